#!/usr/bin/env python
# -*- coding: UTF-8 -*-

"""
Linear attenuation coefficients of filter materials.

Data files live in a data folder, one file per material named
``<material>.csv``. Each file has two comma separated rows: the photon
energies in MeV and the linear attenuation coefficients in cm^-1 (NIST
XCOM mass attenuation coefficients times the material density).
"""

import csv
import logging
import os

import numpy as np
from scipy import interpolate

data_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

default_data_folder = os.path.join(data_path, "mu")


def log_interp_1d(xx, yy, kind="linear"):
    """
    Perform interpolation in log-log scale.

    Args:
        xx (List[float]): x-coordinates of the points.
        yy (List[float]): y-coordinates of the points.
        kind (str or int, optional):
            The kind of interpolation in the log-log domain. This is passed to
            scipy.interpolate.interp1d.

    Returns:
        A function whose call method uses interpolation
        in log-log scale to find the value at a given point.
    """
    log_x = np.log(xx)
    log_y = np.log(yy)
    lin_interp = interpolate.interp1d(log_x, log_y, kind=kind)
    return lambda zz: np.exp(lin_interp(np.log(zz)))


def read_mu_file(route):
    """
    Read the energies and attenuation coefficients stored in a data file.

    Args:
        route (str): Path of the csv file.

    Returns:
        (tuple): tuple containing:

            energies (List[float]): Photon energies in MeV.

            mu (List[float]): Linear attenuation coefficients in cm^-1.
    """
    with open(route, "r") as csvfile:
        r = csv.reader(csvfile)
        rows = [row for row in r if row]
    if len(rows) != 2:
        raise ValueError(
            f"{route} should hold two rows (energies and mu), "
            f"found {len(rows)}"
        )
    energies = [float(a) for a in rows[0]]
    mu = [float(a) for a in rows[1]]
    if len(energies) != len(mu) or len(energies) < 2:
        raise ValueError(f"Malformed attenuation table in {route}")
    if any(b <= a for a, b in zip(energies, energies[1:])):
        raise ValueError(f"Energies in {route} are not increasing")
    return energies, mu


class NistAttenuation:
    """
    Attenuation data of a filter material loaded from a data folder.

    Energies passed to :obj:`linear_attenuation` are in MeV, the unit of
    the NIST tables. Spectrum bins are indexed in keV, so callers holding
    a keV energy must divide it by 1000 first (or use :obj:`get_mu`).

    Attributes:
        material (str): Identifier of the material, the data file stem.
        energies (List[float]): Tabulated energies in MeV.
        mu (List[float]): Tabulated linear attenuation coefficients in cm^-1.
    """

    def __init__(self, data_folder=None, material="Al"):
        if data_folder is None:
            data_folder = default_data_folder
        route = os.path.join(data_folder, "".join([str(material), ".csv"]))
        logging.debug(f"Loading attenuation data for {material} from {route}")
        self.material = material
        self.energies, self.mu = read_mu_file(route)
        self._interp = log_interp_1d(self.energies, self.mu)

    def linear_attenuation(self, energy):
        """
        Linear attenuation coefficient at a photon energy.

        Args:
            energy (float): Photon energy in MeV.

        Returns:
            (float): The linear attenuation coefficient in cm^-1.

        Raises:
            ValueError: If the energy is outside the tabulated range.
        """
        return float(self._interp(energy))


def get_mu(material="Al", data_folder=None):
    """
    Returns a function representing an energy-dependent
    attenuation coefficient.

    Args:
        material (str): The identifier of the material in the data folder.
        data_folder (str): Folder holding the data files. Defaults to the
            data shipped with the package.

    Returns:
        The attenuation coefficient mu(E) in cm^-1 as
        a function of the energy measured in keV.
    """
    table = NistAttenuation(data_folder, material)
    return lambda e: table.linear_attenuation(e / 1000.0)
