#!/usr/bin/env python
# -*- coding: UTF-8 -*-

"""
TASMIP tungsten anode x-ray spectra.

Generates realistic x-ray spectra from a tungsten source, given a tube
voltage (kVp) and a filtration thickness in mm, following

John M. Boone and J. Anthony Seibert, "An accurate method for
computer-generating tungsten anode x-ray spectra from 30 to 140 kV",
Med. Phys. 24(11), November 1997.
"""

import logging
import math
import numbers
import sys

import numpy as np
from scipy import integrate

from tasmip.attenuation import NistAttenuation
from tasmip.coefficients import (
    ENERGIES,
    NUM_BINS,
    NUM_POLYNOMIAL_TERMS,
    POLYNOMIAL_COEFFICIENTS,
)
from tasmip.spectrum import Spectrum


class TasmipError(ValueError):
    """Base class for the errors raised by the spectrum generator."""


class OutOfRangeError(TasmipError):
    """The tube potential does not index the coefficient tables."""


class DegenerateSpectrumError(TasmipError):
    """The spectrum integrates to zero or to a non-finite value."""


class SpectrumGenerator:
    """
    Generates TASMIP spectra on the 0-150 keV grid, one bin per keV.

    Args:
        attenuation: Callable taking ``(data_folder, material)`` and
            returning an object with a ``linear_attenuation(energy)``
            method, energy in MeV and result in cm^-1. A new provider
            is built for every spectrum.
    """

    def __init__(self, attenuation=NistAttenuation):
        self.attenuation = attenuation

    def generate(
        self, tube_potential, mm_filtration, filter_material="Al", data_folder=None
    ):
        """
        Generate a normalized spectrum.

        Args:
            tube_potential (int): Tube voltage in kVp, in [0, 150].
            mm_filtration (float): Filter thickness in mm.
            filter_material (str): Identifier of the filter material.
            data_folder (str): Folder holding the attenuation data,
                forwarded to the attenuation provider.

        Returns:
            (numpy.ndarray): The relative photon fluence of each keV bin,
            normalized to unit area under the trapezoidal rule.

        Raises:
            OutOfRangeError: If the tube potential is outside [0, 150].
            DegenerateSpectrumError: If no bin carries photons.
        """
        return normalize(
            self.fluence(tube_potential, mm_filtration, filter_material, data_folder)
        )

    def fluence(
        self, tube_potential, mm_filtration, filter_material="Al", data_folder=None
    ):
        """
        Filtered photon fluence of each keV bin, before normalization.

        Takes the same arguments as :obj:`generate`.
        """
        tube_potential = check_tube_potential(tube_potential)
        filter_data = self.attenuation(data_folder, filter_material)

        spectrum = np.zeros(NUM_BINS)
        for n in range(NUM_BINS):
            if NUM_POLYNOMIAL_TERMS[n] == 0 or n >= tube_potential:
                continue
            # Table energies are in keV, attenuation data in MeV
            mu = filter_data.linear_attenuation(n / 1000.0)
            # mm to cm
            attenuation = math.exp(-mu * mm_filtration * 0.1)
            spectrum[n] = polynomial(n, tube_potential) * attenuation
        return spectrum


def check_tube_potential(tube_potential):
    """Return the tube potential as an int usable against the tables."""
    if isinstance(tube_potential, bool) or not isinstance(
        tube_potential, numbers.Integral
    ):
        raise TypeError(f"Tube potential must be an integer, got {tube_potential!r}")
    if not 0 <= tube_potential < NUM_BINS:
        raise OutOfRangeError(
            f"Tube potential {tube_potential} kVp is outside [0, {NUM_BINS - 1}]"
        )
    return int(tube_potential)


def polynomial(n, tube_potential):
    """
    Unfiltered TASMIP fluence of the n keV bin at a tube potential.

    The polynomial variable is the tube potential, each bin has its own
    coefficients.
    """
    total = 0.0
    for t in range(NUM_POLYNOMIAL_TERMS[n]):
        total += POLYNOMIAL_COEFFICIENTS[n, t] * tube_potential ** t
    return total


def normalize(spectrum):
    """
    Divide a spectrum by its area, integrated over unit-spaced bins
    with the trapezoidal rule.

    Raises:
        DegenerateSpectrumError: If the area is zero or not finite.
    """
    total_area = integrate.trapezoid(spectrum)
    if total_area == 0 or not np.isfinite(total_area):
        raise DegenerateSpectrumError(
            f"Cannot normalize a spectrum of area {total_area}"
        )
    return spectrum / total_area


def tasmip(tube_potential, mm_filtration, filter_material="Al", data_folder=None):
    """
    Generate a normalized TASMIP spectrum with the NIST attenuation data.

    See :obj:`SpectrumGenerator.generate`.
    """
    return SpectrumGenerator().generate(
        tube_potential, mm_filtration, filter_material, data_folder
    )


def calculate_spectrum(
    tube_potential, mm_filtration, filter_material="Al", data_folder=None
):
    """
    Calculates the x-ray spectrum for given parameters.

    Args:
        tube_potential (int): Tube voltage in kVp, in [0, 150].
        mm_filtration (float): Filter thickness in mm.
        filter_material (str): Identifier of the filter material.
        data_folder (str): Folder holding the attenuation data.

    Returns:
        :obj:`Spectrum`: The calculated spectrum, energies in keV.
    """
    y = tasmip(tube_potential, mm_filtration, filter_material, data_folder)
    return Spectrum(
        ENERGIES.tolist(), y.tolist(), tube_potential, mm_filtration, filter_material
    )


def cli(argv=None):
    import argparse
    import pickle

    logging.basicConfig(
        stream=sys.stderr,
        format="[%(asctime)s] {%(filename)s:%(lineno)d} %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    parser = argparse.ArgumentParser(
        description="Calculate a TASMIP tungsten anode spectrum."
    )
    parser.add_argument(
        "--kvp", metavar="kVp", type=int, default=100, help="Tube voltage in kV"
    )
    parser.add_argument(
        "--mm",
        metavar="mm",
        type=float,
        default=2.5,
        help="Filtration thickness in mm.",
    )
    parser.add_argument(
        "--material",
        metavar="material",
        type=str,
        default="Al",
        help="Filter material, the name of a file in the data folder.",
    )
    parser.add_argument(
        "--data",
        metavar="folder",
        type=str,
        default=None,
        help="Folder with the attenuation data. Defaults to the packaged data.",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="path",
        type=str,
        help="Output file. Available formats are csv, xlsx, and pkl, selected by the file extension. "
        "pkl appends objects using the pickle module. "
        "If this argument is not provided, points are written to the standard output.",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite the pkl output instead of appending to it.",
    )

    args = parser.parse_args(argv)

    ext = None
    if args.output is not None:
        ext = args.output.split(".")[-1].lower() if "." in args.output else None
        if ext not in ["csv", "xlsx", "pkl"]:
            logging.error("Output file format unknown")
            sys.exit(-1)

    logging.info(
        f"Calculating {args.kvp} kVp spectrum with {args.mm} mm of {args.material}"
    )
    s = calculate_spectrum(args.kvp, args.mm, args.material, args.data)

    if ext is None:
        for x, y in zip(s.x, s.y):
            print("%.6g, %.6g" % (x, y))
    elif ext == "csv":
        s.export_csv(args.output)
    elif ext == "xlsx":
        s.export_xlsx(args.output)
    else:
        mode = "wb" if args.overwrite else "ab"
        with open(args.output, mode) as output:
            pickle.dump(s, output, pickle.HIGHEST_PROTOCOL)
    if ext is not None:
        logging.info(f"Spectrum written to {args.output}")


if __name__ == "__main__":
    cli()
