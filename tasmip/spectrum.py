#!/usr/bin/env python
# -*- coding: UTF-8 -*-

"""
Container for the spectra returned by :obj:`tasmip.tasmip.calculate_spectrum`.
"""

import csv

import numpy as np
import xlsxwriter
from scipy import integrate


class Spectrum:
    """
    Photon fluence on a grid of energies, with the tube settings that
    produced it.

    Attributes:
        x (List[float]): Energies in keV.
        y (List[float]): Relative photon fluence at each energy.
        kvp (int): Tube potential in kVp, None if unknown.
        mm_filtration (float): Filter thickness in mm, None if unknown.
        filter_material (str): Filter material identifier, None if unknown.
    """

    def __init__(self, x, y, kvp=None, mm_filtration=None, filter_material=None):
        if len(x) != len(y):
            raise ValueError(f"{len(x)} energies for {len(y)} fluence values")
        self.x = list(x)
        self.y = list(y)
        self.kvp = kvp
        self.mm_filtration = mm_filtration
        self.filter_material = filter_material

    def clone(self):
        return Spectrum(
            self.x, self.y, self.kvp, self.mm_filtration, self.filter_material
        )

    def get_norm(self, weight=None):
        """
        Trapezoidal integral of ``weight(E) * y`` over the energy grid.

        With no weight this is the photon number, with ``lambda e: e``
        the energy fluence.
        """
        y = np.asarray(self.y, dtype=float)
        if weight is not None:
            y = y * np.array([weight(e) for e in self.x], dtype=float)
        return float(integrate.trapezoid(y, x=self.x))

    def set_norm(self, value=1, weight=None):
        """Rescale the fluence so that ``get_norm(weight) == value``."""
        factor = value / self.get_norm(weight)
        self.y = [a * factor for a in self.y]

    def get_mean_energy(self):
        """Fluence-weighted mean energy in keV."""
        return self.get_norm(lambda e: e) / self.get_norm()

    def attenuate(self, depth, mu):
        """
        Pass the beam through ``depth`` cm of a material whose linear
        attenuation coefficient is ``mu(E)`` cm^-1, E in keV.

        mu is only evaluated where the fluence is nonzero. Errors raised
        by mu propagate.
        """
        y = np.asarray(self.y, dtype=float)
        populated = np.flatnonzero(y)
        mu_values = np.array([mu(self.x[i]) for i in populated], dtype=float)
        y[populated] *= np.exp(-mu_values * depth)
        self.y = y.tolist()
        self.mm_filtration = None
        self.filter_material = None

    def _settings(self):
        return [
            ("Tube potential (kVp)", self.kvp),
            ("Filtration (mm)", self.mm_filtration),
            ("Filter material", self.filter_material),
        ]

    def export_csv(self, route="spectrum.csv"):
        """
        Write the spectrum as two columns, energy (keV) and fluence,
        below a header row.
        """
        with open(route, "w", newline="") as csvfile:
            w = csv.writer(csvfile)
            w.writerow(["Energy (keV)", "Fluence"])
            w.writerows(zip(self.x, self.y))

    def export_xlsx(self, route="spectrum.xlsx"):
        """
        Write the spectrum to an Excel workbook: energies and fluence in
        columns A and B, the tube settings next to them.
        """
        workbook = xlsxwriter.Workbook(route)
        try:
            worksheet = workbook.add_worksheet("Spectrum")
            bold = workbook.add_format({"bold": True})
            worksheet.write_row(0, 0, ["Energy (keV)", "Fluence"], bold)
            worksheet.write_column(1, 0, [float(e) for e in self.x])
            worksheet.write_column(1, 1, [float(f) for f in self.y])
            for row, (name, value) in enumerate(self._settings()):
                worksheet.write(row, 3, name, bold)
                if value is not None:
                    worksheet.write(row, 4, value)
        finally:
            workbook.close()
