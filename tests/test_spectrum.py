#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
test_spectrum.py: Tests for the Spectrum container.
"""

import csv
import math
import os
import subprocess
import sys
import tempfile
import unittest
import zipfile

import tasmip as tp
from tasmip.tasmip import calculate_spectrum

s = calculate_spectrum(80, 2.5, "Al")


class SpectrumTest(unittest.TestCase):
    def test_settings(self):
        """The spectrum remembers the tube settings"""
        self.assertEqual(s.kvp, 80)
        self.assertEqual(s.mm_filtration, 2.5)
        self.assertEqual(s.filter_material, "Al")

    def test_mismatched_lengths(self):
        with self.assertRaises(ValueError):
            tp.Spectrum([0, 1, 2], [1, 2])

    def test_clone(self):
        """Test the Spectrum clone method"""
        s1 = s.clone()
        s2 = s1.clone()
        self.assertEqual(s1.y, s2.y)
        self.assertEqual(s2.kvp, 80)
        # Check alteration does not alter both instances
        s1.y[20] = 10.0
        self.assertNotEqual(s1.y[20], s2.y[20])

    def test_norm_functions(self):
        """Test the get_norm and set_norm methods"""
        s2 = s.clone()
        for w in [None, lambda x: 1, lambda x: x]:
            s2.set_norm(13.0, w)
            self.assertAlmostEqual(s2.get_norm(w), 13.0)

    def test_mean_energy(self):
        s2 = tp.Spectrum([0, 1, 2, 3, 4], [0, 1, 1, 1, 0])
        self.assertAlmostEqual(s2.get_mean_energy(), 2.0)
        s2.set_norm(7.0)
        self.assertAlmostEqual(s2.get_mean_energy(), 2.0)

    def test_attenuate(self):
        """Unit depth and unit mu attenuate by a factor 1/e"""
        s2 = s.clone()
        s2.attenuate(1, lambda x: 1)
        for p in zip(s.y, s2.y):
            self.assertAlmostEqual(p[0] / math.e, p[1])
        self.assertIsNone(s2.mm_filtration)
        self.assertIsNone(s2.filter_material)

    def test_attenuate_skips_empty_bins(self):
        """mu is not evaluated in empty bins"""
        evaluated = []

        def mu(e):
            evaluated.append(e)
            return 0.5

        s2 = s.clone()
        s2.attenuate(0.2, mu)
        self.assertEqual(evaluated, list(range(10, 80)))
        self.assertEqual(s2.y[5], 0)

    def test_attenuate_with_nist_data(self):
        """Adding 2.5 mm Al afterwards matches filtering at generation"""
        s0 = calculate_spectrum(80, 0.0, "Al")
        s0.attenuate(0.25, tp.get_mu("Al"))
        s0.set_norm(1)
        for p in zip(s.y, s0.y):
            self.assertAlmostEqual(p[0], p[1], places=9)

    def test_attenuate_outside_data(self):
        """An energy outside the attenuation table raises"""
        s2 = tp.Spectrum([5, 6, 20], [0.0, 1.0, 1.0])
        with self.assertRaises(ValueError):
            s2.attenuate(0.1, tp.get_mu("Cu"))

    def test_export_csv(self):
        with tempfile.TemporaryDirectory() as folder:
            route = os.path.join(folder, "spectrum.csv")
            s.export_csv(route)
            with open(route) as csvfile:
                rows = list(csv.reader(csvfile))
            self.assertEqual(rows[0], ["Energy (keV)", "Fluence"])
            self.assertEqual(len(rows), 152)
            self.assertEqual(float(rows[81][0]), 80)
            for row, y in zip(rows[1:], s.y):
                self.assertAlmostEqual(float(row[1]), y)

    def test_export_xlsx(self):
        with tempfile.TemporaryDirectory() as folder:
            route = os.path.join(folder, "spectrum.xlsx")
            s.export_xlsx(route)
            with zipfile.ZipFile(route) as archive:
                names = archive.namelist()
            self.assertIn("xl/workbook.xml", names)

    def test_import_is_headless(self):
        """Importing the package does not pull in matplotlib"""
        result = subprocess.run(
            [
                sys.executable,
                "-c",
                "import sys, tasmip; print('matplotlib' in sys.modules)",
            ],
            capture_output=True,
            text=True,
            check=True,
        )
        self.assertEqual(result.stdout.strip(), "False")


if __name__ == "__main__":
    unittest.main()
