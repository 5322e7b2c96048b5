#!/usr/bin/env python3
import unittest

import numpy as np
import matplotlib
from matplotlib.colors import to_hex

from crystal_model import Atom
from errors import MissingDataError
from nmr_utils import color_by_isotropy, dipolar_coupling, get_color_scale, isotropy


class TestDipolarCoupling(unittest.TestCase):
    def test_proton_pair(self):
        a = Atom("H", "H", 1, (0.0, 0.0, 0.0))
        b = Atom("H", "H", 2, (0.0, 0.0, 1.0))
        d, r_unit = dipolar_coupling(a, b)
        # About -120 kHz for two protons 1 Å apart
        self.assertAlmostEqual(d / 1e3, -120.1, delta=0.2)
        np.testing.assert_allclose(r_unit, [0.0, 0.0, 1.0])

        far = Atom("H", "H", 3, (0.0, 0.0, 2.0))
        d_far, _ = dipolar_coupling(a, far)
        self.assertAlmostEqual(d_far, d / 8.0)

        d_back, r_back = dipolar_coupling(b, a)
        self.assertAlmostEqual(d_back, d)
        np.testing.assert_allclose(r_back, [0.0, 0.0, -1.0])

    def test_isotopes(self):
        a = Atom("H", "H", 1, (0.0, 0.0, 0.0))
        b = Atom("H", "H", 2, (1.0, 0.0, 0.0))
        d, _ = dipolar_coupling(a, b)
        b.isotope = 2
        d_deuteron, _ = dipolar_coupling(a, b)
        self.assertAlmostEqual(d_deuteron / d, 41.0662 / 267.5222)

        # 15N has a negative gyromagnetic ratio
        n = Atom("N", "N", 1, (1.0, 0.0, 0.0))
        d_nh, _ = dipolar_coupling(a, n)
        self.assertGreater(d_nh, 0.0)

    def test_coincident_atoms(self):
        a = Atom("H", "H", 1, (0.0, 0.0, 0.0))
        with self.assertRaises(ValueError):
            dipolar_coupling(a, a)


class TestColorScale(unittest.TestCase):
    def test_isotropy(self):
        self.assertAlmostEqual(isotropy(np.diag([1.0, 2.0, 6.0])), 3.0)
        self.assertAlmostEqual(isotropy([1, 2, 3, 0, 0, 0]), 2.0)

    def test_end_points(self):
        scale = get_color_scale(0.0, 10.0)
        jet = matplotlib.colormaps["jet"]
        self.assertEqual(scale.get_color(0.0), to_hex(jet(0.0)))
        self.assertEqual(scale.get_color(10.0), to_hex(jet(1.0)))
        # Out of range values are clipped
        self.assertEqual(scale.get_color(-5.0), scale.get_color(0.0))
        self.assertEqual(scale.get_color(50.0), scale.get_color(10.0))

    def test_shades(self):
        scale = get_color_scale(0.0, 1.0, scale="viridis", shades=4)
        colors = {scale.get_color(v) for v in np.linspace(0.0, 1.0, 101)}
        self.assertEqual(len(colors), 4)
        self.assertEqual(colors, set(scale.colors()))

    def test_degenerate_range(self):
        scale = get_color_scale(2.0, 2.0)
        self.assertGreater(scale.vmax, scale.vmin)
        self.assertTrue(scale.get_color(2.0).startswith("#"))

    def test_invalid(self):
        with self.assertRaises(ValueError):
            get_color_scale(0.0, 1.0, scale="no_such_map")
        with self.assertRaises(ValueError):
            get_color_scale(0.0, 1.0, shades=0)

    def test_color_by_isotropy(self):
        atoms = []
        for i, iso in enumerate([10.0, 20.0, 30.0]):
            atom = Atom("C", "C", i + 1, (3.0 * i, 0.0, 0.0), arrays={"ms": np.eye(3) * iso}, index=i)
            atoms.append(atom)
        colors = color_by_isotropy(atoms, "ms")
        scale = get_color_scale(10.0, 30.0)
        self.assertEqual(colors, {0: scale.get_color(10.0), 1: scale.get_color(20.0), 2: scale.get_color(30.0)})
        self.assertEqual(color_by_isotropy([], "ms"), {})
        with self.assertRaises(MissingDataError):
            color_by_isotropy(atoms, "efg")


if __name__ == "__main__":
    unittest.main()
