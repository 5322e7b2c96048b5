#!/usr/bin/env python3
import unittest

import numpy as np

from crystal_model import Atom, CrystalModel
from errors import MissingDataError


def water(offset=(0.0, 0.0, 0.0), label_start=1):
    ox, oy, oz = offset
    return [
        Atom("O", "O", label_start, (ox, oy, oz)),
        Atom("H", "H", 2 * label_start - 1, (ox + 0.96, oy, oz)),
        Atom("H", "H", 2 * label_start, (ox - 0.24, oy + 0.93, oz)),
    ]


class TestAtom(unittest.TestCase):
    def test_labels_and_arrays(self):
        atom = Atom("H", "H", 3, [1, 2, 3], arrays={"ms": np.eye(3)})
        self.assertEqual(atom.crystal_label, "H_3")
        self.assertEqual(atom.element, "H")
        self.assertEqual(atom.position.dtype, float)
        self.assertTrue(atom.has_array("ms"))
        np.testing.assert_allclose(atom.get_array_value("ms"), np.eye(3))
        with self.assertRaises(MissingDataError):
            atom.get_array_value("efg")
        # MissingDataError is also a KeyError
        with self.assertRaises(KeyError):
            atom.get_array_value("efg")


class TestCrystalModel(unittest.TestCase):
    def setUp(self):
        self.model = CrystalModel(water() + water((6.0, 0.0, 0.0), 2), title="two waters")

    def test_indices(self):
        self.assertEqual(len(self.model), 6)
        self.assertEqual([a.index for a in self.model.atoms], list(range(6)))
        self.assertEqual(self.model.query_cell((0, 0, 0)), frozenset(range(6)))

    def test_bonds_and_fragments(self):
        self.assertEqual(self.model.neighbors(0), [1, 2])
        self.assertEqual(self.model.neighbors(1), [0])
        self.assertFalse(self.model.bond_matrix[1, 2])
        self.assertEqual(len(self.model.fragments), 2)
        self.assertEqual(self.model.query_molecule(4), frozenset({3, 4, 5}))

    def test_queries(self):
        self.assertEqual(self.model.query_element("O"), frozenset({0, 3}))
        self.assertEqual(self.model.query_sphere(0, 1.0), frozenset({0, 1, 2}))
        self.assertEqual(self.model.query_sphere(self.model.atoms[1], 0.5), frozenset({1}))
        self.assertEqual(self.model.query_bonded(1, 1), frozenset({0}))
        self.assertEqual(self.model.query_bonded(1, 2), frozenset({0, 2}))
        self.assertEqual(self.model.query_bonded(1, 0), frozenset())

    def test_view_and_labels(self):
        atoms = self.model.view({4, 1})
        self.assertEqual([a.index for a in atoms], [1, 4])
        self.assertIs(self.model.atom_by_label("H_3"), self.model.atoms[4])
        with self.assertRaises(KeyError):
            self.model.atom_by_label("H_9")
        with self.assertRaises(IndexError):
            self.model.view([42])

    def test_has_array(self):
        self.assertFalse(self.model.has_array("ms"))
        for atom in self.model.atoms:
            atom.arrays["ms"] = np.eye(3)
        self.assertTrue(self.model.has_array("ms"))
        self.assertIn("Tensor data: ms", self.model.summary())


class TestSupercell(unittest.TestCase):
    lattice = np.diag([10.0, 10.0, 10.0])

    def test_images_centred_on_origin(self):
        model = CrystalModel(water(), lattice=self.lattice, supercell=(3, 1, 1))
        self.assertEqual(len(model), 9)
        self.assertEqual(sorted({a.cell for a in model.atoms}),
                         [(-1, 0, 0), (0, 0, 0), (1, 0, 0)])
        central = model.query_cell((0, 0, 0))
        self.assertEqual(len(central), 3)
        image = model.view(model.query_cell((1, 0, 0)))[0]
        np.testing.assert_allclose(image.position, [10.0, 0.0, 0.0])
        self.assertEqual(image.crystal_label, "O_1")

    def test_images_share_tensors(self):
        sites = water()
        sites[0].arrays["ms"] = np.diag([1.0, 2.0, 3.0])
        model = CrystalModel(sites, lattice=self.lattice, supercell=(2, 2, 1))
        oxygens = model.view(model.query_element("O"))
        self.assertEqual(len(oxygens), 4)
        for atom in oxygens:
            np.testing.assert_allclose(atom.get_array_value("ms"), np.diag([1.0, 2.0, 3.0]))

    def test_bonds_across_cell_boundary(self):
        # An H sitting just across the boundary bonds to the image of O
        sites = [Atom("O", "O", 1, (9.5, 0.0, 0.0)), Atom("H", "H", 1, (0.3, 0.0, 0.0))]
        model = CrystalModel(sites, lattice=self.lattice, supercell=(2, 1, 1))
        self.assertEqual(model.query_bonded(0, 1), frozenset({3}))

    def test_invalid_supercell(self):
        with self.assertRaises(ValueError):
            CrystalModel(water(), supercell=(2, 1, 1))
        with self.assertRaises(ValueError):
            CrystalModel(water(), lattice=self.lattice, supercell=(0, 1, 1))


if __name__ == "__main__":
    unittest.main()
