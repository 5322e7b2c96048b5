#!/usr/bin/env python3
import os
import tempfile
import unittest

import numpy as np

from errors import MagresParseError
from parsers import MagresParser, get_parser, load_model

SAMPLE = """#$magres-abinitio-v1.0
# Generated by a test
[calculation]
calc_code CASTEP
[/calculation]
[atoms]
units lattice Angstrom
lattice 6.0 0.0 0.0 0.0 6.0 0.0 0.0 0.0 6.0
units atom Angstrom
atom O O 1 0.0 0.0 0.0
atom H H 1 0.96 0.0 0.0
atom H H 2 -0.24 0.93 0.0
[/atoms]
<magres>
units ms ppm
ms O 1 300.0 0.0 0.0 0.0 310.0 0.0 0.0 0.0 320.0
ms H 1 30.0 1.0 0.0 -1.0 31.0 0.0 0.0 0.0 32.0
ms H 2 30.0 0.0 0.0 0.0 31.0 0.0 0.0 0.0 32.0
units efg au
efg O 1 -1.0 0.0 0.0 0.0 -0.5 0.0 0.0 0.0 1.5
efg H 1 0.1 0.0 0.0 0.0 0.1 0.0 0.0 0.0 -0.2
efg H 2 0.1 0.0 0.0 0.0 0.1 0.0 0.0 0.0 -0.2
efg_local O 1 0.0 0.0 0.0 0.0 0.0 0.0 0.0 0.0 0.0
</magres>
"""


class TestParseText(unittest.TestCase):
    def test_atoms_and_tensors(self):
        atoms, metadata = MagresParser.parse_text(SAMPLE)
        self.assertEqual([a.crystal_label for a in atoms], ["O_1", "H_1", "H_2"])
        self.assertEqual(atoms[1].symbol, "H")
        np.testing.assert_allclose(atoms[2].position, [-0.24, 0.93, 0.0])
        np.testing.assert_allclose(atoms[0].get_array_value("ms"), np.diag([300.0, 310.0, 320.0]))
        # Shielding tensors are kept as written, not symmetrized
        self.assertEqual(atoms[1].get_array_value("ms")[0, 1], 1.0)
        self.assertEqual(atoms[1].get_array_value("ms")[1, 0], -1.0)
        self.assertEqual(atoms[2].get_array_value("efg")[2, 2], -0.2)

    def test_metadata(self):
        _, metadata = MagresParser.parse_text(SAMPLE)
        self.assertEqual(metadata["version"], "1.0")
        np.testing.assert_allclose(metadata["lattice"], np.eye(3) * 6.0)
        self.assertEqual(metadata["units"]["ms"], "ppm")
        self.assertEqual(metadata["units"]["efg"], "au")
        self.assertEqual(metadata["blocks"]["calculation"], ["calc_code CASTEP"])
        self.assertEqual(len(metadata["blocks"]["magres"]), 1)

    def test_bohr_units(self):
        text = "[atoms]\nunits atom Bohr\natom H H 1 1.0 0.0 0.0\n[/atoms]\n"
        atoms, _ = MagresParser.parse_text(text)
        self.assertAlmostEqual(atoms[0].position[0], 0.529177210903)

    def test_errors_carry_line_numbers(self):
        cases = [
            ("[atoms]\natom H H 1 0.0 0.0\n[/atoms]\n", 2),
            ("[atoms]\natom Xx X 1 0.0 0.0 0.0\n[/atoms]\n", 2),
            ("[atoms]\natom H H 1 0.0 0.0 0.0\n[/atoms]\n[magres]\nms H 2 1 0 0 0 1 0 0 0 1\n[/magres]\n", 5),
            ("[magres]\nms H 1 1 0 0\n[/magres]\n", 2),
            ("[atoms]\nunits atom furlong\natom H H 1 0.0 0.0 0.0\n[/atoms]\n", 3),
            ("atom H H 1 0.0 0.0 0.0\n", 1),
            ("[atoms]\n[magres]\n", 2),
            ("[atoms]\natom H H 1 0.0 0.0 0.0\n", 1),
            ("[atoms]\natom H H 1 a 0.0 0.0\n[/atoms]\n", 2),
            ("[atoms]\nbogus 1 2 3\n[/atoms]\n", 2),
            ("[atoms]\natom H H 1 inf 0.0 0.0\n[/atoms]\n", 2),
            ("[atoms]\natom H H 1 0.0 0.0 0.0\n[/atoms]\n[magres]\nms H 1 nan 0 0 0 2 0 0 0 3\n[/magres]\n", 5),
        ]
        for text, line in cases:
            with self.assertRaises(MagresParseError) as ctx:
                MagresParser.parse_text(text)
            self.assertEqual(ctx.exception.line_number, line, text)
            self.assertTrue(str(ctx.exception).startswith(f"line {line}: "))


class TestMagresFile(unittest.TestCase):
    def setUp(self):
        handle, self.path = tempfile.mkstemp(suffix=".magres")
        with os.fdopen(handle, "w") as f:
            f.write(SAMPLE)

    def tearDown(self):
        os.remove(self.path)

    def test_can_parse(self):
        self.assertTrue(MagresParser.can_parse(self.path))
        self.assertFalse(MagresParser.can_parse("missing.xyz"))

    def test_can_parse_by_header(self):
        handle, path = tempfile.mkstemp(suffix=".txt")
        with os.fdopen(handle, "w") as f:
            f.write(SAMPLE)
        try:
            self.assertTrue(MagresParser.can_parse(path))
        finally:
            os.remove(path)

    def test_get_parser(self):
        self.assertIs(get_parser(self.path), MagresParser)
        self.assertIsNone(get_parser("missing.xyz"))

    def test_parse_file(self):
        atoms, metadata = MagresParser.parse(self.path)
        self.assertEqual(len(atoms), 3)
        self.assertEqual(metadata["format"], "magres")
        self.assertEqual(metadata["path"], self.path)
        self.assertFalse(metadata["file_name"].endswith(".magres"))

    def test_load_model(self):
        model = load_model(self.path)
        self.assertEqual(len(model), 3)
        self.assertEqual(model.query_molecule(0), frozenset({0, 1, 2}))
        self.assertTrue(model.has_array("ms"))
        self.assertTrue(model.has_array("efg"))

        model = load_model(self.path, supercell=(3, 3, 3))
        self.assertEqual(len(model), 81)
        self.assertEqual(model.query_cell((0, 0, 0)), frozenset(range(39, 42)))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            MagresParser.parse(self.path + ".gone")


if __name__ == "__main__":
    unittest.main()
