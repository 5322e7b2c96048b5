#!/usr/bin/env python3
"""
magres_parser.py
----------------
Parser for .magres files (CASTEP / QE-GIPAW magnetic resonance output).

A magres file is a sequence of blocks, written either as [name] ... [/name]
or <name> ... </name>:

    #$magres-abinitio-v1.0
    [atoms]
    units lattice Angstrom
    lattice  5.0 0.0 0.0  0.0 5.0 0.0  0.0 0.0 5.0
    units atom Angstrom
    atom H H 1  0.0 0.0 0.0
    [/atoms]
    [magres]
    units ms ppm
    ms H 1  30.0 0.0 0.0  0.0 30.0 0.0  0.0 0.0 30.0
    [/magres]

Only the [atoms] and [magres] blocks are interpreted; the lines of any other
block are kept verbatim in the metadata.
"""

import math
import re

import numpy as np

from crystal_model import Atom, CrystalModel
from elements_table import Elements
from errors import MagresParseError
from .base_parser import StructureParser

BOHR_TO_ANGSTROM = 0.529177210903

_LENGTH_UNITS = {
    'angstrom': 1.0,
    'bohr': BOHR_TO_ANGSTROM,
}

_HEADER = re.compile(r'^#\$magres-abinitio-v(\S+)')
_BLOCK_OPEN = re.compile(r'^[\[<]\s*([A-Za-z_]\w*)\s*[\]>]$')
_BLOCK_CLOSE = re.compile(r'^[\[<]\s*/\s*([A-Za-z_]\w*)\s*[\]>]$')
_SYMBOL = re.compile(r'^([A-Z][a-z]?)')

TENSOR_TAGS = ('ms', 'efg')


def _floats(fields, count, line_number, what):
    if len(fields) != count:
        raise MagresParseError(f"{what} needs {count} numbers, got {len(fields)}", line_number)
    try:
        values = [float(x) for x in fields]
    except ValueError:
        raise MagresParseError(f"Non-numeric value in {what}", line_number)
    if not all(math.isfinite(v) for v in values):
        raise MagresParseError(f"Non-finite value in {what}", line_number)
    return values


def _int(value, line_number, what):
    try:
        return int(value)
    except ValueError:
        raise MagresParseError(f"Invalid {what}: {value!r}", line_number)


def _length_scale(units, keyword, line_number):
    unit = units.get(keyword, 'Angstrom')
    scale = _LENGTH_UNITS.get(unit.lower())
    if scale is None:
        raise MagresParseError(f"Unsupported {keyword} unit: {unit}", line_number)
    return scale


class MagresParser(StructureParser):
    """Parser for .magres files"""
    format_name = 'magres'
    extensions = ('.magres',)

    @classmethod
    def can_parse(cls, file_path):
        """Check if file is in magres format: by extension, else by header"""
        if file_path.lower().endswith(cls.extensions):
            return True
        try:
            with open(file_path, 'r') as f:
                first_line = next(f, '').strip()
        except OSError:
            return False
        return bool(_HEADER.match(first_line))

    @classmethod
    def parse_text(cls, content):
        """
        Parse the text of a magres file.

        Returns:
            tuple: (atoms, metadata)
                  - atoms is a list of Atom with 'ms'/'efg' arrays where present
                  - metadata holds the version, lattice, units, symmetry
                    operations and the raw lines of uninterpreted blocks
        """
        metadata = {
            'format': cls.format_name,
            'version': None,
            'lattice': None,
            'units': {},
            'symmetry': [],
            'blocks': {},
        }
        atoms = []
        by_label = {}

        block = None
        block_start = 0
        for line_number, raw in enumerate(content.splitlines(), 1):
            line = raw.strip()
            if not line:
                continue
            if line.startswith('#'):
                header = _HEADER.match(line)
                if header and line_number == 1:
                    metadata['version'] = header.group(1)
                continue

            closing = _BLOCK_CLOSE.match(line)
            if closing:
                name = closing.group(1)
                if name != block:
                    raise MagresParseError(f"Unexpected end of block '{name}'", line_number)
                block = None
                continue
            opening = _BLOCK_OPEN.match(line)
            if opening:
                if block is not None:
                    raise MagresParseError(f"Block '{opening.group(1)}' opened inside '{block}'", line_number)
                block = opening.group(1)
                block_start = line_number
                if block not in ('atoms', 'magres'):
                    metadata['blocks'].setdefault(block, [])
                continue

            if block is None:
                raise MagresParseError(f"Line outside of any block: {line}", line_number)

            fields = line.split()
            if block == 'atoms':
                cls._parse_atoms_line(fields, line_number, metadata, atoms, by_label)
            elif block == 'magres':
                cls._parse_magres_line(fields, line_number, metadata, by_label)
            else:
                metadata['blocks'][block].append(line)

        if block is not None:
            raise MagresParseError(f"Block '{block}' is never closed", block_start)

        return atoms, metadata

    @staticmethod
    def _parse_atoms_line(fields, line_number, metadata, atoms, by_label):
        tag = fields[0]
        if tag == 'units':
            if len(fields) != 3:
                raise MagresParseError("units needs a keyword and a unit", line_number)
            metadata['units'][fields[1]] = fields[2]
        elif tag == 'lattice':
            values = _floats(fields[1:], 9, line_number, 'lattice')
            scale = _length_scale(metadata['units'], 'lattice', line_number)
            metadata['lattice'] = np.array(values).reshape(3, 3) * scale
        elif tag == 'symmetry':
            metadata['symmetry'].append(' '.join(fields[1:]))
        elif tag == 'atom':
            if len(fields) != 7:
                raise MagresParseError("atom needs species, label, index and three coordinates", line_number)
            species, label = fields[1], fields[2]
            match = _SYMBOL.match(species)
            if not match or not Elements.is_valid(match.group(1)):
                raise MagresParseError(f"Unknown species: {species}", line_number)
            index = _int(fields[3], line_number, 'atom index')
            position = _floats(fields[4:], 3, line_number, 'atom position')
            scale = _length_scale(metadata['units'], 'atom', line_number)
            if (label, index) in by_label:
                raise MagresParseError(f"Duplicate atom {label}_{index}", line_number)
            atom = Atom(symbol=match.group(1), label=label, label_index=index,
                        position=np.array(position) * scale)
            by_label[(label, index)] = atom
            atoms.append(atom)
        else:
            raise MagresParseError(f"Unknown tag in atoms block: {tag}", line_number)

    @staticmethod
    def _parse_magres_line(fields, line_number, metadata, by_label):
        tag = fields[0]
        if tag == 'units':
            if len(fields) != 3:
                raise MagresParseError("units needs a keyword and a unit", line_number)
            metadata['units'][fields[1]] = fields[2]
        elif tag in TENSOR_TAGS:
            if len(fields) != 12:
                raise MagresParseError(f"{tag} needs label, index and nine tensor components", line_number)
            key = (fields[1], _int(fields[2], line_number, f'{tag} index'))
            if key not in by_label:
                raise MagresParseError(f"{tag} refers to unknown atom {key[0]}_{key[1]}", line_number)
            values = _floats(fields[3:], 9, line_number, tag)
            by_label[key].arrays[tag] = np.array(values).reshape(3, 3)
        else:
            # Other magres quantities (efg_local, isc, ...) are kept verbatim
            metadata['blocks'].setdefault('magres', []).append(' '.join(fields))


def load_model(file_path, supercell=(1, 1, 1), **kwargs):
    """
    Read a magres file into a CrystalModel.

    Extra keyword arguments are passed on to CrystalModel.
    """
    atoms, metadata = MagresParser.parse(file_path)
    model = CrystalModel(atoms, lattice=metadata['lattice'], supercell=supercell,
                         title=metadata.get('file_name', ''), **kwargs)
    model.metadata = metadata
    return model
