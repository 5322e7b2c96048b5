#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
elements_table.py

Provides a class `Elements` with classmethods for the element data needed by
quickMagres:

  - covalent_radius(symbol, order="single", source="cordero", unit="Ang")
  - gyromagnetic_ratio(symbol, isotope=None)
  - nmr_isotope(symbol)
  - is_valid(symbol)
  - list_symbols()

Data references:
  - Covalent radii: Cordero, B. et al., "Covalent radii revisited",
    Dalton Trans. (21): 2832-2838, DOI: 10.1039/b801115j. Values in Å.
  - Gyromagnetic ratios: IUPAC recommendations (Harris et al., Pure Appl.
    Chem. 73, 1795 (2001)). Values in rad s^-1 T^-1.
"""

# #############################################################################
# 1) Dictionaries of element data
# #############################################################################

COVALENT_RADII = {
    'cordero': {
        'H': 0.31, 'He': 0.28,
        'Li': 1.28, 'Be': 0.96, 'B': 0.84, 'C': 0.76, 'N': 0.71, 'O': 0.66,
        'F': 0.57, 'Ne': 0.58,
        'Na': 1.66, 'Mg': 1.41, 'Al': 1.21, 'Si': 1.11, 'P': 1.07, 'S': 1.05,
        'Cl': 1.02, 'Ar': 1.06,
        'K': 2.03, 'Ca': 1.76, 'Sc': 1.70, 'Ti': 1.60, 'V': 1.53, 'Cr': 1.39,
        'Mn': 1.50, 'Fe': 1.42, 'Co': 1.38, 'Ni': 1.24, 'Cu': 1.32, 'Zn': 1.22,
        'Ga': 1.22, 'Ge': 1.20, 'As': 1.19, 'Se': 1.20, 'Br': 1.20, 'Kr': 1.16,
        'Rb': 2.20, 'Sr': 1.95, 'Y': 1.90, 'Zr': 1.75, 'Nb': 1.64, 'Mo': 1.54,
        'Tc': 1.47, 'Ru': 1.46, 'Rh': 1.42, 'Pd': 1.39, 'Ag': 1.45, 'Cd': 1.44,
        'In': 1.42, 'Sn': 1.39, 'Sb': 1.39, 'Te': 1.38, 'I': 1.39, 'Xe': 1.40,
        'Cs': 2.44, 'Ba': 2.15, 'La': 2.07, 'Ce': 2.04, 'Pr': 2.03, 'Gd': 1.96,
        'Lu': 1.87, 'Hf': 1.75, 'Ta': 1.70, 'W': 1.62, 'Re': 1.51, 'Os': 1.44,
        'Ir': 1.41, 'Pt': 1.36, 'Au': 1.36, 'Tl': 1.45, 'Pb': 1.46, 'Bi': 1.48,
        'Po': 1.40, 'At': 1.50, 'Rn': 1.50, 'Ra': 2.21, 'Ac': 2.15, 'Th': 2.06,
        'Pa': 2.00, 'U': 1.96, 'Np': 1.90,
    },
}

# Gyromagnetic ratios of NMR-active isotopes, keyed by element then mass number.
GYROMAGNETIC_RATIOS = {
    'H': {1: 267.5222e6, 2: 41.0662e6},
    'Li': {6: 39.3713e6, 7: 103.9771e6},
    'B': {10: 28.7469e6, 11: 85.8470e6},
    'C': {13: 67.2828e6},
    'N': {14: 19.3378e6, 15: -27.1262e6},
    'O': {17: -36.2808e6},
    'F': {19: 251.8148e6},
    'Na': {23: 70.8085e6},
    'Mg': {25: -16.3887e6},
    'Al': {27: 69.7628e6},
    'Si': {29: -53.1900e6},
    'P': {31: 108.3940e6},
    'S': {33: 20.5597e6},
    'Cl': {35: 26.2420e6, 37: 21.8437e6},
    'K': {39: 12.5009e6},
    'Ca': {43: -18.0307e6},
    'V': {51: 70.4553e6},
    'Zn': {67: 16.7688e6},
    'Ga': {71: 81.8117e6},
    'Se': {77: 51.2532e6},
    'Rb': {87: 87.6410e6},
    'Y': {89: -13.1628e6},
    'Ag': {109: -12.5186e6},
    'Cd': {113: -59.6092e6},
    'Sn': {119: -100.3170e6},
    'Xe': {129: -74.5210e6},
    'Cs': {133: 35.3326e6},
    'Pt': {195: 58.3850e6},
    'Pb': {207: 55.8046e6},
}

# Default isotope used when none is requested: the most common NMR-active one.
DEFAULT_NMR_ISOTOPES = {
    'H': 1, 'Li': 7, 'B': 11, 'C': 13, 'N': 15, 'O': 17, 'F': 19, 'Na': 23,
    'Mg': 25, 'Al': 27, 'Si': 29, 'P': 31, 'S': 33, 'Cl': 35, 'K': 39,
    'Ca': 43, 'V': 51, 'Zn': 67, 'Ga': 71, 'Se': 77, 'Rb': 87, 'Y': 89,
    'Ag': 109, 'Cd': 113, 'Sn': 119, 'Xe': 129, 'Cs': 133, 'Pt': 195,
    'Pb': 207,
}

_DISTANCE_UNIT_ALIASES = {
    "a": ("Ang", 1.0),
    "ang": ("Ang", 1.0),
    "angstrom": ("Ang", 1.0),
    "angstroms": ("Ang", 1.0),
    "å": ("Ang", 1.0),

    "pm": ("pm", 100.0),
    "nm": ("nm", 0.1),

    "bohr": ("bohr", 1.889725989),
    "a0": ("bohr", 1.889725989),
    "au": ("bohr", 1.889725989),
}

# --------------------------------------------------------------------
# 2) Helpers for normalizing symbol and units
# --------------------------------------------------------------------
def _normalize_symbol(symbol: str) -> str:
    s = symbol.strip().capitalize()
    if s not in COVALENT_RADII['cordero']:
        raise KeyError(f"Unknown element symbol: '{symbol}'")
    return s

def _normalize_distance_unit(unit: str):
    key = unit.strip().lower()
    if key not in _DISTANCE_UNIT_ALIASES:
        raise KeyError(f"Unknown distance unit: '{unit}'")
    return _DISTANCE_UNIT_ALIASES[key]

# --------------------------------------------------------------------
# 3) Elements class
# --------------------------------------------------------------------
class Elements:
    @classmethod
    def is_valid(cls, symbol: str) -> bool:
        try:
            _normalize_symbol(symbol)
            return True
        except KeyError:
            return False

    @classmethod
    def list_symbols(cls):
        """Return all element symbols with covalent radius data."""
        return list(COVALENT_RADII['cordero'].keys())

    @classmethod
    def covalent_radius(cls,
                        symbol: str,
                        order: str = "single",
                        source: str = "cordero",
                        unit: str = "Ang") -> float:
        sym = _normalize_symbol(symbol)
        if order != "single":
            raise KeyError(f"No covalent radius for bond order='{order}' for '{sym}'")
        src_data = COVALENT_RADII.get(source)
        if src_data is None or sym not in src_data:
            raise KeyError(f"No covalent radius data for source='{source}' in '{sym}'")
        _, factor = _normalize_distance_unit(unit)
        return src_data[sym] * factor

    @classmethod
    def nmr_isotope(cls, symbol: str) -> int:
        """Mass number of the default NMR-active isotope of an element."""
        sym = _normalize_symbol(symbol)
        if sym not in DEFAULT_NMR_ISOTOPES:
            raise KeyError(f"No NMR-active isotope known for '{sym}'")
        return DEFAULT_NMR_ISOTOPES[sym]

    @classmethod
    def gyromagnetic_ratio(cls, symbol: str, isotope: int = None) -> float:
        """
        Return the gyromagnetic ratio (rad s^-1 T^-1) of an isotope.
        If isotope is None, the default NMR-active isotope is used.
        """
        sym = _normalize_symbol(symbol)
        if isotope is None:
            isotope = cls.nmr_isotope(sym)
        ratios = GYROMAGNETIC_RATIOS.get(sym, {})
        if isotope not in ratios:
            raise KeyError(f"No gyromagnetic ratio for isotope {isotope}{sym}")
        return ratios[isotope]
