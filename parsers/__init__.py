#!/usr/bin/env python3
"""
parsers package
---------------
File format parsers for NMR crystallography output files.
"""

from .base_parser import StructureParser
from .magres_parser import MagresParser, load_model

PARSERS = [MagresParser]


def get_parser(file_path):
    """Return the first parser class that accepts `file_path`, or None."""
    for parser in PARSERS:
        if parser.can_parse(file_path):
            return parser
    return None


__all__ = ['StructureParser', 'MagresParser', 'PARSERS', 'get_parser', 'load_model']
