#!/usr/bin/env python3
"""
base_parser.py
--------------
Abstract base class for structure parsers.
Contains the StructureParser interface that all parsers must implement:
a cheap can_parse() check and parse_text(), which turns file content into
atoms and metadata. parse() reads the file and adds file-level metadata.
"""

import os
from abc import ABC, abstractmethod


class StructureParser(ABC):
    """
    Abstract base class for structure parsers.

    Class attributes:
        format_name (str): Value stored under metadata['format'].
        extensions (tuple): Lower case file extensions of the format.
    """
    format_name = None
    extensions = ()

    @classmethod
    @abstractmethod
    def can_parse(cls, file_path):
        """
        Determines if this parser can handle the given file

        Parameters:
            file_path (str): Path to the file to check

        Returns:
            bool: True if this parser can handle the file
        """
        pass

    @classmethod
    @abstractmethod
    def parse_text(cls, content):
        """
        Parse file content into atoms and metadata

        Parameters:
            content (str): Full text of the file

        Returns:
            tuple: (atoms, metadata) where:
                  - atoms is a list of crystal_model.Atom
                  - metadata is a dict with file-level metadata
        """
        pass

    @classmethod
    def parse(cls, file_path):
        """
        Read and parse a file. metadata gains 'file_name' (without the
        extension) and 'path'.
        """
        content = cls.read_file_content(file_path)
        atoms, metadata = cls.parse_text(content)

        base_name = os.path.basename(file_path)
        for ext in cls.extensions:
            if base_name.lower().endswith(ext):
                base_name = base_name[:-len(ext)]
                break
        metadata['file_name'] = base_name
        metadata['path'] = file_path
        return atoms, metadata

    @staticmethod
    def read_file_content(file_path):
        """Helper method to read file content"""
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        with open(file_path, 'r') as f:
            return f.read()
