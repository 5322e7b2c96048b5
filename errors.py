# errors.py
"""
Exception types raised by the tensor, selection and parsing code.

All of them derive from MagresError so a caller (the command-line entry point,
or a UI layer) can catch everything this package raises in one place, and from
the closest builtin so plain `except ValueError` keeps working too.
"""


class MagresError(Exception):
    """Base class for all errors raised by quickMagres."""


class InvalidTensorError(MagresError, ValueError):
    """Input is not a finite, symmetric 3x3 numeric tensor."""


class UnsupportedConventionError(MagresError, ValueError):
    """Euler angle convention is not one of the supported tags."""


class UnsupportedTensorKindError(MagresError, ValueError):
    """Tensor kind tag is not one of the supported tags (ms, efg)."""


class MissingDataError(MagresError, KeyError):
    """A required tensor array is absent on the requested atoms."""

    def __str__(self):
        # KeyError quotes its message; keep it readable
        return str(self.args[0]) if self.args else ""


class OverCompletionError(MagresError, RuntimeError):
    """A CallbackMerger received more results than it was built for."""


class MagresParseError(MagresError, ValueError):
    """A .magres file could not be parsed."""

    def __init__(self, message, line_number=None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
