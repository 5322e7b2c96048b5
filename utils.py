# utils.py
"""
Small helpers shared by the tracker, the selection code and the CLI:

  - CallbackMerger: joins the outputs of several independent producers into
    one dictionary and hands it to a callback once all of them have reported
  - deep_merge / merge_only: dictionary merging
  - table_row: one row of a fixed-width text table
"""

import math

from config import TABLE_FORMAT
from errors import OverCompletionError


def deep_merge(target, source):
    """
    Recursively merge dictionary `source` into `target` (in place).

    Nested dictionaries are merged key by key; any other value in `source`
    replaces the one in `target`. Nested dictionaries taken from `source`
    are copied, so later merges never write into the caller's objects.

    Returns:
        The updated `target`.
    """
    for key, value in source.items():
        if isinstance(value, dict):
            current = target.get(key)
            if not isinstance(current, dict):
                current = {}
                target[key] = current
            deep_merge(current, value)
        else:
            target[key] = value
    return target


def merge_only(a, b):
    """
    Return a copy of `a` updated with the values of `b`, ignoring keys of `b`
    that `a` does not already have.
    """
    return {k: (b[k] if k in b else v) for k, v in a.items()}


def table_row(values, width=TABLE_FORMAT["width"], precision=TABLE_FORMAT["precision"]):
    """
    Make a single row of an ASCII table with a fixed field width.

    Parameters:
        values: Values to include in the row
        width: Width of each right-aligned field
        precision: Digits used for finite floating point values

    Returns:
        The row, terminated by a newline.
    """
    fields = []
    for v in values:
        if isinstance(v, float) and math.isfinite(v):
            text = f"{v:.{precision}f}"
        else:
            text = str(v)
        fields.append(text.rjust(width))
    return "".join(fields) + "\n"


class CallbackMerger:
    """
    Merges the outputs of multiple asynchronous producers into a single
    dictionary and passes it to a callback once all `n` have been submitted.

    Submissions are assumed to arrive one at a time (interleaved, not
    parallel), as they do from a single event loop; there is no locking.
    An instance serves exactly one round: submitting past `n` raises
    OverCompletionError.
    """

    def __init__(self, n, callback):
        if n < 1:
            raise ValueError(f"CallbackMerger needs at least one expected result; got {n}")
        self._callback = callback
        self._n = n
        self._arg = {}

    @property
    def remaining(self):
        return self._n

    @property
    def completed(self):
        return self._n == 0

    def submit(self, arg):
        """Merge one partial result; fire the callback when it is the last one."""
        if self._n <= 0:
            raise OverCompletionError("CallbackMerger has completed its iterations")

        deep_merge(self._arg, arg)
        self._n -= 1
        if self._n == 0:
            self._callback(self._arg)

    # Producers written against the callback interface call the merger directly
    call = submit
    __call__ = submit
