#!/usr/bin/env python3
"""
nmr_utils.py

Small NMR helpers used around the viewer:

  - dipolar_coupling(atom_a, atom_b): dipolar coupling constant in Hz
  - isotropy(tensor): isotropic part of a tensor
  - get_color_scale(vmin, vmax, scale, shades): discrete colour scale
  - color_by_isotropy(atoms, kind, ...): one colour per atom
"""

import math

import numpy as np
import matplotlib
from matplotlib.colors import to_hex

from config import COLOR_SCALE_DEFAULTS
from elements_table import Elements
from tensor_math import as_tensor

MU0_OVER_4PI = 1e-7          # T^2 m^3 J^-1
HBAR = 1.054571817e-34       # J s
ANGSTROM = 1e-10             # m


def dipolar_coupling(atom_a, atom_b):
    """
    Dipolar coupling constant between two atoms.

        d = -(mu0 / 4 pi) * gamma_a * gamma_b * hbar / (2 pi r^3)

    Each atom uses its own `isotope` when set, otherwise the default NMR
    isotope of its element.

    Returns:
        (d, r_unit): the constant in Hz and the unit vector from a to b.
    """
    r_vec = np.asarray(atom_b.position, dtype=float) - np.asarray(atom_a.position, dtype=float)
    r = np.linalg.norm(r_vec)
    if r == 0:
        raise ValueError("Dipolar coupling is undefined for coincident atoms")

    gamma_a = Elements.gyromagnetic_ratio(atom_a.symbol, getattr(atom_a, "isotope", None))
    gamma_b = Elements.gyromagnetic_ratio(atom_b.symbol, getattr(atom_b, "isotope", None))

    r_m = r * ANGSTROM
    d = -MU0_OVER_4PI * gamma_a * gamma_b * HBAR / (2 * math.pi * r_m**3)
    return d, r_vec / r


def isotropy(tensor):
    """Isotropic value (trace / 3) of a tensor."""
    return float(np.trace(as_tensor(tensor))) / 3.0


class ColorScale:
    """
    Maps values in [vmin, vmax] onto `shades` discrete colours of a
    matplotlib colormap. Values outside the range are clipped.
    """

    def __init__(self, vmin, vmax, scale=COLOR_SCALE_DEFAULTS["scale"],
                 shades=COLOR_SCALE_DEFAULTS["shades"]):
        if shades < 1:
            raise ValueError("A colour scale needs at least one shade")
        if scale not in matplotlib.colormaps:
            raise ValueError(f"Unknown colour scale: {scale!r}")
        if vmax < vmin:
            vmin, vmax = vmax, vmin
        if vmin == vmax:
            vmax = vmin + 1e-8
        self.vmin = vmin
        self.vmax = vmax
        self.scale = scale
        self.shades = shades
        self.cmap = matplotlib.colormaps[scale].resampled(shades)

    def get_color(self, value):
        """Hex colour string (e.g. '#00007f') for `value`."""
        t = (value - self.vmin) / (self.vmax - self.vmin)
        t = min(max(t, 0.0), 1.0)
        return to_hex(self.cmap(t))

    def colors(self):
        """All the colours of the scale, from vmin to vmax."""
        return [to_hex(self.cmap(i)) for i in range(self.shades)]


def get_color_scale(vmin, vmax, scale=COLOR_SCALE_DEFAULTS["scale"],
                    shades=COLOR_SCALE_DEFAULTS["shades"]):
    return ColorScale(vmin, vmax, scale, shades)


def color_by_isotropy(atoms, kind="ms", scale=COLOR_SCALE_DEFAULTS["scale"],
                      shades=COLOR_SCALE_DEFAULTS["shades"]):
    """
    Colour atoms by the isotropy of their `kind` tensor.

    Returns:
        {atom index: hex colour}. Raises MissingDataError if an atom lacks
        the tensor.
    """
    atoms = list(atoms)
    if not atoms:
        return {}
    values = {atom.index: isotropy(atom.get_array_value(kind)) for atom in atoms}
    cscale = get_color_scale(min(values.values()), max(values.values()), scale, shades)
    return {index: cscale.get_color(v) for index, v in values.items()}
