# config.py
# Settings shared by the selection, Euler angle and reporting code.

# ================================
# Theme (message colors)
# ================================

DEFAULT_THEME = {
    "message_info_color": (0, 0, 0),        # Black
    "message_warning_color": (200, 150, 0), # Amber
    "message_error_color": (200, 0, 0),     # Red
}

CURRENT_THEME = DEFAULT_THEME

MESSAGE_TYPES = {
    "info": {
        "prefix": "",
        "color": CURRENT_THEME["message_info_color"],
    },
    "warning": {
        "prefix": "WARNING",
        "color": CURRENT_THEME["message_warning_color"],
    },
    "error": {
        "prefix": "ERROR",
        "color": CURRENT_THEME["message_error_color"],
    }
}

# Number of messages kept in the rolling queue of the message service.
MAX_MESSAGES = 3

# ================================
# Selection
# ================================

SELECTION_DEFAULTS = {
    # Radius (in Å) used by the 'sphere' selection mode.
    "sphere_radius": 2.0,

    # Number of bonds walked by the 'bonds' selection mode.
    "bond_hops": 1,

    # Mode active when a SelectionManager is created.
    "mode": "atom",

    # Cell whose atoms form the default displayed set.
    "default_cell": (0, 0, 0),
}

BOND_DETECTION = {
    # Extra margin (in Å) on top of the sum of covalent radii.
    "tolerance": 0.3,

    # Covalent radius source and bond order in elements_table.
    "source": "cordero",
    "order": "single",
}

# ================================
# Tensors and Euler angles
# ================================

TENSOR_KINDS = ("ms", "efg")

EULER_CONVENTIONS = ("zyz", "zxz")

EULER_DEFAULTS = {
    "tensor_A": "ms",
    "tensor_B": "ms",
    "convention": "zyz",
}

# Tolerances used when building principal axis frames.
TENSOR_TOLERANCES = {
    # Largest allowed asymmetry, relative to max(1, max |T_ij|).
    "symmetry": 1e-8,

    # Eigenvalues closer than this (relative to max(1, max |λ|)) are degenerate.
    "degeneracy": 1e-8,

    # Below this, sin(beta) is treated as zero (gimbal lock).
    "gimbal": 1e-8,
}

# ================================
# Text output
# ================================

TABLE_FORMAT = {
    "width": 20,       # Width of each right-aligned column
    "precision": 5,    # Digits after the decimal point for floats
}

COLOR_SCALE_DEFAULTS = {
    "scale": "jet",
    "shades": 10,
}
