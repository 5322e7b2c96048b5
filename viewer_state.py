#!/usr/bin/env python3
"""
viewer_state.py

A small store for the state shared by the selection and Euler angle
components. Components read fields with get_field() and change them only by
dispatching actions:

  {'type': 'set', 'key': 'sel_mode', 'value': 'atom'}
  {'type': 'update', 'data': {'eul_convention': 'zxz',
                              'listen_update': [Events.EUL_ANGLES]}}

Names listed under 'listen_update' are events; their listeners run once the
update has been applied.
"""

from config import EULER_DEFAULTS, SELECTION_DEFAULTS


class Events:
    """Events used to trigger listeners."""
    VIEWS = "VIEWS"
    SEL_LABELS = "SEL_LABELS"
    CSCALE = "CSCALE"
    MS_ELLIPSOIDS = "MS_ELLIPSOIDS"
    MS_LABELS = "MS_LABELS"
    EFG_ELLIPSOIDS = "EFG_ELLIPSOIDS"
    EFG_LABELS = "EFG_LABELS"
    DIP_LINKS = "DIP_LINKS"   # Links need two events, one before a VIEWS update, one after
    DIP_RENDER = "DIP_RENDER"
    EUL_ANGLES = "EUL_ANGLES"


def initial_state():
    return {
        # Selection
        "sel_mode": None,
        "sel_sph_r": SELECTION_DEFAULTS["sphere_radius"],
        "sel_bond_n": SELECTION_DEFAULTS["bond_hops"],
        "sel_highlight": True,
        "default_displayed": frozenset(),

        # Euler angles
        "eul_atom_A": None,
        "eul_atom_B": None,
        "eul_tensor_A": EULER_DEFAULTS["tensor_A"],
        "eul_tensor_B": EULER_DEFAULTS["tensor_B"],
        "eul_convention": EULER_DEFAULTS["convention"],
        "eul_results": None,
    }


class ViewerState:
    """
    Dictionary backed store with event listeners.
    """

    def __init__(self, **overrides):
        self._state = initial_state()
        self._state.update(overrides)
        self._listeners = {}

    def get_field(self, key):
        return self._state[key]

    def snapshot(self):
        """A shallow copy of the current state."""
        return dict(self._state)

    def add_listener(self, event, listener):
        """Call `listener(state)` whenever an update lists `event`."""
        self._listeners.setdefault(event, []).append(listener)

    def dispatch_update(self, action):
        """
        Apply a 'set' or 'update' action, then run the listeners of the
        events named in the update's 'listen_update' list.
        """
        kind = action.get("type")
        if kind == "set":
            self._state[action["key"]] = action["value"]
            events = []
        elif kind == "update":
            data = dict(action["data"])
            events = data.pop("listen_update", [])
            self._state.update(data)
        else:
            raise ValueError(f"Unknown action type: {kind!r}")

        for event in events:
            for listener in self._listeners.get(event, []):
                listener(self)
