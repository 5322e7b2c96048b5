#!/usr/bin/env python3
"""
selection_manager.py

Atom selection driven by clicks.

compute_selection() is the pure part: given the previous selection, a
selection mode and the clicked atom, it returns the new selection.
SelectionManager is the binding layer that keeps the
current selection, wires compute_selection() to the click handler and records
the active mode in the viewer state.

Selections are frozensets of atom indices and are always clipped to the
default displayed set (normally the atoms of the central cell), so images used
as ghosts for other purposes can never become selected.
"""

from click_handler import LEFT_CLICK, SHIFT_BUTTON, CTRL_BUTTON, Modifier, code_for_modifier
from config import SELECTION_DEFAULTS
from message_service import MessageService
from viewer_state import ViewerState


class SelectionMode:
    """What a click on an atom selects."""
    ATOM = "atom"          # The clicked atom alone
    ELEMENT = "element"    # Every atom of the same element
    SPHERE = "sphere"      # Atoms within a radius r of the clicked atom
    MOLECULE = "molecule"  # The bonded fragment of the clicked atom
    BONDS = "bonds"        # Atoms within n bonds of the clicked atom, plus itself
    NONE = "none"          # Clicking does not select

    ALL = (ATOM, ELEMENT, SPHERE, MOLECULE, BONDS, NONE)


SELECTION_OWNER = "select"

SELECTION_CODES = (LEFT_CLICK, LEFT_CLICK + SHIFT_BUTTON, LEFT_CLICK + CTRL_BUTTON)


def query_candidates(mode, mode_params, clicked_atom, query):
    """
    The set of atom indices a click selects in `mode`, before it is combined
    with the previous selection.

    Parameters:
        mode: One of SelectionMode.ALL.
        mode_params: dict with optional 'r' (sphere radius) and 'n' (bond hops).
        clicked_atom: Atom record with .index and .element.
        query: Object offering query_element, query_sphere, query_molecule
               and query_bonded (e.g. a CrystalModel).
    """
    mode_params = mode_params or {}
    if mode == SelectionMode.ATOM:
        return frozenset([clicked_atom.index])
    if mode == SelectionMode.ELEMENT:
        return frozenset(query.query_element(clicked_atom.element))
    if mode == SelectionMode.SPHERE:
        r = mode_params.get("r") or SELECTION_DEFAULTS["sphere_radius"]
        return frozenset(query.query_sphere(clicked_atom, r))
    if mode == SelectionMode.MOLECULE:
        return frozenset(query.query_molecule(clicked_atom))
    if mode == SelectionMode.BONDS:
        n = mode_params.get("n") or SELECTION_DEFAULTS["bond_hops"]
        # query_bonded leaves out the atom itself
        return frozenset(query.query_bonded(clicked_atom, n)) | {clicked_atom.index}
    if mode == SelectionMode.NONE:
        return frozenset()
    raise ValueError(f"Unknown selection mode: {mode!r}")


def compute_selection(previous, mode, mode_params, clicked_atom, modifier,
                      default_displayed, query):
    """
    Combine the previous selection with the atoms selected by a click.

      - Modifier.PLAIN   replaces the selection
      - Modifier.SHIFT   adds to it (union)
      - Modifier.CONTROL toggles against it (symmetric difference)

    The result is always intersected with `default_displayed`. In
    SelectionMode.NONE clicking does not select, so the previous selection
    is returned (clipped) whatever the modifier.

    Returns:
        frozenset of atom indices.
    """
    if modifier not in Modifier.ALL:
        raise ValueError(f"Unknown modifier: {modifier!r}")
    if mode not in SelectionMode.ALL:
        raise ValueError(f"Unknown selection mode: {mode!r}")

    previous = frozenset(previous)
    default_displayed = frozenset(default_displayed)

    if mode == SelectionMode.NONE:
        return previous & default_displayed

    found = query_candidates(mode, mode_params, clicked_atom, query)
    if modifier == Modifier.PLAIN:
        combined = found
    elif modifier == Modifier.SHIFT:
        combined = previous | found
    else:
        combined = previous ^ found
    return combined & default_displayed


class SelectionManager:
    """
    Keeps the selected and displayed atoms of a model and binds the click
    handler to the active selection mode.

    Parameters:
        model: CrystalModel (or any object with the query_* methods).
        click_handler: ClickHandler the selection callbacks are bound to.
        state: ViewerState holding the mode settings (a new one if None).
        message_service: MessageService for status messages.
        mode: Selection mode to start with.
        on_select_change, on_display_change: Optional callbacks taking the
            new frozenset of indices.
    """

    def __init__(self, model, click_handler, state=None, message_service=None,
                 mode=SELECTION_DEFAULTS["mode"],
                 on_select_change=None, on_display_change=None):
        self.model = model
        self.click_handler = click_handler
        self.state = state if state is not None else ViewerState()
        self.message_service = message_service if message_service is not None else MessageService(echo=False)
        self.on_select_change = on_select_change
        self.on_display_change = on_display_change

        default = frozenset(model.query_cell(SELECTION_DEFAULTS["default_cell"]))
        self.state.dispatch_update({"type": "set", "key": "default_displayed", "value": default})
        self._selected = frozenset()
        self._displayed = default

        self.set_select(mode)

    # ------------------------------------------------------------------------
    # State projections
    # ------------------------------------------------------------------------
    @property
    def highlighted(self):
        return self.state.get_field("sel_highlight")

    @highlighted.setter
    def highlighted(self, value):
        self.state.dispatch_update({"type": "set", "key": "sel_highlight", "value": bool(value)})

    @property
    def selected(self):
        return self._selected

    @selected.setter
    def selected(self, value):
        self._selected = frozenset(value) & self.default_displayed
        if self.on_select_change is not None:
            self.on_select_change(self._selected)

    @property
    def displayed(self):
        return self._displayed

    @displayed.setter
    def displayed(self, value):
        self._displayed = frozenset(value)
        if self.on_display_change is not None:
            self.on_display_change(self._displayed)

    @property
    def default_displayed(self):
        return self.state.get_field("default_displayed")

    @property
    def selection_mode(self):
        return self.state.get_field("sel_mode")

    @property
    def selection_sphere_R(self):
        return self.state.get_field("sel_sph_r")

    @property
    def selection_bond_n(self):
        return self.state.get_field("sel_bond_n")

    # ------------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------------
    def _make_callback(self, mode, params, modifier):
        def cback(atom, event=None):
            self.selected = compute_selection(self.selected, mode, params, atom, modifier,
                                              self.default_displayed, self.model)
        return cback

    def set_select(self, mode, r=None, n=None):
        """
        Bind the plain, shift and control left-click handlers to `mode`.

        Re-activating the mode that is already active (with the same radius
        for 'sphere' or hop count for 'bonds') does nothing. 'none' unbinds
        the three handlers.

        Returns:
            True if the handlers were rebound.
        """
        if mode not in SelectionMode.ALL:
            raise ValueError(f"Unknown selection mode: {mode!r}")

        current = self.selection_mode
        if mode == SelectionMode.SPHERE:
            r = r or SELECTION_DEFAULTS["sphere_radius"]
            unchanged = current == mode and self.selection_sphere_R == r
        elif mode == SelectionMode.BONDS:
            n = n or SELECTION_DEFAULTS["bond_hops"]
            unchanged = current == mode and self.selection_bond_n == n
        else:
            unchanged = current == mode
        if unchanged:
            return False

        if mode == SelectionMode.NONE:
            for code in SELECTION_CODES:
                self.click_handler.set_callback(SELECTION_OWNER, code, None)
        else:
            params = {"r": r, "n": n}
            for modifier in Modifier.ALL:
                self.click_handler.set_callback(SELECTION_OWNER, code_for_modifier(modifier),
                                                self._make_callback(mode, params, modifier))

        self.state.dispatch_update({"type": "update", "data": {
            "sel_mode": mode,
            "sel_sph_r": r or self.selection_sphere_R,
            "sel_bond_n": n or self.selection_bond_n,
        }})
        self.message_service.log_debug(f"Selection mode: {mode}")
        return True

    def clear_selection(self):
        self.selected = frozenset()

    def set_display(self, mode):
        """
        'selected' shows only the selected atoms; any other mode restores the
        atoms of the default cell.
        """
        if mode == "selected":
            self.displayed = self.selected
        else:
            self.displayed = self.model.query_cell(SELECTION_DEFAULTS["default_cell"])
        self.message_service.log_info(f"Displaying {len(self.displayed)} atoms")
