#!/usr/bin/env python3
"""
click_handler.py

Routes atom clicks to the components that care about them. Several
components (selection, Euler angle picking, ...) can listen to the same
button/modifier combination; each registers under its own owner name, and a
new registration under the same name replaces the old one, so a rebound
component never sees its stale callback fire again.

Click codes are a button plus optional modifier bits, e.g.
LEFT_CLICK + SHIFT_BUTTON. event_code() builds them from X11 button events.
"""

from Xlib import X

LEFT_CLICK = 1
MIDDLE_CLICK = 2
RIGHT_CLICK = 4
SHIFT_BUTTON = 8
CTRL_BUTTON = 16

SUPPORTED_CODES = (
    LEFT_CLICK,
    LEFT_CLICK + SHIFT_BUTTON,
    LEFT_CLICK + CTRL_BUTTON,
    RIGHT_CLICK,
)

# X11 button numbers
_X11_BUTTONS = {
    1: LEFT_CLICK,
    2: MIDDLE_CLICK,
    3: RIGHT_CLICK,
}


class Modifier:
    """Modifier combinations that decide how a click combines with a selection."""
    PLAIN = "plain"      # Replace the selection
    SHIFT = "shift"      # Add to the selection
    CONTROL = "control"  # Toggle against the selection

    ALL = (PLAIN, SHIFT, CONTROL)


def event_code(button, state=0):
    """
    Translate an X11 button number and modifier state mask into a click code.

    Parameters:
        button: X11 button number (evt.detail): 1 left, 2 middle, 3 right.
        state: X11 modifier mask (evt.state).

    Returns:
        The click code, or None for buttons that do not click atoms
        (e.g. the scroll wheel).
    """
    code = _X11_BUTTONS.get(button)
    if code is None:
        return None
    # Control wins over Shift when both are held
    if state & X.ControlMask:
        code += CTRL_BUTTON
    elif state & X.ShiftMask:
        code += SHIFT_BUTTON
    return code


def modifier_for_code(code):
    """The selection Modifier for a left click code."""
    if code == LEFT_CLICK:
        return Modifier.PLAIN
    if code == LEFT_CLICK + SHIFT_BUTTON:
        return Modifier.SHIFT
    if code == LEFT_CLICK + CTRL_BUTTON:
        return Modifier.CONTROL
    raise ValueError(f"Click code {code} does not map to a selection modifier")


def code_for_modifier(modifier):
    """The left click code for a selection Modifier."""
    codes = {
        Modifier.PLAIN: LEFT_CLICK,
        Modifier.SHIFT: LEFT_CLICK + SHIFT_BUTTON,
        Modifier.CONTROL: LEFT_CLICK + CTRL_BUTTON,
    }
    if modifier not in codes:
        raise ValueError(f"Unknown modifier: {modifier!r}")
    return codes[modifier]


class ClickHandler:
    """
    Holds the atom click callbacks, one per (owner name, click code).
    """

    def __init__(self):
        self._callbacks = {code: {} for code in SUPPORTED_CODES}

    def set_callback(self, name, code, cback=None):
        """
        Register `cback(atom, event)` for `code` under owner `name`.
        Passing None removes the owner's callback for that code.
        """
        if code not in self._callbacks:
            raise ValueError("Invalid callback code; unsupported event type")

        if cback is None:
            self._callbacks[code].pop(name, None)
        else:
            self._callbacks[code][name] = cback

    def get_callback(self, name, code):
        return self._callbacks.get(code, {}).get(name)

    def owners(self, code):
        """Names with a callback registered for `code`."""
        return list(self._callbacks.get(code, {}))

    def dispatch(self, code, atom, event=None):
        """
        Call every callback registered for `code`. Returns the number of
        callbacks invoked; unsupported codes invoke nothing.
        """
        # Copy: a callback may rebind handlers while we iterate
        cbacks = list(self._callbacks.get(code, {}).values())
        for cback in cbacks:
            cback(atom, event)
        return len(cbacks)

    def handle_button_release(self, evt, atom):
        """
        Dispatch an X11 button event that landed on `atom`.
        Clicks on empty space (atom is None) are ignored.
        """
        if atom is None:
            return 0
        code = event_code(evt.detail, evt.state)
        if code is None:
            return 0
        return self.dispatch(code, atom, evt)
