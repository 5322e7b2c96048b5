#!/usr/bin/env python3
"""
euler_tracker.py

Euler angles between the NMR tensors of two picked atoms.

Left clicking an atom picks atom A, right clicking picks atom B. Each side
has a tensor kind ('ms' or 'efg'); whenever the atoms, the tensor kinds or the
convention change, the angles are recomputed. The tracker also writes the
plain-text reports: the A/B report and the MS-to-EFG table for a set of atoms.
"""

import math

from click_handler import LEFT_CLICK, RIGHT_CLICK
from config import SELECTION_DEFAULTS, TENSOR_KINDS
from errors import MagresError, MissingDataError, UnsupportedTensorKindError
from message_service import MessageService
from tensor_math import check_convention, euler_between_tensors, symmetric_part
from utils import table_row
from viewer_state import Events, ViewerState

EULER_OWNER = "euler"

NOT_AVAILABLE = "N/A"


def tensor_of(atom, kind):
    """The symmetric part of an atom's tensor of the given kind."""
    return symmetric_part(atom.get_array_value(kind))


class EulerTracker:
    """
    Tracks atoms A and B and the Euler angles between their tensors.

    Parameters:
        model: CrystalModel the atoms come from.
        click_handler: ClickHandler used by bind()/unbind().
        state: ViewerState shared with other components (a new one if None).
        message_service: MessageService for status messages.
        selection: Optional SelectionManager; its selection (or displayed
            atoms) is the default target of txt_self_angle_table().
    """

    def __init__(self, model, click_handler=None, state=None, message_service=None, selection=None):
        self.model = model
        self.click_handler = click_handler
        self.state = state if state is not None else ViewerState()
        self.message_service = message_service if message_service is not None else MessageService(echo=False)
        self.selection = selection
        self.state.add_listener(Events.EUL_ANGLES, self._on_update)

    def _dispatch(self, data):
        self.state.dispatch_update({
            "type": "update",
            "data": dict(data, listen_update=[Events.EUL_ANGLES]),
        })

    # ------------------------------------------------------------------------
    # Data availability
    # ------------------------------------------------------------------------
    @property
    def has_model(self):
        return self.model is not None and len(self.model) > 0

    @property
    def has_ms_data(self):
        return self.has_model and self.model.has_array("ms")

    @property
    def has_efg_data(self):
        return self.has_model and self.model.has_array("efg")

    # ------------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------------
    @property
    def convention(self):
        return self.state.get_field("eul_convention")

    @convention.setter
    def convention(self, value):
        self._dispatch({"eul_convention": check_convention(value)})

    def _set_tensor_type(self, value, ending):
        if value not in TENSOR_KINDS:
            raise UnsupportedTensorKindError(f"Invalid NMR tensor for Euler angles: {value!r}")
        self._dispatch({"eul_tensor_" + ending: value})

    @property
    def tensor_A(self):
        return self.state.get_field("eul_tensor_A")

    @tensor_A.setter
    def tensor_A(self, value):
        self._set_tensor_type(value, "A")

    @property
    def tensor_B(self):
        return self.state.get_field("eul_tensor_B")

    @tensor_B.setter
    def tensor_B(self, value):
        self._set_tensor_type(value, "B")

    @property
    def atom_A(self):
        return self.state.get_field("eul_atom_A")

    @atom_A.setter
    def atom_A(self, atom):
        self._dispatch({"eul_atom_A": atom})

    @property
    def atom_B(self):
        return self.state.get_field("eul_atom_B")

    @atom_B.setter
    def atom_B(self, atom):
        self._dispatch({"eul_atom_B": atom})

    def _get_atom_label(self, ending):
        atom = self.state.get_field("eul_atom_" + ending)
        return atom.crystal_label if atom is not None else "Not selected"

    @property
    def atom_label_A(self):
        return self._get_atom_label("A")

    @property
    def atom_label_B(self):
        return self._get_atom_label("B")

    # ------------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------------
    def compute(self):
        """
        Euler angles (radians) from the tensor of atom A to the tensor of
        atom B, or None while either atom is missing.

        Raises MissingDataError if a picked atom lacks the requested tensor,
        InvalidTensorError if the tensor is not finite.
        """
        atom_a, atom_b = self.atom_A, self.atom_B
        if atom_a is None or atom_b is None:
            return None
        return euler_between_tensors(tensor_of(atom_a, self.tensor_A),
                                     tensor_of(atom_b, self.tensor_B),
                                     self.convention)

    def _on_update(self, state):
        try:
            results = self.compute()
        except MagresError as e:
            # Missing or unusable tensors: no angles for this pair
            self.message_service.log_warning(str(e))
            results = None
        state.dispatch_update({"type": "set", "key": "eul_results", "value": results})

    @property
    def results(self):
        return self.state.get_field("eul_results")

    def _get_result(self, i, rad=False):
        r = self.results
        if r is None:
            return NOT_AVAILABLE
        return r[i] if rad else math.degrees(r[i])

    @property
    def alpha(self):
        return self._get_result(0)

    @property
    def beta(self):
        return self._get_result(1)

    @property
    def gamma(self):
        return self._get_result(2)

    @property
    def alpha_rad(self):
        return self._get_result(0, rad=True)

    @property
    def beta_rad(self):
        return self._get_result(1, rad=True)

    @property
    def gamma_rad(self):
        return self._get_result(2, rad=True)

    # ------------------------------------------------------------------------
    # Clicks
    # ------------------------------------------------------------------------
    def bind(self):
        """Left click picks atom A, right click picks atom B."""
        if self.click_handler is None:
            return

        def pick_a(atom, event=None):
            self.atom_A = atom

        def pick_b(atom, event=None):
            self.atom_B = atom

        self.click_handler.set_callback(EULER_OWNER, LEFT_CLICK, pick_a)
        self.click_handler.set_callback(EULER_OWNER, RIGHT_CLICK, pick_b)

    def unbind(self):
        """Stop picking atoms and forget the picked ones."""
        if self.click_handler is None:
            return

        self.click_handler.set_callback(EULER_OWNER, LEFT_CLICK, None)
        self.click_handler.set_callback(EULER_OWNER, RIGHT_CLICK, None)
        self._dispatch({"eul_atom_A": None, "eul_atom_B": None})

    # ------------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------------
    @staticmethod
    def _fmt(value):
        return f"{value:.5f}" if isinstance(value, float) else str(value)

    def txt_report(self):
        """Plain-text report of the angles between the tensors of atoms A and B."""
        fmt = self._fmt
        report = "Euler angles between tensors:\n"
        report += f"{self.tensor_A} on {self.atom_label_A}\nand\n"
        report += f"{self.tensor_B} on {self.atom_label_B}\n\n"
        report += f"Convention: {self.convention.upper()}\n\n"
        report += f"Degrees:\n{fmt(self.alpha)}    {fmt(self.beta)}    {fmt(self.gamma)}\n\n"
        report += f"Radians:\n{fmt(self.alpha_rad)}    {fmt(self.beta_rad)}    {fmt(self.gamma_rad)}"
        return report

    def _default_targets(self):
        # Selection if available, otherwise displayed atoms
        if self.selection is not None:
            ids = self.selection.selected or self.selection.displayed
        else:
            ids = self.model.query_cell(SELECTION_DEFAULTS["default_cell"])
        return self.model.view(ids)

    def txt_self_angle_table(self, atoms=None):
        """
        Table of the Euler angles (radians) from the MS to the EFG tensor of
        each atom, one fixed-width row per atom.

        Parameters:
            atoms: Atoms to tabulate; defaults to the selected atoms, or the
                   displayed ones when nothing is selected.

        Raises:
            MissingDataError if the MS or EFG tensors are not available.
        """
        if not (self.has_ms_data and self.has_efg_data):
            raise MissingDataError("Both MS and EFG tensors are needed to compute the table")

        targets = self._default_targets() if atoms is None else list(atoms)
        conv = self.convention

        table = f"Euler angles between MS and EFG tensors in radians, convention: {conv.upper()}\n"
        for atom in targets:
            alpha, beta, gamma = euler_between_tensors(tensor_of(atom, "ms"),
                                                       tensor_of(atom, "efg"), conv)
            table += table_row([atom.crystal_label, alpha, beta, gamma])
        return table


__all__ = ["EulerTracker", "EULER_OWNER", "tensor_of"]
