#!/usr/bin/env python3
"""
quickMagres.py

Usage:
  python quickMagres.py <magres_file> [convention=zyz] [atomA atomB]

Without atoms, prints the table of Euler angles between the MS and EFG tensors
of every atom in the file. With two crystal labels (e.g. H_1 C_2), prints the
Euler angles between the MS tensors of those two atoms.
"""

import sys
import os

from config import EULER_DEFAULTS
from errors import MagresError
from euler_tracker import EulerTracker
from message_service import MessageService
from parsers import get_parser, load_model

USAGE = "Usage: quickMagres.py <magres_file> [convention=zyz] [atomA atomB]"


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) not in (1, 2, 3, 4):
        print(USAGE)
        sys.exit(1)

    magres_file = argv[0]
    # An optional convention comes before the optional pair of atoms
    rest = argv[1:]
    convention = rest.pop(0) if len(rest) in (1, 3) else EULER_DEFAULTS["convention"]
    labels = rest

    message_service = MessageService()

    if not os.path.exists(magres_file) or get_parser(magres_file) is None:
        message_service.log_error(f"Not a magres file: {magres_file}")
        sys.exit(1)

    try:
        model = load_model(magres_file)
        message_service.log_info(f"Loaded {os.path.basename(magres_file)} with {len(model)} atoms")

        tracker = EulerTracker(model, message_service=message_service)
        tracker.convention = convention

        if labels:
            tracker.atom_A = model.atom_by_label(labels[0])
            tracker.atom_B = model.atom_by_label(labels[1])
            if tracker.results is None:
                # Recompute to raise the underlying error
                tracker.compute()
            print(tracker.txt_report())
        else:
            print(tracker.txt_self_angle_table(), end="")
    except (MagresError, KeyError) as e:
        message_service.log_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
