#!/usr/bin/env python3
# crystal_model.py
#
# An in-memory crystal model: atoms with NMR tensor arrays, periodic images
# over a supercell, a covalent adjacency matrix built from elements_table.py,
# fragment detection, and the atom queries used by the selection code.
#

import itertools
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

import numpy as np

from config import BOND_DETECTION, SELECTION_DEFAULTS
from elements_table import Elements
from errors import MissingDataError


@dataclass(eq=False)
class Atom:
    """
    A single atom (or periodic image of one).

    Attributes:
        symbol: Element symbol, e.g. "C".
        label: Site label from the input file, e.g. "C" or "C1".
        label_index: Index of the site within its label (1-based, as in .magres).
        position: Cartesian position in Å.
        arrays: Per-atom tensor data keyed by kind ("ms", "efg"), 3x3 arrays.
        cell: Lattice offset of this image; (0, 0, 0) for the original site.
        index: Image index inside a CrystalModel (assigned by the model).
        isotope: Mass number used for dipolar couplings (None: default isotope).
    """
    symbol: str
    label: str
    label_index: int
    position: np.ndarray
    arrays: Dict[str, np.ndarray] = field(default_factory=dict)
    cell: Tuple[int, int, int] = (0, 0, 0)
    index: Optional[int] = None
    isotope: Optional[int] = None

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=float)

    @property
    def element(self) -> str:
        return self.symbol

    @property
    def crystal_label(self) -> str:
        """Human readable site label, e.g. "H_1"."""
        return f"{self.label}_{self.label_index}"

    def has_array(self, kind: str) -> bool:
        return kind in self.arrays

    def get_array_value(self, kind: str) -> np.ndarray:
        if kind not in self.arrays:
            raise MissingDataError(f"Atom {self.crystal_label} has no '{kind}' data")
        return self.arrays[kind]


AtomRef = Union[Atom, int]


class CrystalModel:
    """
    A periodic structure with covalent bonding and fragment detection.
    Coordinates are in Å.

    Key attributes:
        title (str): A descriptive name.
        lattice (np.ndarray | None): Lattice vectors as rows, shape (3, 3).
        atoms (List[Atom]): All images, atoms[i].index == i.
        bond_matrix (np.ndarray): (n, n) boolean adjacency matrix.
        fragments (Dict[int, List[int]]): fragment_id -> list of atom indices.
    """

    def __init__(self,
                 atoms: Iterable[Atom],
                 lattice=None,
                 supercell: Tuple[int, int, int] = (1, 1, 1),
                 bond_tolerance: float = BOND_DETECTION["tolerance"],
                 title: str = ""):
        self.title = title
        self.lattice = None if lattice is None else np.asarray(lattice, dtype=float).reshape(3, 3)
        self.supercell = tuple(int(n) for n in supercell)
        self.atoms = []               # type: List[Atom]
        self.bond_matrix = None       # type: np.ndarray
        self.fragments = {}           # type: Dict[int, List[int]]
        self._fragment_of = {}        # type: Dict[int, int]
        self.metadata = {}            # type: Dict[str, object]

        self._build_images(list(atoms))
        self.detect_bonds(bond_tolerance)
        self.find_fragments()

    def __len__(self):
        return len(self.atoms)

    @staticmethod
    def _cell_range(n: int) -> range:
        # Always contains 0; odd sizes are centred on it
        low = -((n - 1) // 2)
        return range(low, low + n)

    def _build_images(self, sites: List[Atom]) -> None:
        if any(n < 1 for n in self.supercell) or len(self.supercell) != 3:
            raise ValueError(f"Invalid supercell: {self.supercell}")
        if self.lattice is None and self.supercell != (1, 1, 1):
            raise ValueError("A supercell needs lattice vectors")

        cells = itertools.product(*(self._cell_range(n) for n in self.supercell))
        for cell in cells:
            shift = np.zeros(3) if self.lattice is None else np.asarray(cell, dtype=float) @ self.lattice
            for site in sites:
                image = replace(site,
                                position=site.position + shift,
                                cell=tuple(cell),
                                index=len(self.atoms))
                self.atoms.append(image)

    # ------------------------------------------------------------------------
    # Bonds and fragments
    # ------------------------------------------------------------------------
    def positions(self) -> np.ndarray:
        return np.array([atom.position for atom in self.atoms]).reshape(-1, 3)

    def compute_distance_matrix(self) -> np.ndarray:
        """
        Pairwise Euclidean distances between all images, shape (n, n).
        """
        coords = self.positions()
        diff = coords[:, np.newaxis, :] - coords[np.newaxis, :, :]
        return np.sqrt(np.sum(diff**2, axis=-1))

    def detect_bonds(self, tolerance: float = BOND_DETECTION["tolerance"]) -> None:
        """
        Fills self.bond_matrix by comparing all interatomic distances to the
        sum of covalent radii plus `tolerance` (in Å).
        """
        dist_matrix = self.compute_distance_matrix()
        radii = np.array([Elements.covalent_radius(atom.symbol,
                                                   order=BOND_DETECTION["order"],
                                                   source=BOND_DETECTION["source"])
                          for atom in self.atoms])
        threshold_matrix = radii[:, None] + radii[None, :] + tolerance
        self.bond_matrix = (dist_matrix <= threshold_matrix) & (dist_matrix > 0)

    def neighbors(self, index: int) -> List[int]:
        return [int(j) for j in np.flatnonzero(self.bond_matrix[index])]

    def find_fragments(self) -> None:
        """
        Identify connected components ("fragments") of the bond graph.
        A DFS populates self.fragments = {frag_id: [atom_indices]}.
        """
        visited = set()
        self.fragments = {}
        self._fragment_of = {}

        for start_atom in range(len(self.atoms)):
            if start_atom in visited:
                continue
            frag_id = len(self.fragments)
            stack = [start_atom]
            connected = []
            while stack:
                current = stack.pop()
                if current in visited:
                    continue
                visited.add(current)
                connected.append(current)
                self._fragment_of[current] = frag_id
                stack.extend(n for n in self.neighbors(current) if n not in visited)
            self.fragments[frag_id] = sorted(connected)

    # ------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------
    def _index(self, atom: AtomRef) -> int:
        index = atom.index if isinstance(atom, Atom) else int(atom)
        if not 0 <= index < len(self.atoms):
            raise IndexError(f"No atom with index {index}")
        return index

    def query_element(self, element: str) -> FrozenSet[int]:
        """All atoms of the given element."""
        return frozenset(a.index for a in self.atoms if a.symbol == element)

    def query_sphere(self, atom: AtomRef, radius: float = SELECTION_DEFAULTS["sphere_radius"]) -> FrozenSet[int]:
        """All atoms within `radius` Å of `atom`, the atom itself included."""
        center = self.atoms[self._index(atom)].position
        distances = np.linalg.norm(self.positions() - center, axis=1)
        return frozenset(int(i) for i in np.flatnonzero(distances <= radius))

    def query_molecule(self, atom: AtomRef) -> FrozenSet[int]:
        """All atoms in the same bonded fragment as `atom`."""
        frag_id = self._fragment_of[self._index(atom)]
        return frozenset(self.fragments[frag_id])

    def query_bonded(self, atom: AtomRef, hops: int = SELECTION_DEFAULTS["bond_hops"]) -> FrozenSet[int]:
        """
        All atoms reachable from `atom` in at most `hops` bonds. The origin
        atom itself is not included.
        """
        origin = self._index(atom)
        seen = {origin}
        frontier = [origin]
        for _ in range(hops):
            next_frontier = []
            for current in frontier:
                for neigh in self.neighbors(current):
                    if neigh not in seen:
                        seen.add(neigh)
                        next_frontier.append(neigh)
            frontier = next_frontier
        seen.discard(origin)
        return frozenset(seen)

    def query_cell(self, cell=SELECTION_DEFAULTS["default_cell"]) -> FrozenSet[int]:
        """All atoms belonging to the periodic image `cell`."""
        cell = tuple(int(c) for c in cell)
        return frozenset(a.index for a in self.atoms if a.cell == cell)

    def view(self, ids: Iterable[int]) -> List[Atom]:
        """The atoms for a set of ids, in index order."""
        return [self.atoms[self._index(i)] for i in sorted(ids)]

    def has_array(self, kind: str) -> bool:
        """True if every atom carries a tensor of the given kind."""
        return bool(self.atoms) and all(a.has_array(kind) for a in self.atoms)

    def atom_by_label(self, crystal_label: str, cell=SELECTION_DEFAULTS["default_cell"]) -> Atom:
        """Find an atom by its crystal label (e.g. "H_1") in the given cell."""
        cell = tuple(cell)
        for atom in self.atoms:
            if atom.crystal_label == crystal_label and atom.cell == cell:
                return atom
        raise KeyError(f"No atom labelled '{crystal_label}' in cell {cell}")

    def summary(self) -> str:
        lines = []
        lines.append(f"Title: {self.title}")
        lines.append(f"Number of atoms: {len(self.atoms)}")
        lines.append(f"Supercell: {self.supercell}")
        lines.append(f"Number of fragments: {len(self.fragments)}")
        arrays = [kind for kind in ("ms", "efg") if self.has_array(kind)]
        lines.append(f"Tensor data: {', '.join(arrays) if arrays else 'none'}")
        return "\n".join(lines)
