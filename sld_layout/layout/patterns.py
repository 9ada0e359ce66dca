"""Vertical bus connection patterns (VBCPs).

A pattern is the set of bus nodes an extern cell connects to; it becomes one
vertical column of the diagram. Patterns are registered so that no pattern in
the registry is a subset of another: a candidate included in a registered
pattern joins it, a candidate including registered patterns replaces them and
inherits their cells.

Intern cell sides are registered too (without cells), which lets the
structuring filter recognise intern cells already represented vertically.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from sld_layout.layout.errors import EmptyBusNodeSetError
from sld_layout.layout.ranking import RankIndex
from sld_layout.models.graph import CellType, Side, SubstationGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerticalBusConnectionPattern:
    """Canonical set of bus node handles, sorted by rank."""

    bus_nodes: Tuple[int, ...]

    @classmethod
    def of(cls, handles: Sequence[int], cell_id: Optional[str] = None) -> "VerticalBusConnectionPattern":
        if not handles:
            raise EmptyBusNodeSetError("a vertical bus connection pattern", cell_id)
        return cls(tuple(sorted(set(handles))))

    @property
    def min_rank_handle(self) -> int:
        return self.bus_nodes[0]

    def is_included_in(self, other: "VerticalBusConnectionPattern") -> bool:
        return set(self.bus_nodes) <= set(other.bus_nodes)

    def __len__(self) -> int:
        return len(self.bus_nodes)


class PatternRegistry:
    """Ordered registry of patterns with the cells attached to each.

    Pattern handles are positions in the registry; they are only stable once
    registration is finished.
    """

    def __init__(self):
        self._patterns: List[VerticalBusConnectionPattern] = []
        self._cells: List[List[int]] = []

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self) -> Iterator[VerticalBusConnectionPattern]:
        return iter(self._patterns)

    def __getitem__(self, handle: int) -> VerticalBusConnectionPattern:
        return self._patterns[handle]

    @property
    def patterns(self) -> List[VerticalBusConnectionPattern]:
        return list(self._patterns)

    def cells_of(self, handle: int) -> List[int]:
        """Cell indices attached to a pattern, in attachment order."""
        return list(self._cells[handle])

    def add_bus_node_set(
        self,
        candidate: VerticalBusConnectionPattern,
        cell_index: Optional[int] = None,
    ) -> int:
        """Register a candidate pattern and attach a cell to its target.

        The first registered pattern related to the candidate decides:
        an including pattern becomes the target, an included pattern is
        replaced by the candidate (together with any other registered
        pattern the candidate includes). Unrelated candidates are appended.

        Args:
            candidate: Pattern to register
            cell_index: Optional index of the cell to attach

        Returns:
            Handle of the pattern the candidate resolved to
        """
        target = None
        for handle, existing in enumerate(self._patterns):
            if candidate.is_included_in(existing):
                target = handle
                break
            if existing.is_included_in(candidate):
                target = self._promote(handle, candidate)
                break

        if target is None:
            self._patterns.append(candidate)
            self._cells.append([])
            target = len(self._patterns) - 1

        if cell_index is not None:
            self._cells[target].append(cell_index)
        return target

    def _promote(self, handle: int, candidate: VerticalBusConnectionPattern) -> int:
        absorbed = [
            h for h in range(handle, len(self._patterns))
            if self._patterns[h].is_included_in(candidate)
        ]
        cells = [c for h in absorbed for c in self._cells[h]]
        for h in reversed(absorbed[1:]):
            del self._patterns[h]
            del self._cells[h]
        self._patterns[handle] = candidate
        self._cells[handle] = cells
        logger.debug(
            f"Pattern {list(candidate.bus_nodes)} absorbed {len(absorbed)} "
            f"included pattern(s) with {len(cells)} cell(s)"
        )
        return handle

    def find_including(self, pattern: VerticalBusConnectionPattern) -> Optional[int]:
        """Handle of the first registered pattern including ``pattern``."""
        for handle, existing in enumerate(self._patterns):
            if pattern.is_included_in(existing):
                return handle
        return None


def _canonical(candidates: List[Tuple[VerticalBusConnectionPattern, int]]):
    # equal minimum ranks fall back to the full rank tuple, then graph order
    return sorted(candidates, key=lambda item: (item[0].min_rank_handle, item[0].bus_nodes))


def build_patterns(graph: SubstationGraph, ranks: RankIndex) -> PatternRegistry:
    """Register one pattern per extern cell, smallest bus rank first."""
    registry = PatternRegistry()
    candidates = []
    for index, cell in enumerate(graph.cells):
        if cell.cell_type == CellType.EXTERN:
            handles = ranks.handles_of(cell.bus_node_ids, cell.id)
            candidates.append((VerticalBusConnectionPattern.of(handles, cell.id), index))

    for candidate, index in _canonical(candidates):
        registry.add_bus_node_set(candidate, index)

    logger.debug(
        f"Registered {len(registry)} pattern(s) from {len(candidates)} extern cell(s)"
    )
    return registry


def identify_structuring_cells(
    graph: SubstationGraph,
    ranks: RankIndex,
    registry: PatternRegistry,
) -> List[int]:
    """Indices of intern cells not already represented by a pattern.

    Registers the left sides of every intern cell, then the right sides, and
    keeps the intern cells whose full bus node set is included in no
    registered pattern.
    """
    intern_cells = [
        (index, cell) for index, cell in enumerate(graph.cells) if cell.is_intern
    ]

    for side in (Side.LEFT, Side.RIGHT):
        side_candidates = []
        for index, cell in intern_cells:
            handles = ranks.handles_of(cell.side_bus_node_ids(side), cell.id)
            side_candidates.append((VerticalBusConnectionPattern.of(handles, cell.id), index))
        for candidate, _ in _canonical(side_candidates):
            registry.add_bus_node_set(candidate)

    structuring = []
    for index, cell in intern_cells:
        full = VerticalBusConnectionPattern.of(
            ranks.handles_of(cell.bus_node_ids, cell.id), cell.id
        )
        if registry.find_including(full) is None:
            structuring.append(index)
        else:
            logger.debug(f"Intern cell {cell.id} is vertical, not structuring")
    return structuring


def flat_cells(
    graph: SubstationGraph,
    ranks: RankIndex,
    structuring: List[int],
) -> List[Tuple[int, Tuple[int, int]]]:
    """Structuring cells spanning exactly two bus nodes, with their ends."""
    flat = []
    for index in structuring:
        cell = graph.cells[index]
        handles = ranks.handles_of(cell.bus_node_ids, cell.id)
        if len(handles) == 2:
            flat.append((index, (handles[0], handles[1])))
    return flat
