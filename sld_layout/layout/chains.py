"""Horizontal chains of bus nodes linked by flat cells.

A flat cell couples exactly two bus nodes side by side. Following flat cells
transitively gives maximal chains; bus nodes touched by no flat cell are
singleton chains, so the chains partition the bus nodes.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from sld_layout.layout.errors import EmptyBusNodeSetError
from sld_layout.layout.ranking import RankIndex

logger = logging.getLogger(__name__)

FlatCell = Tuple[int, Tuple[int, int]]


@dataclass
class HorizontalChain:
    """Ordered bus node handles plus the vertical slot the chain is drawn on.

    ``v == 0`` means no slot has been assigned yet.
    """

    bus_nodes: List[int] = field(default_factory=list)
    v: int = 0

    def __len__(self) -> int:
        return len(self.bus_nodes)

    def position(self, bus: int) -> int:
        """Index of a bus node in the chain, -1 if absent."""
        try:
            return self.bus_nodes.index(bus)
        except ValueError:
            return -1

    def delta_position(self, bus1: int, bus2: int) -> int:
        return self.position(bus1) - self.position(bus2)

    def align_to(self, other: "HorizontalChain") -> bool:
        """Reverse this chain if it orders shared bus nodes against ``other``.

        Returns:
            True if the chain was reversed
        """
        mine = set(self.bus_nodes)
        shared = [bus for bus in other.bus_nodes if bus in mine]
        for i in range(len(shared)):
            for j in range(i + 1, len(shared)):
                bus1, bus2 = shared[i], shared[j]
                if self.delta_position(bus1, bus2) * other.delta_position(bus1, bus2) < 0:
                    self.bus_nodes.reverse()
                    return True
        return False


def _bus_to_flat_cells(flat_cells: Sequence[FlatCell]) -> Dict[int, List[FlatCell]]:
    bus2flat: Dict[int, List[FlatCell]] = {}
    for flat in flat_cells:
        for bus in flat[1]:
            bus2flat.setdefault(bus, []).append(flat)
    return bus2flat


def build_chains(ranks: RankIndex, flat_cells: Sequence[FlatCell]) -> List[HorizontalChain]:
    """Chain every bus node, longest chains first.

    Walks start from the bus nodes touching the fewest flat cells (ties by
    rank) so that non circular chains start at one of their ends. A bus node
    leaves the candidate pool before its neighbors are explored, which keeps
    the walk finite on cycles.

    Args:
        ranks: Rank index of all bus nodes
        flat_cells: (cell index, (bus, bus)) pairs

    Returns:
        Chains partitioning all bus nodes, sorted by decreasing size

    Raises:
        EmptyBusNodeSetError: If the graph has no bus node
    """
    if len(ranks) == 0:
        raise EmptyBusNodeSetError("horizontal chains")

    bus2flat = _bus_to_flat_cells(flat_cells)
    remaining = dict.fromkeys(
        sorted(bus2flat, key=lambda bus: (len(bus2flat[bus]), bus))
    )

    chains: List[HorizontalChain] = []
    while remaining:
        start = next(iter(remaining))
        chain = HorizontalChain([start])
        del remaining[start]
        stack = [(start, iter(bus2flat[start]))]
        while stack:
            bus, cells = stack[-1]
            for _, (end1, end2) in cells:
                other = end2 if end1 == bus else end1
                if other in remaining:
                    chain.bus_nodes.append(other)
                    del remaining[other]
                    stack.append((other, iter(bus2flat[other])))
                    break
            else:
                stack.pop()
        chains.append(chain)

    for bus in range(len(ranks)):
        if bus not in bus2flat:
            chains.append(HorizontalChain([bus]))

    chains.sort(key=lambda c: -len(c))
    logger.debug(
        f"Built {len(chains)} chain(s) from {len(flat_cells)} flat cell(s), "
        f"longest has {len(chains[0])} bus node(s)"
    )
    return chains
