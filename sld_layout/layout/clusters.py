"""Connected clusters of bus nodes and their organisation.

Two bus nodes are in the same cluster when a path of shared patterns and
shared chains links them. Each cluster is laid out on its own: chains are
oriented consistently, patterns are sorted left to right, chains get vertical
slots, then bus nodes get structural positions and cells/feeders get orders.
Row and feeder counters are handed from one cluster to the next.
"""

import logging
from typing import List, Set

from sld_layout.layout.chains import HorizontalChain
from sld_layout.layout.context import LayoutContext
from sld_layout.layout.patterns import VerticalBusConnectionPattern
from sld_layout.models.graph import Direction, Position

logger = logging.getLogger(__name__)


def first_available_index(booked: Set[int]) -> int:
    """Smallest slot not booked, searching from 0 only when 0 is booked."""
    slot = 0 if 0 in booked else 1
    while slot in booked:
        slot += 1
    return slot


class ConnectedCluster:
    """Bus nodes connected through patterns and chains.

    Attributes:
        buses: Bus node handles, by rank
        patterns: Pattern handles, sorted left to right once organized
        chains: Chain handles, in chain order
    """

    def __init__(self, context: LayoutContext, buses: List[int]):
        self.context = context
        self.buses = sorted(buses)
        self.patterns = sorted({
            p for bus in self.buses for p in context.belongings[bus].patterns
        })
        self.chains = sorted({context.belongings[bus].chain for bus in self.buses})

    def _chain(self, handle: int) -> HorizontalChain:
        return self.context.chains[handle]

    def _pattern(self, handle: int) -> VerticalBusConnectionPattern:
        return self.context.registry[handle]

    def organize(self) -> None:
        """Align chains, sort patterns and assign vertical slots."""
        self.align_chains()
        self.sort_patterns()
        self.organize_chains_vertically()

    def align_chains(self) -> None:
        for i in range(len(self.chains)):
            for j in range(i + 1, len(self.chains)):
                if self._chain(self.chains[j]).align_to(self._chain(self.chains[i])):
                    logger.debug(f"Reversed chain {self.chains[j]} to match chain {self.chains[i]}")

    def _chains_of_pattern(self, pattern: int) -> List[int]:
        return [
            self.context.belongings[bus].chain
            for bus in self._pattern(pattern).bus_nodes
        ]

    def compare_patterns(self, pattern1: int, pattern2: int) -> int:
        """Relative horizontal order of two patterns, 0 when unconstrained.

        Not a total order: patterns sharing no chain compare equal even if
        they are far apart, so it cannot be handed to ``sorted``.
        """
        others = set(self._chains_of_pattern(pattern2))
        common = [c for c in self._chains_of_pattern(pattern1) if c in others]
        members1 = set(self._pattern(pattern1).bus_nodes)
        members2 = set(self._pattern(pattern2).bus_nodes)
        for handle in common:
            chain = self._chain(handle)
            index1 = next((i for i, bus in enumerate(chain.bus_nodes) if bus in members1), -1)
            index2 = next((i for i, bus in enumerate(chain.bus_nodes) if bus in members2), -1)
            if index1 != -1 and index2 != -1 and index1 != index2:
                return index1 - index2
        return 0

    def _try_to_insert(self, pattern: int, ordered: List[int]) -> bool:
        for position, placed in enumerate(ordered):
            compare = self.compare_patterns(pattern, placed)
            if compare != 0:
                ordered.insert(position if compare < 0 else position + 1, pattern)
                return True
        return False

    def sort_patterns(self) -> None:
        """Insertion sort of patterns under the partial order of shared chains.

        Patterns constrained by no placed pattern go to the end.
        """
        if not self.patterns:
            return
        remaining = list(self.patterns)
        ordered = [remaining.pop(0)]
        while remaining:
            for pattern in remaining:
                if self._try_to_insert(pattern, ordered):
                    remaining.remove(pattern)
                    break
            else:
                ordered.append(remaining.pop(0))
        self.patterns = ordered

    def organize_chains_vertically(self) -> None:
        for pattern in self.patterns:
            buses = self._pattern(pattern).bus_nodes
            booked = {self.context.chain_of(bus).v for bus in buses}
            for bus in buses:
                chain = self.context.chain_of(bus)
                if chain.v == 0:
                    chain.v = first_available_index(booked)
                    booked.add(chain.v)

    def set_structural_positions(self, first_row: int) -> int:
        """Write bus node positions; every chain starts at ``first_row``.

        Returns:
            First row available to the next cluster
        """
        next_row = first_row
        for handle in self.chains:
            chain = self._chain(handle)
            row = first_row
            for bus in chain.bus_nodes:
                self.context.ranks.bus_node(bus).structural_position = Position(
                    row=row, column=chain.v
                )
                row += 1
            next_row = max(next_row, row)
        return next_row

    def set_cell_orders(self, first_feeder_order: int) -> int:
        """Write cell directions/orders and feeder orders, pattern by pattern.

        Returns:
            First feeder order available to the next cluster
        """
        cells = self.context.graph.cells
        feeder_order = first_feeder_order
        cell_position = 0
        for pattern in self.patterns:
            for cell_index in self.context.registry.cells_of(pattern):
                cell = cells[cell_index]
                cell.direction = Direction.TOP if cell_position % 2 == 0 else Direction.BOTTOM
                cell.order = cell_position
                cell_position += 1
                for feeder in cell.feeders:
                    feeder.order = feeder_order
                    feeder_order += 1
        return feeder_order


def build_clusters(context: LayoutContext) -> List[ConnectedCluster]:
    """Connected components of the pattern/chain hypergraph, by smallest rank."""
    belongings = context.belongings
    claimed = [False] * len(context.ranks)
    clusters = []
    for start in range(len(context.ranks)):
        if claimed[start]:
            continue
        claimed[start] = True
        stack = [start]
        members = []
        while stack:
            bus = stack.pop()
            members.append(bus)
            neighbors = [
                other
                for p in belongings[bus].patterns
                for other in context.registry[p].bus_nodes
            ]
            neighbors.extend(context.chains[belongings[bus].chain].bus_nodes)
            for other in neighbors:
                if not claimed[other]:
                    claimed[other] = True
                    stack.append(other)
        clusters.append(ConnectedCluster(context, members))

    logger.debug(f"Found {len(clusters)} connected cluster(s)")
    return clusters
