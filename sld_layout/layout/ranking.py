"""Rank index: stable total order over bus nodes.

Every bus node gets a rank 1..N from its id in lexicographic order. The
zero-based handle ``rank - 1`` is the integer every other layout structure
uses to refer to a bus node.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from sld_layout.layout.errors import UnknownBusNodeError
from sld_layout.models.graph import BusNode, SubstationGraph

logger = logging.getLogger(__name__)


class RankIndex:
    """Bus node id <-> handle mapping ordered by id."""

    def __init__(self, bus_nodes: Iterable[BusNode]):
        self.bus_nodes: List[BusNode] = sorted(bus_nodes, key=lambda bus: bus.id)
        self._handles: Dict[str, int] = {
            bus.id: handle for handle, bus in enumerate(self.bus_nodes)
        }

    @classmethod
    def from_graph(cls, graph: SubstationGraph) -> "RankIndex":
        index = cls(graph.bus_nodes)
        logger.debug(f"Ranked {len(index)} bus nodes of graph {graph.id}")
        return index

    def __len__(self) -> int:
        return len(self.bus_nodes)

    def handle(self, bus_id: str, cell_id: str = "?") -> int:
        """Handle of a bus node id.

        Raises:
            UnknownBusNodeError: If the id is not a bus node of the graph
        """
        try:
            return self._handles[bus_id]
        except KeyError:
            raise UnknownBusNodeError(bus_id, cell_id) from None

    def rank(self, bus_id: str) -> int:
        return self.handle(bus_id) + 1

    def bus_id(self, handle: int) -> str:
        return self.bus_nodes[handle].id

    def bus_node(self, handle: int) -> BusNode:
        return self.bus_nodes[handle]

    def handles_of(self, bus_ids: Iterable[str], cell_id: str = "?") -> Tuple[int, ...]:
        """Distinct handles of some bus ids, sorted by rank."""
        return tuple(sorted({self.handle(bus_id, cell_id) for bus_id in bus_ids}))

    def ids_of(self, handles: Iterable[int]) -> List[str]:
        return [self.bus_nodes[h].id for h in handles]
