"""Per-run working state shared by the layout steps.

Everything here references bus nodes, patterns and chains by integer handle
and is discarded once results are written back to the graph.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sld_layout.layout.belonging import NodeBelonging
from sld_layout.layout.chains import HorizontalChain
from sld_layout.layout.patterns import PatternRegistry
from sld_layout.layout.ranking import RankIndex
from sld_layout.models.graph import SubstationGraph


@dataclass
class LayoutContext:
    graph: SubstationGraph
    ranks: RankIndex
    registry: PatternRegistry = field(default_factory=PatternRegistry)
    chains: List[HorizontalChain] = field(default_factory=list)
    belongings: Optional[Tuple[NodeBelonging, ...]] = None

    @classmethod
    def for_graph(cls, graph: SubstationGraph) -> "LayoutContext":
        return cls(graph=graph, ranks=RankIndex.from_graph(graph))

    def chain_of(self, bus: int) -> HorizontalChain:
        return self.chains[self.belongings[bus].chain]

    def pattern_ids(self) -> List[List[str]]:
        """Registry patterns as bus id lists."""
        return [self.ranks.ids_of(p.bus_nodes) for p in self.registry]

    def chain_ids(self) -> List[List[str]]:
        """Chains as bus id lists, in chain order."""
        return [self.ranks.ids_of(c.bus_nodes) for c in self.chains]
