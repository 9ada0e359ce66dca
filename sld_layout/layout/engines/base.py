"""Base position finder protocol.

Defines the interface that all position finders must implement.
"""

from abc import ABC, abstractmethod

from sld_layout.models.graph import SubstationGraph
from sld_layout.models.layout_report import LayoutReport


class PositionFinder(ABC):
    """Abstract base class for position finders.

    Position finders turn a substation topology into structural positions
    for bus nodes and orders/directions for cells and feeders, written in
    place into the graph.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Finder name (e.g., 'free', 'basic')."""
        ...

    @abstractmethod
    def build_layout(self, graph: SubstationGraph) -> LayoutReport:
        """Compute positions and orders for a graph.

        Args:
            graph: Graph to lay out, mutated in place

        Returns:
            LayoutReport snapshot of what was written
        """
        ...
