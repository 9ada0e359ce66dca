"""Basic position finder.

One row per vertical bus connection pattern, bus nodes stacked by rank
inside it; bus nodes in no pattern get a row of their own. Feeders are
ordered by id with a fixed step and every cell is drawn on top. Useful as a
reference layout and for graphs whose intern cells carry no structure.
"""

import logging
from typing import Optional

from sld_layout.config.settings import get_setting
from sld_layout.layout.context import LayoutContext
from sld_layout.layout.engines.base import PositionFinder
from sld_layout.layout.patterns import build_patterns, identify_structuring_cells
from sld_layout.models.graph import Direction, Position, SubstationGraph
from sld_layout.models.layout_report import LayoutReport

logger = logging.getLogger(__name__)


class BasicPositionFinder(PositionFinder):
    """Pattern-per-row positions with feeder orders taken from feeder ids."""

    def __init__(self, feeder_order_step: Optional[int] = None):
        self._feeder_order_step = feeder_order_step

    @property
    def name(self) -> str:
        return "basic"

    def build_layout(self, graph: SubstationGraph) -> LayoutReport:
        logger.info(f"Start basic layout of graph {graph.id}")
        context = LayoutContext.for_graph(graph)
        context.registry = build_patterns(graph, context.ranks)
        identify_structuring_cells(graph, context.ranks, context.registry)

        self._set_structural_positions(context)
        self._set_feeder_orders(graph)

        graph.set_max_bus_position()
        return LayoutReport.from_graph(
            graph, algorithm=self.name, patterns=context.pattern_ids()
        )

    def _set_structural_positions(self, context: LayoutContext) -> None:
        """Place bus nodes that have no position yet, pattern by pattern."""
        row = 1
        for pattern in context.registry:
            for column, bus in enumerate(pattern.bus_nodes, start=1):
                bus_node = context.ranks.bus_node(bus)
                if bus_node.structural_position is None:
                    bus_node.structural_position = Position(row=row, column=column)
            row += 1
        for bus in range(len(context.ranks)):
            bus_node = context.ranks.bus_node(bus)
            if bus_node.structural_position is None:
                bus_node.structural_position = Position(row=row, column=1)
                row += 1

    def _set_feeder_orders(self, graph: SubstationGraph) -> None:
        step = (
            self._feeder_order_step if self._feeder_order_step is not None
            else get_setting('basic_feeder_order_step')
        )
        feeders = sorted(
            ((feeder, cell) for cell in graph.cells for feeder in cell.feeders),
            key=lambda item: item[0].id,
        )
        for i, (feeder, cell) in enumerate(feeders):
            cell.direction = Direction.TOP
            feeder.order = step * i
        for cell in graph.cells:
            cell.order_from_feeder_orders()
