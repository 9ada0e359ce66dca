"""Free position finder.

Lays out a substation with no placement input at all: positions come only
from how extern cells stack bus nodes vertically (patterns) and how flat
intern cells link them horizontally (chains).

Pipeline:
    rank bus nodes -> register patterns -> filter structuring cells ->
    chain bus nodes -> index belongings -> cluster -> organize clusters
"""

import logging
from typing import List, Optional

from sld_layout.config.settings import get_setting, is_enabled
from sld_layout.layout.belonging import build_belongings
from sld_layout.layout.chains import build_chains
from sld_layout.layout.clusters import ConnectedCluster, build_clusters
from sld_layout.layout.context import LayoutContext
from sld_layout.layout.engines.base import PositionFinder
from sld_layout.layout.patterns import build_patterns, flat_cells, identify_structuring_cells
from sld_layout.models.graph import SubstationGraph
from sld_layout.models.layout_report import ClusterReport, LayoutReport
from sld_layout.validators.preconditions import GraphPreconditions

logger = logging.getLogger(__name__)


class FreePositionFinder(PositionFinder):
    """Position finder deriving everything from the graph topology.

    Example:
        finder = FreePositionFinder()
        report = finder.build_layout(graph)
        graph.get_bus_node("B1").structural_position  # Position(row=1, column=1)
    """

    def __init__(
        self,
        first_structural_position: Optional[int] = None,
        first_feeder_order: Optional[int] = None,
        validate: Optional[bool] = None,
    ):
        """Initialize the finder.

        Args:
            first_structural_position: First row of the first cluster
                (default from settings)
            first_feeder_order: First feeder order (default from settings)
            validate: Check preconditions before layout
                (default from the 'validate_preconditions' flag)
        """
        self._first_row = first_structural_position
        self._first_feeder_order = first_feeder_order
        self._validate = validate

    @property
    def name(self) -> str:
        return "free"

    def build_layout(self, graph: SubstationGraph) -> LayoutReport:
        logger.info(f"Start free layout of graph {graph.id}")

        validate = is_enabled('validate_preconditions') if self._validate is None else self._validate
        if validate:
            GraphPreconditions().ensure_well_formed(graph)

        context = self.build_context(graph)
        clusters = build_clusters(context)
        cluster_reports = self.organize_clusters(context, clusters)

        graph.set_max_bus_position()
        logger.info(
            f"Laid out graph {graph.id}: {len(context.registry)} pattern(s), "
            f"{len(context.chains)} chain(s), {len(clusters)} cluster(s)"
        )
        return LayoutReport.from_graph(
            graph,
            algorithm=self.name,
            patterns=context.pattern_ids(),
            chains=context.chain_ids(),
            clusters=cluster_reports,
        )

    def build_context(self, graph: SubstationGraph) -> LayoutContext:
        """Run every step up to (not including) clustering."""
        context = LayoutContext.for_graph(graph)
        context.registry = build_patterns(graph, context.ranks)
        structuring = identify_structuring_cells(graph, context.ranks, context.registry)
        flat = flat_cells(graph, context.ranks, structuring)
        context.chains = build_chains(context.ranks, flat)
        context.belongings = build_belongings(len(context.ranks), context.registry, context.chains)
        return context

    def organize_clusters(
        self,
        context: LayoutContext,
        clusters: List[ConnectedCluster],
    ) -> List[ClusterReport]:
        """Organize clusters in order, threading row and feeder counters."""
        row = self._first_row if self._first_row is not None else get_setting('first_structural_position')
        feeder_order = (
            self._first_feeder_order if self._first_feeder_order is not None
            else get_setting('first_feeder_order')
        )

        reports = []
        for cluster in clusters:
            cluster.organize()
            next_row = cluster.set_structural_positions(row)
            next_feeder_order = cluster.set_cell_orders(feeder_order)
            logger.debug(
                f"Cluster of {len(cluster.buses)} bus node(s): rows {row}-{next_row - 1}, "
                f"feeder orders {feeder_order}-{next_feeder_order - 1}"
            )
            reports.append(ClusterReport(
                bus_node_ids=context.ranks.ids_of(cluster.buses),
                first_row=row,
                next_row=next_row,
                first_feeder_order=feeder_order,
                next_feeder_order=next_feeder_order,
            ))
            row, feeder_order = next_row, next_feeder_order
        return reports
