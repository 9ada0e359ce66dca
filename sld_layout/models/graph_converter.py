"""Conversion between NetworkX topology graphs and SubstationGraph models.

Topology graphs are undirected NetworkX graphs where every node carries a
``kind`` attribute:

    bus nodes:     {"kind": "bus"}
    cell nodes:    {"kind": "cell", "cell_type": "EXTERN" | "INTERN" | ...}
    feeder nodes:  {"kind": "feeder"}

Edges link cells to their bus nodes (optionally with ``side="LEFT"|"RIGHT"``
for intern cells) and to their feeders. Nodes and neighbors are visited in
sorted id order so the resulting model does not depend on insertion order.

Usage:
    >>> graph = from_networkx(topology)
    >>> FreePositionFinder().build_layout(graph)
    >>> apply_to_networkx(graph, topology)
"""

import logging
from typing import Dict, List

import networkx as nx

from .graph import BusNode, Cell, CellType, FeederNode, Side, SubstationGraph

logger = logging.getLogger(__name__)

BUS_KIND = "bus"
CELL_KIND = "cell"
FEEDER_KIND = "feeder"


def _sorted_nodes(g: nx.Graph) -> List:
    return sorted(g.nodes, key=str)


def from_networkx(g: nx.Graph, graph_id: str = "graph") -> SubstationGraph:
    """Build a SubstationGraph from a NetworkX topology graph.

    Args:
        g: Undirected graph with ``kind`` node attributes
        graph_id: Identifier of the resulting diagram graph

    Returns:
        SubstationGraph with bus nodes, cells and feeders

    Raises:
        ValueError: If a cell node has an unknown ``cell_type`` or an
            unknown ``side`` on one of its bus edges
    """
    bus_nodes: List[BusNode] = []
    cell_node_ids = []
    for node_id in _sorted_nodes(g):
        kind = g.nodes[node_id].get("kind")
        if kind == BUS_KIND:
            bus_nodes.append(BusNode(id=str(node_id)))
        elif kind == CELL_KIND:
            cell_node_ids.append(node_id)
        elif kind != FEEDER_KIND:
            logger.warning(f"Skipping node {node_id} with unknown kind {kind!r}")

    cells: List[Cell] = []
    for cell_id in cell_node_ids:
        attrs = g.nodes[cell_id]
        try:
            cell_type = CellType(attrs.get("cell_type", CellType.UNDEFINED.value))
        except ValueError:
            available = ", ".join(t.value for t in CellType)
            raise ValueError(
                f"Cell {cell_id} has unknown cell_type {attrs.get('cell_type')!r}. "
                f"Available: {available}"
            )

        bus_ids: List[str] = []
        sides: Dict[Side, List[str]] = {Side.LEFT: [], Side.RIGHT: []}
        feeders: List[FeederNode] = []
        for neighbor in sorted(g.neighbors(cell_id), key=str):
            kind = g.nodes[neighbor].get("kind")
            if kind == BUS_KIND:
                bus_ids.append(str(neighbor))
                side = g.edges[cell_id, neighbor].get("side")
                if side is not None:
                    sides[Side(side)].append(str(neighbor))
            elif kind == FEEDER_KIND:
                feeders.append(FeederNode(id=str(neighbor)))

        cells.append(Cell(
            id=str(cell_id),
            cell_type=cell_type,
            bus_node_ids=bus_ids,
            left_bus_node_ids=sides[Side.LEFT],
            right_bus_node_ids=sides[Side.RIGHT],
            feeders=feeders,
        ))

    logger.debug(
        f"Converted networkx graph to {graph_id}: "
        f"{len(bus_nodes)} bus nodes, {len(cells)} cells"
    )
    return SubstationGraph(id=graph_id, bus_nodes=bus_nodes, cells=cells)


def apply_to_networkx(graph: SubstationGraph, g: nx.Graph) -> None:
    """Write computed positions and orders back as NetworkX node attributes.

    Bus nodes get ``structural_position`` as [row, column], cells get
    ``direction`` and ``order``, feeders get ``order``. Unset values are not
    written.

    Note:
        Only updates nodes that exist in both the model and the graph.
        Logs a warning for any missing nodes. Model ids are matched against
        ``str(node)`` so non-string node ids are written back too.
    """
    nodes_by_id = {str(node): node for node in g.nodes}

    def _node_attrs(node_id: str):
        if node_id not in nodes_by_id:
            logger.warning(f"Graph {graph.id} has {node_id} but node not in networkx graph")
            return None
        return g.nodes[nodes_by_id[node_id]]

    for bus in graph.bus_nodes:
        attrs = _node_attrs(bus.id)
        if attrs is not None and bus.structural_position is not None:
            attrs["structural_position"] = bus.structural_position.to_list()

    for cell in graph.cells:
        attrs = _node_attrs(cell.id)
        if attrs is not None:
            if cell.direction is not None:
                attrs["direction"] = cell.direction.value
            if cell.order is not None:
                attrs["order"] = cell.order
        for feeder in cell.feeders:
            feeder_attrs = _node_attrs(feeder.id)
            if feeder_attrs is not None and feeder.order is not None:
                feeder_attrs["order"] = feeder.order


__all__ = [
    "BUS_KIND",
    "CELL_KIND",
    "FEEDER_KIND",
    "from_networkx",
    "apply_to_networkx",
]
