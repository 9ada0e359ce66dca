#!/usr/bin/env python3
"""
Double Busbar Example
Lays out two busbars of two sections each, coupled by one extern cell per
column, from a NetworkX topology graph.
"""

import logging
from pathlib import Path
import sys
sys.path.append(str(Path(__file__).parent.parent))

import networkx as nx

from sld_layout.layout.engines import FreePositionFinder
from sld_layout.models.graph_converter import apply_to_networkx, from_networkx


def build_topology() -> nx.Graph:
    """Two busbars (B1-B2, B3-B4) with two lines and two sectionalizers."""
    g = nx.Graph()
    for bus in ("B1", "B2", "B3", "B4"):
        g.add_node(bus, kind="bus")

    # lines, each connectable to both busbars
    for cell, buses, feeder in (("L1", ("B1", "B3"), "F1"), ("L2", ("B2", "B4"), "F2")):
        g.add_node(cell, kind="cell", cell_type="EXTERN")
        g.add_node(feeder, kind="feeder")
        g.add_edge(cell, feeder)
        for bus in buses:
            g.add_edge(cell, bus)

    # sectionalizers
    for cell, left, right in (("S1", "B1", "B2"), ("S2", "B3", "B4")):
        g.add_node(cell, kind="cell", cell_type="INTERN")
        g.add_edge(cell, left, side="LEFT")
        g.add_edge(cell, right, side="RIGHT")
    return g


def main():
    logging.basicConfig(level=logging.DEBUG)

    topology = build_topology()
    graph = from_networkx(topology, graph_id="VL-400kV")
    report = FreePositionFinder().build_layout(graph)
    apply_to_networkx(graph, topology)

    print("Bus node positions (row, column):")
    for bus_id, pos in sorted(report.positions.items()):
        print(f"   {bus_id}: {pos.to_list()}")

    print("\nCells:")
    for cell in graph.cells:
        if cell.order is not None:
            print(f"   {cell.id}: order {cell.order}, direction {cell.direction.value}")

    print(f"\nFeeder orders: {report.feeder_orders}")
    print(f"Etag: {report.etag[:12]}...")


if __name__ == "__main__":
    main()
