"""
Automatic layout of single-line substation diagrams.

Given bus nodes, cells and feeders, the position finders assign every bus
node a structural grid position and every cell and feeder a draw order,
without any manual placement input.

Usage:
    from sld_layout import FreePositionFinder, SubstationGraph

    graph = SubstationGraph(bus_nodes=[...], cells=[...])
    report = FreePositionFinder().build_layout(graph)
"""

from sld_layout.models.graph import (
    BusNode,
    Cell,
    CellType,
    Direction,
    FeederNode,
    Position,
    Side,
    SubstationGraph,
)
from sld_layout.models.layout_report import LayoutReport
from sld_layout.layout import (
    PositionFinder,
    FreePositionFinder,
    BasicPositionFinder,
    get_engine,
    LayoutPreconditionError,
)

__version__ = "0.1.0"

__all__ = [
    "BusNode",
    "Cell",
    "CellType",
    "Direction",
    "FeederNode",
    "Position",
    "Side",
    "SubstationGraph",
    "LayoutReport",
    "PositionFinder",
    "FreePositionFinder",
    "BasicPositionFinder",
    "get_engine",
    "LayoutPreconditionError",
]
