"""Substation graph models and layout reports.

The graph models are the external collaborator of the layout engines: they
are read for topology and written back with positions and orders.
"""

from .graph import (
    CellType,
    Direction,
    Side,
    Position,
    BusNode,
    FeederNode,
    Cell,
    SubstationGraph,
)
from .graph_converter import from_networkx, apply_to_networkx
from .layout_report import ClusterReport, LayoutReport

__all__ = [
    # Graph
    "CellType",
    "Direction",
    "Side",
    "Position",
    "BusNode",
    "FeederNode",
    "Cell",
    "SubstationGraph",

    # NetworkX adapter
    "from_networkx",
    "apply_to_networkx",

    # Reports
    "ClusterReport",
    "LayoutReport",
]
