"""Layout module for single-line substation diagrams.

This module provides:
- Position finder abstraction (PositionFinder)
- Free position finder (patterns, chains, clusters; no placement input)
- Basic position finder (one row per pattern)
- Precondition errors raised on malformed graphs
"""

from sld_layout.layout.errors import (
    LayoutPreconditionError,
    EmptyBusNodeSetError,
    UnknownBusNodeError,
    InvalidCellSplitError,
)
from sld_layout.layout.engines import (
    PositionFinder,
    FreePositionFinder,
    BasicPositionFinder,
    get_engine,
)

__all__ = [
    "PositionFinder",
    "FreePositionFinder",
    "BasicPositionFinder",
    "get_engine",
    "LayoutPreconditionError",
    "EmptyBusNodeSetError",
    "UnknownBusNodeError",
    "InvalidCellSplitError",
]
