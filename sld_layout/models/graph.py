"""Substation graph models read and written by the layout engines.

This module provides the minimal topology a single-line diagram layout needs:
- Bus nodes (busbar sections) with their structural grid position
- Cells (groups of terminals) with type, member bus nodes and sides
- Feeder nodes (external connections) carried by cells

Layout engines never create or delete any of these objects. They only write
``structural_position`` on bus nodes, ``direction``/``order`` on cells and
``order`` on feeders, then ask the graph to recompute its max bus position.
"""

import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


class CellType(str, Enum):
    """Kind of diagram element a cell represents."""
    EXTERN = "EXTERN"
    INTERN = "INTERN"
    INTERN_BOUND = "INTERN_BOUND"
    SHUNT = "SHUNT"
    UNDEFINED = "UNDEFINED"


class Direction(str, Enum):
    """Side of the busbars a cell is drawn on."""
    TOP = "TOP"
    BOTTOM = "BOTTOM"


class Side(str, Enum):
    """Side of an intern cell."""
    LEFT = "LEFT"
    RIGHT = "RIGHT"


INTERN_CELL_TYPES = (CellType.INTERN, CellType.INTERN_BOUND)


class Position(BaseModel):
    """Structural grid coordinate of a bus node.

    Attributes:
        row: Horizontal slot along the busbar axis
        column: Vertical slot (one per horizontal chain)
    """

    row: int = Field(..., description="Horizontal structural slot")
    column: int = Field(..., description="Vertical structural slot")

    def to_list(self) -> List[int]:
        """Convert to list format [row, column]."""
        return [self.row, self.column]


class BusNode(BaseModel):
    """A busbar section."""

    id: str = Field(..., description="Stable bus node identifier")
    structural_position: Optional[Position] = Field(
        default=None, description="Grid position written by the layout engine"
    )


class FeederNode(BaseModel):
    """A leaf terminal of a cell representing an external connection."""

    id: str = Field(..., description="Feeder identifier")
    order: Optional[int] = Field(
        default=None, description="Global feeder order written by the layout engine"
    )


class Cell(BaseModel):
    """A grouping of terminals forming one diagram element.

    Extern cells connect feeders to one or more bus nodes. Intern and
    intern-bound cells couple bus nodes together and split them into a left
    and a right side.
    """

    id: str = Field(..., description="Cell identifier")
    cell_type: CellType = Field(..., description="Kind of cell")
    bus_node_ids: List[str] = Field(
        default_factory=list, description="Member bus nodes, in stored order"
    )
    left_bus_node_ids: List[str] = Field(
        default_factory=list, description="Left side bus nodes (intern cells)"
    )
    right_bus_node_ids: List[str] = Field(
        default_factory=list, description="Right side bus nodes (intern cells)"
    )
    feeders: List[FeederNode] = Field(
        default_factory=list, description="Feeder leaves, in stored order"
    )
    direction: Optional[Direction] = Field(
        default=None, description="Draw direction written by the layout engine"
    )
    order: Optional[int] = Field(
        default=None, description="Cell order written by the layout engine"
    )

    @property
    def is_intern(self) -> bool:
        return self.cell_type in INTERN_CELL_TYPES

    def side_bus_node_ids(self, side: Side) -> List[str]:
        """Bus nodes of one side of an intern cell."""
        if side == Side.LEFT:
            return list(self.left_bus_node_ids)
        return list(self.right_bus_node_ids)

    def order_from_feeder_orders(self) -> None:
        """Set the cell order to the smallest order among its feeders."""
        orders = [f.order for f in self.feeders if f.order is not None]
        if orders:
            self.order = min(orders)


class SubstationGraph(BaseModel):
    """Topology of one voltage level diagram.

    Attributes:
        id: Diagram identifier
        bus_nodes: All bus nodes
        cells: All cells
        max_bus_position: Largest row/column among positioned bus nodes
    """

    id: str = Field(default="graph", description="Diagram identifier")
    bus_nodes: List[BusNode] = Field(default_factory=list)
    cells: List[Cell] = Field(default_factory=list)
    max_bus_position: Optional[Position] = Field(default=None)

    @field_validator("bus_nodes")
    @classmethod
    def validate_unique_bus_ids(cls, v: List[BusNode]) -> List[BusNode]:
        """Validate that bus node ids are unique."""
        seen = set()
        for bus in v:
            if bus.id in seen:
                raise ValueError(f"Duplicate bus node id: '{bus.id}'")
            seen.add(bus.id)
        return v

    def get_bus_node(self, bus_id: str) -> BusNode:
        """Get bus node by id.

        Raises:
            KeyError: If no bus node has this id
        """
        for bus in self.bus_nodes:
            if bus.id == bus_id:
                return bus
        raise KeyError(f"Bus node '{bus_id}' not found in graph '{self.id}'")

    def get_cell(self, cell_id: str) -> Cell:
        """Get cell by id.

        Raises:
            KeyError: If no cell has this id
        """
        for cell in self.cells:
            if cell.id == cell_id:
                return cell
        raise KeyError(f"Cell '{cell_id}' not found in graph '{self.id}'")

    def feeder_nodes(self) -> List[FeederNode]:
        """All feeder nodes, cell by cell."""
        return [feeder for cell in self.cells for feeder in cell.feeders]

    def set_max_bus_position(self) -> None:
        """Recompute the largest structural row and column of the bus nodes."""
        positions = [
            bus.structural_position for bus in self.bus_nodes
            if bus.structural_position is not None
        ]
        if not positions:
            self.max_bus_position = None
            return
        self.max_bus_position = Position(
            row=max(p.row for p in positions),
            column=max(p.column for p in positions),
        )
        logger.debug(
            f"Graph {self.id}: max bus position {self.max_bus_position.to_list()}"
        )


__all__ = [
    "CellType",
    "Direction",
    "Side",
    "INTERN_CELL_TYPES",
    "Position",
    "BusNode",
    "FeederNode",
    "Cell",
    "SubstationGraph",
]
