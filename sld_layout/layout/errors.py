"""Errors raised when a graph violates a layout precondition.

Layout is a pure function of the input graph, so these are never transient:
they always point at malformed input.
"""

from typing import Optional, Sequence


class LayoutPreconditionError(ValueError):
    """Raised when the graph handed to a position finder is malformed."""
    pass


class EmptyBusNodeSetError(LayoutPreconditionError):
    """Raised when a pattern or chain would be built from no bus node."""

    def __init__(self, what: str, cell_id: Optional[str] = None):
        self.what = what
        self.cell_id = cell_id
        location = f" (cell {cell_id})" if cell_id is not None else ""
        super().__init__(f"Cannot build {what} from an empty bus node set{location}")


class UnknownBusNodeError(LayoutPreconditionError):
    """Raised when a cell references a bus node missing from the graph."""

    def __init__(self, bus_id: str, cell_id: str):
        self.bus_id = bus_id
        self.cell_id = cell_id
        super().__init__(f"Cell {cell_id} references unknown bus node '{bus_id}'")


class InvalidCellSplitError(LayoutPreconditionError):
    """Raised when an intern cell has no valid left/right split."""

    def __init__(self, cell_id: str, reason: str, bus_ids: Sequence[str] = ()):
        self.cell_id = cell_id
        self.reason = reason
        self.bus_ids = list(bus_ids)
        detail = f": {', '.join(self.bus_ids)}" if self.bus_ids else ""
        super().__init__(f"Intern cell {cell_id} has an invalid side split ({reason}){detail}")
