"""Well-formedness checks run before a graph is laid out."""

import logging
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from sld_layout.layout.errors import (
    EmptyBusNodeSetError,
    InvalidCellSplitError,
    LayoutPreconditionError,
    UnknownBusNodeError,
)
from sld_layout.models.graph import CellType, SubstationGraph

logger = logging.getLogger(__name__)

UNKNOWN_BUS_NODE = "UNKNOWN_BUS_NODE"
EMPTY_BUS_NODE_SET = "EMPTY_BUS_NODE_SET"
INVALID_CELL_SPLIT = "INVALID_CELL_SPLIT"
DUPLICATE_ID = "DUPLICATE_ID"


class PreconditionIssue(BaseModel):
    """One problem found in a graph."""

    severity: Literal["error", "warning"] = Field(..., description="Issue severity")
    code: str = Field(..., description="Issue code")
    message: str = Field(..., description="Human readable message")
    location: Optional[str] = Field(default=None, description="Cell or graph id")
    bus_node_ids: List[str] = Field(default_factory=list)


class PreconditionReport(BaseModel):
    """Outcome of checking a graph."""

    graph_id: str
    issues: List[PreconditionIssue] = Field(default_factory=list)

    @property
    def errors(self) -> List[PreconditionIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def status(self) -> str:
        if self.errors:
            return "error"
        return "warning" if self.issues else "ok"


class GraphPreconditions:
    """Check that a graph can be laid out."""

    def check(self, graph: SubstationGraph) -> PreconditionReport:
        report = PreconditionReport(graph_id=graph.id)
        issues = report.issues

        if not graph.bus_nodes:
            issues.append(PreconditionIssue(
                severity="error",
                code=EMPTY_BUS_NODE_SET,
                message=f"Graph {graph.id} has no bus node",
            ))

        bus_ids = {bus.id for bus in graph.bus_nodes}
        seen_cells = set()
        seen_feeders = set()
        for cell in graph.cells:
            if cell.id in seen_cells:
                issues.append(PreconditionIssue(
                    severity="warning",
                    code=DUPLICATE_ID,
                    message=f"Cell id {cell.id} is used more than once",
                    location=cell.id,
                ))
            seen_cells.add(cell.id)
            for feeder in cell.feeders:
                if feeder.id in seen_feeders:
                    issues.append(PreconditionIssue(
                        severity="warning",
                        code=DUPLICATE_ID,
                        message=f"Feeder id {feeder.id} is used more than once",
                        location=cell.id,
                    ))
                seen_feeders.add(feeder.id)

            referenced = (
                list(cell.bus_node_ids) + cell.left_bus_node_ids + cell.right_bus_node_ids
            )
            unknown = sorted({b for b in referenced if b not in bus_ids})
            if unknown:
                issues.append(PreconditionIssue(
                    severity="error",
                    code=UNKNOWN_BUS_NODE,
                    message=f"Cell {cell.id} references unknown bus nodes",
                    location=cell.id,
                    bus_node_ids=unknown,
                ))

            if cell.cell_type == CellType.EXTERN and not cell.bus_node_ids:
                issues.append(PreconditionIssue(
                    severity="error",
                    code=EMPTY_BUS_NODE_SET,
                    message=f"Extern cell {cell.id} has no bus node",
                    location=cell.id,
                ))
            if cell.is_intern:
                issues.extend(self._check_split(cell))

        if report.errors:
            logger.warning(
                f"Graph {graph.id} failed {len(report.errors)} precondition check(s)"
            )
        return report

    def _check_split(self, cell) -> List[PreconditionIssue]:
        left, right = set(cell.left_bus_node_ids), set(cell.right_bus_node_ids)
        reason = None
        bus_ids: List[str] = []
        if not left or not right:
            reason = "empty side"
        elif left & right:
            reason = "bus nodes on both sides"
            bus_ids = sorted(left & right)
        elif left | right != set(cell.bus_node_ids):
            reason = "sides do not cover the cell bus nodes"
            bus_ids = sorted((left | right) ^ set(cell.bus_node_ids))
        if reason is None:
            return []
        return [PreconditionIssue(
            severity="error",
            code=INVALID_CELL_SPLIT,
            message=reason,
            location=cell.id,
            bus_node_ids=bus_ids,
        )]

    def ensure_well_formed(self, graph: SubstationGraph) -> PreconditionReport:
        """Check a graph and raise on its first error.

        Raises:
            UnknownBusNodeError: If a cell references a missing bus node
            EmptyBusNodeSetError: If the graph or an extern cell has no bus node
            InvalidCellSplitError: If an intern cell has an invalid side split
        """
        report = self.check(graph)
        if report.ok:
            return report

        issue = report.errors[0]
        if issue.code == UNKNOWN_BUS_NODE:
            raise UnknownBusNodeError(issue.bus_node_ids[0], issue.location)
        if issue.code == EMPTY_BUS_NODE_SET:
            if issue.location is None:
                raise EmptyBusNodeSetError("horizontal chains")
            raise EmptyBusNodeSetError("a vertical bus connection pattern", issue.location)
        if issue.code == INVALID_CELL_SPLIT:
            raise InvalidCellSplitError(issue.location, issue.message, issue.bus_node_ids)
        raise LayoutPreconditionError(issue.message)


def ensure_well_formed(graph: SubstationGraph) -> PreconditionReport:
    """Module-level shortcut for ``GraphPreconditions().ensure_well_formed``."""
    return GraphPreconditions().ensure_well_formed(graph)
