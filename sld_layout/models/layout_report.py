"""Layout report produced by the position finders.

The graph itself is the primary output of a layout run; the report is a
read-only snapshot of what was written plus the intermediate structures
(patterns, chains, clusters) that explain it. Its etag is computed from
canonical content so two runs over the same graph can be compared.
"""

import hashlib
import json
import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .graph import Direction, Position, SubstationGraph

logger = logging.getLogger(__name__)


class ClusterReport(BaseModel):
    """Numbering ranges used by one connected cluster."""

    bus_node_ids: List[str] = Field(..., description="Bus nodes of the cluster, by rank")
    first_row: int = Field(..., description="First structural row of the cluster")
    next_row: int = Field(..., description="First row available to the next cluster")
    first_feeder_order: int = Field(..., description="First feeder order of the cluster")
    next_feeder_order: int = Field(..., description="First feeder order available afterwards")


class LayoutReport(BaseModel):
    """Snapshot of a layout run.

    Attributes:
        algorithm: Position finder name
        positions: Bus node id -> structural position
        cell_orders: Cell id -> order
        cell_directions: Cell id -> direction
        feeder_orders: Feeder id -> order
        patterns: Vertical bus connection patterns as bus id lists
        chains: Horizontal chains as bus id lists
        clusters: Per-cluster numbering ranges
        etag: SHA-256 of the canonical content
    """

    algorithm: str = Field(..., description="Position finder name")
    positions: Dict[str, Position] = Field(default_factory=dict)
    cell_orders: Dict[str, int] = Field(default_factory=dict)
    cell_directions: Dict[str, Direction] = Field(default_factory=dict)
    feeder_orders: Dict[str, int] = Field(default_factory=dict)
    patterns: List[List[str]] = Field(default_factory=list)
    chains: List[List[str]] = Field(default_factory=list)
    clusters: List[ClusterReport] = Field(default_factory=list)
    etag: Optional[str] = Field(default=None, description="Content hash")

    def model_post_init(self, __context) -> None:
        """Compute etag if not provided."""
        if self.etag is None:
            object.__setattr__(self, "etag", self.compute_etag())

    def compute_etag(self) -> str:
        """Compute SHA-256 etag from canonical content.

        Returns:
            64-character hex string (SHA-256 hash)
        """
        canonical = {
            "algorithm": self.algorithm,
            "cell_directions": {
                k: v.value for k, v in sorted(self.cell_directions.items())
            },
            "cell_orders": dict(sorted(self.cell_orders.items())),
            "chains": self.chains,
            "clusters": [c.model_dump() for c in self.clusters],
            "feeder_orders": dict(sorted(self.feeder_orders.items())),
            "patterns": self.patterns,
            "positions": {
                k: v.to_list() for k, v in sorted(self.positions.items())
            },
        }
        canonical_json = json.dumps(canonical, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical_json.encode()).hexdigest()

    @classmethod
    def from_graph(
        cls,
        graph: SubstationGraph,
        algorithm: str,
        patterns: Optional[List[List[str]]] = None,
        chains: Optional[List[List[str]]] = None,
        clusters: Optional[List[ClusterReport]] = None,
    ) -> "LayoutReport":
        """Snapshot the values a layout run wrote into a graph.

        Args:
            graph: Graph after layout
            algorithm: Position finder name to record
            patterns: Optional pattern registry as bus id lists
            chains: Optional chains as bus id lists
            clusters: Optional per-cluster ranges

        Returns:
            LayoutReport instance
        """
        positions = {
            bus.id: bus.structural_position.model_copy()
            for bus in graph.bus_nodes
            if bus.structural_position is not None
        }
        cell_orders = {c.id: c.order for c in graph.cells if c.order is not None}
        cell_directions = {
            c.id: c.direction for c in graph.cells if c.direction is not None
        }
        feeder_orders = {
            f.id: f.order for f in graph.feeder_nodes() if f.order is not None
        }
        return cls(
            algorithm=algorithm,
            positions=positions,
            cell_orders=cell_orders,
            cell_directions=cell_directions,
            feeder_orders=feeder_orders,
            patterns=patterns or [],
            chains=chains or [],
            clusters=clusters or [],
        )

    def to_dict(self, exclude_none: bool = True) -> Dict:
        """Export to dict with deterministic key ordering."""
        data = self.model_dump(exclude_none=exclude_none, mode="json")
        if "positions" in data:
            data["positions"] = {
                bus_id: [pos["row"], pos["column"]]
                for bus_id, pos in sorted(data["positions"].items())
            }
        return dict(sorted(data.items()))


__all__ = [
    "ClusterReport",
    "LayoutReport",
]
