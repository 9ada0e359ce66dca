"""Reverse lookup from a bus node to the patterns and chain it belongs to."""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from sld_layout.layout.chains import HorizontalChain
from sld_layout.layout.patterns import PatternRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeBelonging:
    """Pattern handles and the single chain handle of one bus node."""

    bus: int
    patterns: Tuple[int, ...]
    chain: int


def build_belongings(
    bus_count: int,
    registry: PatternRegistry,
    chains: Sequence[HorizontalChain],
) -> Tuple[NodeBelonging, ...]:
    """Index pattern and chain membership by bus handle.

    Raises:
        ValueError: If the chains do not partition the bus nodes
    """
    patterns: List[List[int]] = [[] for _ in range(bus_count)]
    for handle, pattern in enumerate(registry):
        for bus in pattern.bus_nodes:
            patterns[bus].append(handle)

    chain_of: List[int] = [-1] * bus_count
    for handle, chain in enumerate(chains):
        for bus in chain.bus_nodes:
            if chain_of[bus] != -1:
                raise ValueError(
                    f"Bus node {bus} is in chains {chain_of[bus]} and {handle}"
                )
            chain_of[bus] = handle

    missing = [bus for bus, chain in enumerate(chain_of) if chain == -1]
    if missing:
        raise ValueError(f"Bus nodes {missing} belong to no chain")

    return tuple(
        NodeBelonging(bus, tuple(patterns[bus]), chain_of[bus])
        for bus in range(bus_count)
    )
