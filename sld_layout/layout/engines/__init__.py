"""Position finders registry.

Available finders:
- free: topology-driven layout (patterns, chains, clusters)
- basic: one row per pattern, feeders ordered by id
"""

from sld_layout.layout.engines.base import PositionFinder
from sld_layout.layout.engines.basic import BasicPositionFinder
from sld_layout.layout.engines.free import FreePositionFinder

# Finder registry
ENGINES = {
    "free": FreePositionFinder,
    "basic": BasicPositionFinder,
}


def get_engine(name: str) -> type:
    """Get position finder class by name.

    Args:
        name: Finder name ('free', 'basic')

    Returns:
        Position finder class

    Raises:
        ValueError: If finder not found
    """
    if name not in ENGINES:
        raise ValueError(f"Unknown position finder: {name}. Available: {list(ENGINES.keys())}")
    return ENGINES[name]


__all__ = [
    "PositionFinder",
    "FreePositionFinder",
    "BasicPositionFinder",
    "ENGINES",
    "get_engine",
]
