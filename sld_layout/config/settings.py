"""
Configuration and Feature Flags for the layout engines

Flags and numeric settings are read from environment variables at import
time so they can be toggled without code changes.

Usage:
    from sld_layout.config.settings import is_enabled, get_setting

    if is_enabled('validate_preconditions'):
        ensure_well_formed(graph)

    first_row = get_setting('first_structural_position')

Environment Variables:
    SLD_VALIDATE_GRAPH=true/false  - Check graph preconditions before layout
    SLD_FIRST_ROW=<int>            - First structural row of the first cluster
    SLD_FIRST_FEEDER_ORDER=<int>   - First feeder order of the first cluster
    SLD_BASIC_FEEDER_STEP=<int>    - Feeder order step of the basic finder
"""

import os
from typing import Dict


# Feature flags with environment variable overrides
FEATURE_FLAGS: Dict[str, bool] = {
    'validate_preconditions': os.getenv('SLD_VALIDATE_GRAPH', 'true').lower() == 'true',
}

# Numeric layout settings with environment variable overrides
LAYOUT_SETTINGS: Dict[str, int] = {
    'first_structural_position': int(os.getenv('SLD_FIRST_ROW', '1')),
    'first_feeder_order': int(os.getenv('SLD_FIRST_FEEDER_ORDER', '1')),
    'basic_feeder_order_step': int(os.getenv('SLD_BASIC_FEEDER_STEP', '12')),
}


def _check_known(name: str, table: Dict, kind: str) -> None:
    if name not in table:
        raise KeyError(
            f"Unknown {kind}: '{name}'. "
            f"Available {kind.split()[-1]}s: {', '.join(table)}"
        )


def is_enabled(flag: str) -> bool:
    """Check a feature flag.

    Raises:
        KeyError: If flag name is not recognized
    """
    _check_known(flag, FEATURE_FLAGS, 'feature flag')
    return FEATURE_FLAGS[flag]


def get_all_flags() -> Dict[str, bool]:
    return FEATURE_FLAGS.copy()


def set_flag(flag: str, enabled: bool) -> None:
    """Override a flag at runtime; tests restore the previous value."""
    _check_known(flag, FEATURE_FLAGS, 'feature flag')
    FEATURE_FLAGS[flag] = enabled


def get_setting(name: str) -> int:
    """Numeric layout setting, e.g. ``get_setting('first_structural_position')``."""
    _check_known(name, LAYOUT_SETTINGS, 'layout setting')
    return LAYOUT_SETTINGS[name]


def set_setting(name: str, value: int) -> None:
    _check_known(name, LAYOUT_SETTINGS, 'layout setting')
    LAYOUT_SETTINGS[name] = int(value)
