"""
Domain models and value objects.

Contains pool snapshots, LP positions, pool events and unit conversions.
"""

from cpamm.core.domain.events import (
    AnyPoolEvent,
    EventKind,
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    Swap,
)
from cpamm.core.domain.lp_position import LPPosition
from cpamm.core.domain.pool_state import PoolState
from cpamm.core.domain.units import (
    ETHER_DECIMALS,
    WEI_PER_ETHER,
    format_ether,
    format_units,
    parse_ether,
    parse_units,
)

__all__ = [
    # Units module
    "ETHER_DECIMALS",
    "WEI_PER_ETHER",
    "format_ether",
    "format_units",
    "parse_ether",
    "parse_units",
    # Pool state
    "PoolState",
    # LP position
    "LPPosition",
    # Events
    "AnyPoolEvent",
    "EventKind",
    "LiquidityAdded",
    "LiquidityRemoved",
    "PoolEvent",
    "Swap",
]
