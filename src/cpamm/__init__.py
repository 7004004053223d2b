"""
cpamm — constant-product automated market maker.

Two-asset liquidity pool: deposit a pair of assets for pool shares, swap one
asset for the other at a price set by pool composition (0.3% fee retained by
the pool), redeem shares for a pro-rata part of the grown reserves.
"""

from cpamm.core.errors import (
    AMMError,
    ArithmeticOverflow,
    EmptyPool,
    InsufficientAuthorization,
    InsufficientBalance,
    InsufficientShares,
    InvalidAmount,
    InvariantViolation,
)
from cpamm.pool import PoolConfig, PoolEngine, deploy_pool

__all__ = [
    "AMMError",
    "ArithmeticOverflow",
    "EmptyPool",
    "InsufficientAuthorization",
    "InsufficientBalance",
    "InsufficientShares",
    "InvalidAmount",
    "InvariantViolation",
    "PoolConfig",
    "PoolEngine",
    "deploy_pool",
]
