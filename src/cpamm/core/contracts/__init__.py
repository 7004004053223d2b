"""
Contract Validation Module

Модуль для валидации JSON контрактов пула (снапшоты и события).
"""

from .validators import (
    ContractValidator,
    PoolEventValidator,
    PoolStateValidator,
    SchemaLoader,
    validate_pool_event,
    validate_pool_state,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "PoolStateValidator",
    "PoolEventValidator",
    # Functions
    "validate_pool_state",
    "validate_pool_event",
]
