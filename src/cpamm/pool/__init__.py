"""Pool — constant-product движок пула, транзакции и развёртывание.

- PoolEngine: резервы, shares, swap, события
- PoolTransaction: all-or-nothing применение операций
- deploy_pool: токены + пул одним вызовом
"""

from .engine import PoolConfig, PoolEngine, PoolRecord
from .factory import DEFAULT_INITIAL_SUPPLY, Deployment, deploy_pool, make_address
from .transaction import PoolTransaction

__all__ = [
    "PoolConfig",
    "PoolEngine",
    "PoolRecord",
    "PoolTransaction",
    "DEFAULT_INITIAL_SUPPLY",
    "Deployment",
    "deploy_pool",
    "make_address",
]
