"""
Factory — развёртывание пары токенов и пула

Создаёт Token A / Token B, выпускает всю начальную эмиссию на deployer
и связывает с ними новый PoolEngine. Адреса детерминированы: одна и та же
метка всегда даёт один и тот же адрес.
"""

import hashlib
from dataclasses import dataclass
from typing import Optional

from cpamm.core.domain.units import parse_ether
from cpamm.ledger.asset import TokenAsset
from cpamm.ledger.token import Token
from cpamm.logger import get_logger
from cpamm.pool.engine import PoolConfig, PoolEngine

logger = get_logger(__name__)

# Начальная эмиссия каждого токена (1 000 000 * 10**18)
DEFAULT_INITIAL_SUPPLY = parse_ether(1_000_000)


def make_address(label: str) -> str:
    """
    Детерминированный адрес "0x" + 40 hex из произвольной метки.

    Examples:
        >>> len(make_address("owner"))
        42
    """
    if not label:
        raise ValueError("label must be non-empty")
    return "0x" + hashlib.sha256(label.encode("utf-8")).hexdigest()[:40]


@dataclass(frozen=True)
class Deployment:
    """Результат развёртывания."""

    token_a: Token
    token_b: Token
    pool: PoolEngine

    def approve_pool(self, owner: str, amount_a: int, amount_b: int) -> None:
        """Выдача пулу allowance от owner на оба токена."""
        self.token_a.approve(owner, self.pool.address, amount_a)
        self.token_b.approve(owner, self.pool.address, amount_b)


def deploy_pool(
    deployer: str,
    initial_supply: int = DEFAULT_INITIAL_SUPPLY,
    config: Optional[PoolConfig] = None,
    salt: str = "",
) -> Deployment:
    """
    Развёртывание двух токенов и пула.

    Args:
        deployer: Аккаунт, получающий начальную эмиссию обоих токенов
        initial_supply: Эмиссия каждого токена в base units
        config: Конфигурация пула
        salt: Добавка к меткам адресов для нескольких независимых развёртываний

    Returns:
        Deployment(token_a, token_b, pool)
    """
    logger.info("Deploying with: %s", deployer)

    token_a = Token("Token A", "TKA", make_address(f"{salt}token:TKA"))
    token_b = Token("Token B", "TKB", make_address(f"{salt}token:TKB"))
    token_a.mint(deployer, initial_supply)
    token_b.mint(deployer, initial_supply)

    pool_address = make_address(f"{salt}pool:{token_a.address}:{token_b.address}")
    pool = PoolEngine(
        TokenAsset(token_a, pool_address),
        TokenAsset(token_b, pool_address),
        config=config,
        address=pool_address,
    )

    logger.info("TokenA: %s", token_a.address)
    logger.info("TokenB: %s", token_b.address)
    logger.info("Pool: %s", pool.address)
    return Deployment(token_a=token_a, token_b=token_b, pool=pool)
