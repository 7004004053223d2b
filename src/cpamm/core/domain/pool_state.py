"""
PoolState — Модель снапшота состояния пула

Immutable Pydantic модель, представляющая согласованный снапшот пула.
Полная совместимость с JSON Schema (cpamm/core/contracts/schema/pool_state.json).
"""

from fractions import Fraction

from pydantic import BaseModel, Field, model_validator

from cpamm.core.math.uint256 import MAX_UINT256


# =============================================================================
# POOL STATE MODEL
# =============================================================================


class PoolState(BaseModel):
    """
    Модель состояния пула (pool snapshot).

    Immutable модель (frozen=True). Содержит:
    - Метаданные (schema_version, адреса активов)
    - Резервы и общее количество shares
    - Параметры комиссии
    - Балансы shares по аккаунтам

    Инварианты проверяются при создании:
    - sum(shares) == total_shares
    - reserve_a == 0 ⟺ reserve_b == 0 ⟺ total_shares == 0
    """

    # Метаданные
    schema_version: str = Field(
        "1", pattern="^1$", description="Версия схемы для tracking совместимости"
    )
    token_a: str = Field(..., min_length=1, description="Адрес актива A")
    token_b: str = Field(..., min_length=1, description="Адрес актива B")

    # Резервы
    reserve_a: int = Field(..., ge=0, le=MAX_UINT256, description="Резерв актива A")
    reserve_b: int = Field(..., ge=0, le=MAX_UINT256, description="Резерв актива B")
    total_shares: int = Field(
        ..., ge=0, le=MAX_UINT256, description="Всего shares в обращении"
    )

    # Комиссия
    fee_numerator: int = Field(..., gt=0, description="Числитель комиссии (997)")
    fee_denominator: int = Field(..., gt=0, description="Знаменатель комиссии (1000)")

    # Балансы shares
    shares: dict[str, int] = Field(
        default_factory=dict, description="Баланс shares по аккаунтам"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_pool_invariants(self) -> "PoolState":
        """Проверка инвариантов пула."""
        if self.fee_numerator >= self.fee_denominator:
            raise ValueError(
                f"fee_numerator {self.fee_numerator} must be below "
                f"fee_denominator {self.fee_denominator}"
            )

        if any(v <= 0 for v in self.shares.values()):
            raise ValueError("share balances must be positive")

        if sum(self.shares.values()) != self.total_shares:
            raise ValueError(
                f"sum(shares)={sum(self.shares.values())} != total_shares={self.total_shares}"
            )

        empty = {self.reserve_a == 0, self.reserve_b == 0, self.total_shares == 0}
        if len(empty) != 1:
            raise ValueError(
                f"Inconsistent empty state: reserves=({self.reserve_a}, {self.reserve_b}), "
                f"total_shares={self.total_shares}"
            )
        return self

    @property
    def is_empty(self) -> bool:
        """Пул без ликвидности."""
        return self.total_shares == 0

    def price(self) -> Fraction | None:
        """Цена B за A или None для пустого пула."""
        if self.is_empty:
            return None
        return Fraction(self.reserve_b, self.reserve_a)

    def k(self) -> int:
        """Constant product reserve_a * reserve_b."""
        return self.reserve_a * self.reserve_b
