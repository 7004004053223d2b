"""
LPPosition — Модель позиции провайдера ликвидности

Immutable Pydantic модель: shares аккаунта и количества активов,
которые remove_liquidity выплатил бы в момент снапшота.
"""

from fractions import Fraction

from pydantic import BaseModel, Field, model_validator

from cpamm.core.math.uint256 import MAX_UINT256


class LPPosition(BaseModel):
    """
    Модель позиции провайдера ликвидности.

    amount_a/amount_b включают накопленные комиссии: они остаются
    в резервах и увеличивают стоимость каждой share.
    """

    account: str = Field(..., min_length=1, description="Аккаунт провайдера")
    shares: int = Field(..., ge=0, le=MAX_UINT256, description="Shares аккаунта")
    total_shares: int = Field(
        ..., ge=0, le=MAX_UINT256, description="Всего shares в обращении"
    )
    amount_a: int = Field(..., ge=0, le=MAX_UINT256, description="Погашаемое количество A")
    amount_b: int = Field(..., ge=0, le=MAX_UINT256, description="Погашаемое количество B")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_shares_within_total(self) -> "LPPosition":
        if self.shares > self.total_shares:
            raise ValueError(
                f"shares {self.shares} exceed total_shares {self.total_shares}"
            )
        return self

    def pool_fraction(self) -> Fraction:
        """Доля пула (0 для пустого пула)."""
        if self.total_shares == 0:
            return Fraction(0)
        return Fraction(self.shares, self.total_shares)

    def value_in_b(self, price: Fraction) -> Fraction:
        """
        Стоимость позиции в единицах B.

        Args:
            price: Цена B за A (например, PoolEngine.get_price())
        """
        return self.amount_b + self.amount_a * price
