"""
Events — Модели событий пула

Immutable Pydantic модели событий, которые PoolEngine записывает
в журнал после каждой успешной операции. Предназначены для внешних
индексаторов и тестов; сериализуются в JSON, совместимый с
cpamm/core/contracts/schema/pool_event.json.
"""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field

from cpamm.core.math.uint256 import MAX_UINT256


# =============================================================================
# ENUMS
# =============================================================================


class EventKind(str, Enum):
    """Тип события пула"""

    LIQUIDITY_ADDED = "LiquidityAdded"
    LIQUIDITY_REMOVED = "LiquidityRemoved"
    SWAP = "Swap"


# =============================================================================
# EVENT MODELS
# =============================================================================


class PoolEvent(BaseModel):
    """Общие поля событий."""

    seq: int = Field(..., ge=0, description="Порядковый номер в журнале пула")
    account: str = Field(..., min_length=1, description="Инициатор операции")

    model_config = {"frozen": True}


class LiquidityAdded(PoolEvent):
    """Депозит ликвидности."""

    event: Literal[EventKind.LIQUIDITY_ADDED] = EventKind.LIQUIDITY_ADDED
    amount_a: int = Field(..., gt=0, le=MAX_UINT256, description="Внесено A")
    amount_b: int = Field(..., gt=0, le=MAX_UINT256, description="Внесено B")
    shares_minted: int = Field(..., gt=0, le=MAX_UINT256, description="Выпущено shares")


class LiquidityRemoved(PoolEvent):
    """Погашение shares."""

    event: Literal[EventKind.LIQUIDITY_REMOVED] = EventKind.LIQUIDITY_REMOVED
    amount_a: int = Field(..., ge=0, le=MAX_UINT256, description="Выплачено A")
    amount_b: int = Field(..., ge=0, le=MAX_UINT256, description="Выплачено B")
    shares_burned: int = Field(..., gt=0, le=MAX_UINT256, description="Сожжено shares")


class Swap(PoolEvent):
    """Обмен одного актива на другой."""

    event: Literal[EventKind.SWAP] = EventKind.SWAP
    asset_in: str = Field(..., min_length=1, description="Адрес входного актива")
    amount_in: int = Field(..., gt=0, le=MAX_UINT256, description="Вход")
    amount_out: int = Field(..., gt=0, le=MAX_UINT256, description="Выход")


AnyPoolEvent = Union[LiquidityAdded, LiquidityRemoved, Swap]
