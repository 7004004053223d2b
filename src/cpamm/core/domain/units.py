"""
Units — конверсия между человекочитаемыми количествами и base units

Единственный допустимый способ преобразований между:
- decimal количеством ("1.5" токена)
- base units (целое, 1.5 * 10**decimals)

Пул и ledger работают только с base units (int). Float не принимается:
двоичное представление искажает количества.
"""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Final, Union

# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

# Стандартная точность ERC20-подобных токенов
ETHER_DECIMALS: Final[int] = 18

# Base units в одной целой единице при 18 decimals
WEI_PER_ETHER: Final[int] = 10**ETHER_DECIMALS

# Максимально допустимая точность
MAX_DECIMALS: Final[int] = 77

_CONTEXT_PRECISION: Final[int] = 200


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def _validate_decimals(decimals: int) -> None:
    if not isinstance(decimals, int) or isinstance(decimals, bool):
        raise ValueError(f"decimals must be an integer, got {decimals!r}")
    if not 0 <= decimals <= MAX_DECIMALS:
        raise ValueError(f"decimals must be in [0, {MAX_DECIMALS}], got {decimals}")


def parse_units(value: Union[str, int, Decimal], decimals: int = ETHER_DECIMALS) -> int:
    """
    Конверсия: decimal количество → base units.

    Args:
        value: Количество ("100", "0.5", 100 или Decimal)
        decimals: Точность токена

    Returns:
        Количество в base units

    Raises:
        ValueError: Если value не число, отрицательное, float
            или содержит больше знаков после запятой, чем decimals

    Examples:
        >>> parse_units("100")
        100000000000000000000
        >>> parse_units("1.5", 6)
        1500000
    """
    _validate_decimals(decimals)
    if isinstance(value, float) or isinstance(value, bool):
        raise ValueError(f"Unsupported amount type: {type(value).__name__}")

    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e

    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {value!r}")

    # Точность контекста достаточна для любого u256 без округления
    with localcontext() as ctx:
        ctx.prec = _CONTEXT_PRECISION
        scaled = amount.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ValueError(f"Amount {value!r} has more than {decimals} decimal places")
        return int(scaled)


def format_units(amount: int, decimals: int = ETHER_DECIMALS) -> str:
    """
    Конверсия: base units → decimal строка.

    Хвостовые нули дробной части отбрасываются, целая часть сохраняется
    всегда ("1.0" для 10**decimals).

    Examples:
        >>> format_units(1500000, 6)
        '1.5'
        >>> format_units(10**18)
        '1.0'
    """
    _validate_decimals(decimals)
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise ValueError(f"amount must be an integer, got {type(amount).__name__}")

    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), 10**decimals)
    if decimals == 0:
        return f"{sign}{whole}"
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{frac_str}"


def parse_ether(value: Union[str, int, Decimal]) -> int:
    """parse_units с 18 decimals."""
    return parse_units(value, ETHER_DECIMALS)


def format_ether(amount: int) -> str:
    """format_units с 18 decimals."""
    return format_units(amount, ETHER_DECIMALS)
