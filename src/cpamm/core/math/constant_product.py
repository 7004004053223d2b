"""
ConstantProduct — котировки и инвариант x * y = k с комиссией

Модуль вычисляет котировки swap по формуле constant product с учётом
комиссии, удерживаемой пулом:
- get_amount_out (fee-adjusted, floor)
- quote_no_fee (теоретическая котировка без комиссии)
- quote (парная сумма для депозита в текущей пропорции)
- spot / execution price и slippage как точные рациональные числа
- check_swap_invariant (защитная проверка роста k)

Формула (комиссия 0.3%, N/D = 997/1000):
    amount_in_with_fee = amount_in * N
    amount_out = floor(amount_in_with_fee * reserve_out / (reserve_in * D + amount_in_with_fee))

Свойства:
- монотонно возрастает по amount_in
- строго меньше quote_no_fee
- всегда < reserve_out: один swap не может опустошить сторону пула
"""

from fractions import Fraction
from typing import Final

from cpamm.core.errors import EmptyPool, InvalidAmount, InvariantViolation
from cpamm.core.math.uint256 import mul_div, require_positive, require_uint256

# =============================================================================
# КОМИССИЯ
# =============================================================================

# Доля входа, которая участвует в обмене (99.7%)
FEE_NUMERATOR: Final[int] = 997

# Знаменатель комиссии
FEE_DENOMINATOR: Final[int] = 1000


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_fee(fee_numerator: int, fee_denominator: int) -> None:
    """
    Проверка параметров комиссии: 0 < N < D.

    N == D означало бы нулевую комиссию, и рост k после swap перестал бы
    быть строгим.

    Raises:
        ValueError: Если параметры некорректны
    """
    if not isinstance(fee_numerator, int) or not isinstance(fee_denominator, int):
        raise ValueError("fee_numerator and fee_denominator must be integers")
    if fee_denominator <= 0:
        raise ValueError(f"fee_denominator must be positive, got {fee_denominator}")
    if not 0 < fee_numerator < fee_denominator:
        raise ValueError(
            f"fee_numerator must be in (0, {fee_denominator}), got {fee_numerator}"
        )


def _require_reserves(reserve_in: int, reserve_out: int) -> None:
    require_uint256(reserve_in, "reserve_in")
    require_uint256(reserve_out, "reserve_out")
    if reserve_in == 0 or reserve_out == 0:
        raise EmptyPool(f"No liquidity: reserves=({reserve_in}, {reserve_out})")


# =============================================================================
# КОТИРОВКИ
# =============================================================================


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_numerator: int = FEE_NUMERATOR,
    fee_denominator: int = FEE_DENOMINATOR,
) -> int:
    """
    Выход swap по формуле constant product с комиссией.

    Чистая функция, состояние не меняет.

    Args:
        amount_in: Количество входного актива (> 0)
        reserve_in: Резерв входного актива
        reserve_out: Резерв выходного актива
        fee_numerator: Числитель комиссии (default 997)
        fee_denominator: Знаменатель комиссии (default 1000)

    Returns:
        amount_out (floor)

    Raises:
        InvalidAmount: Если amount_in <= 0
        EmptyPool: Если reserve_in == 0 или reserve_out == 0

    Examples:
        >>> get_amount_out(10, 100, 200)  # floor(1_994_000 / 109_970)
        18
    """
    require_positive(amount_in, "amount_in")
    _require_reserves(reserve_in, reserve_out)
    validate_fee(fee_numerator, fee_denominator)

    amount_in_with_fee = amount_in * fee_numerator
    denominator = reserve_in * fee_denominator + amount_in_with_fee
    return mul_div(amount_in_with_fee, reserve_out, denominator)


def quote_no_fee(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """
    Теоретическая котировка без комиссии и без проскальзывания.

    amount_in * reserve_out / reserve_in (floor). Верхняя граница для get_amount_out.
    """
    require_positive(amount_in, "amount_in")
    _require_reserves(reserve_in, reserve_out)
    return mul_div(amount_in, reserve_out, reserve_in)


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """
    Парное количество B для депозита amount_a в текущей пропорции резервов.

    Депозит (amount_a, quote(amount_a, ...)) не меняет цену пула с точностью
    до floor-округления.

    Raises:
        InvalidAmount: Если amount_a <= 0
        EmptyPool: Если пул пуст (пропорции ещё нет)
    """
    require_positive(amount_a, "amount_a")
    require_uint256(reserve_a, "reserve_a")
    require_uint256(reserve_b, "reserve_b")
    if reserve_a == 0 or reserve_b == 0:
        raise EmptyPool("No reserve ratio on an empty pool")
    return mul_div(amount_a, reserve_b, reserve_a)


# =============================================================================
# ЦЕНЫ
# =============================================================================


def spot_price(reserve_in: int, reserve_out: int) -> Fraction:
    """
    Спот-цена: единиц выходного актива за единицу входного.

    Возвращает точную дробь reserve_out / reserve_in без float-усечения.

    Raises:
        EmptyPool: Если один из резервов равен 0
    """
    _require_reserves(reserve_in, reserve_out)
    return Fraction(reserve_out, reserve_in)


def execution_price(amount_in: int, amount_out: int) -> Fraction:
    """Фактическая цена исполнения swap: amount_out / amount_in."""
    require_positive(amount_in, "amount_in")
    require_uint256(amount_out, "amount_out")
    return Fraction(amount_out, amount_in)


def slippage(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_numerator: int = FEE_NUMERATOR,
    fee_denominator: int = FEE_DENOMINATOR,
) -> Fraction:
    """
    Slippage относительно теоретической котировки без комиссии.

    slippage = 1 - amount_out / (amount_in * reserve_out / reserve_in)

    Включает комиссию, price impact и floor-округление. Лежит в (0, 1).

    Returns:
        Точная дробь
    """
    amount_out = get_amount_out(
        amount_in, reserve_in, reserve_out, fee_numerator, fee_denominator
    )
    ideal = Fraction(amount_in * reserve_out, reserve_in)
    return 1 - Fraction(amount_out) / ideal


# =============================================================================
# ИНВАРИАНТ
# =============================================================================


def check_swap_invariant(
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    amount_out: int,
    fee_numerator: int = FEE_NUMERATOR,
    fee_denominator: int = FEE_DENOMINATOR,
) -> tuple[int, int]:
    """
    Защитная проверка constant product после swap.

    Проверяет на fee-adjusted входе:
        (reserve_in * D + amount_in * N) * (reserve_out - amount_out) >= reserve_in * reserve_out * D
    и строгий рост сырого произведения:
        (reserve_in + amount_in) * (reserve_out - amount_out) > reserve_in * reserve_out

    Args:
        reserve_in: Резерв входного актива до swap
        reserve_out: Резерв выходного актива до swap
        amount_in: Вход
        amount_out: Выход

    Returns:
        (new_reserve_in, new_reserve_out)

    Raises:
        InvariantViolation: Если k уменьшается или сторона пула опустошается
    """
    if amount_out >= reserve_out:
        raise InvariantViolation(
            f"Swap would drain reserve: amount_out={amount_out} >= reserve_out={reserve_out}"
        )

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out

    k_before = reserve_in * reserve_out
    adjusted_in = reserve_in * fee_denominator + amount_in * fee_numerator
    if adjusted_in * new_reserve_out < k_before * fee_denominator:
        raise InvariantViolation(
            f"Fee-adjusted k decreased: ({reserve_in}, {reserve_out}) -> "
            f"({new_reserve_in}, {new_reserve_out})"
        )

    k_after = new_reserve_in * new_reserve_out
    if k_after <= k_before:
        raise InvariantViolation(f"k did not grow: {k_before} -> {k_after}")

    return new_reserve_in, new_reserve_out
