"""
Liquidity — выпуск и погашение shares

Правила:
- Первый депозит (total_shares == 0): shares = amount_a. Первый провайдер
  задаёт неявный курс share к резервам; пропорция (amount_a, amount_b)
  произвольна.
- Последующие депозиты: shares = min(amount_a * S / Ra, amount_b * S / Rb).
  Депозит не в пропорции принимается, избыток одной стороны остаётся
  в резервах и распределяется между всеми держателями shares.
- Погашение: amount = reserve * shares / S (floor), пул никогда не платит
  больше, чем держит.

Комиссии отдельно не учитываются: они остаются в резервах, и стоимость
каждой share растёт вместе с объёмом торгов.
"""

from fractions import Fraction

from cpamm.core.errors import EmptyPool, InsufficientShares, InvalidAmount
from cpamm.core.math.uint256 import mul_div, require_positive, require_uint256


# =============================================================================
# ВЫПУСК
# =============================================================================


def first_deposit_shares(amount_a: int, amount_b: int) -> int:
    """
    Shares для первого депозита в пустой пул.

    Returns:
        amount_a

    Raises:
        InvalidAmount: Если одно из количеств <= 0
    """
    require_positive(amount_a, "amount_a")
    require_positive(amount_b, "amount_b")
    return amount_a


def proportional_shares(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> int:
    """
    Shares для депозита в непустой пул.

    min(amount_a * total_shares / reserve_a, amount_b * total_shares / reserve_b)

    Умножение выполняется до деления в полной ширине (mul_div).

    Raises:
        InvalidAmount: Если одно из количеств <= 0
        EmptyPool: Если пул пуст
    """
    require_positive(amount_a, "amount_a")
    require_positive(amount_b, "amount_b")
    require_uint256(total_shares, "total_shares")
    if total_shares == 0 or reserve_a == 0 or reserve_b == 0:
        raise EmptyPool("Proportional minting requires a non-empty pool")

    shares_by_a = mul_div(amount_a, total_shares, reserve_a)
    shares_by_b = mul_div(amount_b, total_shares, reserve_b)
    return min(shares_by_a, shares_by_b)


def shares_to_mint(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> int:
    """
    Количество shares для депозита (amount_a, amount_b).

    Выбирает правило первого депозита или пропорциональное.
    Может вернуть 0 для очень малого депозита в крупный пул;
    решение об отказе принимает вызывающий код.
    """
    if total_shares == 0:
        return first_deposit_shares(amount_a, amount_b)
    return proportional_shares(amount_a, amount_b, reserve_a, reserve_b, total_shares)


# =============================================================================
# ПОГАШЕНИЕ
# =============================================================================


def redemption_amounts(
    shares: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> tuple[int, int]:
    """
    Количества активов за сжигание shares.

    Args:
        shares: Сжигаемые shares (> 0)
        reserve_a: Резерв A
        reserve_b: Резерв B
        total_shares: Всего shares в обращении

    Returns:
        (amount_a, amount_b), floor

    Raises:
        InvalidAmount: Если shares <= 0
        EmptyPool: Если total_shares == 0
        InsufficientShares: Если shares > total_shares
    """
    require_positive(shares, "shares")
    if total_shares == 0:
        raise EmptyPool("No shares outstanding")
    if shares > total_shares:
        raise InsufficientShares(
            f"shares {shares} exceed total_shares {total_shares}"
        )

    amount_a = mul_div(reserve_a, shares, total_shares)
    amount_b = mul_div(reserve_b, shares, total_shares)
    return amount_a, amount_b


def share_fraction(shares: int, total_shares: int) -> Fraction:
    """Доля пула, которую представляют shares (0 для пустого пула)."""
    require_uint256(shares, "shares")
    require_uint256(total_shares, "total_shares")
    if total_shares == 0:
        return Fraction(0)
    if shares > total_shares:
        raise InvalidAmount(f"shares {shares} exceed total_shares {total_shares}")
    return Fraction(shares, total_shares)
