"""
Uint256 — целочисленная арифметика с явными проверками переполнения

Модуль обеспечивает детерминированную целочисленную арифметику для всех
вычислений пула:
- Границы u256 и валидация количеств
- Checked add/sub/mul с проверкой диапазона [0, 2**256 - 1]
- mul_div: умножение в полной ширине, затем floor-деление

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Float никогда не участвует в вычислениях количеств
2. Любой сохраняемый результат лежит в [0, MAX_UINT256]
3. Промежуточное произведение в mul_div не усекается (ширина 512 бит)
4. Округление всегда вниз (floor), пул никогда не переплачивает
"""

from typing import Final

from cpamm.core.errors import ArithmeticOverflow, InvalidAmount

# =============================================================================
# ГРАНИЦЫ
# =============================================================================

UINT256_BITS: Final[int] = 256

# Максимальное значение u256
MAX_UINT256: Final[int] = 2**UINT256_BITS - 1

# Максимальное промежуточное значение (double-width) для mul_div
MAX_UINT512: Final[int] = 2 ** (2 * UINT256_BITS) - 1


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def is_uint256(value: object) -> bool:
    """
    Проверка, что значение является целым в диапазоне u256.

    bool намеренно отклоняется: True/False не являются количеством.
    """
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= MAX_UINT256
    )


def require_uint256(value: object, name: str = "value") -> int:
    """
    Валидация u256 значения.

    Args:
        value: Проверяемое значение
        name: Имя параметра для сообщения об ошибке

    Returns:
        value без изменений

    Raises:
        InvalidAmount: Если value не int или отрицательное
        ArithmeticOverflow: Если value > MAX_UINT256
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidAmount(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise InvalidAmount(f"{name} must be non-negative, got {value}")
    if value > MAX_UINT256:
        raise ArithmeticOverflow(f"{name} exceeds uint256: {value}")
    return value


def require_positive(value: object, name: str = "amount") -> int:
    """
    Валидация строго положительного u256 количества.

    Raises:
        InvalidAmount: Если value == 0, отрицательное или не int
        ArithmeticOverflow: Если value > MAX_UINT256
    """
    require_uint256(value, name)
    if value == 0:
        raise InvalidAmount(f"{name} must be positive, got 0")
    return value


# =============================================================================
# CHECKED ОПЕРАЦИИ
# =============================================================================


def checked_add(a: int, b: int) -> int:
    """a + b с проверкой переполнения u256."""
    result = a + b
    if result > MAX_UINT256:
        raise ArithmeticOverflow(f"uint256 overflow: {a} + {b}")
    return result


def checked_sub(a: int, b: int) -> int:
    """a - b с проверкой underflow."""
    if b > a:
        raise ArithmeticOverflow(f"uint256 underflow: {a} - {b}")
    return a - b


def checked_mul(a: int, b: int) -> int:
    """a * b с проверкой переполнения u256."""
    result = a * b
    if result > MAX_UINT256:
        raise ArithmeticOverflow(f"uint256 overflow: {a} * {b}")
    return result


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) с промежуточным произведением двойной ширины.

    Произведение a * b вычисляется полностью (до 512 бит) и только затем
    делится, поэтому результат точен даже когда a * b не помещается в u256.

    Args:
        a: Первый множитель (u256)
        b: Второй множитель (u256)
        denominator: Делитель (u256, > 0)

    Returns:
        floor(a * b / denominator)

    Raises:
        ZeroDivisionError: Если denominator == 0
        ArithmeticOverflow: Если результат не помещается в u256

    Examples:
        >>> mul_div(2**255, 4, 8) == 2**254  # a * b > MAX_UINT256
        True
        >>> mul_div(10, 3, 4)
        7
    """
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero")

    product = a * b
    if product > MAX_UINT512:
        raise ArithmeticOverflow(f"mul_div intermediate exceeds 512 bits: {a} * {b}")

    result = product // denominator
    if result > MAX_UINT256:
        raise ArithmeticOverflow(f"mul_div result exceeds uint256: {a} * {b} / {denominator}")
    return result
