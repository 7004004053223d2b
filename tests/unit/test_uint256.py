"""
Тесты для модуля Uint256

Проверяет:
1. Валидацию u256 значений
2. Checked add/sub/mul
3. mul_div с промежуточным произведением двойной ширины
"""

import pytest

from cpamm.core.errors import ArithmeticOverflow, InvalidAmount
from cpamm.core.math.uint256 import (
    MAX_UINT256,
    MAX_UINT512,
    checked_add,
    checked_mul,
    checked_sub,
    is_uint256,
    mul_div,
    require_positive,
    require_uint256,
)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


class TestValidation:
    """Тесты валидации u256"""

    def test_bounds(self) -> None:
        """Границы диапазона"""
        assert is_uint256(0)
        assert is_uint256(MAX_UINT256)
        assert not is_uint256(MAX_UINT256 + 1)
        assert not is_uint256(-1)

    def test_non_int_rejected(self) -> None:
        """float, str и bool не являются количеством"""
        assert not is_uint256(1.0)
        assert not is_uint256("1")
        assert not is_uint256(True)

    def test_require_uint256_errors(self) -> None:
        """require_uint256 различает тип ошибки"""
        with pytest.raises(InvalidAmount, match="must be an integer"):
            require_uint256(1.5)
        with pytest.raises(InvalidAmount, match="non-negative"):
            require_uint256(-1)
        with pytest.raises(ArithmeticOverflow):
            require_uint256(MAX_UINT256 + 1)
        assert require_uint256(42) == 42

    def test_require_positive(self) -> None:
        """Ноль отклоняется"""
        with pytest.raises(InvalidAmount, match="amount_in must be positive"):
            require_positive(0, "amount_in")
        assert require_positive(1) == 1


# =============================================================================
# CHECKED ОПЕРАЦИИ
# =============================================================================


class TestCheckedArithmetic:
    """Тесты checked add/sub/mul"""

    def test_add_within_range(self) -> None:
        assert checked_add(MAX_UINT256 - 1, 1) == MAX_UINT256

    def test_add_overflow(self) -> None:
        with pytest.raises(ArithmeticOverflow, match="overflow"):
            checked_add(MAX_UINT256, 1)

    def test_sub_underflow(self) -> None:
        assert checked_sub(5, 5) == 0
        with pytest.raises(ArithmeticOverflow, match="underflow"):
            checked_sub(4, 5)

    def test_mul_overflow(self) -> None:
        assert checked_mul(2**128, 2**127) == 2**255
        with pytest.raises(ArithmeticOverflow):
            checked_mul(2**128, 2**128)


# =============================================================================
# MUL_DIV
# =============================================================================


class TestMulDiv:
    """Тесты mul_div"""

    def test_floor_rounding(self) -> None:
        """Округление вниз"""
        assert mul_div(10, 3, 4) == 7
        assert mul_div(1, 1, 3) == 0

    def test_wide_intermediate(self) -> None:
        """Промежуточное произведение выходит за u256, результат нет"""
        assert mul_div(MAX_UINT256, MAX_UINT256, MAX_UINT256) == MAX_UINT256
        assert mul_div(2**255, 4, 8) == 2**254

    def test_result_overflow(self) -> None:
        """Результат за пределами u256"""
        with pytest.raises(ArithmeticOverflow, match="result exceeds uint256"):
            mul_div(MAX_UINT256, 2, 1)

    def test_intermediate_overflow(self) -> None:
        """Промежуточное произведение шире 512 бит"""
        with pytest.raises(ArithmeticOverflow, match="512 bits"):
            mul_div(MAX_UINT512, 2, MAX_UINT512)

    def test_zero_denominator(self) -> None:
        with pytest.raises(ZeroDivisionError):
            mul_div(1, 1, 0)
