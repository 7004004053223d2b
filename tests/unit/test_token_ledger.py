"""
Тесты для Token ledger и адаптера TokenAsset

Покрытие:
- mint / transfer / approve / transfer_from
- InsufficientBalance / InsufficientAuthorization
- Атомарность неуспешных переводов
- debit/credit от имени пула
"""

import pytest

from cpamm.core.errors import (
    ArithmeticOverflow,
    InsufficientAuthorization,
    InsufficientBalance,
    InvalidAmount,
)
from cpamm.core.math.uint256 import MAX_UINT256
from cpamm.ledger import AssetLedger, Token, TokenAsset

OWNER = "0x" + "1" * 40
ALICE = "0x" + "2" * 40
POOL = "0x" + "9" * 40


@pytest.fixture
def token() -> Token:
    token = Token("Token A", "TKA", "0x" + "a" * 40)
    token.mint(OWNER, 1_000)
    return token


class TestToken:
    """Тесты Token"""

    def test_mint(self, token: Token) -> None:
        assert token.balance_of(OWNER) == 1_000
        assert token.total_supply == 1_000
        assert token.balance_of(ALICE) == 0

    def test_mint_overflow(self, token: Token) -> None:
        with pytest.raises(ArithmeticOverflow):
            token.mint(ALICE, MAX_UINT256)
        assert token.total_supply == 1_000

    def test_transfer(self, token: Token) -> None:
        token.transfer(OWNER, ALICE, 300)
        assert token.balance_of(OWNER) == 700
        assert token.balance_of(ALICE) == 300
        assert token.total_supply == 1_000

    def test_transfer_insufficient_balance(self, token: Token) -> None:
        with pytest.raises(InsufficientBalance, match="TKA"):
            token.transfer(ALICE, OWNER, 1)
        assert token.balance_of(OWNER) == 1_000

    def test_self_transfer_is_noop(self, token: Token) -> None:
        token.transfer(OWNER, OWNER, 500)
        assert token.balance_of(OWNER) == 1_000

    def test_negative_amount(self, token: Token) -> None:
        with pytest.raises(InvalidAmount):
            token.transfer(OWNER, ALICE, -1)

    def test_transfer_from_consumes_allowance(self, token: Token) -> None:
        token.approve(OWNER, POOL, 500)
        token.transfer_from(POOL, OWNER, POOL, 200)
        assert token.allowance(OWNER, POOL) == 300
        assert token.balance_of(POOL) == 200

    def test_transfer_from_without_allowance(self, token: Token) -> None:
        with pytest.raises(InsufficientAuthorization, match="allowance"):
            token.transfer_from(POOL, OWNER, POOL, 1)
        assert token.balance_of(OWNER) == 1_000

    def test_transfer_from_insufficient_balance_keeps_allowance(self, token: Token) -> None:
        """Неуспешный transfer_from не расходует allowance"""
        token.approve(ALICE, POOL, 50)
        with pytest.raises(InsufficientBalance):
            token.transfer_from(POOL, ALICE, POOL, 50)
        assert token.allowance(ALICE, POOL) == 50

    def test_approve_overwrites(self, token: Token) -> None:
        token.approve(OWNER, POOL, 10)
        token.approve(OWNER, POOL, 3)
        assert token.allowance(OWNER, POOL) == 3

    def test_increase_allowance(self, token: Token) -> None:
        token.approve(OWNER, POOL, 10)
        token.increase_allowance(OWNER, POOL, 5)
        assert token.allowance(OWNER, POOL) == 15

    def test_increase_allowance_overflow(self, token: Token) -> None:
        token.approve(OWNER, POOL, MAX_UINT256)
        with pytest.raises(ArithmeticOverflow):
            token.increase_allowance(OWNER, POOL, 1)
        assert token.allowance(OWNER, POOL) == MAX_UINT256

    def test_requires_identity(self) -> None:
        with pytest.raises(ValueError):
            Token("", "TKA", "0x" + "a" * 40)


class TestTokenAsset:
    """Тесты адаптера AssetLedger"""

    def test_implements_protocol(self, token: Token) -> None:
        assert isinstance(TokenAsset(token, POOL), AssetLedger)

    def test_debit_and_credit(self, token: Token) -> None:
        asset = TokenAsset(token, POOL)
        token.approve(OWNER, POOL, 100)

        asset.debit(OWNER, 100)
        assert token.balance_of(POOL) == 100
        assert token.balance_of(OWNER) == 900

        asset.credit(ALICE, 40)
        assert token.balance_of(POOL) == 60
        assert token.balance_of(ALICE) == 40

    def test_debit_requires_authorization(self, token: Token) -> None:
        with pytest.raises(InsufficientAuthorization):
            TokenAsset(token, POOL).debit(OWNER, 1)

    def test_address(self, token: Token) -> None:
        assert TokenAsset(token, POOL).address == token.address

    def test_refund_restores_balance_and_allowance(self, token: Token) -> None:
        """refund полностью отменяет debit"""
        asset = TokenAsset(token, POOL)
        token.approve(OWNER, POOL, 100)
        asset.debit(OWNER, 60)

        asset.refund(OWNER, 60)

        assert token.balance_of(OWNER) == 1_000
        assert token.balance_of(POOL) == 0
        assert token.allowance(OWNER, POOL) == 100

    def test_reclaim_reverses_credit(self, token: Token) -> None:
        asset = TokenAsset(token, POOL)
        token.transfer(OWNER, POOL, 100)
        asset.credit(ALICE, 30)

        asset.reclaim(ALICE, 30)

        assert token.balance_of(ALICE) == 0
        assert token.balance_of(POOL) == 100
