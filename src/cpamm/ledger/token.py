"""
Token — in-memory ERC20-подобный ledger

Внешний коллаборатор пула: балансы, allowance, переводы.
Каждая операция атомарна под собственным lock токена: либо перевод
полностью применён, либо ledger не изменился.
"""

import threading
from typing import Dict, Tuple

from cpamm.core.domain.units import ETHER_DECIMALS
from cpamm.core.errors import (
    ArithmeticOverflow,
    InsufficientAuthorization,
    InsufficientBalance,
)
from cpamm.core.math.uint256 import checked_add, require_uint256


class Token:
    """
    Fungible asset ledger (mint / transfer / approve / transfer_from).

    Args:
        name: Имя токена ("Token A")
        symbol: Тикер ("TKA")
        address: Адрес токена
        decimals: Точность (default 18)
    """

    def __init__(self, name: str, symbol: str, address: str, decimals: int = ETHER_DECIMALS):
        if not name or not symbol or not address:
            raise ValueError("name, symbol and address must be non-empty")
        self.name = name
        self.symbol = symbol
        self.address = address
        self.decimals = decimals

        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_supply = 0
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Token({self.symbol!r}, address={self.address!r})"

    # -------------------------------------------------------------------------
    # Чтение
    # -------------------------------------------------------------------------

    @property
    def total_supply(self) -> int:
        with self._lock:
            return self._total_supply

    def balance_of(self, account: str) -> int:
        with self._lock:
            return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        with self._lock:
            return self._allowances.get((owner, spender), 0)

    # -------------------------------------------------------------------------
    # Запись
    # -------------------------------------------------------------------------

    def mint(self, to: str, amount: int) -> None:
        """Выпуск amount токенов на баланс to."""
        require_uint256(amount, "amount")
        with self._lock:
            new_supply = checked_add(self._total_supply, amount)
            self._balances[to] = self._balances.get(to, 0) + amount
            self._total_supply = new_supply

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Установка allowance owner → spender (перезаписывает прежнее значение)."""
        require_uint256(amount, "amount")
        with self._lock:
            self._allowances[(owner, spender)] = amount

    def increase_allowance(self, owner: str, spender: str, amount: int) -> None:
        """Увеличение allowance owner → spender на amount."""
        require_uint256(amount, "amount")
        with self._lock:
            current = self._allowances.get((owner, spender), 0)
            self._allowances[(owner, spender)] = checked_add(current, amount)

    def transfer(self, sender: str, to: str, amount: int) -> None:
        """
        Перевод amount с sender на to.

        Raises:
            InsufficientBalance: Если баланса sender недостаточно
        """
        require_uint256(amount, "amount")
        with self._lock:
            self._move(sender, to, amount)

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None:
        """
        Перевод amount с owner на to силами spender в пределах allowance.

        Raises:
            InsufficientAuthorization: Если allowance(owner, spender) < amount
            InsufficientBalance: Если баланса owner недостаточно
        """
        require_uint256(amount, "amount")
        with self._lock:
            allowed = self._allowances.get((owner, spender), 0)
            if allowed < amount:
                raise InsufficientAuthorization(
                    f"{self.symbol}: allowance {allowed} of {spender} over {owner} "
                    f"is below {amount}"
                )
            self._move(owner, to, amount)
            self._allowances[(owner, spender)] = allowed - amount

    def _move(self, sender: str, to: str, amount: int) -> None:
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"{self.symbol}: balance {balance} of {sender} is below {amount}"
            )
        if sender == to:
            return
        received = self._balances.get(to, 0) + amount
        if received > self._total_supply:
            raise ArithmeticOverflow(f"{self.symbol}: balance of {to} exceeds total supply")
        self._balances[sender] = balance - amount
        self._balances[to] = received
