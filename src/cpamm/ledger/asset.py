"""
AssetLedger — интерфейс пула к внешнему ledger актива

Прямые операции:
- debit(account, amount): перевести amount с account в пул
- credit(account, amount): перевести amount из пула на account

Обратные операции (компенсации при откате PoolTransaction):
- refund(account, amount): отменяет debit, включая израсходованное allowance
- reclaim(account, amount): отменяет credit

debit обязан либо выполниться целиком, либо завершиться ошибкой
(InsufficientBalance / InsufficientAuthorization) без изменений.
"""

from typing import Protocol, runtime_checkable

from cpamm.ledger.token import Token


@runtime_checkable
class AssetLedger(Protocol):
    """Контракт внешнего ledger одного актива."""

    @property
    def address(self) -> str: ...

    def debit(self, account: str, amount: int) -> None: ...

    def credit(self, account: str, amount: int) -> None: ...

    def refund(self, account: str, amount: int) -> None: ...

    def reclaim(self, account: str, amount: int) -> None: ...


class TokenAsset:
    """
    AssetLedger поверх Token с моделью pre-approved allowance.

    Аккаунт заранее выдаёт пулу allowance (token.approve(account, pool_address, n));
    debit расходует его через transfer_from.

    Args:
        token: Ledger актива
        pool_address: Адрес пула, который держит резервы
    """

    def __init__(self, token: Token, pool_address: str):
        if not pool_address:
            raise ValueError("pool_address must be non-empty")
        self.token = token
        self.pool_address = pool_address

    def __repr__(self) -> str:
        return f"TokenAsset({self.token.symbol!r}, pool={self.pool_address!r})"

    @property
    def address(self) -> str:
        return self.token.address

    def debit(self, account: str, amount: int) -> None:
        self.token.transfer_from(self.pool_address, account, self.pool_address, amount)

    def credit(self, account: str, amount: int) -> None:
        self.token.transfer(self.pool_address, account, amount)

    def refund(self, account: str, amount: int) -> None:
        """Возврат debit: баланс и allowance account → pool восстанавливаются."""
        self.token.transfer(self.pool_address, account, amount)
        self.token.increase_allowance(account, self.pool_address, amount)

    def reclaim(self, account: str, amount: int) -> None:
        """Возврат credit в пул."""
        self.token.transfer(account, self.pool_address, amount)
