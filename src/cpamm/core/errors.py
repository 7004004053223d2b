"""
Errors — иерархия ошибок пула

Все ошибки синхронные и видимые вызывающему коду. Операция, завершившаяся
ошибкой, не оставляет изменений ни в резервах, ни в shares, ни в балансах.
Повторные попытки остаются на стороне вызывающего кода.
"""


class AMMError(Exception):
    """Базовая ошибка AMM."""

    pass


class InvalidAmount(AMMError):
    """
    Нулевое, отрицательное или иначе недопустимое количество.

    Также используется, когда операция вырождается в ноль: депозит слишком мал,
    чтобы выпустить хотя бы одну share, или swap не даёт ни одной единицы выхода.
    """

    pass


class InsufficientShares(AMMError):
    """Запрошено сжечь больше shares, чем есть у аккаунта."""

    pass


class EmptyPool(AMMError):
    """Цена или котировка запрошена у пула без ликвидности."""

    pass


class InsufficientBalance(AMMError):
    """Asset ledger: на балансе аккаунта недостаточно средств."""

    pass


class InsufficientAuthorization(AMMError):
    """Asset ledger: allowance для spender недостаточен."""

    pass


class ArithmeticOverflow(AMMError):
    """Результат не помещается в u256."""

    pass


class InvariantViolation(AMMError):
    """
    Нарушен инвариант пула.

    Не ожидается в штатной работе: проверки инвариантов выполняются
    до commit, поэтому срабатывание означает ошибку в математике.
    """

    pass
