"""
PoolTransaction — all-or-nothing применение операции пула

При входе снимается снапшот __dict__ переданных объектов состояния.
Внешние эффекты (debit/credit ledger) регистрируются вместе с
компенсирующим действием. Если внутри блока возникло исключение или
post_check не прошёл:
1. состояние восстанавливается из снапшота
2. компенсации выполняются в обратном порядке (refund для debit,
   reclaim для credit)
3. исходное исключение пробрасывается без изменений

Объекты состояния не должны содержать lock и другие некопируемые поля.
"""

from copy import deepcopy
from typing import Callable, Iterable, List, Optional

from cpamm.core.errors import InvariantViolation


class PoolTransaction:
    def __init__(
        self,
        objects: Iterable[object],
        name: Optional[str] = None,
        post_check: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            objects: Объекты состояния, которые откатываются при ошибке
            name: Имя операции для сообщений
            post_check: Проверка инвариантов перед commit; сигнализирует
                о нарушении исключением
        """
        self.objects = list(objects)
        self.name = name or "tx"
        self.post_check = post_check
        self._snapshots: dict = {}
        self._compensations: List[Callable[[], None]] = []
        self.committed = False

    def __enter__(self) -> "PoolTransaction":
        self._snapshots = {id(obj): deepcopy(obj.__dict__) for obj in self.objects}
        self._compensations = []
        self.committed = False
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self._rollback()
            return False

        try:
            self.check()
        except InvariantViolation:
            self._rollback()
            raise

        self.committed = True
        self._compensations = []
        return False

    def check(self) -> None:
        """
        Досрочный запуск post_check внутри блока.

        Вызывается перед выплатами: нарушение инварианта обнаруживается
        до того, как средства покинули пул. Исключение откатывает блок
        обычным путём __exit__.
        """
        if self.post_check is not None:
            self.post_check()

    def apply(self, action: Callable[[], None], compensation: Callable[[], None]) -> None:
        """
        Выполнение внешнего эффекта с регистрацией компенсации.

        Компенсация регистрируется только если action завершился успешно:
        неуспешный debit ничего не изменил и откатывать нечего.
        """
        action()
        self._compensations.append(compensation)

    def _rollback(self) -> None:
        for obj in self.objects:
            snap = self._snapshots.get(id(obj))
            if snap is not None:
                obj.__dict__.clear()
                obj.__dict__.update(deepcopy(snap))

        compensations, self._compensations = self._compensations, []
        for compensation in reversed(compensations):
            compensation()
