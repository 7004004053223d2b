"""Pool Engine — constant-product пул двух активов.

Владеет резервами, ledger shares и общим количеством shares. Все операции
проходят через него:
- add_liquidity / remove_liquidity: выпуск и сжигание shares
- swap_a_for_b / swap_b_for_a: обмен по формуле x * y = k с комиссией 0.3%
- чтение: get_reserves, get_price, get_amount_out, share_of, total_shares

Модель исполнения:
- один RLock на пул: мутирующие операции выполняются строго по одной,
  чтения получают согласованную пару резервов
- каждая мутация выполняется в PoolTransaction: при любой ошибке резервы, shares,
  балансы и allowance в ledger остаются такими же, как до вызова;
  инварианты проверяются до выплат из пула
"""

from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Deque, Dict, Iterator, Optional, Tuple
import threading

from cpamm.core.domain.events import (
    AnyPoolEvent,
    EventKind,
    LiquidityAdded,
    LiquidityRemoved,
    Swap,
)
from cpamm.core.domain.lp_position import LPPosition
from cpamm.core.domain.pool_state import PoolState
from cpamm.core.errors import (
    AMMError,
    EmptyPool,
    InsufficientShares,
    InvalidAmount,
    InvariantViolation,
)
from cpamm.core.math.constant_product import (
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    check_swap_invariant,
    get_amount_out,
    quote,
    validate_fee,
)
from cpamm.core.math.liquidity import redemption_amounts, shares_to_mint
from cpamm.core.math.uint256 import (
    MAX_UINT256,
    checked_add,
    checked_sub,
    require_positive,
    require_uint256,
)
from cpamm.ledger.asset import AssetLedger
from cpamm.logger import get_logger
from cpamm.pool.transaction import PoolTransaction

logger = get_logger(__name__)


@dataclass(frozen=True)
class PoolConfig:
    """Конфигурация пула. Фиксируется при создании и не меняется.

    Комиссия N/D: в обмене участвует amount_in * N / D, остаток
    (0.3% при 997/1000) остаётся в резервах и достаётся провайдерам.

    max_events: сколько последних событий хранит журнал пула; None
    означает журнал без ограничения. Нумерация seq сквозная и не
    сбрасывается при вытеснении старых событий.
    """
    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    max_events: Optional[int] = 10_000

    def __post_init__(self):
        validate_fee(self.fee_numerator, self.fee_denominator)
        if self.max_events is not None and (
            not isinstance(self.max_events, int) or self.max_events <= 0
        ):
            raise ValueError(
                f"max_events must be a positive int or None, got {self.max_events!r}"
            )


@dataclass
class PoolRecord:
    """Изменяемое состояние пула. Доступ только под lock PoolEngine."""
    reserve_a: int = 0
    reserve_b: int = 0
    total_shares: int = 0
    share_of: Dict[str, int] = field(default_factory=dict)


class PoolEngine:
    """Constant-product AMM пул.

    Правило первого депозита: shares = amount_a. Последующие депозиты
    получают min(amount_a * S / Ra, amount_b * S / Rb); депозит не
    в пропорции принимается, избыток остаётся в резервах.

    Комиссии не учитываются отдельно: они остаются в резервах, и каждая
    share дорожает пропорционально объёму торгов.
    """

    def __init__(
        self,
        asset_a: AssetLedger,
        asset_b: AssetLedger,
        config: Optional[PoolConfig] = None,
        address: Optional[str] = None,
    ):
        """
        Args:
            asset_a: ledger актива A
            asset_b: ledger актива B
            config: конфигурация комиссии (default 997/1000)
            address: адрес пула (для снапшотов и логов)
        """
        if asset_a.address == asset_b.address:
            raise ValueError(f"Pool assets must differ, got {asset_a.address} twice")

        self.asset_a = asset_a
        self.asset_b = asset_b
        self.config = config or PoolConfig()
        self.address = address

        self._record = PoolRecord()
        self._events: Deque[AnyPoolEvent] = deque(maxlen=self.config.max_events)
        self._event_seq = 0
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"PoolEngine({self.token_a!r}, {self.token_b!r}, address={self.address!r})"

    @property
    def token_a(self) -> str:
        return self.asset_a.address

    @property
    def token_b(self) -> str:
        return self.asset_b.address

    # =========================================================================
    # Мутирующие операции
    # =========================================================================

    def add_liquidity(self, account: str, amount_a: int, amount_b: int) -> int:
        """Депозит (amount_a, amount_b) от account.

        Args:
            account: провайдер; заранее выдал пулу allowance на оба актива
            amount_a: количество A (> 0)
            amount_b: количество B (> 0)

        Returns:
            количество выпущенных shares

        Raises:
            InvalidAmount: количество <= 0 или депозит не выпускает ни одной share
            InsufficientBalance / InsufficientAuthorization: от ledger
            ArithmeticOverflow: резерв или shares выходят за u256
        """
        with self._operation("add_liquidity", account) as rec:
            require_positive(amount_a, "amount_a")
            require_positive(amount_b, "amount_b")

            minted = shares_to_mint(
                amount_a, amount_b, rec.reserve_a, rec.reserve_b, rec.total_shares
            )
            if minted == 0:
                raise InvalidAmount(
                    f"Deposit ({amount_a}, {amount_b}) is too small to mint a share"
                )

            with self._transaction("add_liquidity") as tx:
                tx.apply(
                    lambda: self.asset_a.debit(account, amount_a),
                    lambda: self.asset_a.refund(account, amount_a),
                )
                tx.apply(
                    lambda: self.asset_b.debit(account, amount_b),
                    lambda: self.asset_b.refund(account, amount_b),
                )
                rec.reserve_a = checked_add(rec.reserve_a, amount_a)
                rec.reserve_b = checked_add(rec.reserve_b, amount_b)
                rec.total_shares = checked_add(rec.total_shares, minted)
                rec.share_of[account] = checked_add(rec.share_of.get(account, 0), minted)

            self._emit(
                LiquidityAdded(
                    seq=self._event_seq,
                    account=account,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    shares_minted=minted,
                )
            )
            logger.debug(
                "add_liquidity %s: in=(%d, %d) minted=%d reserves=(%d, %d)",
                account, amount_a, amount_b, minted, rec.reserve_a, rec.reserve_b,
            )
            return minted

    def remove_liquidity(self, account: str, shares: int) -> Tuple[int, int]:
        """Сжигание shares и выплата пропорциональной доли резервов.

        Returns:
            (amount_a, amount_b), floor

        Raises:
            InvalidAmount: shares <= 0
            InsufficientShares: shares > share_of(account)
        """
        with self._operation("remove_liquidity", account) as rec:
            require_positive(shares, "shares")
            held = rec.share_of.get(account, 0)
            if shares > held:
                raise InsufficientShares(
                    f"{account} holds {held} shares, requested {shares}"
                )

            amount_a, amount_b = redemption_amounts(
                shares, rec.reserve_a, rec.reserve_b, rec.total_shares
            )

            with self._transaction("remove_liquidity") as tx:
                if held == shares:
                    del rec.share_of[account]
                else:
                    rec.share_of[account] = held - shares
                rec.total_shares = checked_sub(rec.total_shares, shares)
                rec.reserve_a = checked_sub(rec.reserve_a, amount_a)
                rec.reserve_b = checked_sub(rec.reserve_b, amount_b)
                tx.check()
                if amount_a:
                    tx.apply(
                        lambda: self.asset_a.credit(account, amount_a),
                        lambda: self.asset_a.reclaim(account, amount_a),
                    )
                if amount_b:
                    tx.apply(
                        lambda: self.asset_b.credit(account, amount_b),
                        lambda: self.asset_b.reclaim(account, amount_b),
                    )

            self._emit(
                LiquidityRemoved(
                    seq=self._event_seq,
                    account=account,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    shares_burned=shares,
                )
            )
            logger.debug(
                "remove_liquidity %s: burned=%d out=(%d, %d) reserves=(%d, %d)",
                account, shares, amount_a, amount_b, rec.reserve_a, rec.reserve_b,
            )
            return amount_a, amount_b

    def swap_a_for_b(self, account: str, amount_in: int) -> int:
        """Обмен amount_in актива A на B. Возвращает amount_out."""
        return self._swap(account, amount_in, a_to_b=True)

    def swap_b_for_a(self, account: str, amount_in: int) -> int:
        """Обмен amount_in актива B на A. Возвращает amount_out."""
        return self._swap(account, amount_in, a_to_b=False)

    def swap(self, account: str, asset_in: str, amount_in: int) -> int:
        """Обмен с выбором направления по адресу входного актива."""
        if asset_in == self.token_a:
            return self.swap_a_for_b(account, amount_in)
        if asset_in == self.token_b:
            return self.swap_b_for_a(account, amount_in)
        raise ValueError(f"Asset {asset_in} is not traded by this pool")

    def _swap(self, account: str, amount_in: int, a_to_b: bool) -> int:
        """Общая реализация swap.

        Слиппедж не ограничивается: вызывающий принимает цену,
        которую дают текущие резервы.
        """
        operation = "swap_a_for_b" if a_to_b else "swap_b_for_a"
        asset_in, asset_out = (
            (self.asset_a, self.asset_b) if a_to_b else (self.asset_b, self.asset_a)
        )

        with self._operation(operation, account) as rec:
            require_positive(amount_in, "amount_in")
            if rec.total_shares == 0:
                raise EmptyPool("Cannot swap on an empty pool")

            if a_to_b:
                reserve_in, reserve_out = rec.reserve_a, rec.reserve_b
            else:
                reserve_in, reserve_out = rec.reserve_b, rec.reserve_a

            amount_out = self.get_amount_out(amount_in, reserve_in, reserve_out)
            if amount_out == 0:
                raise InvalidAmount(f"amount_in {amount_in} is too small to buy anything")

            new_in, new_out = check_swap_invariant(
                reserve_in,
                reserve_out,
                amount_in,
                amount_out,
                self.config.fee_numerator,
                self.config.fee_denominator,
            )
            require_uint256(new_in, "reserve_in")

            with self._transaction(operation) as tx:
                tx.apply(
                    lambda: asset_in.debit(account, amount_in),
                    lambda: asset_in.refund(account, amount_in),
                )
                if a_to_b:
                    rec.reserve_a, rec.reserve_b = new_in, new_out
                else:
                    rec.reserve_b, rec.reserve_a = new_in, new_out
                tx.check()
                tx.apply(
                    lambda: asset_out.credit(account, amount_out),
                    lambda: asset_out.reclaim(account, amount_out),
                )

            self._emit(
                Swap(
                    seq=self._event_seq,
                    account=account,
                    asset_in=asset_in.address,
                    amount_in=amount_in,
                    amount_out=amount_out,
                )
            )
            logger.debug(
                "%s %s: in=%d out=%d reserves=(%d, %d)",
                operation, account, amount_in, amount_out, rec.reserve_a, rec.reserve_b,
            )
            return amount_out

    # =========================================================================
    # Чтение
    # =========================================================================

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Котировка swap с комиссией пула. Чистая функция."""
        return get_amount_out(
            amount_in,
            reserve_in,
            reserve_out,
            self.config.fee_numerator,
            self.config.fee_denominator,
        )

    def get_reserves(self) -> Tuple[int, int]:
        with self._lock:
            return self._record.reserve_a, self._record.reserve_b

    def get_price(self) -> Fraction:
        """Цена B за A (reserve_b / reserve_a) как точная дробь.

        Raises:
            EmptyPool: пул без ликвидности
        """
        with self._lock:
            rec = self._record
            if rec.total_shares == 0:
                raise EmptyPool("No liquidity")
            return Fraction(rec.reserve_b, rec.reserve_a)

    def get_price_b(self) -> Fraction:
        """Цена A за B (reserve_a / reserve_b)."""
        return 1 / self.get_price()

    def share_of(self, account: str) -> int:
        with self._lock:
            return self._record.share_of.get(account, 0)

    def total_shares(self) -> int:
        with self._lock:
            return self._record.total_shares

    def quote(self, amount_a: int) -> int:
        """Количество B, которое сохраняет текущую пропорцию для депозита amount_a."""
        with self._lock:
            return quote(amount_a, self._record.reserve_a, self._record.reserve_b)

    def preview_remove_liquidity(self, shares: int) -> Tuple[int, int]:
        """Что remove_liquidity(shares) выплатил бы сейчас."""
        with self._lock:
            rec = self._record
            return redemption_amounts(shares, rec.reserve_a, rec.reserve_b, rec.total_shares)

    def position(self, account: str) -> LPPosition:
        """Позиция провайдера с текущей погашаемой стоимостью."""
        with self._lock:
            rec = self._record
            shares = rec.share_of.get(account, 0)
            amount_a = amount_b = 0
            if shares:
                amount_a, amount_b = redemption_amounts(
                    shares, rec.reserve_a, rec.reserve_b, rec.total_shares
                )
            return LPPosition(
                account=account,
                shares=shares,
                total_shares=rec.total_shares,
                amount_a=amount_a,
                amount_b=amount_b,
            )

    def snapshot(self) -> PoolState:
        """Согласованный снапшот пула."""
        with self._lock:
            rec = self._record
            return PoolState(
                token_a=self.token_a,
                token_b=self.token_b,
                reserve_a=rec.reserve_a,
                reserve_b=rec.reserve_b,
                total_shares=rec.total_shares,
                fee_numerator=self.config.fee_numerator,
                fee_denominator=self.config.fee_denominator,
                shares=dict(rec.share_of),
            )

    def events(self, kind: Optional[EventKind] = None) -> Tuple[AnyPoolEvent, ...]:
        """Журнал последних событий (не более config.max_events), опционально по типу."""
        with self._lock:
            if kind is None:
                return tuple(self._events)
            return tuple(e for e in self._events if e.event == kind)

    def check_invariants(self) -> None:
        """Проверка инвариантов модели данных.

        Raises:
            InvariantViolation: инвариант нарушен
        """
        with self._lock:
            self._check_invariants_locked()

    # =========================================================================
    # Внутреннее
    # =========================================================================

    @contextmanager
    def _operation(self, name: str, account: str) -> Iterator[PoolRecord]:
        """Эксклюзивный доступ к состоянию на всё время операции."""
        if not isinstance(account, str) or not account:
            raise ValueError(f"account must be a non-empty string, got {account!r}")
        with self._lock:
            try:
                yield self._record
            except AMMError as e:
                logger.warning("%s rejected for %s: %s: %s", name, account, type(e).__name__, e)
                raise

    def _transaction(self, name: str) -> PoolTransaction:
        return PoolTransaction(
            [self._record], name=name, post_check=self._check_invariants_locked
        )

    def _emit(self, event: AnyPoolEvent) -> None:
        self._events.append(event)
        self._event_seq += 1

    def _check_invariants_locked(self) -> None:
        rec = self._record

        if any(v <= 0 for v in rec.share_of.values()):
            raise InvariantViolation("Share balances must be positive")

        held = sum(rec.share_of.values())
        if held != rec.total_shares:
            raise InvariantViolation(
                f"sum(share_of)={held} != total_shares={rec.total_shares}"
            )

        empty = {rec.reserve_a == 0, rec.reserve_b == 0, rec.total_shares == 0}
        if len(empty) != 1:
            raise InvariantViolation(
                f"Inconsistent empty state: reserves=({rec.reserve_a}, {rec.reserve_b}), "
                f"total_shares={rec.total_shares}"
            )

        if max(rec.reserve_a, rec.reserve_b, rec.total_shares) > MAX_UINT256:
            raise InvariantViolation("Pool state exceeds uint256")
