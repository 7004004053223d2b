"""
Тесты конкурентного доступа к PoolEngine

Несколько потоков одновременно вносят ликвидность, меняют и выводят её.
После завершения:
- инварианты пула выполняются
- резервы совпадают с балансами пула в ledger
- сумма балансов каждого токена не изменилась
- журнал событий нумеруется без пропусков

Читатели, работающие параллельно со swap, видят только согласованные
пары резервов и валидные снапшоты.
"""

import threading
from typing import List

from cpamm.core.contracts import validate_pool_state
from cpamm.pool import deploy_pool, make_address
from cpamm.pool.factory import Deployment

OWNER = make_address("owner")
WORKERS = [make_address(f"worker-{i}") for i in range(8)]
ROUNDS = 25
FUNDING = 10**9
SUPPLY = 10**12


def make_dex() -> Deployment:
    dex = deploy_pool(OWNER, initial_supply=SUPPLY)
    dex.approve_pool(OWNER, SUPPLY, SUPPLY)
    dex.pool.add_liquidity(OWNER, 10**8, 2 * 10**8)

    for worker in WORKERS:
        dex.token_a.transfer(OWNER, worker, FUNDING)
        dex.token_b.transfer(OWNER, worker, FUNDING)
        dex.approve_pool(worker, FUNDING, FUNDING)
    return dex


def run_all(threads: List[threading.Thread]) -> None:
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def test_parallel_operations_keep_pool_consistent() -> None:
    dex = make_dex()
    pool = dex.pool

    start = threading.Barrier(len(WORKERS))
    errors: List[BaseException] = []

    def run(index: int, worker: str) -> None:
        start.wait()
        try:
            for i in range(ROUNDS):
                step = (index + i) % 4
                if step == 0:
                    pool.add_liquidity(worker, 10_000 + i, 20_000 + i)
                elif step == 1:
                    pool.swap_a_for_b(worker, 1_000 + index)
                elif step == 2:
                    pool.swap_b_for_a(worker, 2_000 + index)
                else:
                    held = pool.share_of(worker)
                    if held:
                        pool.remove_liquidity(worker, held // 2 or held)
        except BaseException as e:
            errors.append(e)

    run_all([
        threading.Thread(target=run, args=(index, worker))
        for index, worker in enumerate(WORKERS)
    ])

    assert errors == []
    pool.check_invariants()

    state = pool.snapshot()
    assert (state.reserve_a, state.reserve_b) == (
        dex.token_a.balance_of(pool.address),
        dex.token_b.balance_of(pool.address),
    )
    assert sum(state.shares.values()) == state.total_shares

    accounts = [OWNER, pool.address, *WORKERS]
    assert sum(dex.token_a.balance_of(a) for a in accounts) == SUPPLY
    assert sum(dex.token_b.balance_of(a) for a in accounts) == SUPPLY
    events = pool.events()
    assert [e.seq for e in events] == list(range(len(events)))


def test_readers_see_consistent_reserves_during_swaps() -> None:
    """Только swap: каждый читатель видит неубывающее k и валидные снапшоты."""
    dex = make_dex()
    pool = dex.pool

    writers_done = threading.Event()
    start = threading.Barrier(len(WORKERS) + 2)
    errors: List[BaseException] = []

    def swapper(index: int, worker: str) -> None:
        start.wait()
        try:
            for i in range(ROUNDS):
                if (index + i) % 2:
                    pool.swap_a_for_b(worker, 1_000 + index)
                else:
                    pool.swap_b_for_a(worker, 2_000 + index)
        except BaseException as e:
            errors.append(e)

    def reserves_reader() -> None:
        start.wait()
        try:
            last_k = 0
            while not writers_done.is_set():
                reserve_a, reserve_b = pool.get_reserves()
                k = reserve_a * reserve_b
                assert k >= last_k, f"k decreased: {k} < {last_k}"
                last_k = k
        except BaseException as e:
            errors.append(e)

    def snapshot_reader() -> None:
        start.wait()
        try:
            last_k = 0
            while not writers_done.is_set():
                state = pool.snapshot()
                validate_pool_state(state.model_dump(mode="json"))
                assert state.k() >= last_k
                last_k = state.k()
        except BaseException as e:
            errors.append(e)

    readers = [
        threading.Thread(target=reserves_reader),
        threading.Thread(target=snapshot_reader),
    ]
    writers = [
        threading.Thread(target=swapper, args=(index, worker))
        for index, worker in enumerate(WORKERS)
    ]
    for thread in readers:
        thread.start()
    run_all(writers)
    writers_done.set()
    for thread in readers:
        thread.join()

    assert errors == []
    pool.check_invariants()
    assert len(pool.events()) == 1 + len(WORKERS) * ROUNDS
