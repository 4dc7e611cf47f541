from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor

from .clock import NS_PER_SECOND, ManualClock
from .config import CounterConfig, build_counter, configure_logging
from .counter import RollingCounter


def run_demo() -> None:
    clock = ManualClock()
    counter = build_counter(CounterConfig(duration_seconds=5, resolution_seconds=1), clock=clock)

    # One burst per simulated second: 1, 2, ..., 10 hits
    for burst in range(1, 11):
        for _ in range(burst):
            counter.add_hit()
        print(f"t+{burst - 1}s: {counter.get_hits()} hits in window {counter}")
        clock.advance(NS_PER_SECOND)


def micro_benchmark(num_hits: int = 200_000, num_threads: int = 8) -> None:
    counter = RollingCounter(60 * NS_PER_SECOND, NS_PER_SECOND)
    per_thread = num_hits // num_threads

    def worker() -> None:
        add_hit = counter.add_hit
        for _ in range(per_thread):
            add_hit()

    t0 = time.perf_counter()
    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        for f in [pool.submit(worker) for _ in range(num_threads)]:
            f.result()
    t1 = time.perf_counter()
    elapsed = t1 - t0
    recorded = per_thread * num_threads
    throughput = recorded / elapsed
    print(
        f"Recorded {recorded} hits from {num_threads} threads in {elapsed:.4f}s, "
        f"~{throughput:,.0f} hits/s, counted={counter.get_hits()}"
    )


if __name__ == "__main__":
    configure_logging("WARNING")
    run_demo()
    micro_benchmark(300_000)
