"""
Rough timings for push_back / refresh on both storage backends.
Run from the repository root: python -m examples.benchmark
"""

import timeit

from ttl_queue.storage_backend import BACKEND_MAP
from ttl_queue.ttl_queue import TtlQueue

NUMBER = 100_000


def bench(label: str, stmt, number: int = NUMBER) -> None:
    seconds = timeit.timeit(stmt, number=number)
    print(f"  {label:<45} {seconds / number * 1e9:8.1f} ns/op")


for name, backend_cls in BACKEND_MAP.items():
    print("=" * 60)
    print(f"Backend: {name}")
    print("=" * 60)

    # TtlQueue rejects an infinite ttl, so use a very large one instead
    queue = TtlQueue(1e12, backend=backend_cls())
    bench("push_back (no expiry)", lambda: queue.push_back(10))

    queue = TtlQueue(1e12, backend=backend_cls())
    bench("refresh_and_push_back (no expiry)", lambda: queue.refresh_and_push_back(10))

    queue = TtlQueue(0.0, backend=backend_cls())
    bench("refresh_and_push_back (ttl=0)", lambda: queue.refresh_and_push_back(10))

    for elements in (100, 1000):
        queue = TtlQueue(0.0, backend=backend_cls())

        def push_then_refresh():
            for i in range(elements):
                queue.push_back(i)
            queue.refresh()

        bench(f"push_back x{elements}, then refresh (ttl=0)", push_then_refresh, number=1000)
    print()
