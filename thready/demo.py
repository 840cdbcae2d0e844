"""Scale a small raster of float buckets in parallel with each kind of pool."""

from __future__ import annotations

import argparse
import threading
import time
from typing import List, Optional, Sequence

from thready.pools import HybridPool, LockFreePool, SpinningPool, ThreadPool

BUCKET = (3.14, 2.71, 1.41, 1.73, 0.577, 1.618, 2.236, 0.707, 1.414, 0.618)

Bucket = List[float]
Raster = List[Bucket]


def make_raster(rows: int) -> Raster:
    """Return ``rows`` independent copies of the sample bucket."""
    return [list(BUCKET) for _ in range(rows)]


def scale_bucket(bucket: Bucket, multiplier: float) -> None:
    """Multiply every element of ``bucket`` by ``multiplier`` in place."""
    bucket[:] = [value * multiplier for value in bucket]


def run(pool: ThreadPool, raster: Raster, multiplier: float) -> Raster:
    """Scale each bucket of ``raster`` as its own task on ``pool``; return the raster.

    A task refused by a full queue is offered again until accepted, and the call
    returns only once every bucket has been scaled.
    """
    done = threading.Semaphore(0)

    def job(bucket: Bucket) -> None:
        try:
            scale_bucket(bucket, multiplier)
        finally:
            done.release()

    for bucket in raster:
        task = lambda bucket=bucket: job(bucket)  # noqa: E731
        while not pool.enqueue(task):
            time.sleep(0)
    pool.wait_until_empty()
    for _ in raster:
        done.acquire()
    return raster


def _format_raster(raster: Raster) -> str:
    return "\n".join(" ".join(f"{value:g}" for value in bucket) + " " for bucket in raster)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Scale a raster with each pool type.")
    parser.add_argument("--threads", type=int, default=5, help="worker threads per pool")
    parser.add_argument("--tasks", type=int, default=10, help="number of buckets")
    parser.add_argument("--multiplier", type=float, default=1.3, help="scale factor")
    args = parser.parse_args(argv)

    print(f"Thread count: {args.threads}")
    print(f"Tasks count: {args.tasks}")

    raster = make_raster(args.tasks)
    capacity = max(args.tasks, 2)
    for name, factory in (
        ("SpinningPool", lambda: SpinningPool(args.threads, capacity)),
        ("LockFreePool", lambda: LockFreePool(args.threads, capacity)),
        ("HybridPool", lambda: HybridPool(args.threads, capacity)),
    ):
        with factory() as pool:
            run(pool, raster, args.multiplier)
        print(f"{name} done")
        if raster:
            print(_format_raster(raster))
    return 0