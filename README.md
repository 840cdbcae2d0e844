# thready

This package provides small pools of worker threads that run short callables in the
background. It also contains the thread-safe task queues that the pools are built on.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Pools

The pools are in `thready.pools`. They all share the interface defined by the
abstract class `ThreadPool`:

- `enqueue(task)` submits a callable that takes no arguments.
  - It returns `True` when the pool accepts the task.
  - It raises `TypeError` if `task` is not callable.
  - It raises `RuntimeError` once the pool has been shut down.
- `has_work()` reports whether tasks are still waiting in the queue.
- `wait_until_empty()` yields until no task is left waiting in the queue.
- `shutdown()` does three things in order:
  - stops accepting tasks,
  - lets the workers drain the queue,
  - joins the workers.
- A pool is a context manager. Leaving the `with` block calls `shutdown()`.

When a task raises an exception, the pool logs it through the `thready.pools`
logger and the worker goes on to the next task.

The pool types differ in how their workers wait for work:

| Pool           | Queue             | Idle workers                               |
|----------------|-------------------|--------------------------------------------|
| `BlockingPool` | `MutexQueue`      | sleep on a condition until a task arrives  |
| `SpinningPool` | `RingBufferQueue` | poll the queue, yielding when it is empty  |
| `LockFreePool` | `LinkedQueue`     | poll the queue, yielding when it is empty  |
| `HybridPool`   | `RingBufferQueue` | sleep on a condition until a task arrives  |

The constructors take these arguments:

- `BlockingPool(thread_count)`
- `SpinningPool(thread_count, queue_capacity)`
- `HybridPool(thread_count, queue_capacity)`
- `LockFreePool(thread_count, queue_capacity=None)`

`SpinningPool` requires a capacity and raises `ValueError` if it gets `None`.
`LockFreePool` ignores the capacity because its queue is unbounded.

`SpinningPool` and `HybridPool` keep their tasks in a ring buffer. A buffer built
for `queue_capacity` slots holds at most `queue_capacity - 1` tasks. When the
buffer is full, `enqueue` returns `False` and drops the task.

```python
from thready.pools import BlockingPool, HybridPool

results = []

with BlockingPool(4) as pool:
    for n in range(20):
        pool.enqueue(lambda n=n: results.append(n * n))
    pool.wait_until_empty()

with HybridPool(2, 8) as pool:
    accepted = sum(pool.enqueue(lambda: None) for _ in range(100))
    pool.wait_until_empty()
```

`wait_until_empty()` waits only for the queue to empty. A task that a worker has
already taken may still be running when it returns. To wait for every running task
to finish, shut the pool down or leave the `with` block.

## Queues

The FIFO queues in `thready.queues` can also be used on their own:

- `MutexQueue` is unbounded and guarded by a lock. It also offers `front()`, which
  returns the front item without removing it.
- `LinkedQueue` is unbounded and takes no lock. It relies on the atomic
  `append` and `popleft` of `collections.deque`.
- `RingBufferQueue(capacity)` is a fixed-size circular buffer.
  - One slot is always kept free, so it holds at most `capacity - 1` items.
  - `push` returns `False` when the buffer is full.
  - A capacity below 1 raises `ValueError`.

Every queue has `push(item)`, `pop()`, `empty()` and `len()`. Calling `pop()` on an
empty queue raises `QueueEmpty`, and so does `front()` on an empty `MutexQueue`.

```python
from thready.queues import QueueEmpty, RingBufferQueue

ring = RingBufferQueue(4)
for item in "abcd":
    ring.push(item)      # the fourth push returns False

try:
    while True:
        print(ring.pop())
except QueueEmpty:
    pass
```

## Demo

```
thready-demo [--threads N] [--tasks N] [--multiplier X]
```

The demo builds a raster of float buckets, one bucket per task. By default it uses
5 threads, 10 tasks and a multiplier of 1.3. It scales every bucket by the
multiplier on each of these pools in turn:

1. a `SpinningPool`
2. a `LockFreePool`
3. a `HybridPool`

After each pass it prints the raster.

The same steps are available from Python in `thready.demo`:

- `make_raster(rows)` builds the raster.
- `scale_bucket(bucket, multiplier)` scales one bucket in place.
- `run(pool, raster, multiplier)` scales every bucket on the given pool. If a full
  queue refuses a task, `run` offers it again. It returns once every bucket has
  been scaled.