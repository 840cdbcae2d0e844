"""Thread pools that run zero-argument callables on a fixed set of worker threads.

Three flavours are offered:

* :class:`BlockingPool` parks idle workers on a condition variable and keeps
  its tasks in an unbounded :class:`~thready.queues.MutexQueue`.
* :class:`SpinningPool` keeps workers busy-polling a bounded
  :class:`~thready.queues.RingBufferQueue`; :class:`LockFreePool` does the
  same over an unbounded :class:`~thready.queues.LinkedQueue`.
* :class:`HybridPool` stores tasks in a bounded ring buffer but parks idle
  workers on a condition variable.

A bounded pool refuses a task when its queue is full: ``enqueue`` then returns
False and the task is dropped.
"""

from __future__ import annotations

import abc
import logging
import threading
import time
from typing import Callable, List, Optional

from thready.queues import LinkedQueue, MutexQueue, QueueEmpty, RingBufferQueue

Task = Callable[[], object]

logger = logging.getLogger(__name__)


def _run(task: Task) -> None:
    try:
        task()
    except Exception:
        logger.exception("task %r raised", task)


class ThreadPool(abc.ABC):
    """Common behaviour of every pool: lifecycle, waiting and context management."""

    def __init__(self, thread_count: int) -> None:
        if thread_count < 0:
            raise ValueError(f"thread_count must not be negative, got {thread_count}")
        self._thread_count = thread_count
        self._workers: List[threading.Thread] = []
        self._closed = False

    def _start_workers(self) -> None:
        for index in range(self._thread_count):
            worker = threading.Thread(
                target=self._work,
                name=f"{type(self).__name__}-worker-{index}",
                daemon=True,
            )
            worker.start()
            self._workers.append(worker)

    def _join_workers(self) -> None:
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()

    def _check_task(self, task: Task) -> None:
        if self._closed:
            raise RuntimeError("pool is shut down")
        if not callable(task):
            raise TypeError(f"task must be callable, got {type(task).__name__}")

    @abc.abstractmethod
    def _work(self) -> None:
        """Body of every worker thread."""

    @abc.abstractmethod
    def enqueue(self, task: Task) -> bool:
        """Submit ``task``; return True when it was accepted."""

    @abc.abstractmethod
    def has_work(self) -> bool:
        """Return True while tasks are waiting in the queue."""

    @abc.abstractmethod
    def shutdown(self) -> None:
        """Stop accepting tasks, let the workers drain the queue, then join them."""

    def wait_until_empty(self) -> None:
        """Yield until no task is left waiting in the queue.

        Tasks already taken by a worker may still be running when this returns;
        :meth:`shutdown` waits for them as well.
        """
        while self.has_work():
            time.sleep(0)

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()


class BlockingPool(ThreadPool):
    """Workers sleep on a condition variable until a task arrives."""

    def __init__(self, thread_count: int) -> None:
        super().__init__(thread_count)
        self._tasks: MutexQueue[Task] = MutexQueue()
        self._condition = threading.Condition()
        self._start_workers()

    def _work(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._closed or not self._tasks.empty())
                if self._closed and self._tasks.empty():
                    return
                task = self._tasks.pop()
            _run(task)

    def enqueue(self, task: Task) -> bool:
        """Submit ``task``. The queue is unbounded, so the task is always accepted."""
        with self._condition:
            self._check_task(task)
            self._tasks.push(task)
            self._condition.notify()
        return True

    def has_work(self) -> bool:
        """Return True while tasks are waiting in the queue."""
        with self._condition:
            return not self._tasks.empty()

    def shutdown(self) -> None:
        """Stop accepting tasks, wake every worker, drain the queue and join them."""
        with self._condition:
            self._closed = True
            self._condition.notify_all()
        self._join_workers()


class SpinningPool(ThreadPool):
    """Workers poll a bounded ring buffer, yielding whenever it is empty.

    A buffer built for ``queue_capacity`` slots holds ``queue_capacity - 1`` tasks.
    """

    def __init__(self, thread_count: int, queue_capacity: Optional[int]) -> None:
        super().__init__(thread_count)
        self._tasks = self._make_queue(queue_capacity)
        self._start_workers()

    def _make_queue(self, queue_capacity: Optional[int]):
        if queue_capacity is None:
            raise ValueError("queue_capacity is required for a bounded pool")
        return RingBufferQueue(queue_capacity)

    def _work(self) -> None:
        while not self._closed or not self._tasks.empty():
            try:
                task = self._tasks.pop()
            except QueueEmpty:
                time.sleep(0)
                continue
            _run(task)

    def enqueue(self, task: Task) -> bool:
        """Submit ``task``; return False, dropping it, when the queue is full."""
        self._check_task(task)
        return self._tasks.push(task)

    def has_work(self) -> bool:
        """Return True while tasks are waiting in the queue."""
        return not self._tasks.empty()

    def shutdown(self) -> None:
        """Stop accepting tasks; the workers drain the queue and are joined."""
        self._closed = True
        self._join_workers()


class LockFreePool(SpinningPool):
    """Spinning pool over an unbounded queue; ``queue_capacity`` is ignored."""

    def __init__(self, thread_count: int, queue_capacity: Optional[int] = None) -> None:
        super().__init__(thread_count, queue_capacity)

    def _make_queue(self, queue_capacity: Optional[int]):
        return LinkedQueue()


class HybridPool(ThreadPool):
    """Bounded ring buffer of tasks, with idle workers parked on a condition variable.

    A buffer built for ``queue_capacity`` slots holds ``queue_capacity - 1`` tasks.
    """

    def __init__(self, thread_count: int, queue_capacity: int) -> None:
        super().__init__(thread_count)
        self._tasks: RingBufferQueue[Task] = RingBufferQueue(queue_capacity)
        self._condition = threading.Condition()
        self._start_workers()

    def _work(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._closed or not self._tasks.empty())
                if self._closed and self._tasks.empty():
                    return
                try:
                    task = self._tasks.pop()
                except QueueEmpty:
                    continue
            _run(task)

    def enqueue(self, task: Task) -> bool:
        """Submit ``task``; return False, dropping it, when the queue is full."""
        self._check_task(task)
        accepted = self._tasks.push(task)
        if accepted:
            with self._condition:
                self._condition.notify()
        return accepted

    def has_work(self) -> bool:
        """Return True while tasks are waiting in the queue."""
        return not self._tasks.empty()

    def shutdown(self) -> None:
        """Stop accepting tasks, wake every worker, drain the queue and join them."""
        with self._condition:
            self._closed = True
            self._condition.notify_all()
        self._join_workers()