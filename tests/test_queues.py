import threading

import pytest

from thready.queues import LinkedQueue, MutexQueue, QueueEmpty, RingBufferQueue

UNBOUNDED = [LinkedQueue, MutexQueue]


def _make(kind):
    if kind is RingBufferQueue:
        return RingBufferQueue(64)
    if kind is LinkedQueue:
        return LinkedQueue()
    return MutexQueue()


ALL_KINDS = [LinkedQueue, MutexQueue, RingBufferQueue]


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_new_queue_is_empty(kind):
    q = _make(kind)
    assert q.empty() is True
    assert len(q) == 0


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_pop_from_empty_raises(kind):
    q = _make(kind)
    with pytest.raises(QueueEmpty):
        q.pop()


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_fifo_order(kind):
    q = _make(kind)
    items = list(range(10))
    for item in items:
        assert q.push(item) is True
    assert q.empty() is False
    assert len(q) == len(items)
    popped = [q.pop() for _ in items]
    assert popped == items
    assert q.empty() is True


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_pop_after_drain_raises(kind):
    q = _make(kind)
    q.push("a")
    assert q.pop() == "a"
    with pytest.raises(QueueEmpty):
        q.pop()


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_holds_callables(kind):
    q = _make(kind)
    calls = []
    q.push(lambda: calls.append("ran"))
    task = q.pop()
    task()
    assert calls == ["ran"]


@pytest.mark.parametrize("kind", UNBOUNDED)
def test_unbounded_accepts_many(kind):
    q = _make(kind)
    count = 5000
    assert all(q.push(i) for i in range(count))
    assert len(q) == count
    assert [q.pop() for _ in range(count)] == list(range(count))


def test_mutex_front_does_not_remove():
    q = MutexQueue()
    q.push("first")
    q.push("second")
    assert q.front() == "first"
    assert q.front() == "first"
    assert len(q) == 2
    assert q.pop() == "first"
    assert q.front() == "second"


def test_mutex_front_on_empty_raises():
    q = MutexQueue()
    with pytest.raises(QueueEmpty):
        q.front()


@pytest.mark.parametrize("capacity", [2, 4, 8, 10])
def test_ring_buffer_holds_one_less_than_capacity(capacity):
    q = RingBufferQueue(capacity)
    accepted = [q.push(i) for i in range(capacity * 2)]
    assert accepted.count(True) == capacity - 1
    assert accepted[: capacity - 1] == [True] * (capacity - 1)
    assert not any(accepted[capacity - 1 :])
    assert len(q) == capacity - 1


def test_ring_buffer_capacity_one_accepts_nothing():
    q = RingBufferQueue(1)
    assert q.push("x") is False
    assert q.empty() is True


def test_ring_buffer_rejected_item_is_not_stored():
    q = RingBufferQueue(3)
    assert q.push("a") is True
    assert q.push("b") is True
    assert q.push("c") is False
    assert [q.pop(), q.pop()] == ["a", "b"]
    with pytest.raises(QueueEmpty):
        q.pop()


def test_ring_buffer_wraps_around():
    capacity = 4
    q = RingBufferQueue(capacity)
    expected = []
    received = []
    for round_ in range(20):
        for k in range(capacity - 1):
            value = (round_, k)
            assert q.push(value) is True
            expected.append(value)
        assert q.push("overflow") is False
        while not q.empty():
            received.append(q.pop())
    assert received == expected


def test_ring_buffer_frees_space_after_pop():
    q = RingBufferQueue(3)
    q.push(1)
    q.push(2)
    assert q.push(3) is False
    assert q.pop() == 1
    assert q.push(3) is True
    assert [q.pop(), q.pop()] == [2, 3]


@pytest.mark.parametrize("capacity", [0, -1])
def test_ring_buffer_rejects_bad_capacity(capacity):
    with pytest.raises(ValueError):
        RingBufferQueue(capacity)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_concurrent_producers_and_consumers(kind):
    q = RingBufferQueue(16) if kind is RingBufferQueue else _make(kind)
    producers = 4
    per_producer = 500
    consumed = []
    consumed_lock = threading.Lock()
    done_producing = threading.Event()

    def produce(base):
        for i in range(per_producer):
            while not q.push(base * per_producer + i):
                pass

    def consume():
        while True:
            try:
                item = q.pop()
            except QueueEmpty:
                if done_producing.is_set() and q.empty():
                    return
                continue
            with consumed_lock:
                consumed.append(item)

    consumer_threads = [threading.Thread(target=consume) for _ in range(3)]
    producer_threads = [threading.Thread(target=produce, args=(p,)) for p in range(producers)]
    for t in consumer_threads + producer_threads:
        t.start()
    for t in producer_threads:
        t.join()
    done_producing.set()
    for t in consumer_threads:
        t.join(timeout=30)

    assert sorted(consumed) == list(range(producers * per_producer))
    assert q.empty() is True


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_each_producer_order_is_preserved(kind):
    q = RingBufferQueue(1024) if kind is RingBufferQueue else _make(kind)

    def produce(tag):
        for i in range(200):
            while not q.push((tag, i)):
                pass

    threads = [threading.Thread(target=produce, args=(tag,)) for tag in "ab"]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    drained = []
    while not q.empty():
        drained.append(q.pop())
    for tag in "ab":
        seq = [i for t, i in drained if t == tag]
        assert seq == list(range(200))