from pairchat.realtime.waiting_queue import WaitingQueue


def test_dequeue_two_is_fifo(a, b, c):
    queue = WaitingQueue()
    for conn in (a, b, c):
        queue.enqueue(conn)

    assert queue.dequeue_two() == (a, b)
    assert list(queue._entries) == [c]


def test_dequeue_two_with_one_entry_does_not_mutate(a):
    queue = WaitingQueue()
    queue.enqueue(a)

    assert queue.dequeue_two() is None
    assert a in queue
    assert len(queue) == 1


def test_enqueue_rejects_duplicates(a):
    queue = WaitingQueue()

    assert queue.enqueue(a) is True
    assert queue.enqueue(a) is False
    assert len(queue) == 1


def test_remove_from_middle_keeps_order(a, b, c):
    queue = WaitingQueue()
    for conn in (a, b, c):
        queue.enqueue(conn)

    assert queue.remove(b) is True
    assert queue.remove(b) is False
    assert queue.dequeue_two() == (a, c)


def test_position_and_requeue_front(a, b, c):
    queue = WaitingQueue()
    queue.enqueue(c)
    queue.requeue_front(a, b)

    assert queue.position(a) == 1
    assert queue.position(b) == 2
    assert queue.position(c) == 3
    assert queue.position(object()) is None
