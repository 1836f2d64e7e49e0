import threading
from datetime import date

from app.services import locking

DAY = date(2026, 3, 10)


def test_registry_forgets_keys_after_release():
    for employee_id in range(1, 51):
        with locking.employee_day_lock(employee_id, DAY):
            assert (employee_id, DAY) in locking._locks

    assert all((employee_id, DAY) not in locking._locks for employee_id in range(1, 51))


def test_lock_is_reentrant_and_released_once_outermost_exits():
    with locking.employee_day_lock(7, DAY):
        with locking.employee_day_lock(7, DAY):
            assert locking._locks[(7, DAY)].holders == 2
        assert locking._locks[(7, DAY)].holders == 1

    assert (7, DAY) not in locking._locks


def test_registry_is_released_when_the_body_raises():
    try:
        with locking.employee_day_lock(8, DAY):
            raise RuntimeError("write failed")
    except RuntimeError:
        pass

    assert (8, DAY) not in locking._locks


def test_waiters_share_one_lock_and_leave_nothing_behind():
    workers = 6
    start = threading.Barrier(workers)
    inside = []
    overlaps = []

    def _worker():
        start.wait()
        with locking.employee_day_lock(9, DAY):
            if inside:
                overlaps.append(True)
            inside.append(True)
            inside.pop()

    threads = [threading.Thread(target=_worker) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert overlaps == []
    assert (9, DAY) not in locking._locks
