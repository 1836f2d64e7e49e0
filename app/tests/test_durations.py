from datetime import datetime, time

import pytest

from app.services.durations import (
    BucketTotals,
    accumulate,
    add_minutes,
    bucket_for,
    exceeds_one_day,
    format_clock_face,
    format_hhmm,
    minutes_between,
    route_delta,
)


def test_minutes_between_truncates_toward_zero():
    start = datetime(2026, 3, 10, 9, 0, 0)

    assert minutes_between(start, datetime(2026, 3, 10, 9, 30, 59)) == 30
    assert minutes_between(start, datetime(2026, 3, 10, 8, 29, 30)) == -30
    assert minutes_between(start, start) == 0


def test_accumulate_rejects_negative_minutes():
    assert accumulate(None, 15) == 15
    with pytest.raises(ValueError):
        accumulate(10, -1)


def test_hhmm_does_not_wrap_but_clock_face_does():
    assert format_hhmm(1500) == "25:00"
    assert format_clock_face(1500) == "01:00"
    assert format_hhmm(None) == "00:00"
    assert format_hhmm(61) == "01:01"


def test_add_minutes_rolls_past_midnight():
    assert add_minutes(time(23, 30), 45) == time(0, 15)
    assert add_minutes(None, 90) == time(1, 30)


def test_exceeds_one_day_boundary():
    assert exceeds_one_day(1439) is False
    assert exceeds_one_day(1440) is True


def test_bucket_for_is_case_insensitive_and_ignores_untracked():
    assert bucket_for("in_progress") == "in_progress"
    assert bucket_for("ON_HOLD") == "on_hold"
    assert bucket_for("PENDING") is None
    assert bucket_for("END_JOB_CARD") is None
    assert bucket_for(None) is None


def test_route_delta_only_credits_tracked_statuses():
    empty = BucketTotals()

    assert route_delta(empty, "ASSIGNED", 30) == BucketTotals(assigned=30)
    assert route_delta(empty, "PENDING", 30) == empty
    assert route_delta(empty, "COMPLETED", 30) == empty
    assert route_delta(empty, "END_JOB_CARD", 30) == empty
    assert route_delta(empty, "IN_PROGRESS", -5) == empty


def test_route_delta_conserves_tracked_time():
    events = [
        ("ASSIGNED", 15),
        ("IN_PROGRESS", 40),
        ("ON_HOLD", 10),
        ("PENDING", 25),
        ("IN_PROGRESS", 50),
        ("COMPLETED", 5),
    ]

    buckets = BucketTotals()
    for status, delta in events:
        buckets = route_delta(buckets, status, delta)

    assert buckets == BucketTotals(on_hold=10, assigned=15, in_progress=90)
    assert buckets.total == 115


def test_bucket_totals_read_and_write_rows():
    class Row:
        spent_on_hold_minutes = None
        spent_assigned_minutes = 7
        spent_in_progress_minutes = 3

    row = Row()
    totals = BucketTotals.of(row)
    assert totals == BucketTotals(on_hold=0, assigned=7, in_progress=3)

    BucketTotals(on_hold=1, assigned=2, in_progress=4).apply_to(row)
    assert (row.spent_on_hold_minutes, row.spent_assigned_minutes, row.spent_in_progress_minutes) == (1, 2, 4)
