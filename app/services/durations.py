"""
Minute arithmetic for status buckets.

Buckets are stored as plain integer minutes. The legacy clock-face rendering
(hours reduced mod 24) is kept for display compatibility only; it is never
written back into a counter.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, time
from typing import Optional

MINUTES_PER_DAY = 24 * 60

TRACKED_STATUSES = ("ON_HOLD", "ASSIGNED", "IN_PROGRESS")


def minutes_of(value: Optional[time]) -> int:
    if value is None:
        return 0
    return value.hour * 60 + value.minute


def accumulate(total_minutes: int, minutes: int) -> int:
    if minutes < 0:
        raise ValueError(f"Cannot accumulate a negative duration: {minutes}")
    return int(total_minutes or 0) + int(minutes)


def clock_face(total_minutes: int) -> time:
    total_minutes = int(total_minutes or 0)
    return time((total_minutes // 60) % 24, total_minutes % 60, 0)


def add_minutes(base: Optional[time], minutes: int) -> time:
    """Add minutes to a time-of-day counter, rolling over past 24 hours."""
    return clock_face(accumulate(minutes_of(base), minutes))


def exceeds_one_day(total_minutes: int) -> bool:
    return int(total_minutes or 0) >= MINUTES_PER_DAY


def format_hhmm(total_minutes: int) -> str:
    total_minutes = int(total_minutes or 0)
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def format_clock_face(total_minutes: int) -> str:
    return clock_face(total_minutes).strftime("%H:%M")


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end; negative when end precedes start."""
    seconds = (end - start).total_seconds()
    if seconds >= 0:
        return int(seconds // 60)
    return -int(-seconds // 60)


@dataclass(frozen=True)
class BucketTotals:
    on_hold: int = 0
    assigned: int = 0
    in_progress: int = 0

    @property
    def total(self) -> int:
        return self.on_hold + self.assigned + self.in_progress

    @classmethod
    def of(cls, row) -> "BucketTotals":
        return cls(
            on_hold=int(row.spent_on_hold_minutes or 0),
            assigned=int(row.spent_assigned_minutes or 0),
            in_progress=int(row.spent_in_progress_minutes or 0),
        )

    def apply_to(self, row) -> None:
        row.spent_on_hold_minutes = self.on_hold
        row.spent_assigned_minutes = self.assigned
        row.spent_in_progress_minutes = self.in_progress


_BUCKET_FIELDS = {
    "ON_HOLD": "on_hold",
    "ASSIGNED": "assigned",
    "IN_PROGRESS": "in_progress",
}


def bucket_for(status: Optional[str]) -> Optional[str]:
    if status is None:
        return None
    return _BUCKET_FIELDS.get(str(status).upper())


def route_delta(buckets: BucketTotals, prior_status: Optional[str], delta: int) -> BucketTotals:
    """
    Credit delta minutes to the bucket of the status they were spent in.

    PENDING, COMPLETED, CANCELLED and the end-of-day sentinel are not billable
    and leave the buckets untouched, as does a non-positive delta.
    """
    field = bucket_for(prior_status)
    if field is None or delta <= 0:
        return buckets
    return replace(buckets, **{field: accumulate(getattr(buckets, field), delta)})
