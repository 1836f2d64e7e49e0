import os
from datetime import time

DEFAULT_BUSINESS_TIMEZONE = "Asia/Colombo"


def _parse_clock_time(raw: str, name: str) -> time:
    try:
        hours, minutes = raw.strip().split(":", 1)
        return time(int(hours), int(minutes))
    except ValueError as exc:
        raise ValueError(f"{name} must be HH:MM, got {raw!r}") from exc


def get_business_timezone() -> str:
    return os.getenv("BUSINESS_TIMEZONE", DEFAULT_BUSINESS_TIMEZONE)


def get_morning_ot_threshold() -> time:
    return _parse_clock_time(os.getenv("MORNING_OT_THRESHOLD", "08:30"), "MORNING_OT_THRESHOLD")


def get_evening_ot_threshold() -> time:
    return _parse_clock_time(os.getenv("EVENING_OT_THRESHOLD", "17:00"), "EVENING_OT_THRESHOLD")


def get_task_report_max_days() -> int:
    return int(os.getenv("TASK_REPORT_MAX_DAYS", "14"))


def get_ot_report_max_days() -> int:
    return int(os.getenv("OT_REPORT_MAX_DAYS", "31"))
