from enum import Enum


class JobStatus(str, Enum):
    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class JobType(str, Enum):
    SERVICE = "SERVICE"
    REPAIR = "REPAIR"
    VISIT = "VISIT"


# Protocol constants shared by the session finalizer and the edit gate.
END_JOB_CARD = "END_JOB_CARD"
END_DATE = "END_DATE"
UPDATE_JOB_CARD = "UPDATE_JOB_CARD"


def status_value(status) -> str:
    if isinstance(status, Enum):
        return str(status.value)
    return str(status)
