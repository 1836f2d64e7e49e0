from app.models.activity_log import ActivityLog
from app.models.employee import Employee
from app.models.job_card import JobCard
from app.models.mini_job_card import MiniJobCard
from app.models.overtime_ledger import OvertimeLedgerEntry

__all__ = [
    "ActivityLog",
    "Employee",
    "JobCard",
    "MiniJobCard",
    "OvertimeLedgerEntry",
]
