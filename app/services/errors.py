class NotFoundError(LookupError):
    """A referenced task, employee, job card or ledger entry does not exist."""


class NoActiveSession(NotFoundError):
    def __init__(self, employee_id: int, work_date):
        self.employee_id = employee_id
        self.work_date = work_date
        super().__init__(f"No active session found for employee {employee_id} on {work_date}")


class EditNotAllowed(ValueError):
    """The edit gate refused a task change."""
