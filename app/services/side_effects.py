import logging
from typing import Callable

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def best_effort(action: str, fn: Callable[[], object], *, db: Session, context: dict) -> bool:
    """
    Run a secondary write inside a savepoint.

    On failure the savepoint is rolled back, the error is logged with context
    and False is returned; the caller's own changes stay in the transaction.
    """
    try:
        with db.begin_nested():
            fn()
        return True
    except Exception:
        logger.exception(f"{action} failed; primary operation kept", extra=context)
        return False
