"""
Unit-of-work helper

Runs a callable as one atomic unit: commit on success, rollback on any
error. Transient storage errors are retried once before giving up.
"""
import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from rightsdesk.exceptions import TransientStorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_in_transaction(
    db: Session,
    work: Callable[[], T],
    operation: str,
    retries: int = 1,
) -> T:
    """
    Execute work() and commit.

    Args:
        db: Session owning the unit
        work: Callable performing every write of the unit
        operation: Name used in logs and errors
        retries: Extra attempts after an OperationalError

    Raises:
        TransientStorageError: OperationalError persisted after the retries
    """
    last_error = None

    for attempt in range(retries + 1):
        try:
            result = work()
            db.commit()
            return result
        except OperationalError as e:
            db.rollback()
            last_error = e
            logger.warning(f"[{operation}] storage error on attempt {attempt + 1}/{retries + 1}: {e}")
        except Exception:
            db.rollback()
            raise

    logger.error(f"[{operation}] giving up after {retries + 1} attempt(s)")
    raise TransientStorageError(operation, last_error)
