"""
Per-row write with a single retry

Each row is written and committed on its own so one conflict never rolls back
sibling rows. A conflicting write is rolled back and the whole read-then-write
operation re-run once; if that fails too, PersistenceError is raised.
"""

from sqlalchemy.exc import IntegrityError, OperationalError

from app.buisness.core.errors import PersistenceError
from app.logger import get_logger

logger = get_logger("inventory_intelligence.domain.intelligence.row_writer")

MAX_ATTEMPTS = 2


def write_row_with_retry(session, operation, description):
    """
    Run `operation` and commit, retrying once on a write conflict.

    Args:
        session: SQLAlchemy session
        operation: Callable performing the read-then-write; its result is returned
        description: Row description for log and error messages

    Raises:
        PersistenceError: Both attempts conflicted
    """
    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            result = operation()
            session.commit()
            return result
        except (IntegrityError, OperationalError) as e:
            session.rollback()
            if attempt == MAX_ATTEMPTS:
                logger.error(f"Write failed for {description} after {attempt} attempts: {e.orig}")
                raise PersistenceError(f"Write failed for {description}: {e.orig}") from e
            logger.warning(f"Write conflict for {description}, retrying: {e.orig}")
