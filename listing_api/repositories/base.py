"""Shared plumbing for the SQLAlchemy repositories."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from listing_api.exceptions import ConflictError, DependencyError

logger = logging.getLogger(__name__)


@contextmanager
def store_operation(
    db: Session, description: str, conflict_message: Optional[str] = None
) -> Iterator[None]:
    """Roll back and report any database failure as a ``DependencyError``.

    Single-row writes commit inside the block, so a failure leaves no partial
    state behind. When ``conflict_message`` is given, a unique constraint
    violation is reported as a ``ConflictError`` instead.
    """
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        if conflict_message is None:
            logger.error("Integrity error while trying to %s: %s", description, exc)
            raise DependencyError() from exc
        raise ConflictError(conflict_message) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Store failure while trying to %s: %s", description, exc, exc_info=True)
        raise DependencyError() from exc


class SessionRepository:
    def __init__(self, db: Session):
        self.db = db
