from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError

from campus_market.application.interfaces.catalog_store import StorageFaultError

logger = structlog.get_logger(__name__)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Re-raise driver and SQL failures as StorageFaultError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("storage_fault", operation=operation, error=str(exc))
        raise StorageFaultError(f"{operation} failed") from exc
