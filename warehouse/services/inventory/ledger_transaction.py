from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.exceptions import AppException, StoreFailureError
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def ledger_transaction(db: AsyncSession, operation: str, **context):
    """One all-or-nothing ledger unit.

    Everything staged inside the block (detail record, balance update,
    flow entry, activity line) is committed together on exit. Any error
    rolls the whole unit back before it propagates.
    """
    try:
        yield
        await db.commit()

    except AppException:
        await db.rollback()
        raise

    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception(
            "Ledger unit failed, rolled back",
            extra={"operation": operation, **context},
        )
        raise StoreFailureError(operation) from exc

    except Exception:
        await db.rollback()
        logger.exception(
            "Unexpected error in ledger unit, rolled back",
            extra={"operation": operation, **context},
        )
        raise
