"""Connection Gateway.

The only boundary between the repository and relational storage: executes
one parameterized statement and returns its rows as plain dicts.

Statements use positional placeholders ``:p1, :p2, ...``; ``params[i]``
binds to ``p{i + 1}``. Storage failures surface as typed errors
(ConflictError for constraint violations, StorageError otherwise) and are
never turned into an empty result.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Sequence

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from ..core.constants import ConflictReason
from ..core.exceptions import ConflictError, StorageError
from ..core.logging import get_logger, get_transaction_id, transaction_scope

logger = get_logger(__name__)

Row = dict[str, Any]


def bind_positional(params: Sequence[Any]) -> dict[str, Any]:
    """Map a positional parameter list onto ``p1..pN`` bind names."""
    return {f"p{index}": value for index, value in enumerate(params, start=1)}


def classify_conflict(detail: str) -> str | None:
    """Name the kind of constraint a driver error message reports, if known."""
    lowered = detail.lower()
    for reason, patterns in ConflictReason.PATTERNS.items():
        if any(pattern in lowered for pattern in patterns):
            return reason
    return None


def translate_storage_error(error: SQLAlchemyError) -> ConflictError | StorageError:
    """Convert a SQLAlchemy error into the matching typed error."""
    detail = str(error.orig) if getattr(error, 'orig', None) is not None else str(error)
    if isinstance(error, IntegrityError):
        return ConflictError(
            f"Storage constraint violated: {detail}",
            reason=classify_conflict(detail)
        )
    return StorageError(f"Storage failure: {detail}")


class ConnectionGateway:
    """Executes parameterized statements against an AsyncEngine."""

    def __init__(self, engine: AsyncEngine, connection: AsyncConnection | None = None):
        self.engine = engine
        self._connection = connection

    @property
    def in_transaction(self) -> bool:
        return self._connection is not None

    async def execute(self, statement: str, params: Sequence[Any] = ()) -> list[Row]:
        """Execute one statement.

        Args:
            statement: SQL text with ``:pN`` placeholders
            params: Ordered parameter values

        Returns:
            Rows as dicts (empty list when the statement returns no rows)

        Raises:
            ConflictError: Constraint violation (unique, foreign key, check)
            StorageError: Any other storage failure
        """
        bind = bind_positional(params)
        logger.debug(
            "Executing statement",
            extra={
                'statement': statement,
                'param_count': len(bind),
                'transaction_id': get_transaction_id()
            }
        )
        try:
            if self._connection is not None:
                return await self._run(self._connection, statement, bind)
            async with self.engine.begin() as connection:
                return await self._run(connection, statement, bind)
        except SQLAlchemyError as e:
            error = translate_storage_error(e)
            if isinstance(error, ConflictError):
                logger.warning(
                    "Statement rejected by storage constraint",
                    extra={
                        'statement': statement,
                        'error': error.message,
                        'reason': error.reason,
                        'transaction_id': get_transaction_id()
                    }
                )
            else:
                logger.error(
                    "Statement execution failed",
                    extra={
                        'statement': statement,
                        'error': str(e),
                        'error_type': type(e).__name__
                    },
                    exc_info=True
                )
            raise error from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[ConnectionGateway]:
        """Run several statements atomically.

        Commits on success, rolls back on any exception and re-raises it.
        A gateway already bound to a transaction yields itself. Records
        logged inside the block carry the transaction's ``transaction_id``.

        Usage:
            ```python
            async with gateway.transaction() as tx:
                rows = await tx.execute("SELECT id FROM jobs WHERE id = :p1", [job_id])
                await tx.execute("INSERT INTO applications ...", [...])
            ```
        """
        if self._connection is not None:
            yield self
            return

        with transaction_scope() as transaction_id:
            try:
                async with self.engine.begin() as connection:
                    yield ConnectionGateway(self.engine, connection)
                logger.debug(
                    "Transaction committed successfully",
                    extra={'transaction_id': transaction_id}
                )
            except SQLAlchemyError as e:
                logger.error(
                    "Transaction failed in storage",
                    extra={
                        'error': str(e),
                        'error_type': type(e).__name__,
                        'transaction_id': transaction_id
                    },
                    exc_info=True
                )
                raise translate_storage_error(e) from e
            except Exception as e:
                logger.debug(
                    "Transaction rolled back",
                    extra={
                        'error': str(e),
                        'error_type': type(e).__name__,
                        'transaction_id': transaction_id
                    }
                )
                raise

    @staticmethod
    async def _run(connection: AsyncConnection, statement: str, bind: dict[str, Any]) -> list[Row]:
        result = await connection.execute(text(statement), bind)
        if not result.returns_rows:
            return []
        return [dict(row) for row in result.mappings().all()]
