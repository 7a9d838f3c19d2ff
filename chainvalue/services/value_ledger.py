"""
Value Ledger.

Append-only history of observed contract values over the relational store.
Each operation runs in its own short session.
"""

from datetime import datetime

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chainvalue.models.contract_value import ContractValue
from chainvalue.models.enums import ValueSource
from chainvalue.repositories.contract_value_repository import ContractValueRepository
from chainvalue.utils.exceptions import StoreReadError, StoreWriteError
from chainvalue.utils.security import mask_tx_hash

# Store-layer failures: SQLAlchemy wraps driver errors, connection refusal can surface raw
STORE_ERRORS = (SQLAlchemyError, OSError)


class ValueLedger:
    """
    Append-only ledger of contract values.

    Features:
    - Insert with store-assigned id and timestamp
    - Latest / latest-sync / paged history queries
    - Store errors translated to StoreWriteError / StoreReadError
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """
        Initialize ledger.

        Args:
            session_factory: Async session maker shared by all operations
        """
        self._session_factory = session_factory

    async def append(
        self,
        value: str,
        source: ValueSource,
        tx_hash: str | None = None,
    ) -> ContractValue:
        """
        Append one record.

        Duplicate consecutive values are legal rows.

        Args:
            value: Canonical decimal string
            source: Record provenance
            tx_hash: Transaction hash (local writes only)

        Returns:
            Stored record

        Raises:
            StoreWriteError: If the insert fails
        """
        async with self._session_factory() as session:
            try:
                record = await ContractValueRepository(session).append(
                    value=value, source=source, tx_hash=tx_hash
                )
                await session.commit()
            except STORE_ERRORS as e:
                await session.rollback()
                logger.error(f"Failed to store value {value} ({source}): {e}")
                raise StoreWriteError(f"failed to store value: {e}") from e

        logger.info(
            f"Ledger record #{record.id} stored: value={value}, source={source}, "
            f"tx={mask_tx_hash(tx_hash) if tx_hash else '-'}"
        )
        return record

    async def latest(self) -> ContractValue | None:
        """
        Get most recent record.

        Returns:
            Latest record, or None when the ledger is empty

        Raises:
            StoreReadError: If the query fails
        """
        async with self._session_factory() as session:
            try:
                return await ContractValueRepository(session).get_latest()
            except STORE_ERRORS as e:
                raise StoreReadError(f"failed to get latest value: {e}") from e

    async def history(self, limit: int, offset: int) -> list[ContractValue]:
        """
        Get records newest first.

        Paging arguments are expected to be normalized by the caller
        (see ``normalize_paging``).

        Raises:
            StoreReadError: If the query fails
        """
        async with self._session_factory() as session:
            try:
                return await ContractValueRepository(session).get_history(
                    limit=limit, offset=offset
                )
            except STORE_ERRORS as e:
                raise StoreReadError(f"failed to get value history: {e}") from e

    async def last_sync_timestamp(self) -> datetime | None:
        """
        Get timestamp of the most recent sync record.

        Raises:
            StoreReadError: If the query fails
        """
        async with self._session_factory() as session:
            try:
                return await ContractValueRepository(session).get_last_sync_timestamp()
            except STORE_ERRORS as e:
                raise StoreReadError(f"failed to get last sync time: {e}") from e

    async def count(self) -> int:
        """Count all records."""
        async with self._session_factory() as session:
            try:
                return await ContractValueRepository(session).count()
            except STORE_ERRORS as e:
                raise StoreReadError(f"failed to count values: {e}") from e

    async def ping(self) -> None:
        """
        Check that the store answers a trivial query.

        Raises:
            StoreReadError: If the store is unreachable
        """
        async with self._session_factory() as session:
            try:
                await session.execute(text("SELECT 1"))
            except STORE_ERRORS as e:
                raise StoreReadError(f"database unreachable: {e}") from e
