"""
Contract Value repository.

Data access layer for the contract value ledger.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chainvalue.models.contract_value import ContractValue
from chainvalue.models.enums import ValueSource
from chainvalue.repositories.base import BaseRepository


class ContractValueRepository(BaseRepository[ContractValue]):
    """Repository for ledger records."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository."""
        super().__init__(ContractValue, session)

    def _newest_first(self):
        # id breaks ties between records stored within the same clock tick
        return select(ContractValue).order_by(
            ContractValue.timestamp.desc(), ContractValue.id.desc()
        )

    async def append(
        self,
        value: str,
        source: ValueSource,
        tx_hash: str | None = None,
    ) -> ContractValue:
        """
        Insert one ledger record.

        Args:
            value: Canonical decimal string
            source: Record provenance
            tx_hash: Transaction hash for local writes

        Returns:
            Created record
        """
        return await self.create(
            value=value,
            source=ValueSource(source).value,
            tx_hash=tx_hash,
        )

    async def get_latest(self) -> ContractValue | None:
        """Get most recent record, or None when the ledger is empty."""
        result = await self.session.execute(self._newest_first().limit(1))
        return result.scalar_one_or_none()

    async def get_latest_by_source(
        self, source: ValueSource
    ) -> ContractValue | None:
        """Get most recent record with the given source tag."""
        stmt = (
            self._newest_first()
            .where(ContractValue.source == ValueSource(source).value)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_history(self, limit: int, offset: int) -> list[ContractValue]:
        """
        Get a page of records, newest first.

        Args:
            limit: Max number of records
            offset: Number of records to skip

        Returns:
            List of records
        """
        stmt = self._newest_first().offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_last_sync_timestamp(self) -> datetime | None:
        """Get timestamp of the most recent sync record."""
        record = await self.get_latest_by_source(ValueSource.SYNC)
        return record.timestamp if record else None
