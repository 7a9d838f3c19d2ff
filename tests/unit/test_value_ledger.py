"""Unit tests for ValueLedger over an in-memory database."""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from chainvalue.config.database import create_session_maker
from chainvalue.models.enums import ValueSource
from chainvalue.services.value_ledger import ValueLedger
from chainvalue.utils.exceptions import StoreReadError, StoreWriteError


class TestAppend:
    """Tests for inserting records."""

    @pytest.mark.asyncio
    async def test_append_assigns_id_and_timestamp(self, ledger):
        record = await ledger.append("42", ValueSource.BLOCKCHAIN, tx_hash="0xabc")

        assert record.id is not None
        assert record.timestamp is not None
        assert record.value == "42"
        assert record.source == "blockchain"
        assert record.tx_hash == "0xabc"

    @pytest.mark.asyncio
    async def test_duplicate_values_are_separate_rows(self, ledger):
        await ledger.append("7", ValueSource.SYNC)
        await ledger.append("7", ValueSource.SYNC)

        assert await ledger.count() == 2

    @pytest.mark.asyncio
    async def test_sync_record_serializes_empty_tx_hash(self, ledger):
        record = await ledger.append("7", ValueSource.SYNC, tx_hash="")

        data = record.to_dict()
        assert data["tx_hash"] == ""
        assert data["source"] == "sync"
        assert isinstance(data["timestamp"], str)


class TestQueries:
    """Tests for latest, history and last sync lookups."""

    @pytest.mark.asyncio
    async def test_empty_ledger(self, ledger):
        assert await ledger.latest() is None
        assert await ledger.history(limit=10, offset=0) == []
        assert await ledger.last_sync_timestamp() is None

    @pytest.mark.asyncio
    async def test_latest_is_last_appended(self, ledger):
        await ledger.append("1", ValueSource.SYNC)
        await ledger.append("2", ValueSource.BLOCKCHAIN, tx_hash="0x1")

        latest = await ledger.latest()
        assert latest.value == "2"

    @pytest.mark.asyncio
    async def test_history_newest_first_with_paging(self, ledger):
        for value in range(5):
            await ledger.append(str(value), ValueSource.SYNC)

        first_page = await ledger.history(limit=2, offset=0)
        second_page = await ledger.history(limit=2, offset=2)
        past_end = await ledger.history(limit=2, offset=10)

        assert [r.value for r in first_page] == ["4", "3"]
        assert [r.value for r in second_page] == ["2", "1"]
        assert past_end == []

    @pytest.mark.asyncio
    async def test_last_sync_ignores_blockchain_records(self, ledger):
        sync_record = await ledger.append("1", ValueSource.SYNC)
        await ledger.append("2", ValueSource.BLOCKCHAIN, tx_hash="0x1")

        last_sync = await ledger.last_sync_timestamp()

        assert last_sync == sync_record.timestamp.replace(tzinfo=last_sync.tzinfo)

    @pytest.mark.asyncio
    async def test_ping(self, ledger):
        await ledger.ping()


class TestStoreFailures:
    """Store errors surface as StoreWriteError / StoreReadError."""

    @pytest.fixture
    async def broken_ledger(self):
        # No tables created: every statement fails
        engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
        yield ValueLedger(create_session_maker(engine))
        await engine.dispose()

    @pytest.mark.asyncio
    async def test_append_failure(self, broken_ledger):
        with pytest.raises(StoreWriteError, match="failed to store value"):
            await broken_ledger.append("42", ValueSource.SYNC)

    @pytest.mark.asyncio
    async def test_read_failure(self, broken_ledger):
        with pytest.raises(StoreReadError):
            await broken_ledger.latest()
