"""
Contract Value Service - Main Service Class.

Orchestrates chain access, the ledger and reconciliation behind the
operations exposed over HTTP and the CLI.
"""

from datetime import UTC, datetime

from loguru import logger

from chainvalue.config.constants import RECEIPT_TIMEOUT
from chainvalue.models.contract_value import ContractValue
from chainvalue.services.blockchain.chain_connector import ChainConnector
from chainvalue.services.blockchain.transaction_submitter import TransactionSubmitter
from chainvalue.services.blockchain.types import Receipt
from chainvalue.services.reconciliation_service import ReconciliationService
from chainvalue.services.results import (
    CheckResult,
    ContractStatus,
    DatabaseStatus,
    GetValueResult,
    HealthReport,
    SetValueResult,
    StatusSnapshot,
    SyncResult,
)
from chainvalue.services.value_ledger import ValueLedger
from chainvalue.utils.exceptions import ChainError, StoreError
from chainvalue.utils.validation import normalize_paging


class ContractValueService:
    """
    Main contract value service interface.

    Orchestrates:
    - On-chain reads (get, network info)
    - Writes with ledger recording (set)
    - Reconciliation (sync, check)
    - Ledger queries (history)
    - Status and health snapshots
    """

    def __init__(
        self,
        connector: ChainConnector,
        ledger: ValueLedger,
        submitter: TransactionSubmitter | None = None,
        receipt_timeout: float = RECEIPT_TIMEOUT,
        reconciliation: ReconciliationService | None = None,
    ) -> None:
        """
        Initialize service.

        Args:
            connector: Chain connector (owned; closed by ``close``)
            ledger: Value ledger
            submitter: Transaction submitter (created from connector if None)
            receipt_timeout: Deadline used when a caller asks to wait for a receipt
            reconciliation: Reconciliation service (created if None)
        """
        self.connector = connector
        self.ledger = ledger
        self.submitter = submitter or TransactionSubmitter(connector)
        self.receipt_timeout = receipt_timeout
        self.reconciliation = reconciliation or ReconciliationService(
            connector=connector,
            submitter=self.submitter,
            ledger=ledger,
        )

    async def get_value(self) -> GetValueResult:
        """Read the current on-chain value."""
        value = await self.connector.read_value()
        return GetValueResult(value=str(value), timestamp=datetime.now(UTC))

    async def set_value(self, value: int, wait: bool = False) -> SetValueResult:
        """
        Write value on-chain and record it.

        Args:
            value: New value
            wait: Wait up to ``receipt_timeout`` for the receipt before recording
        """
        return await self.reconciliation.set_and_record(
            value, wait_timeout=self.receipt_timeout if wait else None
        )

    async def sync(self) -> SyncResult:
        """Reconcile the ledger with the chain."""
        return await self.reconciliation.sync()

    async def check(self) -> CheckResult:
        """Compare the ledger with the chain without writing."""
        return await self.reconciliation.check()

    async def history(
        self, limit: object = None, offset: object = None
    ) -> tuple[list[ContractValue], int, int]:
        """
        Get a page of ledger records, newest first.

        Args:
            limit: Raw page size; normalized to [1, 100] (default 10)
            offset: Raw offset; negative values become 0

        Returns:
            Tuple of (records, limit, offset) with the normalized paging
        """
        limit, offset = normalize_paging(limit, offset)
        records = await self.ledger.history(limit=limit, offset=offset)
        return records, limit, offset

    async def get_receipt(self, tx_hash: str) -> Receipt:
        """Look up a transaction receipt once."""
        return await self.submitter.get_receipt(tx_hash)

    def contract_status(self) -> ContractStatus:
        if self.connector.is_configured:
            return ContractStatus(status="configured", address=self.connector.contract_address)
        return ContractStatus(status="not_configured", address="")

    async def status(self) -> StatusSnapshot:
        """
        Snapshot network, ledger and contract configuration.

        Ledger failures are reported inside the snapshot; chain failures
        fail the whole call.

        Raises:
            ChainCallError: If network info cannot be fetched
        """
        network = await self.connector.network_info()

        try:
            latest = await self.ledger.latest()
        except StoreError as e:
            database = DatabaseStatus(status="error", error=str(e))
        else:
            database = DatabaseStatus(
                status="connected",
                latest_value=latest.value if latest else None,
                last_updated=latest.timestamp if latest else None,
            )

        return StatusSnapshot(
            timestamp=datetime.now(UTC),
            network=network,
            database=database,
            contract=self.contract_status(),
        )

    async def health(self) -> HealthReport:
        """
        Probe the chain node and the database.

        Never raises: each failing dependency marks the report as degraded.
        """
        services: dict[str, dict] = {}
        status = "ok"

        try:
            network = await self.connector.network_info()
            services["chain"] = {
                "status": "connected",
                "block_number": str(network.block_number),
                "chain_id": str(network.chain_id),
            }
        except ChainError as e:
            logger.warning(f"Health check: chain unavailable: {e}")
            services["chain"] = {"status": "error", "error": str(e)}
            status = "degraded"

        try:
            await self.ledger.ping()
            services["database"] = {"status": "connected"}
        except StoreError as e:
            logger.warning(f"Health check: database unavailable: {e}")
            services["database"] = {"status": "error", "error": str(e)}
            status = "degraded"

        contract = self.contract_status()
        services["contract"] = contract.to_dict()
        if contract.status == "not_configured":
            services["contract"]["message"] = "Contract address not set in environment"

        return HealthReport(status=status, timestamp=datetime.now(UTC), services=services)

    async def close(self) -> None:
        """Release the chain connection."""
        await self.connector.close()
