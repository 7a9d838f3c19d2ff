"""
Reconciliation Service.

Keeps the ledger consistent with the authoritative on-chain value.

Per attempt:
    Start -> ReadLedger -> ReadChain -> NoChange
                                     -> Drift -> Append -> Appended
A failing read ends the attempt before anything is written.
"""

from datetime import UTC, datetime

from loguru import logger

from chainvalue.config.constants import RECEIPT_POLL_INTERVAL
from chainvalue.models.enums import ValueSource
from chainvalue.services.blockchain.chain_connector import ChainConnector
from chainvalue.services.blockchain.transaction_submitter import TransactionSubmitter
from chainvalue.services.results import (
    CheckResult,
    SetValueResult,
    SyncResult,
    WriteOutcome,
)
from chainvalue.services.value_ledger import ValueLedger
from chainvalue.utils.exceptions import ReceiptError, StoreWriteError, SubmissionError
from chainvalue.utils.security import mask_tx_hash


class ReconciliationService:
    """
    Compares on-chain truth with the ledger and appends when needed.

    Features:
    - sync: append a "sync" record on drift, idempotent otherwise
    - check: side-effect-free drift report
    - set_and_record: on-chain write followed by a "blockchain" record,
      reporting partial success when only the write succeeded
    """

    def __init__(
        self,
        connector: ChainConnector,
        submitter: TransactionSubmitter,
        ledger: ValueLedger,
        receipt_poll_interval: float = RECEIPT_POLL_INTERVAL,
    ) -> None:
        """
        Initialize reconciliation service.

        Args:
            connector: Chain connector for reads
            submitter: Transaction submitter for writes
            ledger: Value ledger
            receipt_poll_interval: Poll delay when a caller waits for a receipt
        """
        self.connector = connector
        self.submitter = submitter
        self.ledger = ledger
        self.receipt_poll_interval = receipt_poll_interval

    async def sync(self) -> SyncResult:
        """
        Record the on-chain value if it differs from the latest ledger value.

        An empty ledger counts as previous value "" so the first sync always
        appends.

        Raises:
            ConfigError: No contract address configured
            StoreReadError: Ledger read failed
            ChainCallError: Chain read failed
            StoreWriteError: Drift detected but the record could not be stored
        """
        self.connector.require_contract_address()

        latest = await self.ledger.latest()
        previous_value = latest.value if latest else ""

        current_value = str(await self.connector.read_value())

        updated = previous_value != current_value
        if updated:
            logger.info(
                f"Drift detected: ledger={previous_value or '<empty>'}, chain={current_value}"
            )
            await self.ledger.append(current_value, ValueSource.SYNC, tx_hash="")
        else:
            logger.debug(f"Ledger in sync at {current_value}")

        return SyncResult(
            previous_value=previous_value,
            current_value=current_value,
            updated=updated,
            timestamp=datetime.now(UTC),
        )

    async def check(self) -> CheckResult:
        """
        Compare latest ledger value with the chain without writing.

        Raises:
            ConfigError: No contract address configured
            StoreReadError: Ledger read failed
            ChainCallError: Chain read failed
        """
        self.connector.require_contract_address()

        latest = await self.ledger.latest()
        database_value = latest.value if latest else ""

        blockchain_value = str(await self.connector.read_value())

        last_sync_time = await self.ledger.last_sync_timestamp()

        return CheckResult(
            database_value=database_value,
            blockchain_value=blockchain_value,
            in_sync=database_value == blockchain_value,
            last_sync_time=last_sync_time,
        )

    async def set_and_record(
        self,
        value: int,
        wait_timeout: float | None = None,
    ) -> SetValueResult:
        """
        Write value on-chain, then append a "blockchain" ledger record.

        Args:
            value: New value
            wait_timeout: When given, wait up to this many seconds for the
                receipt before recording

        Returns:
            SUCCESS result, or PARTIAL when the ledger append failed after
            the transaction was submitted

        Raises:
            ConfigError, EncodingError, NonceFetchError, FeeFetchError,
            GasEstimationError, SigningError, SubmissionError: Nothing was
                written on-chain or in the ledger
            SubmissionError: The awaited receipt shows the call reverted
        """
        handle = await self.submitter.submit_set(value)
        value_str = str(value)

        receipt = None
        receipt_error = None
        if wait_timeout:
            try:
                receipt = await self.submitter.wait_for_receipt(
                    handle.tx_hash,
                    timeout=wait_timeout,
                    poll_latency=self.receipt_poll_interval,
                )
            except ReceiptError as e:
                # Transaction is out of our hands; record it and let sync correct drift
                logger.warning(
                    f"Recording {mask_tx_hash(handle.tx_hash)} without receipt: {e}"
                )
                receipt_error = str(e)

            if receipt is not None and not receipt.succeeded:
                raise SubmissionError(
                    f"transaction {handle.tx_hash} reverted in block {receipt.block_number}"
                )

        try:
            await self.ledger.append(value_str, ValueSource.BLOCKCHAIN, tx_hash=handle.tx_hash)
        except StoreWriteError as e:
            logger.error(
                f"Value {value_str} set on chain (tx {handle.tx_hash}) "
                f"but ledger append failed: {e}"
            )
            return SetValueResult(
                value=value_str,
                tx_hash=handle.tx_hash,
                outcome=WriteOutcome.PARTIAL,
                ledger_error=str(e),
                receipt=receipt,
                receipt_error=receipt_error,
            )

        return SetValueResult(
            value=value_str,
            tx_hash=handle.tx_hash,
            outcome=WriteOutcome.SUCCESS,
            receipt=receipt,
            receipt_error=receipt_error,
        )
