"""
Service wiring.

Builds the service graph from settings. Shared by the HTTP entry point and
the operator CLI.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chainvalue.config.settings import Settings
from chainvalue.services.blockchain.chain_connector import ChainConnector
from chainvalue.services.contract_value_service import ContractValueService
from chainvalue.services.reconciliation_service import ReconciliationService
from chainvalue.services.blockchain.transaction_submitter import TransactionSubmitter
from chainvalue.services.value_ledger import ValueLedger


def build_service(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
) -> ContractValueService:
    """
    Create the connector, ledger and service for one process.

    Args:
        settings: Application settings
        session_factory: Session maker bound to the ledger database

    Returns:
        ContractValueService owning a fresh ChainConnector
    """
    connector = ChainConnector(
        rpc_url=settings.rpc_url,
        private_key=settings.private_key,
        contract_address=settings.contract_address,
        rpc_timeout=settings.rpc_timeout,
    )
    ledger = ValueLedger(session_factory)
    submitter = TransactionSubmitter(connector)
    reconciliation = ReconciliationService(
        connector=connector,
        submitter=submitter,
        ledger=ledger,
        receipt_poll_interval=settings.receipt_poll_interval,
    )
    return ContractValueService(
        connector=connector,
        ledger=ledger,
        submitter=submitter,
        receipt_timeout=settings.receipt_timeout,
        reconciliation=reconciliation,
    )
