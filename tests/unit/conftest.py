"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Transaction submitter over the fake chain
- Reconciliation service over the fake chain and in-memory ledger
"""

import pytest

from chainvalue.services.blockchain.transaction_submitter import TransactionSubmitter
from chainvalue.services.reconciliation_service import ReconciliationService


@pytest.fixture
def submitter(connector):
    """
    Transaction submitter bound to the configured connector.

    Returns:
        TransactionSubmitter: Submitter with its own nonce lock
    """
    return TransactionSubmitter(connector)


@pytest.fixture
def reconciliation(connector, submitter, ledger):
    """
    Reconciliation service with a short receipt poll interval.

    Returns:
        ReconciliationService: Service under test
    """
    return ReconciliationService(
        connector=connector,
        submitter=submitter,
        ledger=ledger,
        receipt_poll_interval=0.01,
    )
