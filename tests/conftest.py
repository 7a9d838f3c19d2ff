"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for Settings; tests never reach a real node or database
os.environ.setdefault("PRIVATE_KEY", "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80")
os.environ.setdefault("CONTRACT_ADDRESS", "0x5FbDB2315678afecb367f032d93F642f64180aa3")
os.environ.setdefault("RPC_URL", "http://localhost:8545")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FILE", "")

# Add project root and this directory to PYTHONPATH
tests_root = Path(__file__).parent
sys.path.insert(0, str(tests_root.parent))
sys.path.insert(0, str(tests_root))

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from chain_fakes import TEST_CONTRACT_ADDRESS, TEST_PRIVATE_KEY, FakeEth
from chainvalue.config.database import create_session_maker, init_models
from chainvalue.services.blockchain.chain_connector import ChainConnector
from chainvalue.services.contract_value_service import ContractValueService
from chainvalue.services.value_ledger import ValueLedger


@pytest.fixture
def fake_eth():
    """Fresh fake eth module."""
    return FakeEth()


@pytest.fixture
def fake_web3(fake_eth):
    """Fake AsyncWeb3 exposing ``eth`` and a disconnectable provider."""
    return SimpleNamespace(eth=fake_eth, provider=SimpleNamespace(disconnect=AsyncMock()))


@pytest.fixture
def connector(fake_web3):
    """Connector with a configured contract address."""
    return ChainConnector(
        rpc_url="http://localhost:8545",
        private_key=TEST_PRIVATE_KEY,
        contract_address=TEST_CONTRACT_ADDRESS,
        rpc_timeout=1.0,
        web3=fake_web3,
    )


@pytest.fixture
def unconfigured_connector(fake_web3):
    """Connector without a contract address."""
    return ChainConnector(
        rpc_url="http://localhost:8545",
        private_key=TEST_PRIVATE_KEY,
        contract_address="",
        rpc_timeout=1.0,
        web3=fake_web3,
    )


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with the ledger table created."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def ledger(db_engine):
    """Ledger over the in-memory database."""
    return ValueLedger(create_session_maker(db_engine))


@pytest.fixture
async def service(connector, ledger):
    """Fully wired service over the fake chain and in-memory ledger."""
    return ContractValueService(
        connector=connector,
        ledger=ledger,
        receipt_timeout=1.0,
    )
