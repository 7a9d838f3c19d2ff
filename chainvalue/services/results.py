"""
Service result types.

Typed results of each operation; serialization to JSON happens only at the
HTTP boundary through ``to_dict``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from chainvalue.services.blockchain.types import NetworkInfo, Receipt


def _isoformat(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment else None


class WriteOutcome(StrEnum):
    """
    Outcome of a set operation.

    Failure before or during submission is raised as an exception, so a
    returned result is always one of these two.
    """

    SUCCESS = "success"
    PARTIAL = "partial"  # on-chain write succeeded, ledger append failed


@dataclass(frozen=True)
class GetValueResult:
    value: str
    timestamp: datetime
    source: str = "blockchain"

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "source": self.source,
            "timestamp": _isoformat(self.timestamp),
        }


@dataclass(frozen=True)
class SetValueResult:
    """Result of set-then-record."""

    value: str
    tx_hash: str
    outcome: WriteOutcome
    ledger_error: str | None = None
    receipt: Receipt | None = None
    receipt_error: str | None = None

    @property
    def is_partial(self) -> bool:
        return self.outcome is WriteOutcome.PARTIAL

    def to_dict(self) -> dict:
        data = {"value": self.value, "tx_hash": self.tx_hash}
        if self.receipt is not None:
            data["block_number"] = self.receipt.block_number
            data["gas_used"] = self.receipt.gas_used
            data["status"] = self.receipt.to_dict()["status"]
        if self.receipt_error:
            data["receipt_error"] = self.receipt_error
        return data


@dataclass(frozen=True)
class SyncResult:
    """Result of one reconciliation attempt."""

    previous_value: str
    current_value: str
    updated: bool
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "previous_value": self.previous_value,
            "current_value": self.current_value,
            "updated": self.updated,
            "timestamp": _isoformat(self.timestamp),
        }


@dataclass(frozen=True)
class CheckResult:
    """Read-only drift comparison."""

    database_value: str
    blockchain_value: str
    in_sync: bool
    last_sync_time: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "database_value": self.database_value,
            "blockchain_value": self.blockchain_value,
            "in_sync": self.in_sync,
            "last_sync_time": _isoformat(self.last_sync_time) or "",
        }


@dataclass(frozen=True)
class DatabaseStatus:
    status: str  # connected | error
    latest_value: str | None = None
    last_updated: datetime | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.status == "error":
            return {"status": self.status, "error": self.error}
        return {
            "status": self.status,
            "latest_value": self.latest_value,
            "last_updated": _isoformat(self.last_updated),
        }


@dataclass(frozen=True)
class ContractStatus:
    status: str  # configured | not_configured
    address: str = ""

    def to_dict(self) -> dict:
        return {"status": self.status, "address": self.address}


@dataclass(frozen=True)
class StatusSnapshot:
    """Network, ledger and contract configuration at one moment."""

    timestamp: datetime
    network: NetworkInfo
    database: DatabaseStatus
    contract: ContractStatus

    def to_dict(self) -> dict:
        return {
            "timestamp": _isoformat(self.timestamp),
            "network": self.network.to_dict(),
            "database": self.database.to_dict(),
            "contract": self.contract.to_dict(),
        }


@dataclass(frozen=True)
class HealthReport:
    """Liveness of the chain node, database and contract configuration."""

    status: str  # ok | degraded
    timestamp: datetime
    services: dict[str, dict] = field(default_factory=dict)

    @property
    def healthy(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "timestamp": _isoformat(self.timestamp),
            "services": self.services,
        }
