"""
Contract Value model.

Append-only ledger of values observed in the SimpleStorage contract.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from chainvalue.models.base import Base
from chainvalue.models.enums import ValueSource


class ContractValue(Base):
    """
    One observation of the on-chain value.

    Rows are only ever inserted:
    - source="blockchain" after a local set (tx_hash present)
    - source="sync" after drift was detected (tx_hash empty)
    """

    __tablename__ = "contract_values"
    __table_args__ = (
        Index("idx_contract_values_timestamp", "timestamp"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Canonical decimal string of the uint256
    value: Mapped[str] = mapped_column(Text, nullable=False)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
    )

    tx_hash: Mapped[str | None] = mapped_column(Text, nullable=True)

    source: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ValueSource.SYNC.value
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ContractValue(id={self.id}, value={self.value}, "
            f"source={self.source}, timestamp={self.timestamp})>"
        )

    def to_dict(self) -> dict:
        """Serialize for API responses."""
        return {
            "id": self.id,
            "value": self.value,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "tx_hash": self.tx_hash or "",
            "source": self.source,
        }
