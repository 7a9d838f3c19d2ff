"""
Blockchain result types.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class NetworkInfo:
    """Snapshot of the connected network and signer account."""

    chain_id: int
    block_number: int
    account_address: str
    account_balance: int  # wei

    def to_dict(self) -> dict:
        return {
            "chain_id": str(self.chain_id),
            "block_number": self.block_number,
            "account": self.account_address,
            "balance": str(self.account_balance),
        }


@dataclass(frozen=True)
class TransactionHandle:
    """Submitted (not necessarily mined) transaction."""

    tx_hash: str
    nonce: int
    gas_limit: int
    gas_price: int
    chain_id: int


@dataclass(frozen=True)
class Receipt:
    """Proof of inclusion for a transaction."""

    tx_hash: str
    block_number: int
    gas_used: int
    status: int

    @property
    def succeeded(self) -> bool:
        """Check if the transaction executed without reverting."""
        return self.status == 1

    def to_dict(self) -> dict:
        return {
            "tx_hash": self.tx_hash,
            "block_number": self.block_number,
            "gas_used": self.gas_used,
            "status": "confirmed" if self.succeeded else "failed",
        }
