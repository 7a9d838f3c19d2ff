"""
Model enums.
"""

from enum import StrEnum


class ValueSource(StrEnum):
    """Provenance of a ledger record."""

    BLOCKCHAIN = "blockchain"  # written after a local set
    SYNC = "sync"  # written after detecting drift
