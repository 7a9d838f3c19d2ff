"""
chainvalue.

Async HTTP service that reads and writes a single uint256 held by a
SimpleStorage contract and keeps an append-only ledger of observed values.
"""

__version__ = "1.0.0"
