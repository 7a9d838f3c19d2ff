"""
Blockchain Module.

Module structure:
- contract_interface.py - SimpleStorage ABI and call encoding/decoding
- rpc_wrapper.py - Deadline and error wrapping for RPC calls
- chain_connector.py - Node connection, signing key and RPC primitives
- nonce_manager.py - Pending nonce acquisition with stuck transaction detection
- transaction_submitter.py - Build, sign and submit set(uint256) transactions
- types.py - Result types (NetworkInfo, TransactionHandle, Receipt)
"""

from .chain_connector import ChainConnector
from .nonce_manager import NonceManager
from .transaction_submitter import TransactionSubmitter
from .types import NetworkInfo, Receipt, TransactionHandle

__all__ = [
    "ChainConnector",
    "NetworkInfo",
    "NonceManager",
    "Receipt",
    "TransactionHandle",
    "TransactionSubmitter",
]
