"""
Application constants.

Centralized constants for the application.
"""

# ========================================================================
# BLOCKCHAIN CONSTANTS
# ========================================================================

# Per-request RPC deadline (seconds); bounds a single call, never retried
BLOCKCHAIN_TIMEOUT = 30.0

# Confirmation waiting, only applied when a caller asks to wait
RECEIPT_TIMEOUT = 120.0
RECEIPT_POLL_INTERVAL = 1.0

# Pending nonce ahead of the confirmed nonce by more than this looks stuck
STUCK_NONCE_THRESHOLD = 5

# Largest value representable by a single ABI word
UINT256_MAX = 2**256 - 1

# ========================================================================
# LEDGER CONSTANTS
# ========================================================================

HISTORY_DEFAULT_LIMIT = 10
HISTORY_MAX_LIMIT = 100

# ========================================================================
# API CONSTANTS
# ========================================================================

API_PREFIX = "/api"
API_TITLE = "Chain Value API"
