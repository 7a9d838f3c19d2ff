"""
Input validation and normalization helpers.
"""

import re
from typing import Any

from chainvalue.config.constants import HISTORY_DEFAULT_LIMIT, HISTORY_MAX_LIMIT

TX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


def validate_tx_hash(tx_hash: str) -> bool:
    """
    Validate transaction hash format.

    Args:
        tx_hash: Hash string (0x followed by 64 hex characters)

    Returns:
        True if the format is valid
    """
    return bool(tx_hash) and bool(TX_HASH_PATTERN.match(tx_hash))


def _parse_int(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None


def normalize_paging(limit: Any = None, offset: Any = None) -> tuple[int, int]:
    """
    Normalize history paging parameters.

    Out-of-range or unparsable values are replaced rather than rejected:
    a limit outside [1, HISTORY_MAX_LIMIT] becomes HISTORY_DEFAULT_LIMIT and a
    negative offset becomes 0.

    Args:
        limit: Requested page size (int or string)
        offset: Requested number of records to skip (int or string)

    Returns:
        Tuple of (limit, offset)

    Examples:
        >>> normalize_paging("5", "0")
        (5, 0)
        >>> normalize_paging(500, -3)
        (10, 0)
    """
    parsed_limit = _parse_int(limit)
    if parsed_limit is None or not 1 <= parsed_limit <= HISTORY_MAX_LIMIT:
        parsed_limit = HISTORY_DEFAULT_LIMIT

    parsed_offset = _parse_int(offset)
    if parsed_offset is None or parsed_offset < 0:
        parsed_offset = 0

    return parsed_limit, parsed_offset
