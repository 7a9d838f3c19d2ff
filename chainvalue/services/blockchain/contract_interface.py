"""
SimpleStorage contract interface.

Encoding and decoding of the two contract methods:
- get() -> uint256
- set(uint256)
"""

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_utils import function_signature_to_4byte_selector

from chainvalue.config.constants import UINT256_MAX
from chainvalue.utils.exceptions import ChainCallError, EncodingError

GET_SELECTOR = function_signature_to_4byte_selector("get()")
SET_SELECTOR = function_signature_to_4byte_selector("set(uint256)")


def encode_get_call() -> bytes:
    """Encode calldata for get()."""
    return GET_SELECTOR


def encode_set_call(value: int) -> bytes:
    """
    Encode calldata for set(uint256).

    Args:
        value: Non-negative integer below 2**256

    Returns:
        Selector followed by one 32-byte word

    Raises:
        EncodingError: If value is not a uint256
    """
    # bool is an int subclass but never a valid argument here
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(
            f"failed to pack set method: expected integer, got {type(value).__name__}"
        )
    if not 0 <= value <= UINT256_MAX:
        raise EncodingError(f"failed to pack set method: {value} is outside uint256 range")

    try:
        return SET_SELECTOR + encode(["uint256"], [value])
    except AbiEncodingError as e:
        raise EncodingError(f"failed to pack set method: {e}") from e


def decode_get_result(raw: bytes) -> int:
    """
    Decode the return data of get().

    Args:
        raw: Raw eth_call result

    Returns:
        Stored value

    Raises:
        ChainCallError: If the data is not a single uint256 word
    """
    if not raw:
        # eth_call against an address without code returns empty data
        raise ChainCallError("failed to unpack result: empty response from contract")
    try:
        (value,) = decode(["uint256"], bytes(raw))
    except DecodingError as e:
        raise ChainCallError(f"failed to unpack result: {e}") from e
    return value
