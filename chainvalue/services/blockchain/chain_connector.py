"""
Chain Connector.

Owns the node connection and the signing key for the lifetime of the
process. Created once at startup, passed to every component that needs chain
access, closed once at shutdown.
"""

from typing import Any

from eth_account import Account
from eth_account.datastructures import SignedTransaction
from loguru import logger
from web3 import AsyncWeb3
from web3.exceptions import TimeExhausted, TransactionNotFound

from chainvalue.config.constants import BLOCKCHAIN_TIMEOUT, RECEIPT_POLL_INTERVAL
from chainvalue.utils.exceptions import (
    ChainCallError,
    ChainError,
    ConfigError,
    FeeFetchError,
    GasEstimationError,
    NonceFetchError,
    ReceiptError,
    SigningError,
    SubmissionError,
)
from chainvalue.utils.security import mask_address, mask_tx_hash

from .contract_interface import decode_get_result, encode_get_call
from .rpc_wrapper import guarded_rpc
from .types import NetworkInfo, Receipt


class ChainConnector:
    """
    Connection to a blockchain node plus the signer account.

    Features:
    - Contract address guard (rejects before any RPC call)
    - get() read and network info
    - RPC primitives for the transaction lifecycle, each failing with its
      own error kind
    """

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        contract_address: str = "",
        rpc_timeout: float = BLOCKCHAIN_TIMEOUT,
        web3: AsyncWeb3 | None = None,
    ) -> None:
        """
        Initialize connector.

        Args:
            rpc_url: Node HTTP RPC endpoint
            private_key: Signer key (hex, 0x optional)
            contract_address: Deployed contract address, empty if not configured
            rpc_timeout: Deadline for each RPC call in seconds
            web3: Pre-built AsyncWeb3 instance (tests)

        Raises:
            ConfigError: If the private key cannot be parsed
        """
        self.rpc_url = rpc_url
        self.rpc_timeout = rpc_timeout
        self.web3 = web3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        self._contract_address = (contract_address or "").strip()

        # SECURITY: keep only the key and the derived address, never the Account
        try:
            self._account_address = Account.from_key(private_key).address
        except (ValueError, TypeError) as e:
            raise ConfigError("failed to parse private key") from e
        self._private_key = private_key

        logger.info(
            "ChainConnector initialized\n"
            f"  RPC: {rpc_url}\n"
            f"  Account: {self._account_address}\n"
            f"  Contract: {self._contract_address or 'not configured'}"
        )

    @property
    def account_address(self) -> str:
        """Checksummed signer address."""
        return self._account_address

    @property
    def contract_address(self) -> str:
        """Configured contract address, empty if not configured."""
        return self._contract_address

    @property
    def is_configured(self) -> bool:
        """Check if a contract address is configured."""
        return bool(self._contract_address)

    def require_contract_address(self, address: str | None = None) -> str:
        """
        Resolve the contract address or fail without touching the chain.

        Args:
            address: Explicit address; the configured one is used when None

        Returns:
            Checksummed address

        Raises:
            ConfigError: If the address is empty or malformed
        """
        candidate = self._contract_address if address is None else address.strip()
        if not candidate:
            raise ConfigError("contract address not set")
        try:
            return AsyncWeb3.to_checksum_address(candidate)
        except ValueError as e:
            raise ConfigError(f"invalid contract address: {candidate}") from e

    async def _rpc(self, awaitable: Any, error_cls: type[ChainError], operation_name: str) -> Any:
        return await guarded_rpc(
            awaitable, error_cls, operation_name, timeout=self.rpc_timeout
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def call(self, address: str, payload: bytes) -> bytes:
        """
        Execute eth_call against the latest block.

        Raises:
            ChainCallError: If the node call fails
        """
        return await self._rpc(
            self.web3.eth.call({"to": address, "data": payload}),
            ChainCallError,
            "call contract",
        )

    async def read_value(self, contract_address: str | None = None) -> int:
        """
        Read the stored value via get().

        Args:
            contract_address: Contract to read; the configured one when None

        Returns:
            Stored uint256

        Raises:
            ConfigError: If no contract address is available
            ChainCallError: If the call fails or the result cannot be decoded
        """
        address = self.require_contract_address(contract_address)
        raw = await self.call(address, encode_get_call())
        value = decode_get_result(raw)
        logger.debug(f"Read value {value} from {mask_address(address)}")
        return value

    async def get_chain_id(self, error_cls: type[ChainError] = ChainCallError) -> int:
        """Get the network chain id."""
        return await self._rpc(self.web3.eth.chain_id, error_cls, "get chain ID")

    async def network_info(self) -> NetworkInfo:
        """
        Get chain id, block height and signer balance.

        Raises:
            ChainCallError: If any underlying query fails
        """
        chain_id = await self.get_chain_id()
        block_number = await self._rpc(
            self.web3.eth.block_number, ChainCallError, "get block number"
        )
        balance = await self._rpc(
            self.web3.eth.get_balance(self._account_address),
            ChainCallError,
            "get balance",
        )
        return NetworkInfo(
            chain_id=int(chain_id),
            block_number=int(block_number),
            account_address=self._account_address,
            account_balance=int(balance),
        )

    # ------------------------------------------------------------------
    # Transaction lifecycle primitives
    # ------------------------------------------------------------------

    async def get_transaction_count(self, block_identifier: str = "pending") -> int:
        """
        Get signer nonce at the given block ("pending" or "latest").

        Raises:
            NonceFetchError: If the query fails
        """
        return await self._rpc(
            self.web3.eth.get_transaction_count(self._account_address, block_identifier),
            NonceFetchError,
            "get nonce",
        )

    async def get_gas_price(self) -> int:
        """
        Get the node's gas price suggestion in wei.

        Raises:
            FeeFetchError: If the query fails
        """
        return await self._rpc(self.web3.eth.gas_price, FeeFetchError, "get gas price")

    async def estimate_gas(self, to: str, payload: bytes) -> int:
        """
        Estimate gas for a call from the signer.

        A call that would revert fails here.

        Raises:
            GasEstimationError: If estimation fails
        """
        return await self._rpc(
            self.web3.eth.estimate_gas(
                {"from": self._account_address, "to": to, "data": payload}
            ),
            GasEstimationError,
            "estimate gas",
        )

    def sign_transaction(self, transaction: dict[str, Any]) -> SignedTransaction:
        """
        Sign a transaction with the held key.

        Raises:
            SigningError: If signing fails
        """
        # SECURITY: Account object lives only for the duration of signing
        try:
            return Account.from_key(self._private_key).sign_transaction(transaction)
        except Exception as e:
            logger.error(f"Failed to sign transaction: {e}")
            raise SigningError(f"failed to sign transaction: {e}") from e

    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        """
        Submit a signed transaction.

        Returns:
            Transaction hash (0x-prefixed hex)

        Raises:
            SubmissionError: If the node rejects the transaction
        """
        tx_hash = await self._rpc(
            self.web3.eth.send_raw_transaction(raw_transaction),
            SubmissionError,
            "send transaction",
        )
        return AsyncWeb3.to_hex(tx_hash)

    async def get_receipt(self, tx_hash: str) -> Receipt:
        """
        Look up a transaction receipt once.

        Raises:
            ReceiptError: If the node cannot resolve the hash (including
                transactions that are not mined yet)
        """
        try:
            receipt = await self._rpc(
                self.web3.eth.get_transaction_receipt(tx_hash),
                ReceiptError,
                "get transaction receipt",
            )
        except ReceiptError as e:
            if isinstance(e.__cause__, TransactionNotFound):
                logger.info(f"Receipt for {mask_tx_hash(tx_hash)} not available yet")
            raise
        return self._to_receipt(tx_hash, receipt)

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float,
        poll_latency: float = RECEIPT_POLL_INTERVAL,
    ) -> Receipt:
        """
        Poll until the transaction is included or the deadline elapses.

        Args:
            tx_hash: Transaction hash
            timeout: Caller-imposed deadline in seconds
            poll_latency: Delay between polls in seconds

        Raises:
            ReceiptError: If the deadline elapses or polling fails
        """
        try:
            receipt = await self.web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=timeout, poll_latency=poll_latency
            )
        except TimeExhausted as e:
            logger.warning(
                f"Transaction {mask_tx_hash(tx_hash)} not mined after {timeout}s"
            )
            raise ReceiptError(
                f"failed to get transaction receipt: not mined after {timeout}s"
            ) from e
        except Exception as e:
            logger.error(f"Error waiting for receipt of {mask_tx_hash(tx_hash)}: {e}")
            raise ReceiptError(f"failed to get transaction receipt: {e}") from e
        return self._to_receipt(tx_hash, receipt)

    @staticmethod
    def _to_receipt(tx_hash: str, receipt: Any) -> Receipt:
        if not receipt:
            raise ReceiptError("failed to get transaction receipt: empty receipt")
        return Receipt(
            tx_hash=tx_hash,
            block_number=int(receipt["blockNumber"]),
            gas_used=int(receipt["gasUsed"]),
            status=int(receipt["status"]),
        )

    async def close(self) -> None:
        """Close the provider connection."""
        disconnect = getattr(self.web3.provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()
        logger.info("ChainConnector closed")
