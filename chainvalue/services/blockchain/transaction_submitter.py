"""
Transaction Submitter.

Builds, signs and submits set(uint256) transactions for the single signer
account. Each step fails with its own error kind; nothing is retried.
"""

import asyncio

from loguru import logger

from chainvalue.config.constants import RECEIPT_POLL_INTERVAL
from chainvalue.utils.exceptions import SigningError
from chainvalue.utils.security import mask_address, mask_tx_hash

from .chain_connector import ChainConnector
from .contract_interface import encode_set_call
from .nonce_manager import NonceManager
from .types import Receipt, TransactionHandle


class TransactionSubmitter:
    """
    Submits state-changing calls to the contract.

    Features:
    - Per-signer lock around nonce acquisition and submission
    - Gas estimation as pre-flight revert check
    - Legacy (gasPrice) EIP-155 transactions
    - Receipt lookup and caller-bounded confirmation waiting

    A nonce fetched for a transaction that then fails to sign or submit is
    not reused; the next call fetches a fresh one. The lock only serializes
    writers inside this process.
    """

    def __init__(
        self,
        connector: ChainConnector,
        nonce_manager: NonceManager | None = None,
        nonce_lock: asyncio.Lock | None = None,
    ) -> None:
        """
        Initialize transaction submitter.

        Args:
            connector: Chain connector holding the signing key
            nonce_manager: Nonce manager (created from connector if None)
            nonce_lock: Lock shared by all writers of this signer
        """
        self.connector = connector
        self.nonce_manager = nonce_manager or NonceManager(connector)
        self._nonce_lock = nonce_lock or asyncio.Lock()

    async def submit_set(
        self,
        value: int,
        contract_address: str | None = None,
    ) -> TransactionHandle:
        """
        Submit set(value) without waiting for confirmation.

        Args:
            value: New stored value
            contract_address: Target contract; the configured one when None

        Returns:
            Handle of the submitted transaction

        Raises:
            ConfigError: No contract address (checked before any RPC call)
            NonceFetchError: Nonce lookup failed
            FeeFetchError: Gas price lookup failed
            EncodingError: Value is not a uint256
            GasEstimationError: Estimation failed or the call would revert
            SigningError: Chain id lookup or signing failed
            SubmissionError: Node rejected the transaction
        """
        address = self.connector.require_contract_address(contract_address)

        # Lock nonce acquisition and transaction sending to prevent nonce races
        async with self._nonce_lock:
            nonce = await self.nonce_manager.get_safe_nonce()
            logger.debug(
                f"Acquired nonce {nonce} for {mask_address(self.connector.account_address)}"
            )

            gas_price = await self.connector.get_gas_price()

            payload = encode_set_call(value)

            gas_limit = await self.connector.estimate_gas(address, payload)

            chain_id = await self.connector.get_chain_id(error_cls=SigningError)
            transaction = {
                "nonce": nonce,
                "to": address,
                "value": 0,
                "gas": gas_limit,
                "gasPrice": gas_price,
                "data": payload,
                "chainId": chain_id,
            }
            signed_tx = self.connector.sign_transaction(transaction)

            tx_hash = await self.connector.send_raw_transaction(signed_tx.raw_transaction)

        logger.info(
            f"Transaction sent! Hash: {tx_hash}\n"
            f"  set({value}) on {mask_address(address)}\n"
            f"  Nonce: {nonce}, Gas: {gas_limit}, Gas Price: {gas_price} wei"
        )

        return TransactionHandle(
            tx_hash=tx_hash,
            nonce=nonce,
            gas_limit=gas_limit,
            gas_price=gas_price,
            chain_id=chain_id,
        )

    async def get_receipt(self, tx_hash: str) -> Receipt:
        """
        Look up the receipt of a transaction once.

        Raises:
            ReceiptError: If the node cannot resolve the hash
        """
        return await self.connector.get_receipt(tx_hash)

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float,
        poll_latency: float = RECEIPT_POLL_INTERVAL,
    ) -> Receipt:
        """
        Block until the transaction is mined or the caller's deadline elapses.

        Raises:
            ReceiptError: If the deadline elapses or the lookup fails
        """
        logger.info(f"Waiting up to {timeout}s for {mask_tx_hash(tx_hash)}")
        receipt = await self.connector.wait_for_receipt(
            tx_hash, timeout=timeout, poll_latency=poll_latency
        )
        if not receipt.succeeded:
            logger.warning(f"Transaction {mask_tx_hash(tx_hash)} reverted")
        return receipt
