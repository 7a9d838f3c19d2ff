"""
Nonce Management for the Transaction Submitter.

Handles nonce acquisition with stuck transaction detection.
"""

from loguru import logger

from chainvalue.config.constants import STUCK_NONCE_THRESHOLD
from chainvalue.utils.security import mask_address

from .chain_connector import ChainConnector


class NonceManager:
    """
    Manages transaction nonces for the signer account.

    Features:
    - Pending nonce, so back-to-back writes do not collide while earlier
      transactions are unconfirmed
    - Stuck transaction detection (warning only)

    Serialization of "fetch nonce -> submit" is the caller's job
    (TransactionSubmitter holds a lock around it).
    """

    def __init__(
        self,
        connector: ChainConnector,
        stuck_threshold: int = STUCK_NONCE_THRESHOLD,
    ) -> None:
        """
        Initialize nonce manager.

        Args:
            connector: Chain connector
            stuck_threshold: Pending-minus-confirmed gap that triggers a warning
        """
        self.connector = connector
        self.stuck_threshold = stuck_threshold

    async def get_safe_nonce(self) -> int:
        """
        Get pending nonce with stuck transaction detection.

        Returns:
            Nonce to use for the next transaction

        Raises:
            NonceFetchError: If the node cannot report the nonce
        """
        # Pending nonce includes transactions still in the pool
        pending_nonce = await self.connector.get_transaction_count("pending")
        # Confirmed nonce only counts mined transactions
        confirmed_nonce = await self.connector.get_transaction_count("latest")

        if pending_nonce > confirmed_nonce + self.stuck_threshold:
            logger.warning(
                f"Possible stuck transactions for "
                f"{mask_address(self.connector.account_address)}: "
                f"pending={pending_nonce}, confirmed={confirmed_nonce}, "
                f"stuck={pending_nonce - confirmed_nonce}"
            )

        return pending_nonce
