"""
Confirmation Tracker
Polls the node until a submitted transaction reaches the required confirmation depth
Flags silently dropped transactions for resubmission on networks that opt in
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
from loguru import logger

from .exceptions import (
    ConfirmationDeadlineError,
    ConfirmationError,
    NodeQueryError,
    RetryableNodeError,
    TransactionStalledError,
)
from .node_client import NodeClient
from .transaction import PendingTransaction


class TrackerState(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DROPPED = "dropped"


@dataclass(frozen=True)
class ConfirmationPolicy:
    """
    Polling strategy for one network

    max_rounds: Receipt-less polls tolerated before the transaction counts as stalled
                (None polls forever)
    resubmit_on_timeout: Report a stalled transaction as dropped instead of raising
    poll_interval: Seconds between polls
    max_node_failures: Consecutive retryable node errors tolerated
    """

    max_rounds: Optional[int] = 120
    resubmit_on_timeout: bool = False
    poll_interval: float = 1.0
    max_node_failures: int = 5

    def __post_init__(self):
        if self.max_rounds is not None and self.max_rounds < 0:
            raise ValueError(f"max_rounds must be >= 0, got {self.max_rounds}")
        if self.poll_interval < 0:
            raise ValueError(f"poll_interval must be >= 0, got {self.poll_interval}")
        if self.max_node_failures < 0:
            raise ValueError(f"max_node_failures must be >= 0, got {self.max_node_failures}")


DEFAULT_POLICY = ConfirmationPolicy()

# Kovan drops transactions from the mempool without notice
NETWORK_POLICIES: Dict[str, ConfirmationPolicy] = {
    'kovan': ConfirmationPolicy(resubmit_on_timeout=True),
}


def get_confirmation_policy(
    network: str,
    overrides: Optional[Dict[str, ConfirmationPolicy]] = None
) -> ConfirmationPolicy:
    """
    Select the polling policy for a network

    Args:
        network: Network name from the deployment configuration
        overrides: Extra network -> policy entries, checked first

    Returns:
        ConfirmationPolicy for the network, or the default policy
    """
    if overrides and network in overrides:
        return overrides[network]
    return NETWORK_POLICIES.get(network, DEFAULT_POLICY)


@dataclass(frozen=True)
class TrackingResult:
    state: TrackerState
    transaction: PendingTransaction
    rounds: int


class ConfirmationTracker:
    """
    Confirmation state machine for submitted transactions

    PENDING -> CONFIRMED once the receipt is deep enough
    PENDING -> DROPPED once the round bound is exceeded on a resubmitting network
    """

    def __init__(self, node: NodeClient, max_concurrent: int = 4):
        """
        Initialize Confirmation Tracker

        Args:
            node: Node client used for receipt lookups
            max_concurrent: Maximum number of poll loops running at once
        """
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")

        self.node = node
        self.max_concurrent = max_concurrent
        self._slots = asyncio.Semaphore(max_concurrent)

    async def track(
        self,
        transaction: PendingTransaction,
        required_confirmations: int,
        policy: ConfirmationPolicy = DEFAULT_POLICY,
        deadline: Optional[float] = None
    ) -> TrackingResult:
        """
        Wait until a transaction is confirmed or dropped

        Args:
            transaction: Transaction to track
            required_confirmations: Minimum confirmation count before success
            policy: Polling strategy for the active network
            deadline: Seconds before giving up (None waits as long as the policy allows)

        Returns:
            TrackingResult in state CONFIRMED or DROPPED

        Raises:
            TransactionStalledError: Round bound exceeded and the policy does not resubmit
            ConfirmationDeadlineError: Deadline expired
            NodeQueryError: Node failed fatally or kept failing
        """
        if required_confirmations < 0:
            raise ValueError(f"required_confirmations must be >= 0, got {required_confirmations}")

        if deadline is None:
            return await self._poll_in_slot(transaction, required_confirmations, policy)

        # The deadline covers waiting for a free slot as well as polling
        try:
            return await asyncio.wait_for(
                self._poll_in_slot(transaction, required_confirmations, policy),
                timeout=deadline
            )
        except ConfirmationError:
            # TransactionStalledError is also a TimeoutError
            raise
        except asyncio.TimeoutError as e:
            raise ConfirmationDeadlineError(
                f"{transaction.hash_hex} not confirmed within {deadline}s"
            ) from e

    async def _poll_in_slot(
        self,
        transaction: PendingTransaction,
        required_confirmations: int,
        policy: ConfirmationPolicy
    ) -> TrackingResult:
        async with self._slots:
            return await self._poll(transaction, required_confirmations, policy)

    async def _poll(
        self,
        transaction: PendingTransaction,
        required_confirmations: int,
        policy: ConfirmationPolicy
    ) -> TrackingResult:
        rounds = 0
        failures = 0

        while True:
            try:
                receipt = self.node.get_receipt(transaction.hash)
            except RetryableNodeError as e:
                failures += 1
                if failures > policy.max_node_failures:
                    raise NodeQueryError(
                        f"Giving up on {transaction.hash_hex} after {failures} consecutive node failures"
                    ) from e
                logger.debug(f"Node error while polling {transaction.hash_hex}, retrying: {e}")
            else:
                failures = 0

                if receipt is None:
                    rounds += 1

                    if policy.max_rounds is not None and rounds > policy.max_rounds:
                        if policy.resubmit_on_timeout:
                            logger.warning(
                                f"Exceeded max polling rounds ({policy.max_rounds}) on "
                                f"{transaction.hash_hex}. Attempting to submit transaction again..."
                            )
                            return TrackingResult(TrackerState.DROPPED, transaction, rounds)

                        raise TransactionStalledError(
                            f"No receipt for {transaction.hash_hex} after {rounds} polling rounds"
                        )

                elif receipt.confirmations >= required_confirmations:
                    transaction.receipt = receipt
                    logger.success(
                        f"{transaction.hash_hex} confirmed "
                        f"({receipt.confirmations}/{required_confirmations} confirmations)"
                    )
                    return TrackingResult(TrackerState.CONFIRMED, transaction, rounds)

                else:
                    logger.debug(
                        f"{transaction.hash_hex} {TrackerState.PENDING.value}: "
                        f"{receipt.confirmations}/{required_confirmations} confirmations"
                    )

            await asyncio.sleep(policy.poll_interval)
