"""
Node Client
Single-endpoint RPC access used by the confirmation tracker
Classifies node failures as retryable or fatal
"""

from typing import Optional, Union
import requests
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import TransactionNotFound
from loguru import logger

from .exceptions import NodeQueryError, RetryableNodeError
from .transaction import Receipt


# Transport failures that usually clear up on the next poll
RETRYABLE_ERRORS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    ConnectionError,
    TimeoutError,
)

RATE_LIMIT_MARKERS = ('429', 'rate limit', 'too many requests')


def is_rate_limited(error: Exception) -> bool:
    """Check whether an RPC error message indicates rate limiting"""
    error_str = str(error).lower()
    return any(marker in error_str for marker in RATE_LIMIT_MARKERS)


class NodeClient:
    """
    Thin wrapper over a Web3 connection

    Exposes the node capabilities the tracker needs:
    - receipt lookup with confirmation depth
    - chain identity
    """

    def __init__(self, w3: Web3):
        """
        Initialize Node Client

        Args:
            w3: Web3 instance connected to the trusted RPC endpoint
        """
        self.w3 = w3

    @classmethod
    def from_url(cls, rpc_url: str, request_timeout: int = 30) -> 'NodeClient':
        """
        Connect to an HTTP RPC endpoint

        Args:
            rpc_url: RPC endpoint URL
            request_timeout: Per-request timeout in seconds

        Returns:
            NodeClient instance
        """
        w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={'timeout': request_timeout}))

        if w3.is_connected():
            logger.success(f"Connected to {rpc_url}")
        else:
            logger.warning(f"Failed to connect to {rpc_url}")

        return cls(w3)

    def is_connected(self) -> bool:
        try:
            return self.w3.is_connected()
        except Exception:
            return False

    @property
    def chain_id(self) -> int:
        return self.w3.eth.chain_id

    def get_receipt(self, tx_hash: Union[bytes, str]) -> Optional[Receipt]:
        """
        Fetch a transaction receipt with its confirmation count

        Args:
            tx_hash: Transaction hash

        Returns:
            Receipt, or None if the transaction is not mined yet

        Raises:
            RetryableNodeError: On connection errors, timeouts and rate limits
            NodeQueryError: On any other node failure
        """
        tx_hash = HexBytes(tx_hash)

        try:
            raw = self.w3.eth.get_transaction_receipt(tx_hash)
            if raw is None or raw.get('blockNumber') is None:
                return None
            head = self.w3.eth.block_number
        except TransactionNotFound:
            return None
        except RETRYABLE_ERRORS as e:
            raise RetryableNodeError(f"Node unreachable: {e}") from e
        except Exception as e:
            if is_rate_limited(e):
                raise RetryableNodeError(f"Rate limited: {e}") from e
            raise NodeQueryError(f"Receipt lookup failed for {Web3.to_hex(tx_hash)}: {e}") from e

        block_number = raw['blockNumber']

        return Receipt(
            transaction_hash=HexBytes(raw.get('transactionHash') or tx_hash),
            block_number=block_number,
            status=raw.get('status', 1),
            confirmations=max(head - block_number + 1, 0),
            gas_used=raw.get('gasUsed'),
            contract_address=raw.get('contractAddress')
        )
