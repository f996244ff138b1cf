"""
Transaction Records
Pending transaction handle and normalized receipt
"""

from dataclasses import dataclass
from typing import Optional, Union
from hexbytes import HexBytes
from web3 import Web3


@dataclass(frozen=True)
class Receipt:
    """Node-reported outcome of a mined transaction"""

    transaction_hash: HexBytes
    block_number: int
    status: int
    confirmations: int  # head - block_number + 1
    gas_used: Optional[int] = None
    contract_address: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1


class PendingTransaction:
    """
    Result of submitting a mutating call

    Holds the transaction hash and can block until the node has a receipt.
    The confirmation tracker attaches the final receipt once the required
    depth is reached.
    """

    def __init__(self, tx_hash: Union[bytes, str], w3: Web3, method: Optional[str] = None):
        """
        Initialize Pending Transaction

        Args:
            tx_hash: Transaction hash as bytes or 0x-prefixed hex
            w3: Web3 instance the transaction was sent through
            method: Contract method that produced the transaction
        """
        self.hash = HexBytes(tx_hash)
        self.method = method
        self.receipt: Optional[Receipt] = None
        self._w3 = w3

    @property
    def hash_hex(self) -> str:
        return Web3.to_hex(self.hash)

    def wait(self, timeout: float = 120, poll_latency: float = 1.0):
        """
        Block until the transaction has a receipt

        Args:
            timeout: Seconds to wait before web3 raises TimeExhausted
            poll_latency: Seconds between receipt lookups

        Returns:
            Raw web3 transaction receipt
        """
        return self._w3.eth.wait_for_transaction_receipt(
            self.hash,
            timeout=timeout,
            poll_latency=poll_latency
        )

    def __repr__(self) -> str:
        return f"PendingTransaction(hash={self.hash_hex}, method={self.method!r})"
