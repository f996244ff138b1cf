"""
Fakes and sample data shared by the test modules
"""

from unittest.mock import Mock

from hexbytes import HexBytes

from blockchain.transaction import Receipt


HASH_A = HexBytes(b'\xaa' * 32)
HASH_B = HexBytes(b'\xbb' * 32)
CONTRACT_ADDRESS = '0x5FbDB2315678afecb367f032d93F642f64180aa3'
NEW_OWNER = '0x70997970C51812dc3A010C7d01b50e0d17dc79C8'

ABI = [
    {
        "type": "function",
        "name": "owner",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view"
    },
    {
        "type": "function",
        "name": "version",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "constant": True
    },
    {
        "type": "function",
        "name": "setOwner",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [],
        "stateMutability": "nonpayable"
    },
    {
        "type": "function",
        "name": "transfer",
        "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable"
    },
    {
        "type": "function",
        "name": "transfer",
        "inputs": [],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view"
    },
    {"type": "event", "name": "OwnerChanged", "inputs": [], "anonymous": False},
    {"type": "constructor", "inputs": [], "stateMutability": "nonpayable"}
]


def make_receipt(confirmations: int, tx_hash=HASH_A, status: int = 1) -> Receipt:
    return Receipt(
        transaction_hash=HexBytes(tx_hash),
        block_number=100,
        status=status,
        confirmations=confirmations
    )


class FakeNode:
    """
    Scripted node: each get_receipt call consumes the next entry of the
    script for that hash; the last entry repeats forever. Exception
    instances are raised instead of returned.
    """

    def __init__(self, *script, by_hash=None):
        self.default = list(script) or [None]
        self.by_hash = {HexBytes(k): list(v) for k, v in (by_hash or {}).items()}
        self.calls = []

    def get_receipt(self, tx_hash):
        tx_hash = HexBytes(tx_hash)
        self.calls.append(tx_hash)

        script = self.by_hash.get(tx_hash, self.default)
        item = script.pop(0) if len(script) > 1 else script[0]

        if isinstance(item, Exception):
            raise item
        return item

    def calls_for(self, tx_hash) -> int:
        return self.calls.count(HexBytes(tx_hash))


def make_contract(abi=ABI, address=CONTRACT_ADDRESS):
    """Mock web3 contract exposing address, abi, w3 and functions"""
    contract = Mock()
    contract.address = address
    contract.abi = abi
    return contract


