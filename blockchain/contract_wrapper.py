"""
Confirming Contract
Wraps every function of a web3 contract so mutating calls return only once confirmed
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, List, Optional
from eth_account.signers.local import LocalAccount
from web3 import Web3
from loguru import logger

from .confirmation_tracker import (
    ConfirmationPolicy,
    ConfirmationTracker,
    TrackerState,
    get_confirmation_policy,
)
from .exceptions import ConfigurationError
from .node_client import NodeClient
from .transaction import PendingTransaction


READ_ONLY_MUTABILITY = ('view', 'pure')


def is_read_only(abi_entry: Dict) -> bool:
    """Check whether an ABI function entry is a view/constant call"""
    if abi_entry.get('constant'):
        return True
    return abi_entry.get('stateMutability') in READ_ONLY_MUTABILITY


def is_transaction_like(result: Any) -> bool:
    """Check whether a call result can be waited on for a receipt"""
    return callable(getattr(result, 'wait', None))


def _function_mutability(abi: List[Dict]) -> Dict[str, Optional[bool]]:
    # None marks a name whose overloads disagree; the bound overload decides per call
    read_only: Dict[str, Optional[bool]] = {}
    for entry in abi:
        if entry.get('type', 'function') != 'function' or 'name' not in entry:
            continue
        name = entry['name']
        entry_read_only = is_read_only(entry)
        if name not in read_only:
            read_only[name] = entry_read_only
        elif read_only[name] != entry_read_only:
            read_only[name] = None
    return read_only


class ConfirmingContract:
    """
    Contract handle whose methods wait for confirmations

    Built once from a plain web3 contract. Every ABI function becomes a
    coroutine that fills in the configured gas price, submits the call and,
    for mutating calls, tracks the transaction until it is confirmed.
    The handle is immutable after construction.
    """

    def __init__(
        self,
        contract,
        config,
        account: Optional[LocalAccount] = None,
        node: Optional[NodeClient] = None,
        policy: Optional[ConfirmationPolicy] = None,
        tracker: Optional[ConfirmationTracker] = None,
        max_concurrent_trackers: int = 4,
        call_timeout: Optional[float] = None
    ):
        """
        Initialize Confirming Contract

        Args:
            contract: web3 Contract instance (address, abi, w3)
            config: DeployConfig, or a zero-argument callable returning one
            account: Signing key; None uses the node's default account
            node: Node client for receipt lookups (defaults to contract.w3)
            policy: Polling policy (defaults to the policy of the configured network)
            tracker: Shared tracker; overrides node and max_concurrent_trackers
            max_concurrent_trackers: Cap on concurrent poll loops for this handle
            call_timeout: Seconds allowed for each tracking attempt
        """
        self._contract = contract
        self._config = config
        self.account = account
        self._policy = policy
        self._call_timeout = call_timeout

        if tracker is None:
            tracker = ConfirmationTracker(node or NodeClient(contract.w3), max_concurrent_trackers)
        self._tracker = tracker

        self._methods = MappingProxyType({
            name: self._intercept(name, read_only)
            for name, read_only in _function_mutability(contract.abi).items()
        })
        self._frozen = True

    @property
    def address(self) -> str:
        return self._contract.address

    @property
    def abi(self) -> List[Dict]:
        return self._contract.abi

    @property
    def w3(self) -> Web3:
        return self._contract.w3

    @property
    def method_names(self) -> List[str]:
        return list(self._methods)

    def __setattr__(self, name, value):
        if getattr(self, '_frozen', False):
            raise AttributeError(f"ConfirmingContract is immutable, cannot set '{name}'")
        object.__setattr__(self, name, value)

    def __getattr__(self, name):
        # Only reached for names missing from the instance and class
        methods = self.__dict__.get('_methods', {})
        if name.startswith('_') or name not in methods:
            raise AttributeError(f"ConfirmingContract has no function '{name}'")
        return methods[name]

    def __getitem__(self, name: str) -> Callable:
        return self._methods[name]

    def __contains__(self, name: str) -> bool:
        return name in self._methods

    def __dir__(self):
        return list(super().__dir__()) + self.method_names

    def __repr__(self) -> str:
        return f"ConfirmingContract(address={self.address}, functions={len(self._methods)})"

    def _load_config(self):
        return self._config() if callable(self._config) else self._config

    def _resolve_gas_price(self) -> Optional[int]:
        try:
            return self._load_config().gas_price
        except ConfigurationError as e:
            logger.debug(f"No gas price available ({e}), submitting without override")
            return None

    def _intercept(self, fn_name: str, read_only: Optional[bool]) -> Callable:
        async def method(*args):
            while True:
                fn = getattr(self._contract.functions, fn_name)(*args)
                call_read_only = is_read_only(fn.abi) if read_only is None else read_only
                gas_price = 0 if call_read_only else self._resolve_gas_price()

                result = self._submit(fn, fn_name, call_read_only, gas_price)
                if call_read_only or not is_transaction_like(result):
                    return result

                config = self._load_config()
                policy = self._policy or get_confirmation_policy(config.network)

                outcome = await self._tracker.track(
                    result,
                    config.num_deploy_confirmations,
                    policy,
                    deadline=self._call_timeout
                )
                if outcome.state == TrackerState.CONFIRMED:
                    return outcome.transaction
                # Dropped: the stalled transaction is abandoned and the same call is sent again

        method.__name__ = fn_name
        method.__qualname__ = f"{type(self).__name__}.{fn_name}"
        return method

    def _submit(self, fn, fn_name: str, read_only: bool, gas_price: Optional[int]):
        """
        Send one call to the node

        Args:
            fn: Contract function bound to its arguments (overload resolved)
            fn_name: Function name, recorded on the transaction
            read_only: Use eth_call instead of sending a transaction
            gas_price: Gas price override, None leaves it to the node

        Returns:
            Decoded return value for read-only calls, PendingTransaction otherwise
        """
        params = {}
        if gas_price is not None:
            params['gasPrice'] = gas_price
        if self.account is not None:
            params['from'] = self.account.address

        if read_only:
            return fn.call(params)

        if self.account is None:
            tx_hash = fn.transact(params)
        else:
            params['nonce'] = self.w3.eth.get_transaction_count(self.account.address, 'pending')
            tx = fn.build_transaction(params)
            signed_tx = self.account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)

        transaction = PendingTransaction(tx_hash, self.w3, method=fn_name)
        logger.info(f"{fn_name} submitted: {transaction.hash_hex}")
        return transaction


def get_confirming_contract(
    contract,
    config,
    account: Optional[LocalAccount] = None,
    **options
) -> ConfirmingContract:
    """
    Wrap a web3 contract so every mutating call waits for confirmations

    Args:
        contract: web3 Contract instance
        config: DeployConfig, or a zero-argument callable returning one
        account: Signing key (None uses the node's default account)
        **options: node, policy, tracker, max_concurrent_trackers, call_timeout

    Returns:
        ConfirmingContract with the same address, ABI and credential
    """
    return ConfirmingContract(contract, config, account=account, **options)
