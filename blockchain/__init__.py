"""
Blockchain Interaction Package
Confirmation tracking, contract wrapping, and deployment artifact helpers
"""

from .artifacts import assert_contract_variable, get_contract_from_artifact, get_deployment_address
from .confirmation_tracker import ConfirmationPolicy, ConfirmationTracker, TrackerState, get_confirmation_policy
from .contract_wrapper import ConfirmingContract, get_confirming_contract
from .node_client import NodeClient
from .transaction import PendingTransaction, Receipt

__all__ = [
    'get_confirming_contract',
    'ConfirmingContract',
    'ConfirmationTracker',
    'ConfirmationPolicy',
    'TrackerState',
    'get_confirmation_policy',
    'NodeClient',
    'PendingTransaction',
    'Receipt',
    'get_contract_from_artifact',
    'get_deployment_address',
    'assert_contract_variable'
]
