"""
Deployment Artifacts
Reads hardhat-deploy artifacts and checks deployed contract state
"""

import os
import json
from typing import Any, Dict, List, Optional
from eth_account.signers.local import LocalAccount
from web3 import Web3
from loguru import logger

from .contract_wrapper import ConfirmingContract, get_confirming_contract
from .exceptions import ArtifactError, ContractVariableMismatchError
from .transaction import PendingTransaction


ZERO_ADDRESS = '0x0000000000000000000000000000000000000000'
DEFAULT_DEPLOYMENTS_ROOT = 'deployments'


def deployment_artifact_path(name: str, network: str, root: str = DEFAULT_DEPLOYMENTS_ROOT) -> str:
    """Path of a hardhat-deploy artifact: <root>/<network>/<name>.json"""
    return os.path.join(root, network, f"{name}.json")


def load_deployment_artifact(path: str) -> Dict[str, Any]:
    """
    Load a deployment artifact

    Args:
        path: Path to artifact JSON

    Returns:
        Artifact dict with at least 'address' and 'abi'

    Raises:
        ArtifactError: If the file is missing, invalid, or incomplete
    """
    try:
        with open(path, 'r') as f:
            artifact = json.load(f)
    except FileNotFoundError as e:
        raise ArtifactError(f"Deployment artifact not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ArtifactError(f"Invalid JSON in deployment artifact {path}: {e}") from e

    for field in ('address', 'abi'):
        if field not in artifact:
            raise ArtifactError(f"Deployment artifact {path} is missing '{field}'")

    return artifact


def get_deployment_address(name: str, network: str, root: str = DEFAULT_DEPLOYMENTS_ROOT) -> str:
    artifact = load_deployment_artifact(deployment_artifact_path(name, network, root))
    return Web3.to_checksum_address(artifact['address'])


def _deployment_tx_hash(artifact: Dict[str, Any]) -> Optional[str]:
    if artifact.get('transactionHash'):
        return artifact['transactionHash']
    return (artifact.get('receipt') or {}).get('transactionHash')


def get_contract_from_artifact(
    w3: Web3,
    name: str,
    network: str,
    config,
    account: Optional[LocalAccount] = None,
    abi: Optional[List[Dict]] = None,
    root: str = DEFAULT_DEPLOYMENTS_ROOT,
    **options
) -> ConfirmingContract:
    """
    Build a confirming contract from a deployment artifact

    Waits for the artifact's deployment transaction to be mined first.

    Args:
        w3: Web3 instance
        name: Deployment name
        network: Network directory under root
        config: DeployConfig, or a zero-argument callable returning one
        account: Signing key (None uses the node's default account)
        abi: Interface to use instead of the artifact's ABI
        root: Deployments directory
        **options: Passed through to get_confirming_contract

    Returns:
        ConfirmingContract
    """
    artifact = load_deployment_artifact(deployment_artifact_path(name, network, root))

    tx_hash = _deployment_tx_hash(artifact)
    if tx_hash:
        PendingTransaction(tx_hash, w3, method='constructor').wait()

    contract = w3.eth.contract(
        address=Web3.to_checksum_address(artifact['address']),
        abi=abi or artifact['abi']
    )

    logger.info(f"{name} loaded at {contract.address} on {network}")
    return get_confirming_contract(contract, config, account=account, **options)


def _values_match(actual: Any, expected: Any) -> bool:
    if actual == expected:
        return True
    if isinstance(actual, str) and isinstance(expected, str):
        if Web3.is_address(actual) and Web3.is_address(expected):
            return Web3.to_checksum_address(actual) == Web3.to_checksum_address(expected)
    return False


def assert_contract_variable(contract, variable: str, expected: Any) -> Any:
    """
    Check a deployed contract variable against an expected value

    Reads through a signer-less copy of the contract so the call does not
    carry the deployer as sender.

    Args:
        contract: ConfirmingContract or web3 Contract
        variable: Name of a no-argument view function
        expected: Expected value (addresses compared by checksum)

    Returns:
        The value read from the contract

    Raises:
        ContractVariableMismatchError: If the values differ
    """
    reader = contract.w3.eth.contract(address=contract.address, abi=contract.abi)
    actual = getattr(reader.functions, variable)().call({'from': ZERO_ADDRESS})

    if not _values_match(actual, expected):
        raise ContractVariableMismatchError(
            f"[FATAL] {variable} is {actual} but should be {expected}"
        )

    return actual
