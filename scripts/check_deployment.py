"""
Deployment Check Script
Verifies variables of a deployed contract against expected values

Usage:
    python scripts/check_deployment.py <DeploymentName> variable=expected [variable=expected ...]
"""

import sys
from typing import Any, Dict, List
from loguru import logger
from web3.exceptions import Web3Exception

from blockchain import NodeClient, assert_contract_variable, get_contract_from_artifact
from blockchain.exceptions import ArtifactError, ConfirmationError
from utils import DeployConfig, load_deployer_account, setup_logging


def parse_expected(value: str) -> Any:
    """Interpret a command-line expectation as int, bool, or string"""
    if value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    if value.lstrip('-').isdigit():
        return int(value)
    return value


def parse_expectations(pairs: List[str]) -> Dict[str, Any]:
    expectations = {}
    for pair in pairs:
        if '=' not in pair:
            raise ValueError(f"Expected variable=value, got {pair!r}")
        variable, value = pair.split('=', 1)
        expectations[variable] = parse_expected(value)
    return expectations


def check_deployment(argv: List[str]) -> int:
    if len(argv) < 2:
        logger.error("Usage: check_deployment.py <DeploymentName> variable=expected ...")
        return 2

    name = argv[0]
    try:
        expectations = parse_expectations(argv[1:])
        config = DeployConfig.from_env()
    except ValueError as e:
        logger.error(str(e))
        return 2

    if not config.rpc_url:
        logger.error("RPC_URL must be set")
        return 2

    node = NodeClient.from_url(config.rpc_url)
    if not node.is_connected():
        logger.error("Failed to connect to network")
        return 1

    try:
        contract = get_contract_from_artifact(
            node.w3,
            name,
            config.network,
            config,
            account=load_deployer_account(),
            node=node
        )
    except (ArtifactError, Web3Exception) as e:
        logger.error(str(e))
        return 1

    failed = 0
    for variable, expected in expectations.items():
        try:
            assert_contract_variable(contract, variable, expected)
            logger.success(f"✓ {variable} == {expected}")
        except (ConfirmationError, Web3Exception) as e:
            logger.error(str(e))
            failed += 1

    return 1 if failed else 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(check_deployment(sys.argv[1:]))
