"""
Deployment Configuration
Loads confirmation count, gas price and network identity from .env or JSON
"""

import os
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional
from eth_account import Account
from eth_account.signers.local import LocalAccount
from loguru import logger
from dotenv import load_dotenv

from blockchain.exceptions import ConfigurationError


def _parse_int(name: str, value: Any) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


@dataclass(frozen=True)
class DeployConfig:
    """
    Read-only deployment settings shared by every wrapped contract

    Frozen after load so concurrent trackers can read it without locking.
    """

    network: str
    num_deploy_confirmations: int = 0
    gas_price: Optional[int] = None  # wei, None lets the node pick
    rpc_url: Optional[str] = None

    def __post_init__(self):
        if not self.network:
            raise ConfigurationError("network must be set")
        if self.num_deploy_confirmations < 0:
            raise ConfigurationError(
                f"num_deploy_confirmations must be >= 0, got {self.num_deploy_confirmations}"
            )
        if self.gas_price is not None and self.gas_price < 0:
            raise ConfigurationError(f"gas_price must be >= 0, got {self.gas_price}")

    @classmethod
    def from_env(cls) -> 'DeployConfig':
        """
        Load configuration from environment (.env supported)

        Variables:
            NETWORK: Network name (required)
            NUM_DEPLOY_CONFIRMATIONS: Required confirmations (default 0)
            GAS_PRICE: Gas price in wei (optional)
            RPC_URL: RPC endpoint (optional)
        """
        load_dotenv()

        network = os.getenv('NETWORK')
        if not network:
            raise ConfigurationError("NETWORK must be set")

        confirmations = _parse_int('NUM_DEPLOY_CONFIRMATIONS', os.getenv('NUM_DEPLOY_CONFIRMATIONS'))

        config = cls(
            network=network,
            num_deploy_confirmations=confirmations or 0,
            gas_price=_parse_int('GAS_PRICE', os.getenv('GAS_PRICE')),
            rpc_url=os.getenv('RPC_URL') or None
        )

        logger.debug(f"Deploy config loaded from environment: {config.network}")
        return config

    @classmethod
    def from_file(cls, path: str) -> 'DeployConfig':
        """
        Load configuration from a JSON file

        Accepts camelCase (numDeployConfirmations, gasPrice, rpcUrl) or
        snake_case keys.
        """
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Config file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeployConfig':
        def pick(*keys):
            for key in keys:
                if key in data:
                    return data[key]
            return None

        confirmations = _parse_int(
            'numDeployConfirmations',
            pick('numDeployConfirmations', 'num_deploy_confirmations')
        )

        return cls(
            network=pick('network'),
            num_deploy_confirmations=confirmations or 0,
            gas_price=_parse_int('gasPrice', pick('gasPrice', 'gas_price')),
            rpc_url=pick('rpcUrl', 'rpc_url')
        )


def load_deployer_account(env_var: str = 'DEPLOYER_PRIVATE_KEY') -> Optional[LocalAccount]:
    """
    Load the signing account from environment

    Args:
        env_var: Environment variable holding the private key

    Returns:
        LocalAccount, or None if the variable is unset (node-managed account)
    """
    load_dotenv()

    private_key = os.getenv(env_var)
    if not private_key:
        logger.warning(f"{env_var} not set - using node-managed account")
        return None

    account = Account.from_key(private_key)
    logger.info(f"Deployer account: {account.address}")
    return account
