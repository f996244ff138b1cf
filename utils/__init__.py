"""
Utilities Package
Configuration loading and logging setup
"""

from .config import DeployConfig, load_deployer_account
from .logger import setup_logging

__all__ = [
    'DeployConfig',
    'load_deployer_account',
    'setup_logging'
]
