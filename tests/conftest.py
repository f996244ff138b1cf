"""
Shared fixtures for confirmation tests
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from blockchain.transaction import PendingTransaction
from helpers import HASH_A


@pytest.fixture
def no_sleep():
    """Replace asyncio.sleep so polling loops run instantly"""
    with patch('blockchain.confirmation_tracker.asyncio.sleep', new_callable=AsyncMock) as sleep:
        yield sleep


@pytest.fixture
def transaction():
    return PendingTransaction(HASH_A, Mock(), method='setOwner')
