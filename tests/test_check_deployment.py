"""
Tests for the deployment check script
"""

from unittest.mock import Mock

import pytest
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, TimeExhausted

from blockchain.exceptions import ContractVariableMismatchError
from scripts import check_deployment
from utils.config import DeployConfig


@pytest.fixture
def connected(monkeypatch):
    """Patch configuration and node access used by the script"""
    monkeypatch.setattr(
        check_deployment.DeployConfig, 'from_env',
        classmethod(lambda cls: DeployConfig(network='kovan', rpc_url='http://127.0.0.1:8545'))
    )
    monkeypatch.setattr(check_deployment, 'load_deployer_account', lambda: None)

    node = Mock()
    node.is_connected.return_value = True
    monkeypatch.setattr(check_deployment.NodeClient, 'from_url', Mock(return_value=node))

    contract = Mock()
    monkeypatch.setattr(check_deployment, 'get_contract_from_artifact', Mock(return_value=contract))
    return contract


class TestExpectationParsing:

    def test_types(self):
        assert check_deployment.parse_expected('42') == 42
        assert check_deployment.parse_expected('-1') == -1
        assert check_deployment.parse_expected('true') is True
        assert check_deployment.parse_expected('False') is False
        assert check_deployment.parse_expected('0xabc') == '0xabc'

    def test_pairs(self):
        assert check_deployment.parse_expectations(['version=2', 'owner=0x1=2']) == {
            'version': 2,
            'owner': '0x1=2'
        }

    def test_malformed_pair(self):
        with pytest.raises(ValueError):
            check_deployment.parse_expectations(['version'])


class TestCheckDeployment:

    def test_usage(self):
        assert check_deployment.check_deployment(['Registry']) == 2

    def test_all_variables_match(self, connected, monkeypatch):
        checker = Mock()
        monkeypatch.setattr(check_deployment, 'assert_contract_variable', checker)

        assert check_deployment.check_deployment(['Registry', 'version=2', 'paused=false']) == 0
        checker.assert_any_call(connected, 'version', 2)
        checker.assert_any_call(connected, 'paused', False)

    def test_mismatch_fails(self, connected, monkeypatch):
        checker = Mock(side_effect=ContractVariableMismatchError("[FATAL] version is 1 but should be 2"))
        monkeypatch.setattr(check_deployment, 'assert_contract_variable', checker)

        assert check_deployment.check_deployment(['Registry', 'version=2']) == 1

    def test_unmined_deployment_fails(self, connected, monkeypatch):
        monkeypatch.setattr(
            check_deployment, 'get_contract_from_artifact',
            Mock(side_effect=TimeExhausted("deployment not mined after 120 seconds"))
        )

        assert check_deployment.check_deployment(['Registry', 'version=2']) == 1

    @pytest.mark.parametrize('error', [
        ContractLogicError("execution reverted"),
        BadFunctionCallOutput("Could not decode contract function call"),
    ])
    def test_failed_read_counts_and_continues(self, connected, monkeypatch, error):
        checker = Mock(side_effect=[error, 'ok'])
        monkeypatch.setattr(check_deployment, 'assert_contract_variable', checker)

        assert check_deployment.check_deployment(['Registry', 'version=2', 'owner=0xabc']) == 1
        assert checker.call_count == 2
