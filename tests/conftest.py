from pathlib import Path

import boa
import pytest
from moccasin.config import get_or_initialize_config

from vrf_raffle import chain
from vrf_raffle.config import RaffleSettings
from vrf_raffle.deployment import deploy_raffle

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def isolation():
    """Roll back balances and time after each test and forget deployed objects."""
    with boa.env.anchor():
        yield
    chain.reset()


@pytest.fixture(scope="session")
def active_network():
    """The moccasin network under test: pyevm unless ``mox test --network`` picks another."""
    return get_or_initialize_config(PROJECT_ROOT).get_active_network()


@pytest.fixture(scope="session")
def settings(active_network):
    return RaffleSettings.from_network(active_network)


@pytest.fixture
def account():
    acct = chain.generate_address("deployer")
    boa.env.set_balance(acct, 10 * 10**18)
    return acct


@pytest.fixture
def players():
    addresses = [chain.generate_address(f"player{i}") for i in range(5)]
    for addr in addresses:
        boa.env.set_balance(addr, 10**18)
    return addresses


@pytest.fixture
def deployed(settings, account):
    if not settings.is_development:
        pytest.skip("unit fixtures deploy mocks; development networks only")
    with boa.env.prank(account):
        return deploy_raffle(settings)


@pytest.fixture
def raffle_contract(deployed):
    return deployed[0]


@pytest.fixture
def mock_vrf(deployed):
    return deployed[1]


@pytest.fixture
def ready_raffle(raffle_contract, account):
    """A raffle with one entrant whose interval has elapsed."""
    with boa.env.prank(account):
        raffle_contract.enter_raffle(value=raffle_contract.get_entrance_fee())
    boa.env.time_travel(seconds=raffle_contract.get_interval() + 1)
    return raffle_contract
