import logging

import boa
from eth_utils import to_checksum_address

from vrf_raffle import chain, raffle
from vrf_raffle.config import get_network, get_settings
from vrf_raffle.errors import ConfigError
from vrf_raffle.mocks import mock_vrf_coordinator

logger = logging.getLogger(__name__)


def get_account() -> str:
    """Deployer address: moccasin's default account for the active network."""
    account = get_network().get_default_account()
    if account is None:
        raise ConfigError("The active network has no default account")
    return to_checksum_address(getattr(account, "address", account))


def deploy_mocks(settings):
    """Deploy a coordinator and open a funded subscription on it."""
    coordinator = mock_vrf_coordinator.deploy()
    subscription_id = coordinator.create_subscription()
    coordinator.fund_subscription(subscription_id, settings.fund_amount)
    logger.info(
        "Subscription %s created on %s and funded with %s", subscription_id, coordinator, settings.fund_amount
    )
    return coordinator, subscription_id


def get_coordinator(settings):
    if settings.is_development:
        return deploy_mocks(settings)
    coordinator = chain.lookup(settings.vrf_coordinator)
    return coordinator, settings.subscription_id


def add_consumer(coordinator, subscription_id, raffle_contract, account):
    """Register the raffle on the subscription when ``account`` owns it."""
    _, owner, consumers = coordinator.get_subscription(subscription_id)
    if raffle_contract.address in consumers:
        return
    if owner != account:
        logger.warning(
            "%s does not own subscription %s; add %s as a consumer from %s",
            account,
            subscription_id,
            raffle_contract.address,
            owner,
        )
        return
    coordinator.add_consumer(subscription_id, raffle_contract.address)
    logger.info("Added %s to subscription %s", raffle_contract, subscription_id)


def deploy_raffle(settings=None, account=None):
    settings = settings or get_settings()
    account = account or get_account()
    logger.info("Deploying raffle to %s from %s", settings.network, account)

    with boa.env.prank(account):
        coordinator, subscription_id = get_coordinator(settings)
        raffle_contract = raffle.deploy(
            settings.entrance_fee,
            settings.interval,
            coordinator.address,
            settings.gas_lane,
            subscription_id,
            settings.callback_gas_limit,
        )
        add_consumer(coordinator, subscription_id, raffle_contract, account)
    return raffle_contract, coordinator
