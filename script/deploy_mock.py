import logging

from vrf_raffle.config import get_settings
from vrf_raffle.deployment import deploy_mocks
from vrf_raffle.mocks.mock_vrf_coordinator import MockVRFCoordinator


def deploy_mock() -> MockVRFCoordinator:
    settings = get_settings()
    mock, subscription_id = deploy_mocks(settings)
    print(f"Mock VRF Coordinator at: {mock.address}")
    print(f"Subscription {subscription_id} funded with {settings.fund_amount}")
    return mock


def moccasin_main() -> MockVRFCoordinator:
    logging.basicConfig(level=logging.INFO)
    return deploy_mock()


if __name__ == "__main__":
    moccasin_main()
