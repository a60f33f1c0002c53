import logging

from vrf_raffle.deployment import deploy_raffle
from vrf_raffle.raffle import Raffle


def deploy() -> Raffle:
    raffle_contract, coordinator = deploy_raffle()
    print(f"VRF Coordinator at: {coordinator.address}")
    print(f"Subscription id: {raffle_contract.get_subscription_id()}")
    print(f"Raffle deployed at: {raffle_contract.address}")
    print(f"Entrance fee: {raffle_contract.get_entrance_fee()} wei, interval: {raffle_contract.get_interval()}s")
    return raffle_contract


def moccasin_main() -> Raffle:
    logging.basicConfig(level=logging.INFO)
    return deploy()


if __name__ == "__main__":
    moccasin_main()
