"""Raffle deployment settings carried by moccasin networks.

Each ``[networks.<name>]`` table in ``moccasin.toml`` holds the raffle's
parameters under ``extra_data``::

    [networks.pyevm.extra_data]
    gas_lane = "0x474e..."
    callback_gas_limit = 500000
    interval = 30
    entrance_fee = "0.2"   # ether
    fund_amount = "3"      # LINK, development networks only

Networks moccasin marks ``live_or_staging`` also need ``vrf_coordinator`` and
``subscription_id``; development networks get a mock coordinator instead.
"""
from dataclasses import dataclass
from decimal import Decimal

from eth_utils import to_bytes, to_checksum_address, to_wei
from moccasin.config import Network, get_or_initialize_config

from vrf_raffle.errors import ConfigError

DEFAULT_FUND_AMOUNT = "3"


@dataclass(frozen=True)
class RaffleSettings:
    network: str
    is_development: bool
    gas_lane: bytes
    callback_gas_limit: int
    interval: int
    entrance_fee: int
    fund_amount: int
    vrf_coordinator: str | None = None
    subscription_id: int | None = None

    @classmethod
    def from_network(cls, network: Network) -> "RaffleSettings":
        data = network.extra_data or {}
        is_development = not network.live_or_staging
        try:
            settings = cls(
                network=network.name,
                is_development=is_development,
                gas_lane=to_bytes(hexstr=data["gas_lane"]),
                callback_gas_limit=int(data["callback_gas_limit"]),
                interval=int(data["interval"]),
                entrance_fee=to_wei(Decimal(str(data["entrance_fee"])), "ether"),
                fund_amount=to_wei(Decimal(str(data.get("fund_amount", DEFAULT_FUND_AMOUNT))), "ether"),
                vrf_coordinator=(
                    to_checksum_address(data["vrf_coordinator"]) if "vrf_coordinator" in data else None
                ),
                subscription_id=int(data["subscription_id"]) if "subscription_id" in data else None,
            )
        except KeyError as e:
            raise ConfigError(f"Network {network.name!r} is missing extra_data.{e.args[0]}") from None
        except ValueError as e:
            raise ConfigError(f"Network {network.name!r} has an invalid value: {e}") from e

        if not is_development and (settings.vrf_coordinator is None or settings.subscription_id is None):
            raise ConfigError(f"Network {network.name!r} needs vrf_coordinator and subscription_id")
        return settings


def get_network(name=None) -> Network:
    """The named moccasin network, or the active one."""
    config = get_or_initialize_config()
    if name is None:
        return config.get_active_network()
    try:
        return config.get_networks()[name]
    except KeyError:
        raise ConfigError(f"Network {name!r} is not configured") from None


def get_settings(network=None) -> RaffleSettings:
    """Raffle settings of ``network``: a moccasin ``Network``, a network name, or the active network."""
    if not isinstance(network, Network):
        network = get_network(network)
    return RaffleSettings.from_network(network)
