"""Raffle paid out by verifiable randomness.

Players pay the entrance fee while the raffle is OPEN. Once ``interval``
seconds have passed since the last draw and somebody has entered,
``perform_upkeep`` closes the raffle and asks the VRF coordinator for a random
word. The coordinator answers through ``fulfill_random_words``, which pays the
whole pot to ``players[word % len(players)]`` and reopens the raffle.

The modulo pick is slightly biased towards low indices; the bias is
negligible while the number of players stays far below 2**256.
"""
import logging
from dataclasses import dataclass, field
from enum import IntEnum

import boa
from eth_utils import to_checksum_address

from vrf_raffle import chain
from vrf_raffle.contract import Contract, external
from vrf_raffle.errors import (
    InsufficientPayment,
    NoRandomWords,
    NotCalculating,
    NotOpen,
    OnlyCoordinatorCanFulfill,
    TransferFailed,
    UnknownRequest,
    UpkeepNotNeeded,
)
from vrf_raffle.events import CalculationRequested, Entered, WinnerPicked

logger = logging.getLogger(__name__)

REQUEST_CONFIRMATIONS = 3
NUM_WORDS = 1


class RaffleState(IntEnum):
    OPEN = 0
    CALCULATING = 1


@dataclass
class RaffleStorage:
    raffle_state: RaffleState
    latest_timestamp: int
    players: list = field(default_factory=list)
    recent_winner: str = chain.ZERO_ADDRESS
    pending_request_id: int = 0


class Raffle(Contract):
    def __init__(
        self,
        entrance_fee: int,
        interval: int,
        vrf_coordinator: str,
        gas_lane: bytes,
        subscription_id: int,
        callback_gas_limit: int,
    ):
        super().__init__("raffle")
        self.entrance_fee = entrance_fee
        self.interval = interval
        self.vrf_coordinator = vrf_coordinator
        self.gas_lane = gas_lane
        self.subscription_id = subscription_id
        self.callback_gas_limit = callback_gas_limit
        self._storage = RaffleStorage(
            raffle_state=RaffleState.OPEN,
            latest_timestamp=chain.block_timestamp(),
        )

    @external
    def enter_raffle(self, value: int = 0):
        if value < self.entrance_fee:
            raise InsufficientPayment(value, self.entrance_fee)
        if self._storage.raffle_state != RaffleState.OPEN:
            raise NotOpen()
        player = chain.msg_sender()
        chain.transfer(player, self.address, value)
        self._storage.players.append(player)
        self._emit(Entered(player))
        logger.info("%s entered %s with %s wei", player, self, value)

    def check_upkeep(self, check_data: bytes = b""):
        """Return ``(upkeep_needed, perform_data)``; never changes state."""
        storage = self._storage
        is_open = storage.raffle_state == RaffleState.OPEN
        time_passed = chain.block_timestamp() - storage.latest_timestamp >= self.interval
        has_players = len(storage.players) > 0
        has_balance = self.get_balance() > 0
        return is_open and time_passed and has_players and has_balance, b""

    @external
    def perform_upkeep(self, perform_data: bytes = b"") -> int:
        upkeep_needed, _ = self.check_upkeep(b"")
        if not upkeep_needed:
            raise UpkeepNotNeeded(
                self.get_balance(), len(self._storage.players), int(self._storage.raffle_state)
            )
        self._storage.raffle_state = RaffleState.CALCULATING
        coordinator = chain.lookup(self.vrf_coordinator)
        with boa.env.prank(self.address):
            request_id = coordinator.request_random_words(
                self.gas_lane,
                self.subscription_id,
                REQUEST_CONFIRMATIONS,
                self.callback_gas_limit,
                NUM_WORDS,
            )
        self._storage.pending_request_id = request_id
        self._emit(CalculationRequested(request_id))
        logger.info("%s requested a winner, request id %s", self, request_id)
        return request_id

    @external
    def fulfill_random_words(self, request_id: int, random_words):
        sender = chain.msg_sender()
        if sender != self.vrf_coordinator:
            raise OnlyCoordinatorCanFulfill(sender, self.vrf_coordinator)
        storage = self._storage
        if storage.raffle_state != RaffleState.CALCULATING:
            raise NotCalculating()
        if request_id != storage.pending_request_id:
            raise UnknownRequest(request_id)
        if not random_words:
            raise NoRandomWords(request_id)

        winner = storage.players[random_words[0] % len(storage.players)]
        storage.recent_winner = winner
        storage.players = []
        storage.raffle_state = RaffleState.OPEN
        storage.latest_timestamp = chain.block_timestamp()
        storage.pending_request_id = 0

        prize = self.get_balance()
        if not chain.send_value(self.address, winner, prize):
            raise TransferFailed(winner, prize)
        self._emit(WinnerPicked(winner))
        logger.info("%s picked %s, paid %s wei", self, winner, prize)

    def get_entrance_fee(self) -> int:
        return self.entrance_fee

    def get_interval(self) -> int:
        return self.interval

    def get_vrf_coordinator(self) -> str:
        return self.vrf_coordinator

    def get_gas_lane(self) -> bytes:
        return self.gas_lane

    def get_subscription_id(self) -> int:
        return self.subscription_id

    def get_callback_gas_limit(self) -> int:
        return self.callback_gas_limit

    def get_request_confirmations(self) -> int:
        return REQUEST_CONFIRMATIONS

    def get_num_words(self) -> int:
        return NUM_WORDS

    def get_raffle_state(self) -> RaffleState:
        return self._storage.raffle_state

    def get_player(self, index: int) -> str:
        return self._storage.players[index]

    def get_number_of_players(self) -> int:
        return len(self._storage.players)

    def get_recent_winner(self) -> str:
        return self._storage.recent_winner

    def get_latest_timestamp(self) -> int:
        return self._storage.latest_timestamp

    def get_pending_request_id(self) -> int:
        return self._storage.pending_request_id


def deploy(entrance_fee, interval, vrf_coordinator, gas_lane, subscription_id, callback_gas_limit) -> Raffle:
    raffle = Raffle(
        entrance_fee,
        interval,
        to_checksum_address(vrf_coordinator),
        gas_lane,
        subscription_id,
        callback_gas_limit,
    )
    logger.info("Deployed %s (entrance fee %s wei, interval %ss)", raffle, entrance_fee, interval)
    return raffle
