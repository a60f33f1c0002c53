"""Local stand-in for the VRF coordinator used on development networks.

Mirrors the coordinator's subscription model: a subscription owner funds the
subscription and registers consumers; consumers request random words; the
words are delivered later, when somebody calls ``fulfill_random_words``.
"""
import logging
from dataclasses import dataclass, field

import boa
from eth_abi import encode
from eth_utils import keccak, to_checksum_address, to_wei

from vrf_raffle import chain
from vrf_raffle.contract import Contract, external
from vrf_raffle.errors import (
    InsufficientBalance,
    InvalidConsumer,
    InvalidSubscription,
    MustBeSubOwner,
    NumWordsTooBig,
    UnknownRequest,
)
from vrf_raffle.events import (
    ConsumerAdded,
    RandomWordsFulfilled,
    RandomWordsRequested,
    SubscriptionCreated,
    SubscriptionFunded,
)

logger = logging.getLogger(__name__)

BASE_FEE = to_wei("0.25", "ether")  # LINK per fulfilment
GAS_PRICE_LINK = 10**9
MAX_NUM_WORDS = 500


@dataclass
class Subscription:
    owner: str
    balance: int = 0
    consumers: set = field(default_factory=set)


@dataclass
class Request:
    sub_id: int
    callback_gas_limit: int
    num_words: int


@dataclass
class CoordinatorStorage:
    current_sub_id: int = 0
    last_request_id: int = 0
    subscriptions: dict = field(default_factory=dict)
    requests: dict = field(default_factory=dict)


class MockVRFCoordinator(Contract):
    def __init__(self, base_fee: int = BASE_FEE, gas_price_link: int = GAS_PRICE_LINK):
        super().__init__("vrf_coordinator")
        self.base_fee = base_fee
        self.gas_price_link = gas_price_link
        self._storage = CoordinatorStorage()

    @external
    def create_subscription(self) -> int:
        self._storage.current_sub_id += 1
        sub_id = self._storage.current_sub_id
        owner = chain.msg_sender()
        self._storage.subscriptions[sub_id] = Subscription(owner)
        self._emit(SubscriptionCreated(sub_id, owner))
        return sub_id

    @external
    def fund_subscription(self, sub_id: int, amount: int):
        subscription = self._subscription(sub_id)
        old_balance = subscription.balance
        subscription.balance += amount
        self._emit(SubscriptionFunded(sub_id, old_balance, subscription.balance))

    @external
    def add_consumer(self, sub_id: int, consumer: str):
        subscription = self._subscription(sub_id)
        if chain.msg_sender() != subscription.owner:
            raise MustBeSubOwner(subscription.owner)
        consumer = to_checksum_address(consumer)
        subscription.consumers.add(consumer)
        self._emit(ConsumerAdded(sub_id, consumer))

    @external
    def request_random_words(
        self,
        key_hash: bytes,
        sub_id: int,
        minimum_request_confirmations: int,
        callback_gas_limit: int,
        num_words: int,
    ) -> int:
        subscription = self._subscription(sub_id)
        sender = chain.msg_sender()
        if sender not in subscription.consumers:
            raise InvalidConsumer(sub_id, sender)
        if num_words > MAX_NUM_WORDS:
            raise NumWordsTooBig(num_words, MAX_NUM_WORDS)

        self._storage.last_request_id += 1
        request_id = self._storage.last_request_id
        self._storage.requests[request_id] = Request(sub_id, callback_gas_limit, num_words)
        self._emit(
            RandomWordsRequested(
                request_id,
                key_hash,
                sub_id,
                minimum_request_confirmations,
                callback_gas_limit,
                num_words,
                sender,
            )
        )
        logger.info("Random words requested: id %s by %s", request_id, sender)
        return request_id

    def fulfill_random_words(self, request_id: int, consumer: str):
        request = self._storage.requests.get(request_id)
        if request is None:
            raise UnknownRequest(request_id)
        words = [
            int.from_bytes(keccak(encode(["uint256", "uint256"], [request_id, i])), "big")
            for i in range(request.num_words)
        ]
        self.fulfill_random_words_with_override(request_id, consumer, words)

    @external
    def fulfill_random_words_with_override(self, request_id: int, consumer: str, words):
        request = self._storage.requests.get(request_id)
        if request is None:
            raise UnknownRequest(request_id)
        subscription = self._subscription(request.sub_id)
        payment = self.base_fee + self.gas_price_link * request.callback_gas_limit
        if subscription.balance < payment:
            raise InsufficientBalance(request.sub_id, subscription.balance, payment)

        target = chain.lookup(consumer)
        with boa.env.prank(self.address):
            target.fulfill_random_words(request_id, words)

        subscription.balance -= payment
        del self._storage.requests[request_id]
        self._emit(RandomWordsFulfilled(request_id, payment))
        logger.info("Fulfilled request %s for %s", request_id, consumer)

    def get_subscription(self, sub_id: int):
        subscription = self._subscription(sub_id)
        return subscription.balance, subscription.owner, sorted(subscription.consumers)

    def last_request_id(self) -> int:
        return self._storage.last_request_id

    def _subscription(self, sub_id) -> Subscription:
        try:
            return self._storage.subscriptions[sub_id]
        except KeyError:
            raise InvalidSubscription(sub_id) from None


def deploy(base_fee: int = BASE_FEE, gas_price_link: int = GAS_PRICE_LINK) -> MockVRFCoordinator:
    mock = MockVRFCoordinator(base_fee, gas_price_link)
    logger.info("Deployed %s", mock)
    return mock
