"""Event records emitted by deployed contracts.

Every event is a frozen dataclass; the class name is the event name used by
``Contract.subscribe`` and ``Contract.get_logs``.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Event:
    @property
    def event(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class Entered(Event):
    player: str


@dataclass(frozen=True)
class CalculationRequested(Event):
    request_id: int


@dataclass(frozen=True)
class WinnerPicked(Event):
    winner: str


@dataclass(frozen=True)
class SubscriptionCreated(Event):
    sub_id: int
    owner: str


@dataclass(frozen=True)
class SubscriptionFunded(Event):
    sub_id: int
    old_balance: int
    new_balance: int


@dataclass(frozen=True)
class ConsumerAdded(Event):
    sub_id: int
    consumer: str


@dataclass(frozen=True)
class RandomWordsRequested(Event):
    request_id: int
    key_hash: bytes
    sub_id: int
    minimum_request_confirmations: int
    callback_gas_limit: int
    num_words: int
    sender: str


@dataclass(frozen=True)
class RandomWordsFulfilled(Event):
    request_id: int
    payment: int
