import copy
import functools
import logging
from collections import defaultdict

from vrf_raffle import chain

logger = logging.getLogger(__name__)


def external(fn):
    """Run a state-changing method as one transaction.

    Storage, balances and events touched by the call are discarded if it raises.
    """

    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        with chain.transaction():
            saved = copy.deepcopy(self._storage)
            chain.on_revert(lambda: setattr(self, "_storage", saved))
            return fn(self, *args, **kwargs)

    return wrapper


class Contract:
    """Base for objects living at an address in ``boa.env``."""

    def __init__(self, alias=None):
        self.address = chain.generate_address(alias or type(self).__name__)
        self._storage = None
        self._logs = []
        self._subscribers = defaultdict(list)
        chain.register(self)

    def __repr__(self):
        return f"<{type(self).__name__} at {self.address}>"

    def get_balance(self) -> int:
        return chain.balance_of(self.address)

    def get_logs(self, event_name=None):
        if event_name is None:
            return list(self._logs)
        return [log for log in self._logs if log.event == event_name]

    def subscribe(self, event_name, callback):
        self._subscribers[event_name].append(callback)
        return lambda: self._subscribers[event_name].remove(callback)

    def once(self, event_name, callback):
        def handler(event):
            unsubscribe()
            callback(event)

        unsubscribe = self.subscribe(event_name, handler)
        return unsubscribe

    def _emit(self, event):
        chain.emit(self, event)

    def _record(self, event):
        self._logs.append(event)
        logger.debug("%s emitted %s", self, event)

    def _notify(self, event):
        for callback in list(self._subscribers[event.event]):
            try:
                callback(event)
            except Exception:
                logger.exception("Subscriber %r to %s on %s failed", callback, event.event, self)
