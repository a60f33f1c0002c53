"""Thin layer over ``boa.env`` giving Python contracts EVM-like semantics.

``boa.env`` owns accounts, balances, block time and the current sender
(``boa.env.prank``). This module adds what a contract written in Python needs
on top of that: value transfers, a registry of deployed objects, and
transactions that roll back balances and journaled storage and drop pending
events when the call raises.

Deployed objects and receive hooks are kept per ``boa.env``, so switching the
environment (``boa.set_env``, ``boa.swap_env``) starts from an empty registry.
``boa.env.anchor()`` rewinds balances and time but not the registry: call
``reset()`` when leaving an anchor.
"""
import contextlib
import logging
import weakref

import boa
from eth_utils import to_checksum_address

from vrf_raffle.errors import ContractNotFound, InsufficientFunds

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class _ChainState:
    def __init__(self):
        self.contracts = {}
        self.receive_hooks = {}
        self.frames = []


class _Frame:
    def __init__(self, snapshot_id):
        self.snapshot_id = snapshot_id
        self.undo = []
        self.events = []


class _Rejected(Exception):
    pass


_states = weakref.WeakKeyDictionary()


def _state() -> _ChainState:
    state = _states.get(boa.env)
    if state is None:
        state = _states[boa.env] = _ChainState()
    return state


def msg_sender() -> str:
    return to_checksum_address(boa.env.eoa)


def block_timestamp() -> int:
    return boa.env.evm.patch.timestamp


def generate_address(alias=None) -> str:
    return to_checksum_address(boa.env.generate_address(alias))


def balance_of(address) -> int:
    return boa.env.get_balance(to_checksum_address(address))


def set_balance(address, value: int):
    boa.env.set_balance(to_checksum_address(address), value)


def transfer(sender, recipient, amount: int):
    """Move ``amount`` wei, as the value attached to a call."""
    balance = balance_of(sender)
    if balance < amount:
        raise InsufficientFunds(sender, balance, amount)
    if amount == 0 or sender == recipient:
        return
    set_balance(sender, balance - amount)
    set_balance(recipient, balance_of(recipient) + amount)


def send_value(sender, recipient, amount: int) -> bool:
    """Low-level send; returns False instead of raising when it does not go through.

    A receive hook registered for ``recipient`` runs after the balances move and
    rejects the payment by raising or returning False.
    """
    hook = _state().receive_hooks.get(to_checksum_address(recipient))
    try:
        with transaction():
            transfer(sender, recipient, amount)
            if hook is not None and hook(sender, amount) is False:
                raise _Rejected(recipient)
    except Exception:
        logger.debug("Send of %s wei from %s to %s reverted", amount, sender, recipient, exc_info=True)
        return False
    return True


def set_receive_hook(address, hook):
    _state().receive_hooks[to_checksum_address(address)] = hook


def clear_receive_hook(address):
    _state().receive_hooks.pop(to_checksum_address(address), None)


def register(contract):
    _state().contracts[to_checksum_address(contract.address)] = contract


def lookup(address):
    try:
        return _state().contracts[to_checksum_address(address)]
    except KeyError:
        raise ContractNotFound(address) from None


def reset():
    """Forget deployed objects and receive hooks of the current ``boa.env``."""
    state = _state()
    state.contracts.clear()
    state.receive_hooks.clear()


def on_revert(undo):
    frames = _state().frames
    if frames:
        frames[-1].undo.append(undo)


def emit(contract, event):
    frames = _state().frames
    if frames:
        frames[-1].events.append((contract, event))
    else:
        _dispatch([(contract, event)])


def _dispatch(events):
    # every event is logged before any subscriber runs
    for contract, event in events:
        contract._record(event)
    for contract, event in events:
        contract._notify(event)


@contextlib.contextmanager
def transaction():
    frames = _state().frames
    frame = _Frame(boa.env.evm.snapshot())
    frames.append(frame)
    try:
        yield
    except BaseException:
        frames.pop()
        boa.env.evm.revert(frame.snapshot_id)
        for undo in reversed(frame.undo):
            undo()
        raise
    frames.pop()
    if frames:
        # nested call: its changes stand or fall with the outer one
        frames[-1].undo.extend(frame.undo)
        frames[-1].events.extend(frame.events)
        return
    _dispatch(frame.events)
