import boa
from hypothesis import Phase, settings
from hypothesis import strategies as st
from hypothesis.stateful import RuleBasedStateMachine, invariant, precondition, rule

from vrf_raffle import chain, raffle
from vrf_raffle.errors import (
    InsufficientPayment,
    NotCalculating,
    NotOpen,
    UnknownRequest,
    UpkeepNotNeeded,
)
from vrf_raffle.mocks import mock_vrf_coordinator
from vrf_raffle.raffle import RaffleState

ENTRANCE_FEE = 10**16
INTERVAL = 60
STARTING_BALANCE = 10**18
PLAYERS = [chain.generate_address() for _ in range(5)]


def deploy_raffle(entrance_fee=ENTRANCE_FEE, interval=INTERVAL):
    owner = chain.generate_address()
    mock = mock_vrf_coordinator.deploy()
    with boa.env.prank(owner):
        sub_id = mock.create_subscription()
        mock.fund_subscription(sub_id, 10**24)
        raffle_contract = raffle.deploy(entrance_fee, interval, mock.address, b"\x00" * 32, sub_id, 100000)
        mock.add_consumer(sub_id, raffle_contract.address)
    return mock, raffle_contract


class RaffleStateMachine(RuleBasedStateMachine):
    """Random entries, draws and bogus callbacks against a model of the pot."""

    def __init__(self):
        super().__init__()
        self.mock, self.raffle = deploy_raffle()
        for player in PLAYERS:
            boa.env.set_balance(player, STARTING_BALANCE)
        self.entries = []
        self.pot = 0
        self.request_id = None
        print(f"\nStarting new {self.__class__.__name__} test")

    def print_step(self, step_name, **kwargs):
        print(f"Step: {step_name} - {' '.join(f'{k}={v}' for k, v in kwargs.items())}")

    @rule(sender=st.sampled_from(PLAYERS), extra=st.integers(min_value=0, max_value=10**15))
    def enter_raffle(self, sender, extra):
        self.print_step("enter_raffle", sender=sender, extra=extra)
        with boa.env.prank(sender):
            if self.raffle.get_raffle_state() != RaffleState.OPEN:
                try:
                    self.raffle.enter_raffle(value=ENTRANCE_FEE + extra)
                except NotOpen:
                    return
                raise AssertionError("entered a calculating raffle")
            self.raffle.enter_raffle(value=ENTRANCE_FEE + extra)
        self.entries.append(sender)
        self.pot += ENTRANCE_FEE + extra

    @rule(sender=st.sampled_from(PLAYERS), short=st.integers(min_value=1, max_value=ENTRANCE_FEE))
    def enter_underpaid(self, sender, short):
        self.print_step("enter_underpaid", sender=sender, short=short)
        with boa.env.prank(sender):
            try:
                self.raffle.enter_raffle(value=ENTRANCE_FEE - short)
            except InsufficientPayment:
                return
        raise AssertionError("underpaid entry accepted")

    @rule(seconds=st.integers(min_value=0, max_value=2 * INTERVAL))
    def perform_upkeep(self, seconds):
        self.print_step("perform_upkeep", seconds=seconds)
        boa.env.time_travel(seconds=seconds)
        elapsed = chain.block_timestamp() - self.raffle.get_latest_timestamp()
        expected = (
            self.raffle.get_raffle_state() == RaffleState.OPEN and len(self.entries) > 0 and elapsed >= INTERVAL
        )
        assert self.raffle.check_upkeep()[0] == expected
        try:
            request_id = self.raffle.perform_upkeep()
        except UpkeepNotNeeded:
            assert not expected
            return
        assert expected
        assert request_id == self.mock.last_request_id()
        self.request_id = request_id

    @precondition(lambda self: self.request_id is not None)
    @rule(random_value=st.integers(min_value=0, max_value=2**256 - 1))
    def fulfill(self, random_value):
        self.print_step("fulfill", random_value=random_value)
        winner = self.entries[random_value % len(self.entries)]
        winner_balance = boa.env.get_balance(winner)
        self.mock.fulfill_random_words_with_override(self.request_id, self.raffle.address, [random_value])
        assert self.raffle.get_recent_winner() == winner
        assert boa.env.get_balance(winner) == winner_balance + self.pot
        self.entries = []
        self.pot = 0
        self.request_id = None

    @rule(bogus_id=st.integers(min_value=0, max_value=100))
    def bogus_vrf_call(self, bogus_id):
        self.print_step("bogus_vrf_call", bogus_id=bogus_id)
        if bogus_id == self.request_id:
            return
        try:
            with boa.env.prank(self.mock.address):
                self.raffle.fulfill_random_words(bogus_id, [42])
        except (UnknownRequest, NotCalculating):
            return
        raise AssertionError(f"fulfilled unknown request {bogus_id}")

    @invariant()
    def check_state(self):
        state = self.raffle.get_raffle_state()
        assert state in (RaffleState.OPEN, RaffleState.CALCULATING)
        assert self.raffle.get_number_of_players() == len(self.entries)
        assert self.raffle.get_balance() == self.pot
        if state == RaffleState.CALCULATING:
            assert self.raffle.get_number_of_players() > 0
            assert self.raffle.get_pending_request_id() == self.request_id
        else:
            assert self.request_id is None

    @invariant()
    def check_wei_conserved(self):
        total = sum(boa.env.get_balance(player) for player in PLAYERS) + self.raffle.get_balance()
        assert total == STARTING_BALANCE * len(PLAYERS)


class TimeStateMachine(RuleBasedStateMachine):
    """The interval gate: upkeep opens exactly ``INTERVAL`` seconds after the last draw."""

    def __init__(self):
        super().__init__()
        self.mock, self.raffle = deploy_raffle()
        self.player = chain.generate_address()
        boa.env.set_balance(self.player, STARTING_BALANCE)
        self.entered = False
        print(f"\nStarting new {self.__class__.__name__} test")

    @rule(amount=st.integers(min_value=0, max_value=10**17))
    def enter_with_varying_amounts(self, amount):
        boa.env.set_balance(self.player, boa.env.get_balance(self.player) + amount)
        with boa.env.prank(self.player):
            try:
                self.raffle.enter_raffle(value=amount)
                assert amount >= ENTRANCE_FEE, "Should have reverted for insufficient payment"
                self.entered = True
            except InsufficientPayment:
                assert amount < ENTRANCE_FEE, "Should have succeeded with sufficient payment"

    @precondition(lambda self: self.entered)
    @rule(seconds=st.integers(min_value=0, max_value=2 * INTERVAL))
    def time_travel_and_draw(self, seconds):
        last_draw = self.raffle.get_latest_timestamp()
        boa.env.time_travel(seconds=seconds)
        elapsed = chain.block_timestamp() - last_draw
        try:
            request_id = self.raffle.perform_upkeep()
        except UpkeepNotNeeded:
            assert elapsed < INTERVAL, "Should have succeeded after interval"
            return
        assert elapsed >= INTERVAL, "Should have reverted - too soon"
        self.mock.fulfill_random_words(request_id, self.raffle.address)
        assert self.raffle.get_latest_timestamp() > last_draw
        assert self.raffle.get_recent_winner() == self.player
        self.entered = False

    @invariant()
    def check_time_state(self):
        assert self.raffle.get_latest_timestamp() <= chain.block_timestamp()
        assert self.raffle.get_raffle_state() == RaffleState.OPEN


fuzz_settings = settings(
    max_examples=10,
    phases=[Phase.explicit, Phase.reuse, Phase.generate],
    deadline=None,
)

TestRaffleState = fuzz_settings(RaffleStateMachine).TestCase
TestTimeState = fuzz_settings(TimeStateMachine).TestCase
