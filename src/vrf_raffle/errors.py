class RaffleError(Exception):
    """Base class for every revert raised by the raffle and its collaborators."""


class InsufficientPayment(RaffleError):
    def __init__(self, paid, required):
        self.paid = paid
        self.required = required
        super().__init__(f"Not enough ETH entered: paid {paid}, required {required}")


class NotOpen(RaffleError):
    def __init__(self):
        super().__init__("Raffle not open")


class UpkeepNotNeeded(RaffleError):
    def __init__(self, balance, num_players, raffle_state):
        self.balance = balance
        self.num_players = num_players
        self.raffle_state = raffle_state
        super().__init__(
            f"Upkeep not needed (balance={balance}, players={num_players}, state={raffle_state})"
        )


class UnknownRequest(RaffleError):
    def __init__(self, request_id):
        self.request_id = request_id
        super().__init__(f"nonexistent request: {request_id}")


class NotCalculating(RaffleError):
    def __init__(self):
        super().__init__("Not calculating winner")


class NoRandomWords(RaffleError):
    def __init__(self, request_id):
        self.request_id = request_id
        super().__init__(f"No random words delivered for request {request_id}")


class TransferFailed(RaffleError):
    def __init__(self, recipient, amount):
        self.recipient = recipient
        self.amount = amount
        super().__init__(f"Transfer of {amount} wei to {recipient} failed")


class OnlyCoordinatorCanFulfill(RaffleError):
    def __init__(self, have, want):
        self.have = have
        self.want = want
        super().__init__(f"Only coordinator can fulfill: have {have}, want {want}")


class InsufficientFunds(RaffleError):
    def __init__(self, account, balance, amount):
        self.account = account
        self.balance = balance
        self.amount = amount
        super().__init__(f"{account} has {balance} wei, cannot send {amount}")


class ContractNotFound(RaffleError):
    def __init__(self, address):
        self.address = address
        super().__init__(f"No contract deployed at {address}")


class ConfigError(RaffleError):
    pass


class CoordinatorError(RaffleError):
    pass


class InvalidSubscription(CoordinatorError):
    def __init__(self, sub_id):
        self.sub_id = sub_id
        super().__init__(f"Invalid subscription {sub_id}")


class InvalidConsumer(CoordinatorError):
    def __init__(self, sub_id, consumer):
        self.sub_id = sub_id
        self.consumer = consumer
        super().__init__(f"{consumer} is not a consumer of subscription {sub_id}")


class MustBeSubOwner(CoordinatorError):
    def __init__(self, owner):
        self.owner = owner
        super().__init__(f"Must be subscription owner {owner}")


class InsufficientBalance(CoordinatorError):
    def __init__(self, sub_id, balance, payment):
        self.sub_id = sub_id
        self.balance = balance
        self.payment = payment
        super().__init__(f"Subscription {sub_id} has {balance}, fulfilment costs {payment}")


class NumWordsTooBig(CoordinatorError):
    def __init__(self, have, want):
        self.have = have
        self.want = want
        super().__init__(f"Too many random words requested: {have} > {want}")
