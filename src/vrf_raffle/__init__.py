from vrf_raffle.raffle import Raffle, RaffleState

__all__ = ["Raffle", "RaffleState"]
