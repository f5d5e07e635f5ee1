"""Domain models for the Transfer primitive."""

from dataclasses import dataclass

from src.bp_account.domain.models import Transaction


@dataclass(frozen=True)
class Leg:
    """One balance mutation of a transfer: delta < 0 debits, delta >= 0 credits."""

    account_id: int
    delta: int
    description: str


@dataclass(frozen=True)
class TransferPlan:
    actor_id: int
    target_id: int
    amount: int
    direction: str                 # TransferDirection value
    legs: tuple[Leg, ...]          # debit legs first
    commission_bps: int | None = None
    bonus: int = 0

    @property
    def is_self_funding(self) -> bool:
        return self.actor_id == self.target_id

    @property
    def net_delta(self) -> int:
        return sum(leg.delta for leg in self.legs)


@dataclass
class TransactionPair:
    """Records written by one Transfer. target_entry is None for self-funding."""

    actor_entry: Transaction
    target_entry: Transaction | None
    plan: TransferPlan

    @property
    def entries(self) -> list[Transaction]:
        if self.target_entry is None:
            return [self.actor_entry]
        return [self.actor_entry, self.target_entry]
