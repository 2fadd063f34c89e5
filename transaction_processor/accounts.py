"""
Client Account Module

Per-client ledger state machine. Each account tracks available and held
funds, the signed history of deposits/withdrawals needed to re-derive dispute
amounts, the set of currently disputed transactions, and a lock flag set by
chargebacks.

Every operation is atomic: all arithmetic and precondition checks happen
before any field is written, so a failed operation leaves the account exactly
as it was.
"""

from dataclasses import dataclass, field
from typing import Dict, Set
from enum import Enum

from .currency import CurrencyAmount
from .exceptions import (
    AccountIsLockedError, DisputeAlreadyExistsError, DisputeDoesNotExistError,
    NotEnoughFundsError, TransactionAlreadyExistsError, TransactionDoesNotExistError
)
from .logging_config import get_logger, log_action


ClientId = int
TransactionId = int

logger = get_logger("transaction_processor.accounts")


class DisputeResolution(Enum):
    """Outcomes of a dispute"""
    RESOLVE = "resolve"        # Held funds go back to available
    CHARGEBACK = "chargeback"  # Held funds are removed and the account is locked


@dataclass
class ClientAccount:
    """
    Ledger state for a single client
    """
    client: ClientId
    available: CurrencyAmount = CurrencyAmount.ZERO
    held: CurrencyAmount = CurrencyAmount.ZERO
    locked: bool = False
    # Positive amount for a deposit, negative for a withdrawal
    records: Dict[TransactionId, CurrencyAmount] = field(default_factory=dict)
    active_disputes: Set[TransactionId] = field(default_factory=set)

    def total(self) -> CurrencyAmount:
        """
        Sum of available and held funds

        Raises:
            OutOfBoundsError: If the sum cannot be represented
        """
        return self.available.checked_add(self.held)

    def deposit(self, tx: TransactionId, amount: CurrencyAmount) -> None:
        """
        Increase the available funds by the specified amount.

        Raises:
            AccountIsLockedError: If a chargeback locked the account
            TransactionAlreadyExistsError: If ``tx`` was already recorded
            OutOfBoundsError: If the new balance cannot be represented
            NotEnoughFundsError: If the new available balance is negative
        """
        if self.locked:
            raise AccountIsLockedError()

        if tx in self.records:
            raise TransactionAlreadyExistsError(tx)

        new_available = self.available.checked_add(amount)
        if new_available.is_negative():
            raise NotEnoughFundsError()

        self.records[tx] = amount
        self.available = new_available

        log_action(
            logger, "debug", f"Recorded {amount} for client {self.client}",
            action="deposit", client=self.client, tx=tx,
            extra={"available": str(self.available)}
        )

    def withdraw(self, tx: TransactionId, amount: CurrencyAmount) -> None:
        """Reduce the available funds by the specified amount."""
        self.deposit(tx, -amount)

    def create_dispute(self, tx: TransactionId) -> None:
        """
        Dispute a recorded transaction.

        Moves the value of the transaction from available to held funds and
        marks it as disputed.

        Raises:
            TransactionDoesNotExistError: If ``tx`` is not recorded
            OutOfBoundsError: If either balance cannot be represented
            DisputeAlreadyExistsError: If ``tx`` is already disputed
        """
        amount = self.records.get(tx)
        if amount is None:
            raise TransactionDoesNotExistError(tx)

        new_held = self.held.checked_add(amount)
        new_available = self.available.checked_sub(amount)

        if tx in self.active_disputes:
            raise DisputeAlreadyExistsError(tx)

        self.active_disputes.add(tx)
        self.held = new_held
        self.available = new_available

        log_action(
            logger, "debug", f"Opened dispute for client {self.client}",
            action="dispute", client=self.client, tx=tx,
            extra={"held": str(self.held), "available": str(self.available)}
        )

    def resolve_dispute(self, tx: TransactionId, resolution: DisputeResolution) -> None:
        """
        Close an existing dispute.

        RESOLVE returns the held funds to available. CHARGEBACK removes them,
        forgets the transaction so it can never be disputed again, and locks
        the account.

        Raises:
            TransactionDoesNotExistError: If ``tx`` is not recorded
            OutOfBoundsError: If either balance cannot be represented
            DisputeDoesNotExistError: If ``tx`` is not disputed
        """
        amount = self.records.get(tx)
        if amount is None:
            raise TransactionDoesNotExistError(tx)

        new_held = self.held.checked_sub(amount)
        if resolution is DisputeResolution.RESOLVE:
            new_available = self.available.checked_add(amount)
        else:
            new_available = self.available

        if tx not in self.active_disputes:
            raise DisputeDoesNotExistError(tx)

        self.active_disputes.remove(tx)
        if resolution is DisputeResolution.CHARGEBACK:
            del self.records[tx]
            self.locked = True

        self.held = new_held
        self.available = new_available

        log_action(
            logger, "debug", f"Dispute closed ({resolution.value}) for client {self.client}",
            action=resolution.value, client=self.client, tx=tx,
            extra={"held": str(self.held), "available": str(self.available),
                   "locked": self.locked}
        )
