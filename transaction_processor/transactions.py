"""
Transaction Processing Module

Defines the closed set of transaction kinds (deposit, withdrawal, dispute,
resolve, chargeback) and the TransactionProcessor that routes each incoming
transaction to the right client account, creating accounts on first
reference.

Transactions must be applied in the order received: a dispute only works if
the deposit/withdrawal it references was applied first, and a resolve or
chargeback only works once the dispute exists.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union, assert_never

from .accounts import ClientAccount, ClientId, DisputeResolution, TransactionId
from .currency import CurrencyAmount, amount_from
from .reporting import ReportEntry, generate_report
from .logging_config import get_logger


MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TRANSACTION_ID = 2 ** 32 - 1


@dataclass(frozen=True)
class Deposit:
    """Increases the available funds by ``amount``"""
    amount: CurrencyAmount

    def __post_init__(self):
        object.__setattr__(self, 'amount', amount_from(self.amount))


@dataclass(frozen=True)
class Withdrawal:
    """Reduces the available funds by ``amount``"""
    amount: CurrencyAmount

    def __post_init__(self):
        object.__setattr__(self, 'amount', amount_from(self.amount))


@dataclass(frozen=True)
class Dispute:
    """Disputes the earlier transaction with the same ``tx``"""


@dataclass(frozen=True)
class Resolve:
    """Resolves the dispute on the earlier transaction with the same ``tx``"""


@dataclass(frozen=True)
class Chargeback:
    """Charges back the disputed transaction with the same ``tx``"""


TransactionType = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]


@dataclass(frozen=True)
class Transaction:
    """
    A single transaction against a client account.

    For deposits and withdrawals ``tx`` is a new transaction id. For disputes,
    resolutions and chargebacks it is the id of an existing transaction.
    """
    client: ClientId
    tx: TransactionId
    transaction_type: TransactionType

    def __post_init__(self):
        if not 0 <= self.client <= MAX_CLIENT_ID:
            raise ValueError(f"Client id {self.client} out of range 0..{MAX_CLIENT_ID}")
        if not 0 <= self.tx <= MAX_TRANSACTION_ID:
            raise ValueError(f"Transaction id {self.tx} out of range 0..{MAX_TRANSACTION_ID}")


class TransactionProcessor:
    """
    Processes a stream of transactions with ``apply`` and reports the final
    state of every account with ``snapshot``.
    """

    def __init__(self):
        self._accounts: Dict[ClientId, ClientAccount] = {}
        self.logger = get_logger("transaction_processor.transactions")

    @property
    def accounts(self) -> List[ClientAccount]:
        """All accounts in ascending client id order"""
        return [self._accounts[client] for client in sorted(self._accounts)]

    def get_account(self, client: ClientId) -> Optional[ClientAccount]:
        """Get an account without creating it"""
        return self._accounts.get(client)

    def _get_or_create_account(self, client: ClientId) -> ClientAccount:
        account = self._accounts.get(client)
        if account is None:
            account = ClientAccount(client=client)
            self._accounts[client] = account
            self.logger.debug(f"Created account for client {client}")
        return account

    def apply(self, transaction: Transaction) -> None:
        """
        Apply a single transaction.

        The client account is created if it does not exist yet, even when the
        transaction itself then fails.

        Raises:
            TransactionError: If the transaction cannot be applied. The
                account is left unchanged.
            OutOfBoundsError: If a balance would overflow. The account is
                left unchanged.
        """
        account = self._get_or_create_account(transaction.client)
        payload = transaction.transaction_type
        tx = transaction.tx

        if isinstance(payload, Deposit):
            account.deposit(tx, payload.amount)
        elif isinstance(payload, Withdrawal):
            account.withdraw(tx, payload.amount)
        elif isinstance(payload, Dispute):
            account.create_dispute(tx)
        elif isinstance(payload, Resolve):
            account.resolve_dispute(tx, DisputeResolution.RESOLVE)
        elif isinstance(payload, Chargeback):
            account.resolve_dispute(tx, DisputeResolution.CHARGEBACK)
        else:
            assert_never(payload)

    def snapshot(self) -> List[ReportEntry]:
        """Report on every account, see ``reporting.generate_report``"""
        return generate_report(self._accounts)
