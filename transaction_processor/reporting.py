"""
Reporting Module

Builds the end-of-run snapshot of every client account.
"""

from dataclasses import dataclass
from typing import List, Mapping

from .accounts import ClientAccount, ClientId
from .currency import CurrencyAmount
from .exceptions import CurrencyError
from .logging_config import get_logger, log_action


REPORT_HEADERS = ["client", "available", "held", "total", "locked"]

logger = get_logger("transaction_processor.reporting")


@dataclass(frozen=True)
class ReportEntry:
    """State of a single client account in a generated report"""
    client: ClientId
    available: CurrencyAmount
    held: CurrencyAmount
    total: CurrencyAmount  # available + held
    locked: bool

    def to_row(self) -> List[str]:
        """Fields as strings, in REPORT_HEADERS order"""
        return [
            str(self.client),
            str(self.available),
            str(self.held),
            str(self.total),
            "true" if self.locked else "false"
        ]


def generate_report(accounts: Mapping[ClientId, ClientAccount]) -> List[ReportEntry]:
    """
    Generate a report of every account in ascending client id order.

    An account whose total cannot be computed without overflow is left out
    of the report and an error is logged. Accounts are not modified.
    """
    entries = []
    for client in sorted(accounts):
        account = accounts[client]
        try:
            total = account.total()
        except CurrencyError as e:
            log_action(
                logger, "error", f"Skipping account {client} due to error finding total: {e}",
                action="report", client=client
            )
            continue

        entries.append(ReportEntry(
            client=client,
            available=account.available,
            held=account.held,
            total=total,
            locked=account.locked
        ))

    return entries
