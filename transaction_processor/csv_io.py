"""
CSV Input/Output Module

Decodes transaction rows (``type, client, tx, amount``) into Transaction
objects and encodes report entries as ``client,available,held,total,locked``
rows.

Decoding is forgiving about layout: headers and fields are trimmed, short
rows and trailing extra fields are accepted, blank rows are skipped. Each
data row yields exactly one DecodedRecord, carrying either a transaction or
the error that prevented decoding it, so one bad row never ends the stream.
"""

from dataclasses import dataclass
from typing import IO, Iterable, Iterator, List, Optional
from enum import Enum
import csv

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .currency import CurrencyAmount
from .exceptions import CSVParseError, DecodeError, MissingAmountError
from .reporting import REPORT_HEADERS, ReportEntry
from .transactions import (
    MAX_CLIENT_ID, MAX_TRANSACTION_ID, Chargeback, Deposit, Dispute, Resolve,
    Transaction, TransactionType, Withdrawal
)


class CSVTransactionType(str, Enum):
    """Values of the ``type`` column"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class CSVEntry(BaseModel):
    """One validated input row"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    transaction_type: CSVTransactionType = Field(..., alias="type")
    client: int = Field(..., ge=0, le=MAX_CLIENT_ID)
    tx: int = Field(..., ge=0, le=MAX_TRANSACTION_ID)
    amount: Optional[CurrencyAmount] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        if value is None or isinstance(value, CurrencyAmount):
            return value
        if isinstance(value, str):
            if value == "":
                return None
            return CurrencyAmount.parse(value)
        raise ValueError("amount must be a decimal string")

    def to_transaction(self, line: int) -> Transaction:
        """
        Build the transaction for this row.

        Raises:
            MissingAmountError: If a deposit or withdrawal has no amount
        """
        payload: TransactionType
        if self.transaction_type is CSVTransactionType.DEPOSIT:
            payload = Deposit(self._require_amount(line))
        elif self.transaction_type is CSVTransactionType.WITHDRAWAL:
            payload = Withdrawal(self._require_amount(line))
        elif self.transaction_type is CSVTransactionType.DISPUTE:
            payload = Dispute()
        elif self.transaction_type is CSVTransactionType.RESOLVE:
            payload = Resolve()
        else:
            payload = Chargeback()

        return Transaction(client=self.client, tx=self.tx, transaction_type=payload)

    def _require_amount(self, line: int) -> CurrencyAmount:
        if self.amount is None:
            raise MissingAmountError(line)
        return self.amount


@dataclass(frozen=True)
class DecodedRecord:
    """Outcome of decoding one data row"""
    line: int
    transaction: Optional[Transaction] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "row"
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)


class CSVReader:
    """Reads transactions from a CSV text stream with a header row"""

    def __init__(self, stream: Iterable[str]):
        self._reader = csv.reader(stream)

    def read(self) -> Iterator[DecodedRecord]:
        """Yield one DecodedRecord per non-blank data row, in input order"""
        headers: Optional[List[str]] = None

        while True:
            try:
                row = next(self._reader)
            except StopIteration:
                return
            except csv.Error as e:
                # the reader drops the rest of the bad row and resumes on the next one
                line = self._reader.line_num
                yield DecodedRecord(line=line, error=CSVParseError(line, str(e)))
                continue

            fields = [value.strip() for value in row]
            if not any(fields):
                continue

            if headers is None:
                headers = fields
                continue

            line = self._reader.line_num
            data = dict(zip(headers, fields))

            try:
                entry = CSVEntry.model_validate(data)
            except ValidationError as e:
                yield DecodedRecord(line=line, error=CSVParseError(line, _describe(e)))
                continue

            try:
                yield DecodedRecord(line=line, transaction=entry.to_transaction(line))
            except DecodeError as e:
                yield DecodedRecord(line=line, error=e)


class CSVWriter:
    """Writes report entries as CSV with a header row"""

    def __init__(self, stream: IO[str]):
        self._writer = csv.writer(stream, lineterminator="\n")
        self._header_written = False

    def _write_header(self) -> None:
        if not self._header_written:
            self._writer.writerow(REPORT_HEADERS)
            self._header_written = True

    def write(self, entry: ReportEntry) -> None:
        self._write_header()
        self._writer.writerow(entry.to_row())

    def write_all(self, entries: Iterable[ReportEntry]) -> None:
        for entry in entries:
            self.write(entry)
        self.finish()

    def finish(self) -> None:
        """Make sure the header is present even for an empty report"""
        self._write_header()
