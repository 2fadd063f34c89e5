"""
Typed Exception Hierarchy

Every failure the processor can report has its own exception class with a
machine-readable ``code`` attribute, so callers catch by type rather than by
parsing messages.

    TransactionProcessorError (base)
    |
    +-- CurrencyError
    |   +-- OutOfBoundsError
    |
    +-- InvalidNumericValueError (also a ValueError)
    |
    +-- TransactionError
    |   +-- TransactionDoesNotExistError
    |   +-- TransactionAlreadyExistsError
    |   +-- DisputeAlreadyExistsError
    |   +-- DisputeDoesNotExistError
    |   +-- AccountIsLockedError
    |   +-- NotEnoughFundsError
    |
    +-- DecodeError
    |   +-- CSVParseError
    |   +-- MissingAmountError
    |
    +-- FailedToOpenFileError

All errors are recoverable at the granularity of a single transaction except
FailedToOpenFileError, which the CLI treats as fatal.
"""


class TransactionProcessorError(Exception):
    """Base exception for all transaction processor errors."""

    code: str = "TRANSACTION_PROCESSOR_ERROR"


# Currency-related exceptions


class CurrencyError(TransactionProcessorError):
    """An arithmetic error occurred on currency amounts."""

    code: str = "CURRENCY_ERROR"


class OutOfBoundsError(CurrencyError):
    """The result of a calculation would overflow/underflow."""

    code: str = "OUT_OF_BOUNDS"

    def __init__(self, message: str = "Out of bounds"):
        super().__init__(message)


class InvalidNumericValueError(TransactionProcessorError, ValueError):
    """The string is not a valid currency amount."""

    code: str = "INVALID_NUMERIC_VALUE"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid numeric value: {value!r}")


# Transaction-related exceptions


class TransactionError(TransactionProcessorError):
    """Base exception for transactions that could not be applied to an account."""

    code: str = "TRANSACTION_ERROR"


class TransactionDoesNotExistError(TransactionError):
    """The referenced transaction is not recorded for this client."""

    code: str = "TRANSACTION_DOES_NOT_EXIST"

    def __init__(self, tx: int):
        self.tx = tx
        super().__init__(f"Transaction {tx} does not exist")


class TransactionAlreadyExistsError(TransactionError):
    """The transaction id has already been used for this client."""

    code: str = "TRANSACTION_ALREADY_EXISTS"

    def __init__(self, tx: int):
        self.tx = tx
        super().__init__(f"Transaction {tx} already exists")


class DisputeAlreadyExistsError(TransactionError):
    """The transaction is already under dispute."""

    code: str = "DISPUTE_ALREADY_EXISTS"

    def __init__(self, tx: int):
        self.tx = tx
        super().__init__(f"Dispute {tx} already exists")


class DisputeDoesNotExistError(TransactionError):
    """The transaction is not currently disputed."""

    code: str = "DISPUTE_DOES_NOT_EXIST"

    def __init__(self, tx: int):
        self.tx = tx
        super().__init__(f"Dispute {tx} does not exist")


class AccountIsLockedError(TransactionError):
    """The account was locked by a chargeback and cannot deposit/withdraw."""

    code: str = "ACCOUNT_IS_LOCKED"

    def __init__(self):
        super().__init__("Account is locked")


class NotEnoughFundsError(TransactionError):
    """The operation would take the available balance below zero."""

    code: str = "NOT_ENOUGH_FUNDS"

    def __init__(self):
        super().__init__("Not enough funds")


# Decoding exceptions


class DecodeError(TransactionProcessorError):
    """Base exception for input rows that could not be turned into transactions."""

    code: str = "DECODE_ERROR"


class CSVParseError(DecodeError):
    """The CSV row is malformed."""

    code: str = "CSV_PARSE_ERROR"

    def __init__(self, line: int, detail: str):
        self.line = line
        self.detail = detail
        super().__init__(f"CSV parse error on line {line}: {detail}")


class MissingAmountError(DecodeError):
    """A deposit or withdrawal row has no amount."""

    code: str = "MISSING_AMOUNT"

    def __init__(self, line: int):
        self.line = line
        super().__init__(f"Transaction parse error on line {line}: Missing amount")


# CLI exceptions


class FailedToOpenFileError(TransactionProcessorError):
    """One of the input files could not be opened."""

    code: str = "FAILED_TO_OPEN_FILE"

    def __init__(self, path: str, error: OSError):
        self.path = path
        self.error = error
        super().__init__(f"Failed to open '{path}': {error}")
