"""
Command line interface for the transaction processor.

    transaction-processor [-v] FILE [FILE ...]

Reads every CSV file in order, applies the transactions, and writes the final
account report as CSV to stdout. Rows that cannot be decoded or applied are
logged and skipped. A file that cannot be opened is fatal.
"""

import argparse
import sys
from typing import IO, List, Optional, Sequence

from .config import get_config
from .csv_io import CSVReader, CSVWriter
from .exceptions import FailedToOpenFileError, TransactionProcessorError
from .logging_config import get_logger, setup_logging
from .transactions import TransactionProcessor


logger = get_logger("transaction_processor.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transaction-processor",
        description="Apply CSV transactions to client accounts and print the final balances."
    )
    parser.add_argument("input_files", nargs="+", metavar="FILE", help="input csv file")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def process_files(input_files: Sequence[str], output: IO[str]) -> TransactionProcessor:
    """
    Process the transactions in the given files and write a CSV report.

    Raises:
        FailedToOpenFileError: If any input file cannot be opened. Nothing is
            written to ``output`` in that case.
    """
    processor = TransactionProcessor()

    for path in input_files:
        logger.info(f"Reading file {path}")

        try:
            stream = open(path, encoding="utf-8-sig", errors="replace", newline="")
        except OSError as e:
            raise FailedToOpenFileError(path, e) from e

        with stream:
            for record in CSVReader(stream).read():
                if not record.ok:
                    logger.error(f"Got error '{record.error}' reading CSV. Skipping transaction.")
                    continue

                try:
                    processor.apply(record.transaction)
                except TransactionProcessorError as e:
                    logger.error(
                        f"Got error '{e}' processing transaction on line {record.line}. Skipping."
                    )

    writer = CSVWriter(output)
    writer.write_all(processor.snapshot())

    return processor


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``transaction-processor`` command"""
    args = build_parser().parse_args(argv)

    config = get_config()
    setup_logging(
        level="DEBUG" if args.verbose else config.log_level,
        fmt=config.log_format,
        log_file=config.log_file
    )

    try:
        process_files(args.input_files, sys.stdout)
    except FailedToOpenFileError as e:
        logger.error(str(e))
        return 1

    return 0
