import csv
import logging
import re
from typing import Dict, Iterator, Optional, TextIO

from errors import DecodeError
from models import Amount, ClientId, Transaction, TransactionId, TransactionType

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("type", "client", "tx")

# Plain ASCII forms only: no digit separators, no non-ASCII digits
ID_PATTERN = re.compile(r"[0-9]+")
AMOUNT_PATTERN = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def parse_row(row: Dict[str, str], line_number: int = 0) -> Transaction:
    """
    Parse a header-keyed CSV row into a Transaction.

    Keys and values are whitespace-trimmed. Cells missing from a short row may
    be None. The amount of a dispute, resolve or chargeback row is ignored.

    Raises:
        DecodeError: unknown type, bad id, or missing/invalid amount
    """
    normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

    type_str = normalized.get("type", "")
    try:
        transaction_type = TransactionType(type_str.lower())
    except ValueError:
        raise DecodeError(line_number, f'Unrecognised transaction type "{type_str}"') from None

    try:
        client_id = ClientId(_parse_id(normalized.get("client", "")))
        transaction_id = TransactionId(_parse_id(normalized.get("tx", "")))
    except ValueError as e:
        raise DecodeError(line_number, f"invalid id: {e}") from None

    amount: Optional[Amount] = None
    if transaction_type.carries_amount:
        amount_str = normalized.get("amount", "")
        if not amount_str:
            raise DecodeError(line_number, f'{transaction_type.value.capitalize()} "amount" field is blank')
        if not AMOUNT_PATTERN.fullmatch(amount_str):
            raise DecodeError(line_number, f"invalid amount: {amount_str!r}")
        try:
            amount = Amount.from_decimal(amount_str)
        except ValueError as e:
            raise DecodeError(line_number, str(e)) from None

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str) -> int:
    if not ID_PATTERN.fullmatch(value):
        raise ValueError(f"not an unsigned integer: {value!r}")
    return int(value)


class TransactionReader:
    """Iterates over the transactions of a CSV stream, in file order."""

    def __init__(self, stream: TextIO):
        self._reader = csv.DictReader(stream, skipinitialspace=True)

    def __iter__(self) -> Iterator[Transaction]:
        try:
            fieldnames = self._reader.fieldnames
            if fieldnames is None:
                logger.info("Input is empty, no transactions to read")
                return

            columns = {name.strip() for name in fieldnames if name is not None}
            missing = [name for name in REQUIRED_COLUMNS if name not in columns]
            if missing:
                raise DecodeError(self._reader.line_num, f"header is missing column(s): {', '.join(missing)}")

            for row in self._reader:
                yield parse_row(row, self._reader.line_num)
        except csv.Error as e:
            # e.g. a field over csv.field_size_limit()
            raise DecodeError(self._reader.line_num, str(e)) from None
