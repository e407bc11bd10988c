"""
Transaction Record Parser

Turns one raw CSV row into a typed Transaction using a header-derived
column map. Parsing is tolerant:
- missing columns leave the field at its zero value
- unparseable numbers become zero
- unparseable dates become UNSET_DATE
so a row is never rejected for field-level problems.
"""

import math
from datetime import datetime
from typing import Dict, Optional, Sequence

from src.models.transaction import UNSET_DATE, Transaction

# Tried in order, first match wins
DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%Y/%m/%d",
)

_STRING_FIELDS = (
    "transaction_id",
    "user_id",
    "product_id",
    "product_name",
    "category",
    "country",
    "region",
)


def normalize_column_name(name: str) -> str:
    """Case-fold and trim a header name"""
    return name.replace("\ufeff", "").strip().lower()


def build_column_map(header: Sequence[str]) -> Dict[str, int]:
    """
    Map normalized header names to their column index.

    Duplicate names resolve to the last occurrence.
    """
    return {normalize_column_name(name): idx for idx, name in enumerate(header)}


def _cell(row: Sequence[str], columns: Dict[str, int], name: str) -> Optional[str]:
    idx = columns.get(name)
    if idx is None or idx >= len(row):
        return None
    return row[idx].strip()


def parse_float(value: Optional[str]) -> float:
    """Parse a float, returning 0.0 for anything unparseable or non-finite"""
    if not value:
        return 0.0
    try:
        number = float(value)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_int(value: Optional[str]) -> int:
    """Parse a base-10 integer, returning 0 for anything unparseable"""
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0


def parse_date(value: Optional[str]) -> datetime:
    """Parse a date using DATE_FORMATS, returning UNSET_DATE if none match"""
    if not value:
        return UNSET_DATE
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return UNSET_DATE


def parse_transaction(row: Sequence[str], columns: Dict[str, int]) -> Transaction:
    """
    Build a Transaction from a raw row.

    Args:
        row: Raw field values
        columns: Normalized column name to index map (see build_column_map)

    Returns:
        Transaction with every available field populated
    """
    transaction = Transaction()

    for name in _STRING_FIELDS:
        value = _cell(row, columns, name)
        if value is not None:
            setattr(transaction, name, value)

    transaction.price = parse_float(_cell(row, columns, "price"))
    transaction.total_price = parse_float(_cell(row, columns, "total_price"))
    transaction.quantity = parse_int(_cell(row, columns, "quantity"))
    transaction.stock_quantity = parse_int(_cell(row, columns, "stock_quantity"))

    transaction.transaction_date = parse_date(_cell(row, columns, "transaction_date"))
    transaction.added_date = parse_date(_cell(row, columns, "added_date"))

    return transaction
