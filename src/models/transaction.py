"""
Transaction Record

One ingested transaction row. Records are created per row by the parser and
folded into the aggregates straight away; they are never retained.
"""

from dataclasses import dataclass, field
from datetime import datetime

# Zero value for dates that are missing or match none of the known formats
UNSET_DATE = datetime.min

# Logical columns declared by the source header
TRANSACTION_COLUMNS = (
    "transaction_id",
    "transaction_date",
    "user_id",
    "country",
    "region",
    "product_id",
    "product_name",
    "category",
    "price",
    "quantity",
    "total_price",
    "stock_quantity",
    "added_date",
)


@dataclass
class Transaction:
    """A single typed transaction record"""
    transaction_id: str = ""
    user_id: str = ""
    product_id: str = ""
    country: str = ""
    region: str = ""
    category: str = ""
    product_name: str = ""
    price: float = 0.0
    quantity: int = 0
    total_price: float = 0.0
    stock_quantity: int = 0
    transaction_date: datetime = field(default=UNSET_DATE)
    added_date: datetime = field(default=UNSET_DATE)
