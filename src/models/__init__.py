"""
Domain Models
"""
from .dashboard import (
    CountryProductRevenue,
    DashboardSnapshot,
    MonthlySales,
    ProductFrequency,
    RegionRevenue,
    ViewKind,
)
from .transaction import TRANSACTION_COLUMNS, UNSET_DATE, Transaction

__all__ = [
    "CountryProductRevenue",
    "DashboardSnapshot",
    "MonthlySales",
    "ProductFrequency",
    "RegionRevenue",
    "ViewKind",
    "TRANSACTION_COLUMNS",
    "UNSET_DATE",
    "Transaction",
]
