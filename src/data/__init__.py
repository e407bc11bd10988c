"""
Data Generation Module
"""
from .generators import COUNTRY_REGIONS, PRODUCTS, TransactionGenerator

__all__ = [
    "COUNTRY_REGIONS",
    "PRODUCTS",
    "TransactionGenerator",
]
