"""
Synthetic Transaction Generator

Generates realistic transaction rows for development and testing, in the
same column layout the ingestion pipeline reads.
"""

import random
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Union

import polars as pl
import structlog
from faker import Faker

from src.models.transaction import TRANSACTION_COLUMNS

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

COUNTRY_REGIONS = {
    "USA": ["California", "Texas", "New York", "Florida", "Illinois"],
    "Canada": ["Ontario", "Quebec", "British Columbia", "Alberta"],
    "UK": ["England", "Scotland", "Wales", "Northern Ireland"],
    "Germany": ["Bavaria", "Berlin", "Hamburg", "Hesse"],
    "France": ["Ile-de-France", "Provence", "Normandy", "Brittany"],
    "Japan": ["Kanto", "Kansai", "Hokkaido", "Kyushu"],
    "Australia": ["New South Wales", "Victoria", "Queensland"],
    "Brazil": ["Sao Paulo", "Rio de Janeiro", "Bahia"],
    "India": ["Maharashtra", "Karnataka", "Delhi", "Tamil Nadu"],
    "China": ["Guangdong", "Shanghai", "Beijing", "Zhejiang"],
}

# (name, category, unit price range)
PRODUCTS = [
    ("Wireless Headphones", "Electronics", (49.0, 299.0)),
    ("Smartphone", "Electronics", (199.0, 1199.0)),
    ("Laptop", "Computers", (499.0, 2499.0)),
    ("Tablet", "Computers", (149.0, 999.0)),
    ("Smartwatch", "Wearables", (99.0, 499.0)),
    ("Camera", "Electronics", (299.0, 1899.0)),
    ("Gaming Console", "Gaming", (299.0, 599.0)),
    ("Keyboard", "Accessories", (19.0, 199.0)),
    ("Mouse", "Accessories", (9.0, 129.0)),
    ("Monitor", "Computers", (129.0, 899.0)),
    ("Speakers", "Audio", (39.0, 499.0)),
    ("Microphone", "Audio", (29.0, 349.0)),
    ("Webcam", "Accessories", (29.0, 199.0)),
    ("Router", "Networking", (49.0, 399.0)),
    ("Hard Drive", "Storage", (49.0, 249.0)),
    ("SSD", "Storage", (59.0, 399.0)),
    ("Graphics Card", "Components", (249.0, 1999.0)),
    ("Processor", "Components", (149.0, 799.0)),
    ("Memory", "Components", (39.0, 299.0)),
    ("Motherboard", "Components", (99.0, 599.0)),
]

DATE_FORMAT = "%Y-%m-%d"


# =============================================================================
# GENERATOR
# =============================================================================

class TransactionGenerator:
    """
    Generate transaction rows with per-product stock that drains over time.

    Example:
        generator = TransactionGenerator(seed=42)
        generator.write_csv("data/sample_transactions.csv", n=5000)
    """

    def __init__(self, seed: Optional[int] = 42, days: int = 730, n_users: int = 500):
        self.rng = random.Random(seed)
        self.fake = Faker()
        if seed is not None:
            self.fake.seed_instance(seed)
        self.days = days
        self.user_ids = [f"USER-{i:05d}" for i in range(1, n_users + 1)]
        self.product_ids = {name: f"PROD-{i:04d}" for i, (name, _, _) in enumerate(PRODUCTS, start=1)}

    def generate(self, n: int = 1000, end_date: Optional[date] = None) -> pl.DataFrame:
        """Generate n transaction rows"""
        end_date = end_date or date.today()
        start_date = end_date - timedelta(days=self.days)

        stock: Dict[str, int] = {name: self.rng.randint(200, 1000) for name, _, _ in PRODUCTS}
        added: Dict[str, date] = {
            name: start_date - timedelta(days=self.rng.randint(0, 365)) for name, _, _ in PRODUCTS
        }

        rows: List[dict] = []
        for i in range(n):
            name, category, (low, high) = self.rng.choice(PRODUCTS)
            country = self.rng.choice(list(COUNTRY_REGIONS))
            region = self.rng.choice(COUNTRY_REGIONS[country])

            price = round(self.rng.uniform(low, high), 2)
            quantity = self.rng.randint(1, 5)

            # Restock once the shelf runs dry
            stock[name] -= quantity
            if stock[name] <= 0:
                stock[name] = self.rng.randint(200, 1000)
                added[name] = start_date + timedelta(days=self.rng.randint(0, self.days))

            transaction_date = self.fake.date_between(start_date=start_date, end_date=end_date)

            rows.append({
                "transaction_id": f"TXN-{i + 1:08d}",
                "transaction_date": transaction_date.strftime(DATE_FORMAT),
                "user_id": self.rng.choice(self.user_ids),
                "country": country,
                "region": region,
                "product_id": self.product_ids[name],
                "product_name": name,
                "category": category,
                "price": price,
                "quantity": quantity,
                "total_price": round(price * quantity, 2),
                "stock_quantity": stock[name],
                "added_date": added[name].strftime(DATE_FORMAT),
            })

        return pl.DataFrame(rows).select(list(TRANSACTION_COLUMNS))

    def write_csv(self, path: Union[str, Path], n: int = 1000) -> Path:
        """Generate n rows and write them as CSV"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        df = self.generate(n)
        df.write_csv(path)

        logger.info("Sample transactions written", file=str(path), rows=len(df))
        return path
