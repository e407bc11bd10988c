"""
Unit Tests - Sample Data Generator
"""
from datetime import date

import polars as pl

from src.aggregation.pipeline import IngestionPipeline
from src.data.generators import COUNTRY_REGIONS, PRODUCTS, TransactionGenerator
from src.models.transaction import TRANSACTION_COLUMNS


class TestTransactionGenerator:
    """Tests for TransactionGenerator"""

    def test_columns_and_rows(self):
        """Generated frames have the ingestion column layout"""
        df = TransactionGenerator(seed=1).generate(200)

        assert df.columns == list(TRANSACTION_COLUMNS)
        assert len(df) == 200

    def test_values_are_consistent(self):
        """Totals, regions and products come from the configured catalog"""
        df = TransactionGenerator(seed=2).generate(300)

        assert df["country"].is_in(list(COUNTRY_REGIONS)).all()
        assert df["product_name"].is_in([name for name, _, _ in PRODUCTS]).all()
        assert (df["quantity"] >= 1).all()
        assert (df["stock_quantity"] > 0).all()
        for country, region in zip(df["country"].to_list()[:50], df["region"].to_list()[:50]):
            assert region in COUNTRY_REGIONS[country]

        diff = (df["total_price"] - df["price"] * df["quantity"]).abs()
        assert (diff < 0.011).all()

    def test_dates_within_window(self):
        """Transaction dates fall inside the configured window"""
        end = date(2024, 6, 30)
        df = TransactionGenerator(seed=3, days=90).generate(100, end_date=end)

        dates = df["transaction_date"].str.strptime(pl.Date, "%Y-%m-%d")
        assert dates.max() <= end
        assert dates.min() >= date(2024, 4, 1)

    def test_seeded_output_is_reproducible(self):
        """The same seed produces the same rows"""
        end = date(2024, 1, 1)
        first = TransactionGenerator(seed=7).generate(50, end_date=end)
        second = TransactionGenerator(seed=7).generate(50, end_date=end)

        assert first.equals(second)

    def test_write_csv_is_ingestible(self, tmp_path):
        """Written sample files ingest cleanly"""
        path = TransactionGenerator(seed=4).write_csv(tmp_path / "nested" / "sample.csv", n=250)

        snapshot, report = IngestionPipeline(workers=2).run(path)

        assert path.exists()
        assert report.rows_ingested == 250
        assert report.rows_skipped == 0
        assert sum(r.transaction_count for r in snapshot.country_revenues) == 250
