"""
Unit Tests - Ingestion Pipeline
"""
import pytest

from src.aggregation.pipeline import IngestionPipeline
from src.config import IngestionSettings
from src.ingestion.errors import HeaderReadError, IngestionError, SourceUnavailableError


class TestIngestionPipeline:
    """Tests for IngestionPipeline.run"""

    def test_builds_snapshot(self, pipeline, write_csv, sample_rows):
        """A run produces all four views and a report"""
        path = write_csv(sample_rows)

        snapshot, report = pipeline.run(path)

        top = snapshot.country_revenues[0]
        assert (top.country, top.product_name) == ("USA", "Laptop")
        assert top.total_revenue == 1500.0
        assert top.transaction_count == 2

        assert [p.product_name for p in snapshot.top_products] == ["Mouse", "Laptop", "Phone"]
        assert [(m.year, m.month) for m in snapshot.monthly_sales] == [
            (2024, "January"), (2024, "February"), (2023, "November"), (2023, "December"),
        ]
        assert snapshot.top_regions[0].region == "California"

        assert snapshot.record_count == 5
        assert snapshot.last_updated is not None
        assert report.rows_ingested == 5
        assert report.rows_skipped == 0
        assert report.groups == 4
        assert report.workers == 3

    def test_transaction_counts_match_rows(self, pipeline, write_csv, row):
        """Every valid row contributes exactly once to country revenues"""
        rows = [
            row(transaction_id=f"TXN{i}", country=f"Country {i % 6}", product_name=f"Product {i % 9}")
            for i in range(500)
        ]
        path = write_csv(rows)

        snapshot, _ = pipeline.run(path)

        assert sum(r.transaction_count for r in snapshot.country_revenues) == 500
        assert sum(r.items_sold for r in snapshot.top_regions) == 500

    def test_view_limits(self, pipeline, write_csv, row):
        """Top products and top regions are truncated to their limits"""
        rows = [
            row(transaction_id=f"TXN{i}", product_name=f"Product {i}", region=f"Region {i}")
            for i in range(40)
        ]
        path = write_csv(rows)

        snapshot, _ = pipeline.run(path)

        assert len(snapshot.top_products) == 20
        assert len(snapshot.top_regions) == 30
        assert len(snapshot.country_revenues) == 40

    def test_custom_limits(self, write_csv, row):
        """Configured limits override the defaults"""
        rows = [row(transaction_id=f"TXN{i}", product_name=f"P{i}", region=f"R{i}") for i in range(10)]
        path = write_csv(rows)
        pipeline = IngestionPipeline(workers=2, top_products_limit=3, top_regions_limit=None)

        snapshot, _ = pipeline.run(path)

        assert len(snapshot.top_products) == 3
        assert len(snapshot.top_regions) == 10

    def test_unparseable_price_counts_without_revenue(self, pipeline, write_csv, row):
        """A bad total_price adds nothing to revenue but the row still counts"""
        path = write_csv([
            row(transaction_id="TXN1", total_price="100"),
            row(transaction_id="TXN2", total_price="n/a"),
        ])

        snapshot, report = pipeline.run(path)

        group = snapshot.country_revenues[0]
        assert group.total_revenue == 100.0
        assert group.transaction_count == 2
        assert report.rows_ingested == 2

    def test_skipped_rows_reported(self, pipeline, write_csv, row):
        """Malformed rows are excluded from the views and counted in the report"""
        path = write_csv([row(), ["TXN9", "2024-01-01"]])

        snapshot, report = pipeline.run(path)

        assert report.rows_ingested == 1
        assert report.rows_skipped == 1
        assert snapshot.record_count == 1

    def test_idempotent(self, pipeline, write_csv, row):
        """Running the same file twice yields identical views"""
        rows = [
            row(
                transaction_id=f"TXN{i}",
                country=f"Country {i % 5}",
                region=f"Region {i % 11}",
                product_name=f"Product {i % 13}",
                total_price=f"{(i % 17) * 3.33:.2f}",
                quantity=str(i % 4 + 1),
                transaction_date=f"2024-{i % 12 + 1:02d}-15",
            )
            for i in range(1000)
        ]
        path = write_csv(rows)

        first, _ = pipeline.run(path)
        second, _ = pipeline.run(path)

        assert first.country_revenues == second.country_revenues
        assert first.monthly_sales == second.monthly_sales
        assert first.top_regions == second.top_regions
        assert first.top_products == second.top_products

    def test_header_only_file(self, pipeline, write_csv):
        """A file with a header and no rows yields an empty but built snapshot"""
        snapshot, report = pipeline.run(write_csv([]))

        assert snapshot.country_revenues == ()
        assert snapshot.record_count == 0
        assert not snapshot.is_empty
        assert report.rows_ingested == 0

    def test_missing_file_is_fatal(self, pipeline, tmp_path):
        """An unopenable source fails the run"""
        with pytest.raises(SourceUnavailableError):
            pipeline.run(tmp_path / "missing.csv")

    def test_empty_file_is_fatal(self, pipeline, tmp_path):
        """A source without a header fails the run"""
        path = tmp_path / "empty.csv"
        path.write_text("")

        with pytest.raises(HeaderReadError):
            pipeline.run(path)

    def test_unexpected_errors_are_wrapped(self, write_csv, sample_rows, monkeypatch):
        """Errors raised by workers surface as IngestionError"""
        def broken_fold(self, tx):
            raise RuntimeError("boom")

        monkeypatch.setattr("src.aggregation.aggregator.AggregationState.fold", broken_fold)
        pipeline = IngestionPipeline(workers=2, queue_size=100)

        with pytest.raises(IngestionError, match="boom"):
            pipeline.run(write_csv(sample_rows))

    def test_rejects_zero_workers(self):
        """At least one worker is required"""
        with pytest.raises(ValueError):
            IngestionPipeline(workers=0)

    @pytest.mark.parametrize("limits", [{"top_products_limit": -1}, {"top_regions_limit": 0}])
    def test_rejects_non_positive_limits(self, limits):
        """View limits are positive or None"""
        with pytest.raises(ValueError):
            IngestionPipeline(**limits)

    def test_from_settings(self):
        """Pipeline parameters come from the ingestion settings section"""
        settings = IngestionSettings(workers=5, queue_size=64, top_products_limit=7)

        pipeline = IngestionPipeline.from_settings(settings)

        assert pipeline.workers == 5
        assert pipeline.queue_size == 64
        assert pipeline.top_products_limit == 7
