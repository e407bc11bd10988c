"""
Unit Tests - Snapshot Builder
"""
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from src.aggregation.aggregator import (
    AggregationState,
    CountryProductTotals,
    MonthTotals,
    ProductTotals,
    RegionTotals,
)
from src.aggregation.snapshot import (
    build_snapshot,
    sort_country_revenues,
    sort_monthly_sales,
    sort_top_products,
    sort_top_regions,
)
from src.models.dashboard import DashboardSnapshot, ViewKind
from src.models.transaction import Transaction


class TestSortViews:
    """Tests for view ordering and truncation"""

    def test_country_revenues_descending(self):
        """Country revenues sort by total revenue, highest first"""
        result = sort_country_revenues([
            CountryProductTotals("USA", "Laptop", 1000.0, 5),
            CountryProductTotals("UK", "Phone", 2000.0, 3),
            CountryProductTotals("Germany", "Tablet", 1500.0, 4),
        ])

        assert [r.country for r in result] == ["UK", "Germany", "USA"]

    def test_country_revenue_ties_break_on_names(self):
        """Equal revenues order by country then product name"""
        result = sort_country_revenues([
            CountryProductTotals("USA", "Mouse", 10.0, 1),
            CountryProductTotals("UK", "Mouse", 10.0, 1),
            CountryProductTotals("UK", "Keyboard", 10.0, 1),
        ])

        assert [(r.country, r.product_name) for r in result] == [
            ("UK", "Keyboard"), ("UK", "Mouse"), ("USA", "Mouse"),
        ]

    def test_top_products_truncated(self):
        """Top products keep the highest purchase counts up to the limit"""
        totals = [ProductTotals(f"Product {i:02d}", i, 10) for i in range(25)]

        result = sort_top_products(totals, limit=20)

        assert len(result) == 20
        assert result[0].purchase_count == 24
        assert result[-1].purchase_count == 5

    def test_top_products_shorter_than_limit(self):
        """Fewer products than the limit are all kept"""
        result = sort_top_products([ProductTotals("A", 1, 0), ProductTotals("B", 2, 0)], limit=20)

        assert [p.product_name for p in result] == ["B", "A"]

    def test_monthly_sales_by_year_then_sales(self):
        """Months sort by year descending, then by sales descending"""
        result = sort_monthly_sales([
            MonthTotals(2023, 12, "December", 3000.0, 30),
            MonthTotals(2024, 1, "January", 1000.0, 10),
            MonthTotals(2024, 2, "February", 1500.0, 15),
            MonthTotals(2023, 11, "November", 2500.0, 25),
        ])

        assert [(m.year, m.month) for m in result] == [
            (2024, "February"), (2024, "January"), (2023, "December"), (2023, "November"),
        ]

    def test_top_regions_truncated(self):
        """Top regions keep the highest revenues up to the limit"""
        totals = [RegionTotals(f"Region {i:02d}", float(i), i) for i in range(35)]

        result = sort_top_regions(totals, limit=30)

        assert len(result) == 30
        assert result[0].region == "Region 34"

    def test_no_limit_keeps_everything(self):
        """A limit of None disables truncation"""
        totals = [RegionTotals(f"Region {i:02d}", float(i), i) for i in range(35)]

        assert len(sort_top_regions(totals, limit=None)) == 35

    def test_money_rounded_to_cents(self):
        """Monetary totals are reported to two decimals"""
        result = sort_country_revenues([CountryProductTotals("USA", "Mouse", 0.1 + 0.2, 2)])

        assert result[0].total_revenue == 0.3


class TestBuildSnapshot:
    """Tests for build_snapshot"""

    def test_builds_all_views(self):
        """The snapshot carries every view plus metadata"""
        state = AggregationState()
        state.fold(Transaction(country="USA", region="Texas", product_name="Laptop",
                               quantity=2, total_price=1000.0, stock_quantity=5,
                               transaction_date=datetime(2024, 3, 1)))
        state.fold(Transaction(country="UK", region="Wales", product_name="Phone",
                               quantity=1, total_price=800.0,
                               transaction_date=datetime(2024, 3, 9)))
        built_at = datetime(2024, 4, 1, tzinfo=timezone.utc)

        snapshot = build_snapshot(state, timedelta(seconds=2), built_at=built_at)

        assert len(snapshot.country_revenues) == 2
        assert len(snapshot.top_products) == 2
        assert snapshot.monthly_sales[0].total_sales == 1800.0
        assert snapshot.top_regions[0].region == "Texas"
        assert snapshot.last_updated == built_at
        assert snapshot.processing_duration == timedelta(seconds=2)
        assert snapshot.record_count == 2

    def test_empty_state(self):
        """An empty run yields empty views but is stamped as built"""
        snapshot = build_snapshot(AggregationState(), timedelta(0))

        assert snapshot.country_revenues == ()
        assert snapshot.record_count == 0
        assert snapshot.last_updated is not None


class TestDashboardSnapshot:
    """Tests for the snapshot model"""

    def test_empty_snapshot(self):
        """The initial snapshot has empty views and no timestamp"""
        snapshot = DashboardSnapshot.empty()

        assert snapshot.is_empty
        for kind in ViewKind:
            assert snapshot.view(kind) == ()

    def test_view_by_name(self):
        """Views can be looked up by their string name"""
        snapshot = DashboardSnapshot.empty()

        assert snapshot.view("top_regions") == ()

    def test_unknown_view(self):
        """Unknown view names are rejected"""
        with pytest.raises(ValueError):
            DashboardSnapshot.empty().view("best_customers")

    def test_snapshot_is_frozen(self):
        """Published snapshots cannot be mutated"""
        snapshot = DashboardSnapshot.empty()

        with pytest.raises(ValidationError):
            snapshot.record_count = 5
