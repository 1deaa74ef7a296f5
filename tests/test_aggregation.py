"""Tests for annual aggregation of payroll entries."""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from payroll_statutory.calculators.aggregation import aggregate_entries

from tests.factories import make_snapshot

ORG_ID = uuid4()
FY = "2023-2024"


def by_profile(records):
    return {r.profile_id: r for r in records}


class TestAggregateEntries:
    """Test grouping and summing by employee."""

    def test_sums_salary_and_tds_per_employee(self):
        """Two runs for one employee: 60000 + 62000 gross, 3000 + 3200 TDS."""
        employee = uuid4()
        entries = [
            make_snapshot(gross="60000", profile_id=employee, tds_amount=Decimal("3000")),
            make_snapshot(gross="62000", profile_id=employee, tds_amount=Decimal("3200")),
        ]

        records = aggregate_entries(entries, ORG_ID, FY)

        assert len(records) == 1
        record = records[0]
        assert record.profile_id == employee
        assert record.organization_id == ORG_ID
        assert record.financial_year == FY
        assert record.total_salary == Decimal("122000")
        assert record.total_tds == Decimal("6200")

    def test_missing_tds_counts_as_zero(self):
        employee = uuid4()
        entries = [
            make_snapshot(gross="40000", profile_id=employee, tds_amount=None),
            make_snapshot(gross="41000", profile_id=employee, tds_amount=Decimal("500")),
        ]

        record = aggregate_entries(entries, ORG_ID, FY)[0]

        assert record.total_salary == Decimal("81000")
        assert record.total_tds == Decimal("500")

    def test_one_record_per_employee(self):
        a, b, c = uuid4(), uuid4(), uuid4()
        entries = [
            make_snapshot(gross="100", profile_id=a),
            make_snapshot(gross="200", profile_id=b),
            make_snapshot(gross="300", profile_id=a),
            make_snapshot(gross="400", profile_id=c),
        ]

        records = by_profile(aggregate_entries(entries, ORG_ID, FY))

        assert set(records) == {a, b, c}
        assert records[a].total_salary == Decimal("400")
        assert records[b].total_salary == Decimal("200")
        assert records[c].total_salary == Decimal("400")

    def test_split_across_runs_matches_combined(self):
        """Totals do not depend on how the year is split across runs."""
        employee = uuid4()
        split = [
            make_snapshot(gross="30000", profile_id=employee, tds_amount=Decimal("1000")),
            make_snapshot(gross="20000", profile_id=employee, tds_amount=Decimal("500")),
        ]
        combined = [
            make_snapshot(gross="50000", profile_id=employee, tds_amount=Decimal("1500")),
        ]
        stamp = datetime(2024, 4, 15, tzinfo=timezone.utc)

        assert aggregate_entries(split, ORG_ID, FY, stamp) == aggregate_entries(
            combined, ORG_ID, FY, stamp
        )

    def test_batch_shares_one_timestamp(self):
        entries = [make_snapshot(gross="1"), make_snapshot(gross="2"), make_snapshot(gross="3")]

        records = aggregate_entries(entries, ORG_ID, FY)

        assert len({r.generated_at for r in records}) == 1
        assert records[0].generated_at.tzinfo is not None

    def test_explicit_timestamp(self):
        stamp = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
        records = aggregate_entries([make_snapshot()], ORG_ID, FY, generated_at=stamp)
        assert records[0].generated_at == stamp

    def test_empty_input(self):
        assert aggregate_entries([], ORG_ID, FY) == []

    def test_to_row(self):
        stamp = datetime(2024, 5, 1, tzinfo=timezone.utc)
        employee = uuid4()
        record = aggregate_entries(
            [make_snapshot(gross="1000", profile_id=employee, tds_amount=Decimal("10"))],
            ORG_ID,
            FY,
            stamp,
        )[0]

        assert record.to_row() == {
            "profile_id": employee,
            "organization_id": ORG_ID,
            "financial_year": FY,
            "total_salary": Decimal("1000"),
            "total_tds": Decimal("10"),
            "generated_at": stamp,
        }
