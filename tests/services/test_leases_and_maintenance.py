"""Unit tests for lease expirations, maintenance selection and capital projects."""
from datetime import date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from conftest import make_lease, with_records
from properly.schemas.rental import CapitalProject, MaintenancePriority, ProjectExpense
from properly.services.capital_projects import is_over_budget, log_expense
from properly.services.leases import expiring_leases
from properly.services.maintenance import open_requests, urgent_requests


class TestExpiringLeases:
    def test_within_window(self, snapshot, now):
        leases = expiring_leases(snapshot, now)
        assert [e.lease_id for e in leases] == ["L1"]
        assert leases[0].days_left == 77
        assert leases[0].unit_name == "Unit 1A"

    def test_wider_window_sorted_soonest_first(self, snapshot, now):
        assert [e.lease_id for e in expiring_leases(snapshot, now, within_days=365)] == ["L1", "L2"]

    def test_already_ended_is_excluded(self, snapshot):
        assert expiring_leases(snapshot, datetime(2024, 6, 1)) == []

    def test_unresolved_lease_is_skipped(self, snapshot, now):
        stray = make_lease(id="L9", unit_id="U404", end=date(2024, 4, 1))
        data = with_records(snapshot, leases=(*snapshot.leases, stray))
        assert [e.lease_id for e in expiring_leases(data, now)] == ["L1"]


class TestMaintenance:
    def test_open_requests(self, snapshot):
        assert [r.id for r in open_requests(snapshot.maintenance_requests)] == ["M1", "M3"]

    def test_urgent_requests_exclude_completed_and_low(self, snapshot):
        assert [r.id for r in urgent_requests(snapshot.maintenance_requests)] == ["M1"]

    def test_urgent_newest_first(self, snapshot):
        newer = snapshot.maintenance_requests[0].model_copy(
            update={"id": "M4", "priority": MaintenancePriority.EMERGENCY, "submitted_date": date(2024, 3, 10)}
        )
        requests = [*snapshot.maintenance_requests, newer]
        assert [r.id for r in urgent_requests(requests)] == ["M4", "M1"]
        assert [r.id for r in urgent_requests(requests, limit=1)] == ["M4"]


class TestCapitalProjects:
    @pytest.fixture
    def roof(self):
        return CapitalProject(id="CP1", name="New roof", property_id="P1", budget=Decimal("10000"))

    def test_new_project_has_no_cost(self, roof):
        assert roof.actual_cost == Decimal("0.00")
        assert roof.budget_remaining == Decimal("10000.00")

    def test_log_expense_returns_new_project(self, roof):
        updated = log_expense(roof, ProjectExpense(description="Shingles", amount=Decimal("4200.50"),
                                                   expense_date=date(2024, 3, 1), vendor="RoofCo"))
        assert roof.expenses == ()
        assert updated.actual_cost == Decimal("4200.50")
        assert updated.budget_remaining == Decimal("5799.50")

    def test_over_budget(self, roof):
        expense = ProjectExpense(description="Everything", amount=Decimal("10000.01"), expense_date=date(2024, 3, 1))
        assert not is_over_budget(roof)
        assert is_over_budget(log_expense(roof, expense))

    def test_negative_expense_rejected(self):
        with pytest.raises(ValidationError):
            ProjectExpense(description="Refund", amount=Decimal("-1"), expense_date=date(2024, 3, 1))
