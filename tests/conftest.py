"""
Shared fixtures: a small two-property portfolio evaluated in March 2024.

    Maple Court (owner-1)
      Building A / Unit 1A  $1800  Alice (lease L1, March paid)
      Building B / Unit 2B  $1500  vacant (Dan's ended lease L4)
    Oak Plaza (owner-2)
      Tower / 101           $1200  Bob $600 (L2, March failed) + Carol $500 (L3, no March row)
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from properly.schemas.rental import (
    Building,
    Lease,
    LeaseStatus,
    MaintenancePriority,
    MaintenanceRequest,
    MaintenanceStatus,
    Payment,
    PaymentStatus,
    Property,
    Tenant,
    TenantStatus,
    Transaction,
    TransactionCategory,
    TransactionType,
    Unit,
    UnitOccupant,
)
from properly.schemas.snapshot import PortfolioSnapshot


def make_lease(id="L1", unit_id="U1", tenant_id="T1", rent="1800", status=LeaseStatus.ACTIVE,
               start=date(2023, 6, 1), end=None) -> Lease:
    return Lease(
        id=id,
        unit_id=unit_id,
        tenant_id=tenant_id,
        monthly_rent=Decimal(rent),
        status=status,
        lease_start=start,
        lease_end=end,
    )


def make_payment(id="PAY1", lease_id="L1", due=date(2024, 3, 1), status=PaymentStatus.PROCESSING,
                 amount="1800", tenant_id="T1") -> Payment:
    return Payment(
        id=id,
        lease_id=lease_id,
        tenant_id=tenant_id,
        amount=Decimal(amount),
        due_date=due,
        status=status,
    )


def make_tx(category, tx_type, amount, day=date(2024, 3, 1), property_id="P1", owner_id="owner-1", id=None) -> Transaction:
    return Transaction(
        id=id or f"tx-{category.value}-{tx_type.value}-{amount}-{day.isoformat()}",
        transaction_date=day,
        property_id=property_id,
        owner_id=owner_id,
        category=category,
        type=tx_type,
        amount=Decimal(amount),
    )


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 3, 15, 12, 0)


@pytest.fixture
def maple_court() -> Property:
    return Property(
        id="P1",
        name="Maple Court",
        address="12 Maple Ave, Springfield",
        owner_id="owner-1",
        manager_id="mgr-1",
        buildings=[
            Building(id="B1", name="Building A", units=[
                Unit(id="U1", building_id="B1", name="Unit 1A", beds=2, baths=Decimal("1"),
                     monthly_rent=Decimal("1800"),
                     tenants=[UnitOccupant(tenant_id="T1", name="Alice Johnson", rent_portion=Decimal("1800"))]),
            ]),
            Building(id="B2", name="Building B", units=[
                Unit(id="U2", building_id="B2", name="Unit 2B", beds=1, baths=Decimal("1"),
                     monthly_rent=Decimal("1500")),
            ]),
        ],
    )


@pytest.fixture
def oak_plaza() -> Property:
    return Property(
        id="P2",
        name="Oak Plaza",
        address="400 Oak St",
        owner_id="owner-2",
        buildings=[
            Building(id="B3", name="Tower", units=[
                Unit(id="U3", building_id="B3", name="101", beds=3, baths=Decimal("2"),
                     monthly_rent=Decimal("1200"),
                     tenants=[
                         UnitOccupant(tenant_id="T2", name="Bob Smith", rent_portion=Decimal("600")),
                         UnitOccupant(tenant_id="T3", name="Carol White", rent_portion=Decimal("500")),
                     ]),
            ]),
        ],
    )


@pytest.fixture
def snapshot(maple_court, oak_plaza) -> PortfolioSnapshot:
    Income, Expense = TransactionCategory.INCOME, TransactionCategory.EXPENSE
    return PortfolioSnapshot(
        properties=[maple_court, oak_plaza],
        tenants=[
            Tenant(id="T1", name="Alice Johnson", email="alice@example.com", phone="555-0101"),
            Tenant(id="T2", name="Bob Smith", email="bob@example.com"),
            Tenant(id="T3", name="Carol White"),
            Tenant(id="T4", name="Dan Brown", status=TenantStatus.PAST),
        ],
        leases=[
            make_lease("L1", "U1", "T1", "1800", end=date(2024, 5, 31)),
            make_lease("L2", "U3", "T2", "600", end=date(2025, 1, 31)),
            make_lease("L3", "U3", "T3", "500"),
            make_lease("L4", "U2", "T4", "1500", status=LeaseStatus.ENDED,
                       start=date(2022, 1, 1), end=date(2023, 12, 31)),
        ],
        payments=[
            make_payment("PAY0", "L1", date(2024, 2, 1), PaymentStatus.PAID),
            make_payment("PAY1", "L1", date(2024, 3, 1), PaymentStatus.PAID),
            make_payment("PAY2", "L2", date(2024, 3, 1), PaymentStatus.FAILED, amount="600", tenant_id="T2"),
        ],
        transactions=[
            make_tx(Income, TransactionType.RENT, "1800", date(2024, 3, 1), "P1", "owner-1"),
            make_tx(Expense, TransactionType.MAINTENANCE, "300", date(2024, 3, 10), "P1", "owner-1"),
            make_tx(Income, TransactionType.LATE_FEE, "50", date(2024, 2, 5), "P2", "owner-2"),
            make_tx(Expense, TransactionType.TAXES, "200", date(2024, 1, 15), "P2", "owner-2"),
            make_tx(Income, TransactionType.RENT, "1100", date(2023, 12, 1), "P2", "owner-2"),
        ],
        maintenance_requests=[
            MaintenanceRequest(id="M1", issue="Leaking faucet", property_id="P1", unit_name="Unit 1A",
                               priority=MaintenancePriority.HIGH, status=MaintenanceStatus.NEW,
                               submitted_date=date(2024, 3, 2)),
            MaintenanceRequest(id="M2", issue="Broken heater", property_id="P2", unit_name="101",
                               priority=MaintenancePriority.EMERGENCY, status=MaintenanceStatus.COMPLETED,
                               submitted_date=date(2024, 1, 10)),
            MaintenanceRequest(id="M3", issue="Repaint hallway", property_id="P1", unit_name="",
                               priority=MaintenancePriority.LOW, status=MaintenanceStatus.IN_PROGRESS,
                               submitted_date=date(2024, 2, 20)),
        ],
    )


def with_records(snapshot: PortfolioSnapshot, **changes) -> PortfolioSnapshot:
    """A fresh snapshot (with fresh lookup caches) with some record sets replaced."""
    data = {name: getattr(snapshot, name) for name in PortfolioSnapshot.model_fields}
    data.update(changes)
    return PortfolioSnapshot(**data)
