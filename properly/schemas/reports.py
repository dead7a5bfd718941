from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from properly.schemas.rental import RentStatus, TransactionCategory, TransactionType

# Filter sentinels meaning "no filter"
ALL_PROPERTIES = "All Properties"
ALL_STATUSES = "All Statuses"


# ─── Rent roll ─────────────────────────────────────────────────────────────

class RentRollItem(BaseModel):
    """Current-period status of one active lease. Recomputed on demand, never stored."""
    model_config = ConfigDict(frozen=True)

    id: str                 # "{lease_id}:{tenant_id}"
    lease_id: str
    tenant_id: str
    tenant_name: str
    property_name: str
    unit_name: str
    rent: Decimal
    due_date: date
    status: RentStatus
    balance: Decimal


class RentRoll(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: tuple[RentRollItem, ...] = ()
    skipped: int = 0
    duplicate_lease_ids: tuple[str, ...] = ()


class RentRollSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_rent: Decimal
    total_overdue: Decimal
    total_paid: Decimal
    collected_percentage: Decimal
    paid_count: int
    overdue_count: int
    upcoming_count: int


# ─── Occupancy ─────────────────────────────────────────────────────────────

class PropertyMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    property_id: str | None = None
    property_name: str | None = None
    total_units: int
    occupied_units: int
    vacant_units: int
    revenue: Decimal
    occupancy_percentage: Decimal


class VacantUnit(BaseModel):
    model_config = ConfigDict(frozen=True)

    property_id: str
    property_name: str
    building_name: str
    unit_id: str
    unit_name: str
    market_rent: Decimal
    beds: int
    baths: Decimal


class RentSplitMismatch(BaseModel):
    """Occupied unit whose tenant rent portions do not add up to the unit rent."""
    model_config = ConfigDict(frozen=True)

    property_name: str
    unit_id: str
    unit_name: str
    unit_rent: Decimal
    assigned_rent: Decimal
    difference: Decimal


class ExpiringLease(BaseModel):
    model_config = ConfigDict(frozen=True)

    lease_id: str
    tenant_name: str
    property_name: str
    unit_name: str
    lease_end: date
    days_left: int


# ─── Financials ────────────────────────────────────────────────────────────

class FinancialSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_revenue: Decimal
    total_expenses: Decimal
    noi: Decimal
    profit_margin: Decimal


class BreakdownItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: TransactionType
    label: str
    value: Decimal
    color: str


class MonthlyBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int
    name: str
    income: Decimal
    expenses: Decimal


class PropertyFinancials(BaseModel):
    model_config = ConfigDict(frozen=True)

    property_id: str
    property_name: str
    revenue: Decimal
    expenses: Decimal
    noi: Decimal


class StatementLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    account: str
    category: TransactionCategory
    amount: Decimal


class ProfitAndLoss(BaseModel):
    model_config = ConfigDict(frozen=True)

    income: tuple[StatementLine, ...] = ()
    expenses: tuple[StatementLine, ...] = ()
    total_income: Decimal
    total_expenses: Decimal
    noi: Decimal


class FinancialOverview(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    summary: FinancialSummary
    income_breakdown: tuple[BreakdownItem, ...] = ()
    expense_breakdown: tuple[BreakdownItem, ...] = ()
    monthly: tuple[MonthlyBucket, ...] = ()
    properties: tuple[PropertyFinancials, ...] = ()
    skipped: int = 0


# ─── Report previews ───────────────────────────────────────────────────────

class ReportType(str, Enum):
    RENT_ROLL = "Rent Roll"
    PROFIT_AND_LOSS = "Profit & Loss Statement"
    OWNER_STATEMENT = "Owner Statement"
    TENANT_DIRECTORY = "Tenant Directory"
    LEASE_EXPIRATION = "Lease Expiration Report"
    VACANCY = "Vacancy Report"
    OPEN_MAINTENANCE = "Open Maintenance Requests"
    MAINTENANCE_HISTORY = "Maintenance History"


class ReportFilters(BaseModel):
    """Inclusive date bounds (either may be absent), property name and owner scope."""
    model_config = ConfigDict(frozen=True)

    date_from: date | None = None
    date_to: date | None = None
    property_name: str = ALL_PROPERTIES
    owner_id: str | None = None


class ReportPreview(BaseModel):
    """Row-set plus explicit column list; enough to render any report as a table."""
    model_config = ConfigDict(frozen=True)

    title: str
    columns: tuple[str, ...]
    rows: tuple[dict[str, Any], ...] = ()
    total_rows: int = 0
    # Source records left out for unresolved references
    skipped: int = 0
    # Leases with more than one payment row in the period (first row used)
    duplicate_lease_ids: tuple[str, ...] = ()

    def head(self, n: int) -> "ReportPreview":
        return self.model_copy(update={"rows": self.rows[:n]})


class PortfolioReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    portfolio: PropertyMetrics
    properties: tuple[PropertyMetrics, ...] = ()
    vacant_units: tuple[VacantUnit, ...] = ()
    rent_split_mismatches: tuple[RentSplitMismatch, ...] = ()


class RentRollReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    rent_roll: RentRoll
    summary: RentRollSummary
    due: tuple[RentRollItem, ...] = ()
    expiring_leases: tuple[ExpiringLease, ...] = ()
