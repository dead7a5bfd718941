from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field

Money = Annotated[Decimal, Field(ge=0, max_digits=14, decimal_places=2)]


# ─── Enumerations ──────────────────────────────────────────────────────────

class LeaseStatus(str, Enum):
    ACTIVE = "Active"
    ENDED = "Ended"
    FUTURE = "Future"


class PaymentStatus(str, Enum):
    """Persisted payment states. Upcoming/Overdue are never stored."""
    PROCESSING = "Processing"
    PAID = "Paid"
    FAILED = "Failed"


class RentStatus(str, Enum):
    """Display states computed by the rent roll, never persisted."""
    PAID = "Paid"
    OVERDUE = "Overdue"
    UPCOMING = "Upcoming"


class PaymentMethod(str, Enum):
    CARD = "Card"
    BANK_TRANSFER = "Bank Transfer"
    ACH = "ACH"
    CHECK = "Check"
    CASH = "Cash"
    OTHER = "Other"


class UnitStatus(str, Enum):
    VACANT = "Vacant"
    OCCUPIED = "Occupied"


class TenantStatus(str, Enum):
    ACTIVE = "Active"
    PENDING = "Pending"
    PAST = "Past"


class TransactionCategory(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


class TransactionType(str, Enum):
    RENT = "Rent"
    LATE_FEE = "Late Fee"
    PARKING = "Parking"
    MAINTENANCE = "Maintenance"
    TAXES = "Taxes"
    UTILITIES = "Utilities"
    INSURANCE = "Insurance"
    MANAGEMENT_FEE = "Management Fee"
    OTHER = "Other"


class MaintenancePriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    EMERGENCY = "Emergency"


class MaintenanceStatus(str, Enum):
    NEW = "New"
    IN_PROGRESS = "In Progress"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"


# ─── Property / Building / Unit ────────────────────────────────────────────

class UnitOccupant(BaseModel):
    """A tenant assigned to a unit, with their share of the rent."""
    model_config = ConfigDict(frozen=True)

    tenant_id: str
    name: str
    rent_portion: Money = Decimal("0")


class Unit(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    building_id: str
    name: str                       # "Unit 1", "A", "Main", etc.
    beds: int = 0
    baths: Decimal = Decimal("0")
    sqft: int | None = None
    monthly_rent: Money
    tenants: tuple[UnitOccupant, ...] = ()

    @computed_field
    @property
    def status(self) -> UnitStatus:
        return UnitStatus.OCCUPIED if self.tenants else UnitStatus.VACANT


class Building(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    units: tuple[Unit, ...] = ()


class Property(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    address: str = ""
    owner_id: str
    manager_id: str | None = None
    buildings: tuple[Building, ...] = ()


# ─── Tenant ────────────────────────────────────────────────────────────────

class Tenant(BaseModel):
    """Tenant directory — minimal contact info."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    status: TenantStatus = TenantStatus.ACTIVE


# ─── Lease ─────────────────────────────────────────────────────────────────

class Lease(BaseModel):
    """Defines occupancy and rent terms for a unit."""
    model_config = ConfigDict(frozen=True)

    id: str
    unit_id: str
    tenant_id: str
    monthly_rent: Money
    status: LeaseStatus = LeaseStatus.ACTIVE
    lease_start: date
    lease_end: date | None = None


# ─── Payment ───────────────────────────────────────────────────────────────

class Payment(BaseModel):
    """One billing period's charge for one lease."""
    model_config = ConfigDict(frozen=True)

    id: str
    lease_id: str
    tenant_id: str
    amount: Money
    due_date: date
    paid_date: date | None = None
    status: PaymentStatus = PaymentStatus.PROCESSING
    method: PaymentMethod = PaymentMethod.OTHER


# ─── Ledger ────────────────────────────────────────────────────────────────

class Transaction(BaseModel):
    """Append-only ledger entry."""
    model_config = ConfigDict(frozen=True)

    id: str
    transaction_date: date
    property_id: str
    owner_id: str
    category: TransactionCategory
    type: TransactionType
    amount: Money


# ─── Maintenance ───────────────────────────────────────────────────────────

class MaintenanceRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    issue: str
    property_id: str
    unit_name: str = ""
    priority: MaintenancePriority = MaintenancePriority.MEDIUM
    status: MaintenanceStatus = MaintenanceStatus.NEW
    submitted_date: date


# ─── Capital projects ──────────────────────────────────────────────────────

class ProjectExpense(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str
    amount: Money
    expense_date: date
    vendor: str | None = None


class CapitalProject(BaseModel):
    """A budgeted improvement; actual cost is always derived from its expenses."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    property_id: str
    budget: Money
    expenses: tuple[ProjectExpense, ...] = ()

    @computed_field
    @property
    def actual_cost(self) -> Decimal:
        return sum((e.amount for e in self.expenses), Decimal("0")).quantize(Decimal("0.01"))

    @computed_field
    @property
    def budget_remaining(self) -> Decimal:
        return (self.budget - self.actual_cost).quantize(Decimal("0.01"))
