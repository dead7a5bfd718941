"""
Report filter/projection engine.

Every report is the same three steps over some record set:

  1. select   — inclusive date range, property name ("All Properties" means
                no filter) and any report-specific predicates
  2. project  — map each surviving record to a row keyed by column name
  3. return   — ``ReportPreview(columns, rows)`` so the caller can render a
                table without knowing which report it is

Source records with an unresolvable property, unit or tenant are left out
and counted in ``ReportPreview.skipped``. Owner scope always matches on
property id; property names need not be unique across owners.

Truncating long previews is left to the caller (``ReportPreview.head``).
"""
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import Any, TypeVar

from properly.schemas.rental import LeaseStatus, MaintenanceRequest, Transaction, TransactionCategory
from properly.schemas.reports import (
    ALL_PROPERTIES,
    ReportFilters,
    ReportPreview,
    ReportType,
)
from properly.schemas.snapshot import PortfolioSnapshot, UnitLocation
from properly.services.financials import profit_and_loss, summarize
from properly.services.maintenance import is_open
from properly.services.money import in_date_range
from properly.services.occupancy import vacant_units
from properly.services.rent_roll import build_rent_roll

logger = logging.getLogger(__name__)

T = TypeVar("T")
Predicate = Callable[[T], bool]


# ─── Generic engine ───────────────────────────────────────────────────────────

def select(
    records: Iterable[T],
    filters: ReportFilters | None = None,
    *,
    date_of: Callable[[T], date | None] | None = None,
    property_of: Callable[[T], str | None] | None = None,
    predicates: Sequence[Predicate] = (),
) -> list[T]:
    """
    Records passing every filter. A record without a date is kept only when
    the date range is unbounded.
    """
    filters = filters or ReportFilters()
    bounded = filters.date_from is not None or filters.date_to is not None

    selected = []
    for record in records:
        if property_of is not None and filters.property_name != ALL_PROPERTIES:
            if property_of(record) != filters.property_name:
                continue
        if date_of is not None and bounded:
            day = date_of(record)
            if day is None or not in_date_range(day, filters.date_from, filters.date_to):
                continue
        if not all(predicate(record) for predicate in predicates):
            continue
        selected.append(record)
    return selected


def project(
    title: str,
    records: Iterable[T],
    columns: Sequence[str],
    row: Callable[[T], Mapping[str, Any]],
    filters: ReportFilters | None = None,
    *,
    date_of: Callable[[T], date | None] | None = None,
    property_of: Callable[[T], str | None] | None = None,
    predicates: Sequence[Predicate] = (),
    skipped: int = 0,
) -> ReportPreview:
    """Select, then map each record onto ``columns``; missing keys become None."""
    rows = []
    for record in select(records, filters, date_of=date_of, property_of=property_of, predicates=predicates):
        values = row(record)
        rows.append({column: values.get(column) for column in columns})
    return ReportPreview(
        title=title, columns=tuple(columns), rows=tuple(rows), total_rows=len(rows), skipped=skipped,
    )


# ─── Report catalogue ─────────────────────────────────────────────────────────

def _owner_predicates(snapshot: PortfolioSnapshot, filters: ReportFilters, property_id_of) -> list[Predicate]:
    if filters.owner_id is None:
        return []
    owned = {p.id for p in snapshot.properties_for_owner(filters.owner_id)}
    return [lambda record: property_id_of(record) in owned]


def _transactions(snapshot: PortfolioSnapshot, filters: ReportFilters) -> tuple[list[Transaction], int]:
    """Transactions in scope, plus how many were dropped for an unknown property."""
    known: list[Transaction] = []
    skipped = 0
    for t in snapshot.transactions:
        if t.property_id not in snapshot.property_index:
            logger.warning("Report: skipping transaction %s — unknown property %s", t.id, t.property_id)
            skipped += 1
            continue
        known.append(t)

    predicates: list[Predicate] = []
    if filters.owner_id is not None:
        predicates.append(lambda t: t.owner_id == filters.owner_id)
    selected = select(
        known,
        filters,
        date_of=lambda t: t.transaction_date,
        property_of=lambda t: snapshot.property_name(t.property_id),
        predicates=predicates,
    )
    return selected, skipped


def _maintenance_requests(snapshot: PortfolioSnapshot) -> tuple[list[MaintenanceRequest], int]:
    known: list[MaintenanceRequest] = []
    skipped = 0
    for req in snapshot.maintenance_requests:
        if req.property_id not in snapshot.property_index:
            logger.warning("Report: skipping maintenance request %s — unknown property %s", req.id, req.property_id)
            skipped += 1
            continue
        known.append(req)
    return known, skipped


def rent_roll_report(snapshot: PortfolioSnapshot, filters: ReportFilters, now: date | datetime) -> ReportPreview:
    roll = build_rent_roll(snapshot, now)

    def property_id_of(item):
        return snapshot.unit_index[snapshot.lease_index[item.lease_id].unit_id].property.id

    preview = project(
        ReportType.RENT_ROLL.value,
        roll.items,
        ["Tenant", "Property", "Unit", "Rent", "Balance", "Due Date", "Status"],
        lambda item: {
            "Tenant": item.tenant_name,
            "Property": item.property_name,
            "Unit": item.unit_name,
            "Rent": item.rent,
            "Balance": item.balance,
            "Due Date": item.due_date,
            "Status": item.status.value,
        },
        filters,
        date_of=lambda item: item.due_date,
        property_of=lambda item: item.property_name,
        predicates=_owner_predicates(snapshot, filters, property_id_of),
        skipped=roll.skipped,
    )
    return preview.model_copy(update={"duplicate_lease_ids": roll.duplicate_lease_ids})


def _statement_line(line) -> dict[str, Any]:
    return {"Account": line.account, "Category": line.category.value, "Amount": line.amount}


def profit_and_loss_report(snapshot: PortfolioSnapshot, filters: ReportFilters, now: date | datetime) -> ReportPreview:
    transactions, skipped = _transactions(snapshot, filters)
    statement = profit_and_loss(transactions)
    lines = [
        *(_statement_line(line) for line in statement.income),
        {"Account": "Total Income", "Category": TransactionCategory.INCOME.value, "Amount": statement.total_income},
        *(_statement_line(line) for line in statement.expenses),
        {"Account": "Total Expenses", "Category": TransactionCategory.EXPENSE.value, "Amount": statement.total_expenses},
        {"Account": "Net Operating Income", "Category": "", "Amount": statement.noi},
    ]
    return project(
        ReportType.PROFIT_AND_LOSS.value, lines, ["Account", "Category", "Amount"], lambda r: r, skipped=skipped,
    )


def owner_statement_report(snapshot: PortfolioSnapshot, filters: ReportFilters, now: date | datetime) -> ReportPreview:
    transactions, skipped = _transactions(snapshot, filters)
    summary = summarize(transactions)
    lines = [
        {"Category": "Total Income", "Amount": summary.total_revenue},
        {"Category": "Total Expenses", "Amount": summary.total_expenses},
        {"Category": "Net Operating Income", "Amount": summary.noi},
    ]
    return project(ReportType.OWNER_STATEMENT.value, lines, ["Category", "Amount"], lambda r: r, skipped=skipped)


def tenant_directory_report(snapshot: PortfolioSnapshot, filters: ReportFilters, now: date | datetime) -> ReportPreview:
    # Current home of each tenant: their active lease, else the most recent one.
    homes: dict[str, UnitLocation] = {}
    for lease in sorted(snapshot.leases, key=lambda lease: (lease.status == LeaseStatus.ACTIVE, lease.lease_start)):
        location = snapshot.unit_index.get(lease.unit_id)
        if location is not None:
            homes[lease.tenant_id] = location

    def home(tenant) -> UnitLocation | None:
        return homes.get(tenant.id)

    return project(
        ReportType.TENANT_DIRECTORY.value,
        snapshot.tenants,
        ["Name", "Email", "Phone", "Property", "Unit", "Status"],
        lambda t: {
            "Name": t.name,
            "Email": t.email,
            "Phone": t.phone,
            "Property": home(t).property.name if home(t) else None,
            "Unit": home(t).unit.name if home(t) else None,
            "Status": t.status.value,
        },
        filters,
        property_of=lambda t: home(t).property.name if home(t) else None,
        predicates=_owner_predicates(snapshot, filters, lambda t: home(t).property.id if home(t) else None),
    )


def lease_expiration_report(snapshot: PortfolioSnapshot, filters: ReportFilters, now: date | datetime) -> ReportPreview:
    leases = []
    skipped = 0
    for lease in snapshot.leases:
        location = snapshot.unit_index.get(lease.unit_id)
        tenant = snapshot.tenant_index.get(lease.tenant_id)
        if location is None or tenant is None:
            logger.warning("Lease expiration report: skipping lease %s — unresolved unit or tenant", lease.id)
            skipped += 1
            continue
        leases.append((lease, tenant, location))

    return project(
        ReportType.LEASE_EXPIRATION.value,
        leases,
        ["Tenant", "Property", "Unit", "Lease End Date"],
        lambda rec: {
            "Tenant": rec[1].name,
            "Property": rec[2].property.name,
            "Unit": rec[2].unit.name,
            "Lease End Date": rec[0].lease_end,
        },
        filters,
        date_of=lambda rec: rec[0].lease_end,
        property_of=lambda rec: rec[2].property.name,
        predicates=[
            lambda rec: rec[0].status == LeaseStatus.ACTIVE and rec[0].lease_end is not None,
            *_owner_predicates(snapshot, filters, lambda rec: rec[2].property.id),
        ],
        skipped=skipped,
    )


def vacancy_report(snapshot: PortfolioSnapshot, filters: ReportFilters, now: date | datetime) -> ReportPreview:
    return project(
        ReportType.VACANCY.value,
        vacant_units(snapshot.properties),
        ["Property", "Unit", "Market Rent", "Beds", "Baths"],
        lambda v: {
            "Property": v.property_name,
            "Unit": v.unit_name,
            "Market Rent": v.market_rent,
            "Beds": v.beds,
            "Baths": v.baths,
        },
        filters,
        property_of=lambda v: v.property_name,
        predicates=_owner_predicates(snapshot, filters, lambda v: v.property_id),
    )


def _maintenance_row(snapshot: PortfolioSnapshot):
    def row(req):
        return {
            "Issue": req.issue,
            "Property": snapshot.property_name(req.property_id),
            "Unit": req.unit_name,
            "Priority": req.priority.value,
            "Status": req.status.value,
            "Submitted": req.submitted_date,
        }
    return row


_MAINTENANCE_COLUMNS = ["Issue", "Property", "Unit", "Priority", "Status", "Submitted"]


def open_maintenance_report(snapshot: PortfolioSnapshot, filters: ReportFilters, now: date | datetime) -> ReportPreview:
    requests, skipped = _maintenance_requests(snapshot)
    return project(
        ReportType.OPEN_MAINTENANCE.value,
        requests,
        _MAINTENANCE_COLUMNS,
        _maintenance_row(snapshot),
        filters,
        property_of=lambda req: snapshot.property_name(req.property_id),
        predicates=[is_open, *_owner_predicates(snapshot, filters, lambda req: req.property_id)],
        skipped=skipped,
    )


def maintenance_history_report(snapshot: PortfolioSnapshot, filters: ReportFilters, now: date | datetime) -> ReportPreview:
    requests, skipped = _maintenance_requests(snapshot)
    return project(
        ReportType.MAINTENANCE_HISTORY.value,
        requests,
        _MAINTENANCE_COLUMNS,
        _maintenance_row(snapshot),
        filters,
        date_of=lambda req: req.submitted_date,
        property_of=lambda req: snapshot.property_name(req.property_id),
        predicates=_owner_predicates(snapshot, filters, lambda req: req.property_id),
        skipped=skipped,
    )


REPORT_BUILDERS: dict[ReportType, Callable[[PortfolioSnapshot, ReportFilters, date | datetime], ReportPreview]] = {
    ReportType.RENT_ROLL: rent_roll_report,
    ReportType.PROFIT_AND_LOSS: profit_and_loss_report,
    ReportType.OWNER_STATEMENT: owner_statement_report,
    ReportType.TENANT_DIRECTORY: tenant_directory_report,
    ReportType.LEASE_EXPIRATION: lease_expiration_report,
    ReportType.VACANCY: vacancy_report,
    ReportType.OPEN_MAINTENANCE: open_maintenance_report,
    ReportType.MAINTENANCE_HISTORY: maintenance_history_report,
}


def build_report(
    report_type: ReportType | str,
    snapshot: PortfolioSnapshot,
    filters: ReportFilters | None,
    now: date | datetime,
) -> ReportPreview:
    """Build any catalogued report. Raises ValueError for an unknown report type."""
    report_type = ReportType(report_type)
    filters = filters or ReportFilters()
    preview = REPORT_BUILDERS[report_type](snapshot, filters, now)
    logger.debug("Report %s: %d rows, %d skipped", report_type.value, preview.total_rows, preview.skipped)
    return preview
