"""
Rent roll derivation — pure functions over a portfolio snapshot.

For every Active lease, the current billing period (the calendar month of
``now``) is reconciled against the lease's payment rows:

    no payment this month          → Upcoming, due the 1st, balance 0
    payment status Paid            → Paid, balance 0
    unpaid and due before ``now``  → Overdue, balance = monthly rent
    otherwise                      → Upcoming, balance 0

Upcoming/Overdue are display states only; a Payment row stores
Processing/Paid/Failed. Partial payments are not modelled.
"""
import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime

from properly.schemas.rental import Lease, LeaseStatus, Payment, PaymentStatus, RentStatus
from properly.schemas.reports import (
    ALL_PROPERTIES,
    ALL_STATUSES,
    RentRoll,
    RentRollItem,
    RentRollSummary,
)
from properly.schemas.snapshot import PortfolioSnapshot
from properly.services.money import (
    ZERO,
    as_instant,
    first_of_month,
    percentage,
    same_billing_period,
    start_of_day,
    sum_money,
    to_money,
)

logger = logging.getLogger(__name__)


# ─── Period matching ──────────────────────────────────────────────────────────

def select_period_payment(
    lease: Lease,
    payments: Iterable[Payment],
    now: date | datetime,
) -> tuple[Payment | None, int]:
    """
    Return the lease's payment due in ``now``'s month and the number of extra
    rows that also matched. The first match in input order wins.
    """
    matches = [
        p for p in payments
        if p.lease_id == lease.id and same_billing_period(p.due_date, now)
    ]
    if not matches:
        return None, 0
    return matches[0], len(matches) - 1


def _is_past_due(due_date: date, now: date | datetime) -> bool:
    instant = as_instant(now)
    return start_of_day(due_date, instant) < instant


def _item_for(
    lease: Lease,
    payment: Payment | None,
    now: date | datetime,
    tenant_name: str,
    property_name: str,
    unit_name: str,
) -> RentRollItem:
    if payment is None:
        due_date = first_of_month(now)
        status = RentStatus.UPCOMING
    else:
        due_date = payment.due_date
        if payment.status == PaymentStatus.PAID:
            status = RentStatus.PAID
        elif _is_past_due(payment.due_date, now):
            status = RentStatus.OVERDUE
        else:
            status = RentStatus.UPCOMING

    rent = to_money(lease.monthly_rent)
    return RentRollItem(
        id=f"{lease.id}:{lease.tenant_id}",
        lease_id=lease.id,
        tenant_id=lease.tenant_id,
        tenant_name=tenant_name,
        property_name=property_name,
        unit_name=unit_name,
        rent=rent,
        due_date=due_date,
        status=status,
        balance=rent if status == RentStatus.OVERDUE else ZERO,
    )


# ─── Public API ───────────────────────────────────────────────────────────────

def derive_rent_roll_item(
    lease: Lease,
    payments: Iterable[Payment],
    now: date | datetime,
    *,
    tenant_name: str = "",
    property_name: str = "",
    unit_name: str = "",
) -> RentRollItem:
    """
    Current-period rent roll entry for one lease.

    ``now`` may be a date or a datetime; a payment is overdue once the start
    of its due day lies strictly before ``now``.
    """
    if lease.status != LeaseStatus.ACTIVE:
        raise ValueError(
            f"Rent roll covers active leases only; lease {lease.id} is {lease.status.value}"
        )
    payment, _ = select_period_payment(lease, payments, now)
    return _item_for(lease, payment, now, tenant_name, property_name, unit_name)


def build_rent_roll(snapshot: PortfolioSnapshot, now: date | datetime) -> RentRoll:
    """
    One item per Active lease in the snapshot.

    Payments pointing at an unknown lease, and leases whose unit or tenant
    cannot be resolved, are left out and counted in ``skipped``. Leases with
    more than one payment due this month are listed in ``duplicate_lease_ids``.
    """
    skipped = 0
    payments_by_lease: dict[str, list[Payment]] = defaultdict(list)
    for payment in snapshot.payments:
        if payment.lease_id not in snapshot.lease_index:
            logger.warning("Rent roll: skipping payment %s — unknown lease %s", payment.id, payment.lease_id)
            skipped += 1
            continue
        payments_by_lease[payment.lease_id].append(payment)

    items: list[RentRollItem] = []
    duplicates: list[str] = []
    for lease in snapshot.leases:
        if lease.status != LeaseStatus.ACTIVE:
            continue

        location = snapshot.unit_index.get(lease.unit_id)
        tenant = snapshot.tenant_index.get(lease.tenant_id)
        if location is None or tenant is None:
            logger.warning(
                "Rent roll: skipping lease %s — unit %s or tenant %s not found",
                lease.id, lease.unit_id, lease.tenant_id,
            )
            skipped += 1
            continue

        payment, extra = select_period_payment(lease, payments_by_lease.get(lease.id, ()), now)
        if extra:
            logger.warning(
                "Rent roll: lease %s has %d payments due in %04d-%02d, using %s",
                lease.id, extra + 1, now.year, now.month, payment.id,
            )
            duplicates.append(lease.id)

        items.append(
            _item_for(lease, payment, now, tenant.name, location.property.name, location.unit.name)
        )

    logger.debug("Rent roll: %d items, %d skipped", len(items), skipped)
    return RentRoll(items=tuple(items), skipped=skipped, duplicate_lease_ids=tuple(duplicates))


# ─── Summaries and views ──────────────────────────────────────────────────────

def summarize_rent_roll(items: Sequence[RentRollItem]) -> RentRollSummary:
    total_rent = sum_money(i.rent for i in items)
    total_paid = sum_money(i.rent for i in items if i.status == RentStatus.PAID)
    return RentRollSummary(
        total_rent=total_rent,
        total_overdue=sum_money(i.balance for i in items if i.status == RentStatus.OVERDUE),
        total_paid=total_paid,
        collected_percentage=percentage(total_paid, total_rent),
        paid_count=sum(1 for i in items if i.status == RentStatus.PAID),
        overdue_count=sum(1 for i in items if i.status == RentStatus.OVERDUE),
        upcoming_count=sum(1 for i in items if i.status == RentStatus.UPCOMING),
    )


def due_items(items: Iterable[RentRollItem], limit: int | None = None) -> list[RentRollItem]:
    """Overdue and upcoming entries, overdue first, then by due date."""
    due = [i for i in items if i.status in (RentStatus.OVERDUE, RentStatus.UPCOMING)]
    due.sort(key=lambda i: (i.status != RentStatus.OVERDUE, i.due_date))
    return due if limit is None else due[:limit]


def filter_rent_roll(
    items: Iterable[RentRollItem],
    property_name: str = ALL_PROPERTIES,
    status: str = ALL_STATUSES,
    search: str = "",
) -> list[RentRollItem]:
    term = search.strip().lower()
    result = []
    for item in items:
        if property_name != ALL_PROPERTIES and item.property_name != property_name:
            continue
        if status != ALL_STATUSES and item.status.value != status:
            continue
        if term and not any(
            term in field.lower()
            for field in (item.tenant_name, item.property_name, item.unit_name)
        ):
            continue
        result.append(item)
    return result


def sort_rent_roll(
    items: Iterable[RentRollItem],
    key: str = "due_date",
    descending: bool = False,
) -> list[RentRollItem]:
    if key not in RentRollItem.model_fields:
        raise ValueError(f"Cannot sort rent roll by unknown field '{key}'")
    return sorted(items, key=lambda i: getattr(i, key), reverse=descending)
