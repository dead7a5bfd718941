"""Lease-term helpers used by the manager dashboard and the expiration report."""
import logging
import math
from datetime import date, datetime, timedelta

from properly.schemas.rental import LeaseStatus
from properly.schemas.reports import ExpiringLease
from properly.schemas.snapshot import PortfolioSnapshot
from properly.services.money import as_instant, start_of_day

logger = logging.getLogger(__name__)

_DAY = timedelta(days=1)


def expiring_leases(
    snapshot: PortfolioSnapshot,
    now: date | datetime,
    within_days: int = 90,
) -> list[ExpiringLease]:
    """Active leases ending after ``now`` and no later than ``within_days`` from it, soonest first."""
    instant = as_instant(now)
    horizon = instant + timedelta(days=within_days)

    result = []
    for lease in snapshot.leases:
        if lease.status != LeaseStatus.ACTIVE or lease.lease_end is None:
            continue
        ends_at = start_of_day(lease.lease_end, instant)
        if not (instant < ends_at <= horizon):
            continue

        location = snapshot.unit_index.get(lease.unit_id)
        tenant = snapshot.tenant_index.get(lease.tenant_id)
        if location is None or tenant is None:
            logger.warning("Expiring leases: skipping lease %s — unresolved unit or tenant", lease.id)
            continue

        result.append(
            ExpiringLease(
                lease_id=lease.id,
                tenant_name=tenant.name,
                property_name=location.property.name,
                unit_name=location.unit.name,
                lease_end=lease.lease_end,
                days_left=math.ceil((ends_at - instant) / _DAY),
            )
        )

    result.sort(key=lambda e: e.days_left)
    return result
