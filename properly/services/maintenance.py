"""Maintenance request selection for the dashboard and the maintenance reports."""
from collections.abc import Iterable

from properly.schemas.rental import MaintenancePriority, MaintenanceRequest, MaintenanceStatus

URGENT_PRIORITIES = frozenset({MaintenancePriority.HIGH, MaintenancePriority.EMERGENCY})


def is_open(request: MaintenanceRequest) -> bool:
    return request.status != MaintenanceStatus.COMPLETED


def open_requests(requests: Iterable[MaintenanceRequest]) -> list[MaintenanceRequest]:
    return [r for r in requests if is_open(r)]


def urgent_requests(requests: Iterable[MaintenanceRequest], limit: int | None = None) -> list[MaintenanceRequest]:
    """High/Emergency requests still open, most recently submitted first."""
    urgent = [r for r in requests if is_open(r) and r.priority in URGENT_PRIORITIES]
    urgent.sort(key=lambda r: r.submitted_date, reverse=True)
    return urgent if limit is None else urgent[:limit]
