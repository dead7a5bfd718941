"""
Reporting router.

Stateless: every endpoint receives the portfolio snapshot in the request body
and returns figures derived from it. Nothing is read from or written to
storage here.

Endpoints:
  POST /reports/rent-roll?now=2024-03-15T12:00:00Z
  POST /reports/properties
  POST /reports/properties/csv
  POST /reports/financials?year=2024&owner_id=...&property_id=...
  POST /reports/preview/{report}?limit=100
  POST /reports/preview/{report}/csv
"""
import logging
from datetime import date, datetime, timezone

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from properly.core.config import settings
from properly.schemas.reports import (
    FinancialOverview,
    PortfolioReport,
    ReportFilters,
    ReportPreview,
    ReportType,
    RentRollReport,
)
from properly.schemas.snapshot import PortfolioSnapshot
from properly.services.export import properties_csv, to_csv
from properly.services.financials import financial_overview
from properly.services.leases import expiring_leases
from properly.services.occupancy import (
    portfolio_metrics,
    property_metrics,
    rent_split_mismatches,
    vacant_units,
)
from properly.services.rent_roll import build_rent_roll, due_items, summarize_rent_roll
from properly.services.report_engine import build_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])

# URL-safe names for the report catalogue: "rent_roll", "profit_and_loss", ...
REPORT_SLUGS: dict[str, ReportType] = {rt.name.lower(): rt for rt in ReportType}

_YEAR_MIN = 1990
_YEAR_MAX = 2100


class ReportRequest(BaseModel):
    snapshot: PortfolioSnapshot
    filters: ReportFilters = ReportFilters()


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def _report_type(slug: str) -> ReportType:
    report_type = REPORT_SLUGS.get(slug.lower())
    if report_type is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown report '{slug}'. Valid reports: {sorted(REPORT_SLUGS)}",
        )
    return report_type


# ─── Endpoints ────────────────────────────────────────────────────────────────

@router.post("/rent-roll", response_model=RentRollReport)
async def rent_roll(
    snapshot: PortfolioSnapshot,
    now: datetime | None = Query(default=None),
):
    """Current-period rent roll with totals, the due list and upcoming lease expirations."""
    now = _now(now)
    roll = build_rent_roll(snapshot, now)
    return RentRollReport(
        rent_roll=roll,
        summary=summarize_rent_roll(roll.items),
        due=tuple(due_items(roll.items, settings.dashboard_due_limit)),
        expiring_leases=tuple(expiring_leases(snapshot, now, settings.expiring_lease_window_days)),
    )


@router.post("/properties", response_model=PortfolioReport)
async def properties_report(snapshot: PortfolioSnapshot):
    """Occupancy and scheduled revenue per property and for the whole portfolio."""
    return PortfolioReport(
        portfolio=portfolio_metrics(snapshot.properties),
        properties=tuple(property_metrics(p) for p in snapshot.properties),
        vacant_units=tuple(vacant_units(snapshot.properties)),
        rent_split_mismatches=tuple(rent_split_mismatches(snapshot.properties)),
    )


@router.post("/properties/csv")
async def properties_csv_export(snapshot: PortfolioSnapshot):
    """Property list with occupancy figures as a CSV download."""
    metrics = [property_metrics(p) for p in snapshot.properties]
    logger.info("Exporting property list: %d properties", len(metrics))
    return StreamingResponse(
        iter([properties_csv(snapshot.properties, metrics)]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=properties.csv"},
    )


@router.post("/financials", response_model=FinancialOverview)
async def financials_report(
    snapshot: PortfolioSnapshot,
    year: int = Query(default=None),
    owner_id: str = Query(default=None),
    property_id: str = Query(default=None),
):
    """Revenue, expenses, NOI, breakdowns and the monthly trend for one year."""
    if year is None:
        year = date.today().year
    if not (_YEAR_MIN <= year <= _YEAR_MAX):
        raise HTTPException(status_code=400, detail=f"year must be between {_YEAR_MIN} and {_YEAR_MAX}")
    return financial_overview(snapshot, year, owner_id=owner_id, property_id=property_id)


@router.post("/preview/{report}", response_model=ReportPreview)
async def report_preview(
    report: str,
    payload: ReportRequest,
    now: datetime | None = Query(default=None),
    limit: int = Query(default=None, ge=1),
):
    """Tabular preview of any catalogued report, capped at ``limit`` rows."""
    report_type = _report_type(report)
    preview = build_report(report_type, payload.snapshot, payload.filters, _now(now))
    return preview.head(limit or settings.report_preview_limit)


@router.post("/preview/{report}/csv")
async def report_csv(
    report: str,
    payload: ReportRequest,
    now: datetime | None = Query(default=None),
):
    """Full report as a CSV download."""
    report_type = _report_type(report)
    preview = build_report(report_type, payload.snapshot, payload.filters, _now(now))
    logger.info("Exporting %s: %d rows", report_type.value, preview.total_rows)
    return StreamingResponse(
        iter([to_csv(preview)]),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={report_type.name.lower()}.csv"
        },
    )
