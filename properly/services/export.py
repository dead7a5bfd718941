"""
CSV export for report previews.

RFC 4180: CRLF line endings, fields containing commas, quotes or line breaks
are wrapped in double quotes and embedded quotes are doubled.
"""
import csv
import io
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from properly.schemas.reports import PropertyMetrics, ReportPreview
from properly.schemas.rental import Property
from properly.services.money import to_money


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        return f"{to_money(value):.2f}"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def write_csv(columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(columns)
    for row in rows:
        writer.writerow([format_cell(v) for v in row])
    return output.getvalue()


def to_csv(preview: ReportPreview) -> str:
    return write_csv(
        preview.columns,
        ([row.get(column) for column in preview.columns] for row in preview.rows),
    )


def properties_csv(properties: Iterable[Property], metrics: Iterable[PropertyMetrics]) -> str:
    """Property list export: name, address, owner and occupancy figures."""
    by_id = {m.property_id: m for m in metrics}
    rows = []
    for prop in properties:
        m = by_id.get(prop.id)
        if m is None:
            continue
        rows.append([prop.name, prop.address, prop.owner_id, m.total_units, m.occupied_units, m.vacant_units, m.revenue])
    return write_csv(
        ["Name", "Address", "Owner", "Total Units", "Occupied", "Vacant", "Monthly Revenue"],
        rows,
    )
