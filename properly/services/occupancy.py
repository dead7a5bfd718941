"""
Property roll-ups: occupancy, vacancies and scheduled monthly revenue.

A unit counts as occupied iff it has at least one tenant assigned. Vacant
units never contribute to revenue, whatever their listed rent.
"""
from collections.abc import Iterable

from properly.schemas.rental import Property, Unit, UnitStatus
from properly.schemas.reports import PropertyMetrics, RentSplitMismatch, VacantUnit
from properly.services.money import percentage, sum_money, to_money


def _units(prop: Property) -> list[Unit]:
    return [unit for building in prop.buildings for unit in building.units]


def _metrics(units: list[Unit], property_id: str | None = None, property_name: str | None = None) -> PropertyMetrics:
    occupied = [u for u in units if u.status == UnitStatus.OCCUPIED]
    total = len(units)
    return PropertyMetrics(
        property_id=property_id,
        property_name=property_name,
        total_units=total,
        occupied_units=len(occupied),
        vacant_units=total - len(occupied),
        revenue=sum_money(u.monthly_rent for u in occupied),
        occupancy_percentage=percentage(len(occupied), total),
    )


def property_metrics(prop: Property) -> PropertyMetrics:
    """Unit counts, occupancy % and monthly revenue for one property."""
    return _metrics(_units(prop), prop.id, prop.name)


def portfolio_metrics(properties: Iterable[Property]) -> PropertyMetrics:
    """Same figures as ``property_metrics`` across every unit of every property."""
    units = [unit for prop in properties for unit in _units(prop)]
    return _metrics(units)


def vacant_units(properties: Iterable[Property], limit: int | None = None) -> list[VacantUnit]:
    vacancies = [
        VacantUnit(
            property_id=prop.id,
            property_name=prop.name,
            building_name=building.name,
            unit_id=unit.id,
            unit_name=unit.name,
            market_rent=to_money(unit.monthly_rent),
            beds=unit.beds,
            baths=unit.baths,
        )
        for prop in properties
        for building in prop.buildings
        for unit in building.units
        if unit.status == UnitStatus.VACANT
    ]
    return vacancies if limit is None else vacancies[:limit]


def rent_split_mismatches(properties: Iterable[Property]) -> list[RentSplitMismatch]:
    """
    Occupied units whose tenants' rent portions don't sum to the unit rent.

    Reported only; nothing is rebalanced. ``difference`` is unit rent minus
    assigned rent, so a positive value means rent is unassigned.
    """
    mismatches = []
    for prop in properties:
        for unit in _units(prop):
            if unit.status != UnitStatus.OCCUPIED:
                continue
            assigned = sum_money(t.rent_portion for t in unit.tenants)
            unit_rent = to_money(unit.monthly_rent)
            if assigned == unit_rent:
                continue
            mismatches.append(
                RentSplitMismatch(
                    property_name=prop.name,
                    unit_id=unit.id,
                    unit_name=unit.name,
                    unit_rent=unit_rent,
                    assigned_rent=assigned,
                    difference=unit_rent - assigned,
                )
            )
    return mismatches
