"""
Immutable portfolio snapshot handed to every report computation.

The persistence layer fetches a consistent set of records and wraps them in a
``PortfolioSnapshot``; the services only ever read from it. Lookup tables are
built lazily and cached on the instance.
"""
from dataclasses import dataclass
from functools import cached_property

from pydantic import BaseModel, ConfigDict

from properly.schemas.rental import (
    Building,
    CapitalProject,
    Lease,
    MaintenanceRequest,
    Payment,
    Property,
    Tenant,
    Transaction,
    Unit,
)


@dataclass(frozen=True)
class UnitLocation:
    property: Property
    building: Building
    unit: Unit


class PortfolioSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    properties: tuple[Property, ...] = ()
    tenants: tuple[Tenant, ...] = ()
    leases: tuple[Lease, ...] = ()
    payments: tuple[Payment, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    maintenance_requests: tuple[MaintenanceRequest, ...] = ()
    capital_projects: tuple[CapitalProject, ...] = ()

    @cached_property
    def property_index(self) -> dict[str, Property]:
        return {p.id: p for p in self.properties}

    @cached_property
    def unit_index(self) -> dict[str, UnitLocation]:
        index: dict[str, UnitLocation] = {}
        for prop in self.properties:
            for building in prop.buildings:
                for unit in building.units:
                    index[unit.id] = UnitLocation(prop, building, unit)
        return index

    @cached_property
    def tenant_index(self) -> dict[str, Tenant]:
        return {t.id: t for t in self.tenants}

    @cached_property
    def lease_index(self) -> dict[str, Lease]:
        return {lease.id: lease for lease in self.leases}

    def property_name(self, property_id: str) -> str | None:
        prop = self.property_index.get(property_id)
        return prop.name if prop else None

    def properties_for_owner(self, owner_id: str | None) -> list[Property]:
        if owner_id is None:
            return list(self.properties)
        return [p for p in self.properties if p.owner_id == owner_id]
