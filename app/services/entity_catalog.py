"""
app/services/entity_catalog.py

Immutable name -> id catalogs for service types and lead sources.

Importers thread an ``EntityCatalog`` through row processing: resolving a
name never mutates the catalog, it returns a (possibly extended) copy along
with the resolved id. A row that fails part-way therefore never leaks the
entities it proposed.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Union

from app.domain.crm_import import LeadSource, ServiceType

CatalogEntity = Union[ServiceType, LeadSource]

# Stable namespace so the same imported name always maps to the same id.
_IMPORTED_ENTITY_NAMESPACE = uuid.UUID("6f0c7a52-31a4-4c1e-9d0b-2f8e5b7d9a13")

IMPORTED_DESCRIPTION = "Imported from CRM export"


def _name_key(name: str) -> str:
    return name.strip().lower()


def imported_entity_id(kind: str, name: str) -> str:
    """
    Deterministic id for an entity proposed by an import.
    """

    return f"imported-{kind}-{uuid.uuid5(_IMPORTED_ENTITY_NAMESPACE, f'{kind}:{_name_key(name)}')}"


@dataclass(frozen=True)
class EntityCatalog:
    """
    Known entities of one kind plus the ones proposed during this import.
    """

    kind: str
    entity_type: type
    entities: tuple[CatalogEntity, ...] = ()
    proposed: tuple[CatalogEntity, ...] = ()
    name_to_id: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_existing(
        cls,
        *,
        kind: str,
        entity_type: type,
        existing: Iterable[CatalogEntity],
    ) -> "EntityCatalog":
        entities = tuple(existing)
        lookup: dict[str, str] = {}
        for entity in entities:
            lookup.setdefault(_name_key(entity.name), entity.id)
        return cls(
            kind=kind,
            entity_type=entity_type,
            entities=entities,
            name_to_id=MappingProxyType(lookup),
        )

    def lookup(self, name: str) -> str | None:
        return self.name_to_id.get(_name_key(name))

    def resolve(self, name: str, *, default_name: str) -> tuple["EntityCatalog", str]:
        """
        Return ``(catalog, entity_id)`` for ``name``.

        Unknown names are proposed as new custom entities. A blank name falls
        back to the first catalog entry, or to a proposed ``default_name``
        entity when the catalog is empty.
        """

        cleaned = name.strip()
        if cleaned:
            known = self.lookup(cleaned)
            if known is not None:
                return self, known
            return self._propose(cleaned, description=IMPORTED_DESCRIPTION)

        if self.entities:
            return self, self.entities[0].id

        label = self.kind.replace("_", " ")
        return self._propose(default_name, description=f"Default {label} for imported bookings")

    def _propose(self, name: str, *, description: str) -> tuple["EntityCatalog", str]:
        entity = self.entity_type(
            id=imported_entity_id(self.kind, name),
            name=name,
            is_custom=True,
            description=description,
        )
        lookup = dict(self.name_to_id)
        lookup[_name_key(name)] = entity.id
        extended = EntityCatalog(
            kind=self.kind,
            entity_type=self.entity_type,
            entities=(*self.entities, entity),
            proposed=(*self.proposed, entity),
            name_to_id=MappingProxyType(lookup),
        )
        return extended, entity.id


def service_type_catalog(existing: Iterable[ServiceType]) -> EntityCatalog:
    return EntityCatalog.from_existing(kind="service_type", entity_type=ServiceType, existing=existing)


def lead_source_catalog(existing: Iterable[LeadSource]) -> EntityCatalog:
    return EntityCatalog.from_existing(kind="lead_source", entity_type=LeadSource, existing=existing)
