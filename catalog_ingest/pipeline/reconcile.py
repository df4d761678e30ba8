"""Reconcile fetched records against the catalog by name."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Iterable

from catalog_ingest.common.constants import DEFAULT_COUNTRY, WGS84_EPSG
from catalog_ingest.common.errors import SpecialtyNotFound
from catalog_ingest.common.logging import log_event
from catalog_ingest.common.models import RawSourceRecord, Specialty
from catalog_ingest.pipeline.normalise import normalise_record
from catalog_ingest.store.sqlite_catalog import CatalogStore

LOGGER = logging.getLogger(__name__)


@dataclass
class ReconcileStats:
    records_in: int = 0
    specialties_seen: int = 0
    specialties_added: int = 0
    specialists_added: int = 0
    specialists_skipped: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def distinct_specialty_names(records: Iterable[RawSourceRecord]) -> list[str]:
    return sorted({record.specialization for record in records})


class Reconciler:
    """Create the specialties and specialists a batch references but the catalog lacks.

    Fail-fast: the first store error or unresolved specialty aborts the rest
    of the batch. Rows inserted before the failure stay in place.
    """

    def __init__(
        self,
        store: CatalogStore,
        *,
        country: str = DEFAULT_COUNTRY,
        source_epsg: int = WGS84_EPSG,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.country = country
        self.source_epsg = source_epsg
        self.logger = logger or LOGGER

    def reconcile_specialties(self, records: list[RawSourceRecord], stats: ReconcileStats) -> None:
        names = distinct_specialty_names(records)
        stats.specialties_seen = len(names)
        for name in names:
            if self.store.find_specialty_by_name(name) is not None:
                continue
            self.store.insert_specialty(Specialty(name=name))
            stats.specialties_added += 1
            log_event(self.logger, "specialty inserted", stage="reconcile", event="SPECIALTY_INSERTED", status="ok", entity="specialty", entity_name=name)

    def reconcile_specialists(self, records: list[RawSourceRecord], stats: ReconcileStats) -> None:
        for record in records:
            if self.store.find_specialist_by_name(record.name) is not None:
                stats.specialists_skipped += 1
                self.logger.debug(
                    "specialist already present",
                    extra={"stage": "reconcile", "event": "SPECIALIST_SKIPPED", "status": "ok", "entity": "specialist", "entity_name": record.name},
                )
                continue

            specialty = self.store.find_specialty_by_name(record.specialization)
            if specialty is None or specialty.id is None:
                raise SpecialtyNotFound(record.specialization)

            specialist = normalise_record(
                record,
                specialty.id,
                country=self.country,
                source_epsg=self.source_epsg,
            )
            self.store.insert_specialist(specialist)
            stats.specialists_added += 1
            log_event(self.logger, "specialist inserted", stage="reconcile", event="SPECIALIST_INSERTED", status="ok", entity="specialist", entity_name=record.name)

    def reconcile(self, records: list[RawSourceRecord]) -> ReconcileStats:
        stats = ReconcileStats(records_in=len(records))
        self.reconcile_specialties(records, stats)
        self.reconcile_specialists(records, stats)
        return stats
