"""In-memory collaborators shared by the reconcile and ingest tests."""

from __future__ import annotations

from dataclasses import replace

from catalog_ingest.common.errors import SourceUnavailable, StoreError
from catalog_ingest.common.models import Specialist, Specialty


class RecordingStore:
    """CatalogStore double that records every call.

    ``fail_on`` holds ``(operation, name)`` pairs, or bare operation names,
    that raise StoreError. With ``persist_specialties=False`` specialty
    inserts are acknowledged but never become visible.
    """

    def __init__(self, fail_on=None, persist_specialties: bool = True):
        self.fail_on = set(fail_on or ())
        self.persist_specialties = persist_specialties
        self.specialties: dict[str, Specialty] = {}
        self.specialists: dict[str, Specialist] = {}
        self.calls: list[tuple[str, str]] = []

    def _record(self, operation: str, name: str) -> None:
        self.calls.append((operation, name))
        if operation in self.fail_on or (operation, name) in self.fail_on:
            raise StoreError(f"mocked {operation} failure for {name}")

    def operations(self, operation: str) -> list[str]:
        return [name for op, name in self.calls if op == operation]

    def find_specialty_by_name(self, name):
        self._record("find_specialty", name)
        return self.specialties.get(name)

    def insert_specialty(self, specialty):
        self._record("insert_specialty", specialty.name)
        new_id = len(self.specialties) + 1
        if self.persist_specialties:
            self.specialties.setdefault(specialty.name, replace(specialty, id=new_id))
        return new_id

    def find_specialist_by_name(self, name):
        self._record("find_specialist", name)
        return self.specialists.get(name)

    def insert_specialist(self, specialist):
        self._record("insert_specialist", specialist.name)
        new_id = len(self.specialists) + 1
        self.specialists.setdefault(specialist.name, replace(specialist, id=new_id))
        return new_id


class FakeHttpClient:
    """Serves queued payloads; exceptions in the queue are raised instead."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[str] = []

    def get_json(self, url: str, **_kwargs):
        self.calls.append(url)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        return None


def feature_collection(*properties: dict) -> dict:
    return {"features": [{"type": "Feature", "properties": props} for props in properties]}


def source_down(status_code: int = 500) -> SourceUnavailable:
    return SourceUnavailable(f"HTTP {status_code}", status_code=status_code)
