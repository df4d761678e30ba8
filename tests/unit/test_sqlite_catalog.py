from pathlib import Path

import pytest

from catalog_ingest.common.errors import StoreError
from catalog_ingest.common.models import Specialist, Specialty
from catalog_ingest.store.sqlite_catalog import SqliteCatalogStore


def _specialist(name: str, specialty_id: int, **overrides) -> Specialist:
    values = {"name": name, "specialty_id": specialty_id, "location_wkt": "POINT(17.1 48.15)", "monday": "7:00 - 12:00"}
    values.update(overrides)
    return Specialist(**values)


@pytest.fixture
def store(tmp_path: Path):
    with SqliteCatalogStore(tmp_path / "nested" / "catalog.db") as catalog:
        yield catalog


def test_find_returns_none_for_unknown_names(store):
    assert store.find_specialty_by_name("ortoped") is None
    assert store.find_specialist_by_name("Dr. John Doe") is None


def test_insert_specialty_is_insert_if_absent(store):
    first_id = store.insert_specialty(Specialty(name="ortoped"))
    second_id = store.insert_specialty(Specialty(name="ortoped", description="ignored"))

    assert first_id == second_id
    found = store.find_specialty_by_name("ortoped")
    assert found == Specialty(id=first_id, name="ortoped", description="")
    assert len(store.all_specialties()) == 1


def test_insert_and_read_specialist(store):
    specialty_id = store.insert_specialty(Specialty(name="ortoped"))
    specialist_id = store.insert_specialist(_specialist("Dr. John Doe", specialty_id, telephone="055, "))

    found = store.find_specialist_by_name("Dr. John Doe")
    assert found.id == specialist_id
    assert found.specialty_id == specialty_id
    assert found.location_wkt == "POINT(17.1 48.15)"
    assert found.telephone == "055, "
    assert found.monday == "7:00 - 12:00"
    assert store.get_specialist_by_id(specialist_id) == found


def test_duplicate_specialist_name_keeps_single_row(store):
    specialty_id = store.insert_specialty(Specialty(name="ortoped"))
    first_id = store.insert_specialist(_specialist("Dr. John Doe", specialty_id))
    second_id = store.insert_specialist(_specialist("Dr. John Doe", specialty_id, address="elsewhere"))

    assert first_id == second_id
    assert [s.address for s in store.all_specialists()] == [""]


def test_specialist_requires_existing_specialty(store):
    with pytest.raises(StoreError):
        store.insert_specialist(_specialist("Dr. Orphan", 999))
    assert store.all_specialists() == []


def test_specialists_by_specialty_filters(store):
    ortoped = store.insert_specialty(Specialty(name="ortoped"))
    zubar = store.insert_specialty(Specialty(name="zubný lekár"))
    store.insert_specialist(_specialist("B", ortoped))
    store.insert_specialist(_specialist("A", ortoped))
    store.insert_specialist(_specialist("C", zubar))

    assert [s.name for s in store.specialists_by_specialty(ortoped)] == ["A", "B"]
    assert store.get_specialty_by_id(zubar).name == "zubný lekár"


def test_update_and_delete_specialist(store):
    specialty_id = store.insert_specialty(Specialty(name="ortoped"))
    specialist_id = store.insert_specialist(_specialist("Dr. John Doe", specialty_id))

    current = store.get_specialist_by_id(specialist_id)
    store.update_specialist(_specialist(current.name, specialty_id, id=specialist_id, email="doe@example.sk"))
    assert store.get_specialist_by_id(specialist_id).email == "doe@example.sk"

    store.delete_specialist(specialist_id)
    assert store.get_specialist_by_id(specialist_id) is None

    store.delete_specialty(specialty_id)
    assert store.all_specialties() == []


def test_update_without_id_raises(store):
    with pytest.raises(StoreError):
        store.update_specialist(_specialist("Dr. John Doe", 1))


def test_query_failure_raises_store_error(tmp_path: Path):
    store = SqliteCatalogStore(tmp_path / "catalog.db")
    store.close()

    with pytest.raises(StoreError):
        store.find_specialty_by_name("ortoped")


def test_catalog_persists_across_connections(tmp_path: Path):
    db_path = tmp_path / "catalog.db"
    with SqliteCatalogStore(db_path) as first:
        first.insert_specialty(Specialty(name="ortoped"))
    with SqliteCatalogStore(db_path) as second:
        assert second.find_specialty_by_name("ortoped") is not None
