"""Catalog store protocol and its SQLite implementation."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Iterator, Protocol

from catalog_ingest.common.errors import StoreError
from catalog_ingest.common.models import Specialist, Specialty

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS specialty (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    description TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS specialist (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    specialty_id INTEGER NOT NULL REFERENCES specialty(id),
    location TEXT NOT NULL,
    address TEXT NOT NULL DEFAULT '',
    telephone TEXT NOT NULL DEFAULT '',
    email TEXT NOT NULL DEFAULT '',
    monday TEXT NOT NULL DEFAULT '',
    tuesday TEXT NOT NULL DEFAULT '',
    wednesday TEXT NOT NULL DEFAULT '',
    thursday TEXT NOT NULL DEFAULT '',
    friday TEXT NOT NULL DEFAULT '',
    saturday TEXT NOT NULL DEFAULT '',
    sunday TEXT NOT NULL DEFAULT ''
);

CREATE INDEX IF NOT EXISTS idx_specialist_specialty ON specialist(specialty_id);
"""

SPECIALTY_COLUMNS = "id, name, description"
SPECIALIST_INSERT_COLUMNS = (
    "name, specialty_id, location, address, telephone, email, "
    "monday, tuesday, wednesday, thursday, friday, saturday, sunday"
)
SPECIALIST_COLUMNS = f"id, {SPECIALIST_INSERT_COLUMNS}"


class CatalogStore(Protocol):
    """What the reconciler needs from the catalog.

    Lookups return ``None`` for "not found"; failures raise StoreError.
    Inserts return the id of the row holding that name.
    """

    def find_specialty_by_name(self, name: str) -> Specialty | None:
        ...

    def insert_specialty(self, specialty: Specialty) -> int:
        ...

    def find_specialist_by_name(self, name: str) -> Specialist | None:
        ...

    def insert_specialist(self, specialist: Specialist) -> int:
        ...


def _row_to_specialty(row: sqlite3.Row) -> Specialty:
    return Specialty(id=row["id"], name=row["name"], description=row["description"])


def _row_to_specialist(row: sqlite3.Row) -> Specialist:
    return Specialist(
        id=row["id"],
        name=row["name"],
        specialty_id=row["specialty_id"],
        location_wkt=row["location"],
        address=row["address"],
        telephone=row["telephone"],
        email=row["email"],
        monday=row["monday"],
        tuesday=row["tuesday"],
        wednesday=row["wednesday"],
        thursday=row["thursday"],
        friday=row["friday"],
        saturday=row["saturday"],
        sunday=row["sunday"],
    )


class SqliteCatalogStore:
    """SQLite-backed catalog.

    Names are UNIQUE and inserts use ``ON CONFLICT(name) DO NOTHING``, so a
    lookup-then-insert race between two runs cannot produce duplicate rows.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.executescript(SCHEMA_SQL)
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"cannot open catalog at {self.db_path}: {exc}") from exc

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SqliteCatalogStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        cursor = self._conn.cursor()
        try:
            yield cursor
            self._conn.commit()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise StoreError(str(exc)) from exc

    def _query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

    def _query_one(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        rows = self._query(sql, params)
        return rows[0] if rows else None

    # Specialty

    def find_specialty_by_name(self, name: str) -> Specialty | None:
        row = self._query_one(f"SELECT {SPECIALTY_COLUMNS} FROM specialty WHERE name = ?", (name,))
        return _row_to_specialty(row) if row else None

    def get_specialty_by_id(self, specialty_id: int) -> Specialty | None:
        row = self._query_one(f"SELECT {SPECIALTY_COLUMNS} FROM specialty WHERE id = ?", (specialty_id,))
        return _row_to_specialty(row) if row else None

    def all_specialties(self) -> list[Specialty]:
        rows = self._query(f"SELECT {SPECIALTY_COLUMNS} FROM specialty ORDER BY name")
        return [_row_to_specialty(row) for row in rows]

    def insert_specialty(self, specialty: Specialty) -> int:
        with self._transaction() as cursor:
            cursor.execute(
                "INSERT INTO specialty (name, description) VALUES (?, ?) ON CONFLICT(name) DO NOTHING",
                (specialty.name, specialty.description),
            )
            cursor.execute("SELECT id FROM specialty WHERE name = ?", (specialty.name,))
            return cursor.fetchone()["id"]

    def delete_specialty(self, specialty_id: int) -> None:
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM specialty WHERE id = ?", (specialty_id,))

    # Specialist

    def find_specialist_by_name(self, name: str) -> Specialist | None:
        row = self._query_one(f"SELECT {SPECIALIST_COLUMNS} FROM specialist WHERE name = ?", (name,))
        return _row_to_specialist(row) if row else None

    def get_specialist_by_id(self, specialist_id: int) -> Specialist | None:
        row = self._query_one(f"SELECT {SPECIALIST_COLUMNS} FROM specialist WHERE id = ?", (specialist_id,))
        return _row_to_specialist(row) if row else None

    def all_specialists(self) -> list[Specialist]:
        rows = self._query(f"SELECT {SPECIALIST_COLUMNS} FROM specialist ORDER BY name")
        return [_row_to_specialist(row) for row in rows]

    def specialists_by_specialty(self, specialty_id: int) -> list[Specialist]:
        rows = self._query(
            f"SELECT {SPECIALIST_COLUMNS} FROM specialist WHERE specialty_id = ? ORDER BY name",
            (specialty_id,),
        )
        return [_row_to_specialist(row) for row in rows]

    def insert_specialist(self, specialist: Specialist) -> int:
        hours = specialist.opening_hours()
        with self._transaction() as cursor:
            cursor.execute(
                f"""
                INSERT INTO specialist ({SPECIALIST_INSERT_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(name) DO NOTHING
                """,
                (
                    specialist.name,
                    specialist.specialty_id,
                    specialist.location_wkt,
                    specialist.address,
                    specialist.telephone,
                    specialist.email,
                    *hours.values(),
                ),
            )
            cursor.execute("SELECT id FROM specialist WHERE name = ?", (specialist.name,))
            return cursor.fetchone()["id"]

    def update_specialist(self, specialist: Specialist) -> None:
        if specialist.id is None:
            raise StoreError("cannot update a specialist without an id")
        hours = specialist.opening_hours()
        with self._transaction() as cursor:
            cursor.execute(
                """
                UPDATE specialist
                SET name = ?, specialty_id = ?, location = ?, address = ?, telephone = ?, email = ?,
                    monday = ?, tuesday = ?, wednesday = ?, thursday = ?, friday = ?, saturday = ?, sunday = ?
                WHERE id = ?
                """,
                (
                    specialist.name,
                    specialist.specialty_id,
                    specialist.location_wkt,
                    specialist.address,
                    specialist.telephone,
                    specialist.email,
                    *hours.values(),
                    specialist.id,
                ),
            )

    def delete_specialist(self, specialist_id: int) -> None:
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM specialist WHERE id = ?", (specialist_id,))
