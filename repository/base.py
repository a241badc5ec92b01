"""Schnittstelle zur Hotel-Datenbank (Tabellen `hotels` und `hotel_room_types`).

Jede Methode entspricht genau einem Datenbank-Roundtrip. Implementierungen:
  - repository.sql.SqlHotelStore     (SQLAlchemy, produktiv)
  - repository.memory.InMemoryHotelStore (Test-Double)
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from models.filters import HotelQuery
from models.records import (
    HotelInsert,
    HotelRecord,
    HotelUpdate,
    RoomTypeInsert,
    RoomTypeRecord,
    RoomTypeUpdate,
)


class EntityType(str, Enum):
    """Tabellen mit eigener external_id-Folge."""
    HOTEL = "hotels"
    ROOM_TYPE = "hotel_room_types"


class HotelStore(ABC):
    """Tabellen-Client für Hotels und Zimmertypen.

    Fehler werden als RepositoryError (bzw. Unterklassen) ausgelöst.
    """

    # ─── hotels ───

    @abstractmethod
    def select_hotels(self, query: Optional[HotelQuery] = None) -> list[HotelRecord]:
        """Alle Hotels, neueste zuerst (created_at absteigend)."""

    @abstractmethod
    def get_hotel(self, hotel_id: str) -> HotelRecord:
        """Ein Hotel; RecordNotFoundError wenn es nicht existiert."""

    @abstractmethod
    def insert_hotel(self, hotel: HotelInsert) -> HotelRecord:
        ...

    @abstractmethod
    def update_hotel(self, hotel_id: str, changes: HotelUpdate) -> HotelRecord:
        ...

    @abstractmethod
    def delete_hotel(self, hotel_id: str) -> None:
        ...

    @abstractmethod
    def search_hotels(self, term: str) -> list[HotelRecord]:
        """Teilstring-Suche in Name, Stadt und Land; sortiert nach Name."""

    # ─── hotel_room_types ───

    @abstractmethod
    def select_room_types(self, hotel_id: str) -> list[RoomTypeRecord]:
        """Zimmertypen eines Hotels, sortiert nach Name."""

    @abstractmethod
    def select_all_room_types(self) -> list[RoomTypeRecord]:
        ...

    @abstractmethod
    def get_room_type(self, room_type_id: str) -> RoomTypeRecord:
        ...

    @abstractmethod
    def insert_room_type(self, room_type: RoomTypeInsert) -> RoomTypeRecord:
        ...

    @abstractmethod
    def insert_room_types(self, room_types: list[RoomTypeInsert]) -> list[RoomTypeRecord]:
        """Mehrere Zimmertypen in einem Roundtrip."""

    @abstractmethod
    def update_room_type(self, room_type_id: str, changes: RoomTypeUpdate) -> RoomTypeRecord:
        ...

    @abstractmethod
    def delete_room_type(self, room_type_id: str) -> None:
        ...

    @abstractmethod
    def delete_room_types_for_hotel(self, hotel_id: str) -> int:
        """Löscht alle Zimmertypen eines Hotels; gibt die Anzahl zurück."""

    # ─── external_id ───

    @abstractmethod
    def max_external_id(self, entity: EntityType) -> Optional[int]:
        """Höchste vergebene external_id der Tabelle (None wenn keine)."""

    @abstractmethod
    def external_id_exists(self, entity: EntityType, value: int) -> bool:
        ...

    def close(self) -> None:
        """Gibt Verbindungen frei (Standard: nichts zu tun)."""
