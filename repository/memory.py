"""In-Memory-Implementierung von HotelStore (Test-Double, Demo-Modus)."""

import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Callable, Optional

from models.filters import HotelQuery
from models.records import (
    HotelInsert,
    HotelRecord,
    HotelUpdate,
    RoomTypeInsert,
    RoomTypeRecord,
    RoomTypeUpdate,
)
from repository.base import EntityType, HotelStore
from repository.errors import RecordNotFoundError, UniqueViolationError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryHotelStore(HotelStore):
    """Hält beide Tabellen als Dicts. Verhält sich wie die echte Datenbank:

    - id und Zeitstempel werden beim Einfügen gesetzt
    - external_id ist pro Tabelle eindeutig (UniqueViolationError)
    - Rückgaben sind Kopien, nie die gespeicherten Objekte

    `calls` zählt die Roundtrips pro Methode.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._hotels: dict[str, HotelRecord] = {}
        self._room_types: dict[str, RoomTypeRecord] = {}
        self._order: dict[str, int] = {}
        self._seq = 0
        self.calls: Counter = Counter()

    # ─── Hilfen ───

    def _next_seq(self, record_id: str) -> None:
        self._seq += 1
        self._order[record_id] = self._seq

    def _check_unique(self, entity: EntityType, value: Optional[int],
                      ignore_id: Optional[str] = None) -> None:
        if value is None:
            return
        rows = self._hotels if entity == EntityType.HOTEL else self._room_types
        for rid, row in rows.items():
            if rid != ignore_id and row.external_id == value:
                raise UniqueViolationError(entity.value, "external_id", value)

    # ─── hotels ───

    def select_hotels(self, query: Optional[HotelQuery] = None) -> list[HotelRecord]:
        self.calls["select_hotels"] += 1
        rows = list(self._hotels.values())
        if query is not None:
            if query.city:
                rows = [r for r in rows if query.city.casefold() in r.city.casefold()]
            if query.country:
                rows = [r for r in rows if query.country.casefold() in r.country.casefold()]
            if query.status:
                rows = [r for r in rows if r.status == query.status]
            if query.star_rating:
                rows = [r for r in rows if r.star_rating == query.star_rating]
        rows.sort(key=lambda r: (r.created_at, self._order[r.id]), reverse=True)
        return [r.model_copy(deep=True) for r in rows]

    def get_hotel(self, hotel_id: str) -> HotelRecord:
        self.calls["get_hotel"] += 1
        if hotel_id not in self._hotels:
            raise RecordNotFoundError(EntityType.HOTEL.value, hotel_id)
        return self._hotels[hotel_id].model_copy(deep=True)

    def insert_hotel(self, hotel: HotelInsert) -> HotelRecord:
        self.calls["insert_hotel"] += 1
        self._check_unique(EntityType.HOTEL, hotel.external_id)
        now = self._clock()
        record = HotelRecord(
            **hotel.model_dump(),
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            last_updated=now,
        )
        self._hotels[record.id] = record
        self._next_seq(record.id)
        return record.model_copy(deep=True)

    def update_hotel(self, hotel_id: str, changes: HotelUpdate) -> HotelRecord:
        self.calls["update_hotel"] += 1
        if hotel_id not in self._hotels:
            raise RecordNotFoundError(EntityType.HOTEL.value, hotel_id)
        values = changes.changes()
        if "external_id" in values:
            self._check_unique(EntityType.HOTEL, values["external_id"], ignore_id=hotel_id)
        now = self._clock()
        updated = self._hotels[hotel_id].model_copy(
            update={**values, "updated_at": now, "last_updated": now}
        )
        self._hotels[hotel_id] = updated
        return updated.model_copy(deep=True)

    def delete_hotel(self, hotel_id: str) -> None:
        self.calls["delete_hotel"] += 1
        # Wie DELETE ... WHERE id = ?: kein Fehler wenn nichts gelöscht wird
        self._hotels.pop(hotel_id, None)

    def search_hotels(self, term: str) -> list[HotelRecord]:
        self.calls["search_hotels"] += 1
        needle = term.casefold()
        rows = [
            r for r in self._hotels.values()
            if needle in r.name.casefold()
            or needle in r.city.casefold()
            or needle in r.country.casefold()
        ]
        rows.sort(key=lambda r: r.name)
        return [r.model_copy(deep=True) for r in rows]

    # ─── hotel_room_types ───

    def select_room_types(self, hotel_id: str) -> list[RoomTypeRecord]:
        self.calls["select_room_types"] += 1
        rows = [r for r in self._room_types.values() if r.hotel_id == hotel_id]
        rows.sort(key=lambda r: r.name)
        return [r.model_copy(deep=True) for r in rows]

    def select_all_room_types(self) -> list[RoomTypeRecord]:
        self.calls["select_all_room_types"] += 1
        rows = sorted(self._room_types.values(), key=lambda r: r.name)
        return [r.model_copy(deep=True) for r in rows]

    def get_room_type(self, room_type_id: str) -> RoomTypeRecord:
        self.calls["get_room_type"] += 1
        if room_type_id not in self._room_types:
            raise RecordNotFoundError(EntityType.ROOM_TYPE.value, room_type_id)
        return self._room_types[room_type_id].model_copy(deep=True)

    def _insert_room_type(self, room_type: RoomTypeInsert) -> RoomTypeRecord:
        self._check_unique(EntityType.ROOM_TYPE, room_type.external_id)
        now = self._clock()
        record = RoomTypeRecord(
            **room_type.model_dump(),
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
        )
        self._room_types[record.id] = record
        self._next_seq(record.id)
        return record.model_copy(deep=True)

    def insert_room_type(self, room_type: RoomTypeInsert) -> RoomTypeRecord:
        self.calls["insert_room_type"] += 1
        return self._insert_room_type(room_type)

    def insert_room_types(self, room_types: list[RoomTypeInsert]) -> list[RoomTypeRecord]:
        self.calls["insert_room_types"] += 1
        # Alles oder nichts, wie ein einzelnes INSERT mit mehreren Zeilen
        seen: set[int] = set()
        for rt in room_types:
            self._check_unique(EntityType.ROOM_TYPE, rt.external_id)
            if rt.external_id is not None:
                if rt.external_id in seen:
                    raise UniqueViolationError(
                        EntityType.ROOM_TYPE.value, "external_id", rt.external_id)
                seen.add(rt.external_id)
        return [self._insert_room_type(rt) for rt in room_types]

    def update_room_type(self, room_type_id: str, changes: RoomTypeUpdate) -> RoomTypeRecord:
        self.calls["update_room_type"] += 1
        if room_type_id not in self._room_types:
            raise RecordNotFoundError(EntityType.ROOM_TYPE.value, room_type_id)
        values = changes.changes()
        if "external_id" in values:
            self._check_unique(EntityType.ROOM_TYPE, values["external_id"],
                               ignore_id=room_type_id)
        updated = self._room_types[room_type_id].model_copy(
            update={**values, "updated_at": self._clock()}
        )
        self._room_types[room_type_id] = updated
        return updated.model_copy(deep=True)

    def delete_room_type(self, room_type_id: str) -> None:
        self.calls["delete_room_type"] += 1
        self._room_types.pop(room_type_id, None)

    def delete_room_types_for_hotel(self, hotel_id: str) -> int:
        self.calls["delete_room_types_for_hotel"] += 1
        doomed = [rid for rid, r in self._room_types.items() if r.hotel_id == hotel_id]
        for rid in doomed:
            del self._room_types[rid]
        return len(doomed)

    # ─── external_id ───

    def max_external_id(self, entity: EntityType) -> Optional[int]:
        self.calls["max_external_id"] += 1
        rows = self._hotels if entity == EntityType.HOTEL else self._room_types
        ids = [r.external_id for r in rows.values() if r.external_id is not None]
        return max(ids) if ids else None

    def external_id_exists(self, entity: EntityType, value: int) -> bool:
        self.calls["external_id_exists"] += 1
        rows = self._hotels if entity == EntityType.HOTEL else self._room_types
        return any(r.external_id == value for r in rows.values())
