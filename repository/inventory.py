"""HotelInventory: Hotels und Zimmertypen über einen HotelStore verwalten.

Hält einen Schnappschuss `hotels` (Hotels inkl. Zimmertypen). Nach jeder
schreibenden Operation wird der Schnappschuss komplett neu geladen, nie
lokal gepatcht. Laden = 1 Abfrage für die Hotels + 1 pro Hotel für dessen
Zimmertypen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from analysis.filters import apply_filters
from config.defaults import default_app_config
from config.schema import AppConfig
from data.validation import ensure_valid_hotel, ensure_valid_room_type
from models.convert import (
    hotel_changes_to_update,
    hotel_from_record,
    hotel_to_insert,
    room_type_changes_to_update,
    room_type_from_record,
    room_type_to_insert,
)
from models.filters import HotelFilters, HotelQuery
from models.hotel import Hotel
from models.records import HotelRecord, RoomTypeInsert, RoomTypeRecord
from models.room_type import RoomType, RoomTypeStatus
from repository.base import EntityType, HotelStore
from repository.errors import RecordNotFoundError, RepositoryError
from repository.external_id import allocate, next_external_id

logger = logging.getLogger(__name__)


@dataclass
class BulkResult:
    """Ergebnis eines Hotels in bulk_add."""
    hotel_name: str
    success: bool
    hotel: Optional[Hotel] = None
    error: Optional[Exception] = None


class HotelInventory:
    """Repository-Adapter über einem HotelStore (SQL oder In-Memory)."""

    def __init__(self, store: HotelStore, config: Optional[AppConfig] = None):
        self.store = store
        self.config = config or default_app_config()
        self.hotels: list[Hotel] = []

    # ─── Laden ───

    def _attach_room_types(self, records: list[HotelRecord]) -> list[Hotel]:
        hotels = []
        for record in records:
            try:
                room_types = self.store.select_room_types(record.id)
            except RepositoryError as exc:
                logger.warning(f"Zimmertypen für Hotel {record.id} nicht ladbar: {exc}")
                room_types = []
            hotels.append(hotel_from_record(record, room_types))
        return hotels

    def refresh(self) -> list[Hotel]:
        """Lädt alle Hotels samt Zimmertypen neu (N+1 Abfragen)."""
        try:
            records = self.store.select_hotels()
        except RepositoryError as exc:
            logger.error(f"Hotels konnten nicht geladen werden: {exc}")
            raise
        self.hotels = self._attach_room_types(records)
        logger.debug(f"Schnappschuss: {len(self.hotels)} Hotels")
        return self.hotels

    # ─── Hotels ───

    def list(self, filters: Optional[HotelFilters] = None,
             query: Optional[HotelQuery] = None) -> list[Hotel]:
        """Hotels aus dem Schnappschuss, optional gefiltert.

        Mit `query` wird serverseitig gefiltert neu geladen (ersetzt den
        Schnappschuss nicht), `filters` wirkt danach clientseitig.
        """
        if query is not None:
            hotels = self._attach_room_types(self.store.select_hotels(query))
        else:
            hotels = list(self.hotels)
        if filters is not None:
            hotels = apply_filters(hotels, filters)
        return hotels

    def get_by_id(self, hotel_id: str) -> Optional[Hotel]:
        """Ein Hotel ohne Zimmertypen; None wenn es nicht existiert."""
        try:
            return hotel_from_record(self.store.get_hotel(hotel_id))
        except RecordNotFoundError:
            return None

    def _insert_hotel(self, hotel: Hotel) -> HotelRecord:
        row = hotel_to_insert(hotel)
        requested = row.external_id
        start = self.config.external_ids.start

        def generator() -> int:
            nonlocal requested
            if requested is not None:
                candidate, requested = requested, None
                if not self.store.external_id_exists(EntityType.HOTEL, candidate):
                    return candidate
                logger.warning(f"Externe ID {candidate} bereits vergeben, vergebe neu")
            return next_external_id(self.store, EntityType.HOTEL, start)

        return allocate(
            lambda external_id: self.store.insert_hotel(
                row.model_copy(update={"external_id": external_id})),
            generator,
            max_retries=self.config.external_ids.max_retries,
        )

    def _insert_room_types(self, hotel_id: str,
                           room_types: list[RoomType]) -> list[RoomTypeRecord]:
        """Alle Zimmertypen in einem INSERT, mit fortlaufenden externen IDs."""
        if not room_types:
            return []
        rows = [room_type_to_insert(rt, hotel_id) for rt in room_types]
        start = self.config.external_ids.start

        def insert(first_id: int) -> list[RoomTypeRecord]:
            numbered: list[RoomTypeInsert] = [
                row.model_copy(update={"external_id": first_id + i})
                for i, row in enumerate(rows)
            ]
            return self.store.insert_room_types(numbered)

        return allocate(
            insert,
            lambda: next_external_id(self.store, EntityType.ROOM_TYPE, start),
            max_retries=self.config.external_ids.max_retries,
        )

    def create(self, hotel: Hotel) -> Hotel:
        """Legt ein Hotel an (und seine Zimmertypen, falls vorhanden).

        Die Validierung läuft vor jedem Datenbankzugriff.
        """
        ensure_valid_hotel(hotel)
        try:
            record = self._insert_hotel(hotel)
        except RepositoryError as exc:
            logger.error(f"Hotel '{hotel.name}' konnte nicht angelegt werden: {exc}")
            raise
        try:
            room_records = self._insert_room_types(record.id, hotel.room_types)
        except RepositoryError as exc:
            logger.error(f"Zimmertypen für '{hotel.name}' nicht angelegt, Hotel wird verworfen: {exc}")
            self._discard_hotel(record.id)
            raise
        logger.info(f"Hotel angelegt: {record.name} (#{record.external_id})")
        self.refresh()
        return self._from_snapshot(record.id) or hotel_from_record(record, room_records)

    def _discard_hotel(self, hotel_id: str) -> None:
        """Entfernt ein Hotel, dessen Zimmertypen nicht angelegt werden konnten."""
        try:
            self.store.delete_hotel(hotel_id)
        except RepositoryError as exc:
            logger.error(f"Hotel {hotel_id} konnte nicht verworfen werden: {exc}")
            self.refresh()

    def update(self, hotel_id: str, changes: dict[str, Any]) -> Hotel:
        """Teil-Update; nur die übergebenen Felder werden geschrieben.

        Die Änderungen werden vorher auf den aktuellen Datensatz angewendet
        und das Ergebnis wie beim Anlegen validiert. Ungültige Werte
        erreichen den Store also nie.
        """
        update = hotel_changes_to_update(changes)
        try:
            current = self.store.get_hotel(hotel_id)
        except RepositoryError as exc:
            logger.error(f"Hotel {hotel_id} konnte nicht geändert werden: {exc}")
            raise
        ensure_valid_hotel(hotel_from_record(current.model_copy(update=update.changes())))
        try:
            record = self.store.update_hotel(hotel_id, update)
        except RepositoryError as exc:
            logger.error(f"Hotel {hotel_id} konnte nicht geändert werden: {exc}")
            raise
        self.refresh()
        return self._from_snapshot(hotel_id) or hotel_from_record(record)

    def delete(self, hotel_id: str) -> None:
        """Löscht erst alle Zimmertypen, dann das Hotel."""
        try:
            removed = self.store.delete_room_types_for_hotel(hotel_id)
            self.store.delete_hotel(hotel_id)
        except RepositoryError as exc:
            logger.error(f"Hotel {hotel_id} konnte nicht gelöscht werden: {exc}")
            raise
        logger.info(f"Hotel {hotel_id} gelöscht ({removed} Zimmertypen)")
        self.refresh()

    def search(self, term: str) -> list[Hotel]:
        """Serverseitige Suche in Name, Stadt und Land (ohne Zimmertypen)."""
        return [hotel_from_record(r) for r in self.store.search_hotels(term)]

    def _from_snapshot(self, hotel_id: str) -> Optional[Hotel]:
        for hotel in self.hotels:
            if hotel.id == hotel_id:
                return hotel
        return None

    # ─── Zimmertypen ───

    def room_types_for(self, hotel_id: str) -> list[RoomType]:
        return [room_type_from_record(r) for r in self.store.select_room_types(hotel_id)]

    def add_room_type(self, room_type: RoomType, hotel_id: Optional[str] = None) -> RoomType:
        ensure_valid_room_type(room_type)
        row = room_type_to_insert(room_type, hotel_id)
        start = self.config.external_ids.start
        try:
            record = allocate(
                lambda external_id: self.store.insert_room_type(
                    row.model_copy(update={"external_id": external_id})),
                lambda: next_external_id(self.store, EntityType.ROOM_TYPE, start),
                max_retries=self.config.external_ids.max_retries,
            )
        except RepositoryError as exc:
            logger.error(f"Zimmertyp '{room_type.name}' konnte nicht angelegt werden: {exc}")
            raise
        logger.info(f"Zimmertyp angelegt: {record.name} (#{record.external_id})")
        self.refresh()
        return room_type_from_record(record)

    def update_room_type(self, room_type_id: str, changes: dict[str, Any]) -> RoomType:
        """Teil-Update eines Zimmertyps, validiert wie update()."""
        update = room_type_changes_to_update(changes)
        try:
            current = self.store.get_room_type(room_type_id)
        except RepositoryError as exc:
            logger.error(f"Zimmertyp {room_type_id} konnte nicht geändert werden: {exc}")
            raise
        # Capacity(adults=0) u.ä. scheitert hier als ValidationError
        ensure_valid_room_type(room_type_from_record(current.model_copy(update=update.changes())))
        try:
            record = self.store.update_room_type(room_type_id, update)
        except RepositoryError as exc:
            logger.error(f"Zimmertyp {room_type_id} konnte nicht geändert werden: {exc}")
            raise
        self.refresh()
        return room_type_from_record(record)

    def delete_room_type(self, room_type_id: str) -> None:
        try:
            self.store.delete_room_type(room_type_id)
        except RepositoryError as exc:
            logger.error(f"Zimmertyp {room_type_id} konnte nicht gelöscht werden: {exc}")
            raise
        self.refresh()

    def set_room_type_status(self, room_type_id: str, status: str) -> RoomType:
        """Ändert nur den Status, alle anderen Felder bleiben unberührt."""
        return self.update_room_type(room_type_id, {"status": RoomTypeStatus(status)})

    # ─── Kombiniert ───

    def get_hotel_with_room_types(self, hotel_id: str) -> Optional[Hotel]:
        try:
            record = self.store.get_hotel(hotel_id)
        except RecordNotFoundError:
            return None
        return hotel_from_record(record, self.store.select_room_types(hotel_id))

    def add_hotel_with_room_types(self, hotel: Hotel, room_types: list[RoomType]) -> Hotel:
        return self.create(hotel.model_copy(update={"room_types": list(room_types)}))

    def bulk_add(self, hotels: list[Hotel]) -> list[BulkResult]:
        """Legt mehrere Hotels an; ein Fehler bricht die übrigen nicht ab."""
        results = []
        for hotel in hotels:
            try:
                created = self.create(hotel)
                results.append(BulkResult(hotel.name, True, hotel=created))
            except (RepositoryError, ValueError) as exc:
                results.append(BulkResult(hotel.name, False, error=exc))
        ok = sum(1 for r in results if r.success)
        logger.info(f"Sammelimport: {ok}/{len(results)} Hotels angelegt")
        return results
