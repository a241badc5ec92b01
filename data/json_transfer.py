"""JSON-Export und -Import des Hotelbestands (Sicherung / Umzug zwischen Datenbanken).

Format (Version 1.0.0):
    {
      "version": "1.0.0",
      "exportDate": "2025-01-31T10:00:00+00:00",
      "hotels":    [ {Hotel ohne room_types}, ... ],
      "roomTypes": [ {RoomType + hotel_id + hotel_name}, ... ]
    }
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from data.validation import (
    ValidationIssue,
    errors_only,
    issues_from_pydantic,
    validate_hotel,
    validate_room_type,
)
from models.filters import HotelQuery
from models.hotel import Hotel
from models.room_type import RoomType
from repository.errors import RepositoryError
from repository.inventory import HotelInventory

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"

# Vom Server vergebene Felder, beim Import neu gesetzt
_SERVER_FIELDS = {"id", "created_at", "updated_at", "last_updated"}


class JsonImportError(ValueError):
    """JSON nicht lesbar oder Struktur ungültig."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = issues or []


class HotelExportData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str = EXPORT_VERSION
    export_date: datetime = Field(alias="exportDate")
    hotels: list[dict[str, Any]]
    room_types: list[dict[str, Any]] = Field(alias="roomTypes")


class ImportStatistics(BaseModel):
    total_hotels: int = 0
    imported_hotels: int = 0
    skipped_hotels: int = 0
    total_room_types: int = 0
    imported_room_types: int = 0
    skipped_room_types: int = 0
    errors: list[ValidationIssue] = []

    def print_rich(self) -> None:
        """Zusammenfassung als Rich-Tabelle plus Fehler/Warnungen."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="JSON-Import", box=box.SIMPLE_HEAVY)
        table.add_column("", style="bold")
        table.add_column("Gesamt", justify="right")
        table.add_column("Importiert", justify="right", style="green")
        table.add_column("Übersprungen", justify="right", style="yellow")
        table.add_row("Hotels", str(self.total_hotels),
                      str(self.imported_hotels), str(self.skipped_hotels))
        table.add_row("Zimmertypen", str(self.total_room_types),
                      str(self.imported_room_types), str(self.skipped_room_types))
        console.print(table)
        for issue in self.errors:
            color = "red" if issue.severity == "error" else "yellow"
            console.print(f"  [{color}]• {issue.field}: {issue.message}[/{color}]")


# ─── Export ───────────────────────────────────────────────────────────────────

def build_export_data(hotels: list[Hotel]) -> HotelExportData:
    room_types = []
    for hotel in hotels:
        for rt in hotel.room_types:
            entry = rt.model_dump(mode="json")
            entry["hotel_id"] = hotel.id
            entry["hotel_name"] = hotel.name
            room_types.append(entry)
    return HotelExportData(
        export_date=datetime.now(timezone.utc),
        hotels=[h.model_dump(mode="json", exclude={"room_types"}) for h in hotels],
        room_types=room_types,
    )


def export_hotels_to_json(inventory: HotelInventory,
                          hotel_ids: Optional[list[str]] = None) -> str:
    """Exportiert alle (oder die angegebenen) Hotels samt Zimmertypen als JSON-Text."""
    if hotel_ids:
        hotels = []
        for hotel_id in hotel_ids:
            hotel = inventory.get_hotel_with_room_types(hotel_id)
            if hotel is None:
                logger.warning(f"JSON-Export: Hotel {hotel_id} nicht gefunden")
                continue
            hotels.append(hotel)
    else:
        hotels = inventory.list(query=HotelQuery())
    data = build_export_data(hotels)
    logger.info(f"JSON-Export: {len(data.hotels)} Hotels, {len(data.room_types)} Zimmertypen")
    return data.model_dump_json(by_alias=True, indent=2)


# ─── Import ───────────────────────────────────────────────────────────────────

def _load_export_data(payload: str) -> tuple[HotelExportData, list[ValidationIssue]]:
    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise JsonImportError(f"Ungültiges JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise JsonImportError("Ungültiges Exportformat: Objekt erwartet.")

    issues = []
    if not isinstance(raw.get("hotels"), list):
        issues.append(ValidationIssue(field="hotels", message="Hotel-Liste fehlt oder ist ungültig."))
    if not isinstance(raw.get("roomTypes"), list):
        issues.append(ValidationIssue(field="roomTypes",
                                      message="Zimmertyp-Liste fehlt oder ist ungültig."))
    if issues:
        raise JsonImportError("Ungültiges Exportformat.", issues)

    raw.setdefault("exportDate", datetime.now(timezone.utc).isoformat())
    try:
        data = HotelExportData.model_validate(raw)
    except ValidationError as exc:
        raise JsonImportError("Ungültiges Exportformat.", issues_from_pydantic(exc)) from exc

    warnings = []
    hotel_ids = {h.get("id") for h in data.hotels}
    orphans = [rt for rt in data.room_types if rt.get("hotel_id") not in hotel_ids]
    if orphans:
        warnings.append(ValidationIssue(
            field="roomTypes",
            message=f"{len(orphans)} Zimmertypen ohne zugehöriges Hotel.",
            severity="warning",
        ))
    return data, warnings


def _duplicate_key(hotel: Hotel) -> tuple[str, str, str]:
    return (hotel.name.casefold(), hotel.city.casefold(), hotel.country.casefold())


def _skip_hotel(stats: ImportStatistics, own_room_types: list[dict]) -> None:
    """Übersprungenes Hotel zählen, seine Zimmertypen gleich mit."""
    stats.skipped_hotels += 1
    stats.skipped_room_types += len(own_room_types)


def import_hotels_from_json(inventory: HotelInventory, payload: str,
                            skip_duplicates: bool = True) -> ImportStatistics:
    """Importiert einen JSON-Export in den Bestand.

    Hotels mit Fehlern werden übersprungen, ebenso (bei skip_duplicates)
    Hotels mit gleichem Namen, Stadt und Land wie ein vorhandenes.
    Zimmertypen werden einzeln angelegt; ein fehlerhafter Zimmertyp hält
    das Hotel nicht auf.

    Raises:
        JsonImportError: JSON unlesbar oder Struktur ungültig.
    """
    data, warnings = _load_export_data(payload)
    stats = ImportStatistics(
        total_hotels=len(data.hotels),
        total_room_types=len(data.room_types),
        errors=list(warnings),
    )
    existing = {_duplicate_key(h) for h in inventory.list(query=HotelQuery())}
    # Verwaiste Zimmertypen gelten als übersprungen
    hotel_ids = {h.get("id") for h in data.hotels}
    stats.skipped_room_types = sum(1 for rt in data.room_types
                                   if rt.get("hotel_id") not in hotel_ids)

    for raw_hotel in data.hotels:
        label = raw_hotel.get("name") or "?"
        own = [rt for rt in data.room_types if rt.get("hotel_id") == raw_hotel.get("id")]
        values = {k: v for k, v in raw_hotel.items() if k not in _SERVER_FIELDS}
        try:
            hotel = Hotel.model_validate(values)
        except ValidationError as exc:
            stats.errors.extend(issues_from_pydantic(exc, prefix=f"{label}."))
            _skip_hotel(stats, own)
            continue

        hotel_errors = errors_only(validate_hotel(hotel))
        if hotel_errors:
            stats.errors.extend(hotel_errors)
            _skip_hotel(stats, own)
            continue

        if skip_duplicates and _duplicate_key(hotel) in existing:
            _skip_hotel(stats, own)
            stats.errors.append(ValidationIssue(
                field="name",
                message=f"Doppeltes Hotel übersprungen: {hotel.name} in {hotel.city}, {hotel.country}",
                severity="warning",
            ))
            continue

        try:
            created = inventory.create(hotel)
        except (RepositoryError, ValueError) as exc:
            logger.error(f"JSON-Import: Hotel '{hotel.name}' fehlgeschlagen: {exc}")
            stats.errors.append(ValidationIssue(
                field="hotel", message=f"Hotel '{hotel.name}' nicht importiert: {exc}"))
            _skip_hotel(stats, own)
            continue
        existing.add(_duplicate_key(created))
        stats.imported_hotels += 1

        for raw_rt in own:
            rt_values = {k: v for k, v in raw_rt.items()
                         if k not in _SERVER_FIELDS and k not in ("hotel_id", "hotel_name")}
            try:
                room_type = RoomType.model_validate(rt_values)
            except ValidationError as exc:
                stats.errors.extend(issues_from_pydantic(exc, prefix=f"{hotel.name}."))
                stats.skipped_room_types += 1
                continue
            rt_errors = errors_only(validate_room_type(room_type, hotel.name))
            if rt_errors:
                stats.errors.extend(rt_errors)
                stats.skipped_room_types += 1
                continue
            try:
                inventory.add_room_type(room_type, created.id)
            except (RepositoryError, ValueError) as exc:
                logger.error(f"JSON-Import: Zimmertyp '{room_type.name}' fehlgeschlagen: {exc}")
                stats.errors.append(ValidationIssue(
                    field="roomType",
                    message=f"Zimmertyp '{room_type.name}' nicht importiert: {exc}"))
                stats.skipped_room_types += 1
                continue
            stats.imported_room_types += 1

    logger.info(
        f"JSON-Import: {stats.imported_hotels}/{stats.total_hotels} Hotels, "
        f"{stats.imported_room_types}/{stats.total_room_types} Zimmertypen"
    )
    return stats
