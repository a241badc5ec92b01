"""Umwandlung zwischen Tabellenzeilen (models.records) und Ansichtsmodellen.

Jede Richtung ist Feld für Feld ausgeschrieben. Teil-Updates laufen über
eine explizite Feldtabelle: unbekannte oder nicht änderbare Felder lösen
ValueError aus statt still ignoriert zu werden.
"""

from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel

from config.defaults import currency_for_country, symbol_for_currency
from models.hotel import Address, ContactInfo, Hotel, HotelPolicies, HotelStatus
from models.records import (
    HotelInsert,
    HotelRecord,
    HotelUpdate,
    RoomTypeInsert,
    RoomTypeRecord,
    RoomTypeUpdate,
)
from models.room_type import Capacity, RoomType, RoomTypeStatus


def _same(value: Any) -> Any:
    return value


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


def _enum_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _list(value: Any) -> Optional[list]:
    return list(value) if value is not None else None


# ─── Hotel ────────────────────────────────────────────────────────────────────

def hotel_from_record(record: HotelRecord,
                      room_types: Optional[list[RoomTypeRecord]] = None) -> Hotel:
    """Tabellenzeile (+ optionale Zimmertyp-Zeilen) → Hotel."""
    return Hotel(
        id=record.id,
        external_id=record.external_id,
        name=record.name,
        star_rating=record.star_rating or 3,
        category=record.category or "Standard",
        description=record.description or "",
        country=record.country,
        city=record.city,
        location=record.location or "",
        address=Address.model_validate(record.address or {}),
        latitude=record.latitude,
        longitude=record.longitude,
        google_map_link=record.google_map_link or "",
        contact_info=ContactInfo.model_validate(record.contact_info or {}),
        check_in_time=record.check_in_time or "14:00",
        check_out_time=record.check_out_time or "12:00",
        facilities=list(record.facilities or []),
        amenities=list(record.amenities or []),
        images=list(record.images or []),
        policies=HotelPolicies.model_validate(record.policies or {}),
        status=HotelStatus(record.status),
        currency=record.currency,
        currency_symbol=record.currency_symbol,
        room_types=[room_type_from_record(r) for r in (room_types or [])],
        created_at=record.created_at,
        updated_at=record.updated_at,
        last_updated=record.last_updated,
    )


def hotel_to_insert(hotel: Hotel) -> HotelInsert:
    """Hotel → einfügbare Zeile. Zimmertypen werden separat eingefügt."""
    return HotelInsert(
        name=hotel.name,
        country=hotel.country,
        city=hotel.city,
        external_id=hotel.external_id,
        star_rating=hotel.star_rating,
        category=hotel.category,
        description=hotel.description,
        location=hotel.location,
        address=hotel.address.model_dump(),
        latitude=hotel.latitude,
        longitude=hotel.longitude,
        google_map_link=hotel.google_map_link,
        contact_info=hotel.contact_info.model_dump(),
        check_in_time=hotel.check_in_time,
        check_out_time=hotel.check_out_time,
        facilities=list(hotel.facilities),
        amenities=list(hotel.amenities),
        images=list(hotel.images),
        policies=hotel.policies.model_dump(),
        status=hotel.status.value,
        currency=hotel.currency,
        currency_symbol=hotel.currency_symbol,
    )


# Ansichtsfeld → (Spalte, Umwandlung)
_HOTEL_FIELD_MAP: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "name":            ("name", _same),
    "country":         ("country", _same),
    "city":            ("city", _same),
    "external_id":     ("external_id", _same),
    "star_rating":     ("star_rating", _same),
    "category":        ("category", _same),
    "description":     ("description", _same),
    "location":        ("location", _same),
    "address":         ("address", _dump),
    "latitude":        ("latitude", _same),
    "longitude":       ("longitude", _same),
    "google_map_link": ("google_map_link", _same),
    "contact_info":    ("contact_info", _dump),
    "check_in_time":   ("check_in_time", _same),
    "check_out_time":  ("check_out_time", _same),
    "facilities":      ("facilities", _list),
    "amenities":       ("amenities", _list),
    "images":          ("images", _list),
    "policies":        ("policies", _dump),
    "status":          ("status", _enum_value),
    "currency":        ("currency", _same),
    "currency_symbol": ("currency_symbol", _same),
}

_HOTEL_READONLY = {"id", "room_types", "created_at", "updated_at", "last_updated"}


def hotel_changes_to_update(changes: dict[str, Any]) -> HotelUpdate:
    """Teiländerungen (Ansichtsfelder) → HotelUpdate.

    Ändert sich das Land ohne explizite Währung, werden Währung und Symbol
    neu aus dem Land abgeleitet.
    """
    values: dict[str, Any] = {}
    for field, value in changes.items():
        if field in _HOTEL_READONLY:
            raise ValueError(f"Feld '{field}' kann nicht per Update geändert werden.")
        if field not in _HOTEL_FIELD_MAP:
            raise ValueError(f"Unbekanntes Hotel-Feld: '{field}'")
        column, convert = _HOTEL_FIELD_MAP[field]
        values[column] = convert(value)

    if "status" in values:
        HotelStatus(values["status"])      # ValueError bei unbekanntem Status
    if values.get("star_rating") is not None and not 1 <= values["star_rating"] <= 5:
        raise ValueError(f"Sterne müssen zwischen 1 und 5 liegen, nicht {values['star_rating']}.")

    if values.get("country") and "currency" not in values:
        values["currency"], values["currency_symbol"] = currency_for_country(values["country"])
    elif values.get("currency") and "currency_symbol" not in values:
        values["currency_symbol"] = symbol_for_currency(values["currency"])

    # Pydantic prüft die Typen; exclude_unset hält die Teilmenge
    return HotelUpdate(**values)


# ─── Zimmertyp ────────────────────────────────────────────────────────────────

def room_type_from_record(record: RoomTypeRecord) -> RoomType:
    """Tabellenzeile → RoomType."""
    return RoomType(
        id=record.id,
        external_id=record.external_id,
        hotel_id=record.hotel_id,
        name=record.name,
        description=record.description or "",
        configuration=record.configuration or "",
        bed_type=record.bed_type or "",
        meal_plan=record.meal_plan or "Room Only",
        capacity=Capacity.model_validate(record.capacity),
        max_occupancy=record.max_occupancy,
        valid_from=record.valid_from,
        valid_to=record.valid_to,
        adult_price=record.adult_price,
        child_price=record.child_price,
        extra_bed_price=record.extra_bed_price,
        amenities=list(record.amenities or []),
        images=list(record.images or []),
        inventory=record.inventory,
        status=RoomTypeStatus(record.status),
        currency=record.currency,
        currency_symbol=record.currency_symbol,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def room_type_to_insert(room_type: RoomType, hotel_id: Optional[str] = None) -> RoomTypeInsert:
    """RoomType → einfügbare Zeile. hotel_id ist Pflicht."""
    owner = hotel_id or room_type.hotel_id
    if not owner:
        raise ValueError(
            f"Zimmertyp '{room_type.name}': hotel_id ist beim Anlegen erforderlich."
        )
    return RoomTypeInsert(
        hotel_id=owner,
        name=room_type.name,
        capacity=room_type.capacity.model_dump(),
        external_id=room_type.external_id,
        description=room_type.description,
        configuration=room_type.configuration,
        bed_type=room_type.bed_type,
        meal_plan=room_type.meal_plan,
        max_occupancy=room_type.max_occupancy,
        valid_from=room_type.valid_from,
        valid_to=room_type.valid_to,
        adult_price=room_type.adult_price,
        child_price=room_type.child_price,
        extra_bed_price=room_type.extra_bed_price,
        amenities=list(room_type.amenities),
        images=list(room_type.images),
        inventory=room_type.inventory,
        status=room_type.status.value,
        currency=room_type.currency,
        currency_symbol=room_type.currency_symbol,
    )


_ROOM_TYPE_FIELD_MAP: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "hotel_id":        ("hotel_id", _same),
    "name":            ("name", _same),
    "capacity":        ("capacity", _dump),
    "external_id":     ("external_id", _same),
    "description":     ("description", _same),
    "configuration":   ("configuration", _same),
    "bed_type":        ("bed_type", _same),
    "meal_plan":       ("meal_plan", _same),
    "max_occupancy":   ("max_occupancy", _same),
    "valid_from":      ("valid_from", _same),
    "valid_to":        ("valid_to", _same),
    "adult_price":     ("adult_price", _same),
    "child_price":     ("child_price", _same),
    "extra_bed_price": ("extra_bed_price", _same),
    "amenities":       ("amenities", _list),
    "images":          ("images", _list),
    "inventory":       ("inventory", _same),
    "status":          ("status", _enum_value),
    "currency":        ("currency", _same),
    "currency_symbol": ("currency_symbol", _same),
}

_ROOM_TYPE_READONLY = {"id", "created_at", "updated_at"}


def room_type_changes_to_update(changes: dict[str, Any]) -> RoomTypeUpdate:
    """Teiländerungen (Ansichtsfelder) → RoomTypeUpdate."""
    values: dict[str, Any] = {}
    for field, value in changes.items():
        if field in _ROOM_TYPE_READONLY:
            raise ValueError(f"Feld '{field}' kann nicht per Update geändert werden.")
        if field not in _ROOM_TYPE_FIELD_MAP:
            raise ValueError(f"Unbekanntes Zimmertyp-Feld: '{field}'")
        column, convert = _ROOM_TYPE_FIELD_MAP[field]
        values[column] = convert(value)
    if "status" in values:
        RoomTypeStatus(values["status"])   # ValueError bei unbekanntem Status
    return RoomTypeUpdate(**values)
