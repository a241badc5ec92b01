"""Zeilen-Formate der Tabellen `hotels` und `hotel_room_types`.

Pro Tabelle drei Varianten:
  - *Record: vollständige Zeile wie sie gelesen wird
  - *Insert: einfügbare Spalten (id und Zeitstempel setzt der Store)
  - *Update: alle Spalten optional, für Teil-Updates
    (nur gesetzte Felder via model_dump(exclude_unset=True))

JSON-Spalten (address, contact_info, policies, facilities, amenities,
images, capacity) sind einfache dict/list-Werte.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel


# ─── hotels ───

class HotelInsert(BaseModel):
    name: str
    country: str
    city: str
    external_id: Optional[int] = None
    star_rating: Optional[int] = None
    category: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    address: Optional[dict[str, Any]] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    google_map_link: Optional[str] = None
    contact_info: Optional[dict[str, Any]] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    facilities: Optional[list[str]] = None
    amenities: Optional[list[str]] = None
    images: Optional[list[str]] = None
    policies: Optional[dict[str, Any]] = None
    status: str = "draft"
    currency: Optional[str] = None
    currency_symbol: Optional[str] = None


class HotelRecord(HotelInsert):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None


class HotelUpdate(BaseModel):
    name: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    external_id: Optional[int] = None
    star_rating: Optional[int] = None
    category: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    address: Optional[dict[str, Any]] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    google_map_link: Optional[str] = None
    contact_info: Optional[dict[str, Any]] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    facilities: Optional[list[str]] = None
    amenities: Optional[list[str]] = None
    images: Optional[list[str]] = None
    policies: Optional[dict[str, Any]] = None
    status: Optional[str] = None
    currency: Optional[str] = None
    currency_symbol: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        """Nur die explizit gesetzten Spalten."""
        return self.model_dump(exclude_unset=True)


# ─── hotel_room_types ───

class RoomTypeInsert(BaseModel):
    hotel_id: str
    name: str
    capacity: dict[str, int]
    external_id: Optional[int] = None
    description: Optional[str] = None
    configuration: Optional[str] = None
    bed_type: Optional[str] = None
    meal_plan: Optional[str] = None
    max_occupancy: Optional[int] = None
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    adult_price: float = 0.0
    child_price: float = 0.0
    extra_bed_price: float = 0.0
    amenities: Optional[list[str]] = None
    images: Optional[list[str]] = None
    inventory: int = 0
    status: str = "active"
    currency: Optional[str] = None
    currency_symbol: Optional[str] = None


class RoomTypeRecord(RoomTypeInsert):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RoomTypeUpdate(BaseModel):
    hotel_id: Optional[str] = None
    name: Optional[str] = None
    capacity: Optional[dict[str, int]] = None
    external_id: Optional[int] = None
    description: Optional[str] = None
    configuration: Optional[str] = None
    bed_type: Optional[str] = None
    meal_plan: Optional[str] = None
    max_occupancy: Optional[int] = None
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    adult_price: Optional[float] = None
    child_price: Optional[float] = None
    extra_bed_price: Optional[float] = None
    amenities: Optional[list[str]] = None
    images: Optional[list[str]] = None
    inventory: Optional[int] = None
    status: Optional[str] = None
    currency: Optional[str] = None
    currency_symbol: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        """Nur die explizit gesetzten Spalten."""
        return self.model_dump(exclude_unset=True)
