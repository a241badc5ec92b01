"""Datenmodell für ein Hotel inkl. Zimmertypen (Pydantic v2)."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from config.defaults import DEFAULT_POLICIES, currency_for_country, symbol_for_currency
from models.room_type import RoomType


class HotelStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


class Address(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""


class ContactInfo(BaseModel):
    phone: str = ""
    email: str = ""
    website: str = ""


class HotelPolicies(BaseModel):
    cancellation: str = DEFAULT_POLICIES["cancellation"]
    children: str = DEFAULT_POLICIES["children"]
    pets: str = DEFAULT_POLICIES["pets"]
    payment: str = DEFAULT_POLICIES["payment"]


class Hotel(BaseModel):
    """Hotel mit allen Stammdaten und seinen Zimmertypen.

    Die Währung wird aus dem Land abgeleitet, solange sie nicht explizit
    gesetzt ist. Zimmertypen ohne eigene Währung erben die des Hotels.
    """

    id: Optional[str] = None
    external_id: Optional[int] = None
    name: str
    star_rating: int = Field(3, ge=1, le=5)
    category: str = "Standard"
    description: str = ""
    country: str
    city: str
    location: str = ""                 # Freitext, z.B. Stadtteil
    address: Address = Address()
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    google_map_link: str = ""
    contact_info: ContactInfo = ContactInfo()
    check_in_time: str = "14:00"
    check_out_time: str = "12:00"
    facilities: list[str] = []
    amenities: list[str] = []
    images: list[str] = []
    policies: HotelPolicies = HotelPolicies()
    status: HotelStatus = HotelStatus.DRAFT
    currency: Optional[str] = None
    currency_symbol: Optional[str] = None
    room_types: list[RoomType] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    @field_validator("name", "country", "city")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode='after')
    def _derive_currency(self):
        if not self.currency:
            self.currency, derived_symbol = currency_for_country(self.country)
            if not self.currency_symbol:
                self.currency_symbol = derived_symbol
        elif not self.currency_symbol:
            self.currency_symbol = symbol_for_currency(self.currency)
        self.room_types = [
            rt.inherit_currency(self.currency, self.currency_symbol)
            for rt in self.room_types
        ]
        return self

    @property
    def min_price(self) -> Optional[float]:
        """Niedrigster Erwachsenenpreis aller Zimmertypen (None ohne Zimmertypen)."""
        if not self.room_types:
            return None
        return min(rt.adult_price for rt in self.room_types)

    @property
    def room_type_names(self) -> list[str]:
        return [rt.name for rt in self.room_types]
