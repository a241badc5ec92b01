"""Datenmodell für einen Zimmertyp (Pydantic v2)."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class RoomTypeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


class Capacity(BaseModel):
    """Belegung: Erwachsene + Kinder."""

    adults: int = Field(2, ge=1)
    children: int = Field(0, ge=0)

    @property
    def total(self) -> int:
        return self.adults + self.children


class RoomType(BaseModel):
    """Buchbare Zimmerkategorie eines Hotels (z.B. Deluxe, Suite).

    Preise und Gültigkeitsfenster werden hier NICHT geprüft: negative Preise
    oder valid_from > valid_to fängt erst die Import-/Formularvalidierung ab
    (data.validation).
    """

    id: Optional[str] = None           # Primärschlüssel (Server-generiert)
    external_id: Optional[int] = None  # Fortlaufende Nummer, siehe repository.external_id
    hotel_id: Optional[str] = None     # Besitzendes Hotel
    name: str
    description: str = ""
    configuration: str = ""            # Bettenkonfiguration, z.B. "1 King Bed"
    bed_type: str = ""
    meal_plan: str = "Room Only"
    capacity: Capacity = Capacity()
    max_occupancy: Optional[int] = None
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    adult_price: float = 0.0
    child_price: float = 0.0
    extra_bed_price: float = 0.0
    amenities: list[str] = []
    images: list[str] = []
    inventory: int = 0                 # Anzahl verfügbarer Zimmer
    status: RoomTypeStatus = RoomTypeStatus.ACTIVE
    currency: Optional[str] = None     # Erbt vom Hotel wenn leer
    currency_symbol: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("valid_from", "valid_to", mode="before")
    @classmethod
    def _date_only(cls, v):
        # ISO-Zeitstempel ("2024-06-01T00:00:00Z") auf das Datum kürzen
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and len(v) > 10 and v[4] == "-":
            return v[:10]
        if v == "":
            return None
        return v

    @model_validator(mode='after')
    def _default_occupancy(self):
        if self.max_occupancy is None:
            self.max_occupancy = self.capacity.total
        return self

    def overlaps(self, start: date, end: date) -> bool:
        """Inklusive Überschneidung des Gültigkeitsfensters mit [start, end].

        Fehlende Grenzen gelten als offen.
        """
        if self.valid_from is not None and self.valid_from > end:
            return False
        if self.valid_to is not None and self.valid_to < start:
            return False
        return True

    def inherit_currency(self, currency: str, symbol: str) -> "RoomType":
        """Kopie mit Hotel-Währung, falls der Zimmertyp keine eigene hat."""
        if self.currency:
            return self
        return self.model_copy(update={"currency": currency, "currency_symbol": symbol})
