"""Filter- und Sortierparameter für die Hotelliste (Pydantic v2)."""

from datetime import date
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

# Platzhalter für "kein Filter" in Auswahlfeldern
ALL = "all"

DEFAULT_PRICE_CEILING = 10000.0


class SortField(str, Enum):
    NAME = "name"
    COUNTRY = "country"
    CITY = "city"
    STAR_RATING = "star_rating"
    MIN_PRICE = "min_price"
    UPDATED_AT = "updated_at"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class PriceRange(BaseModel):
    min: float = Field(0.0, ge=0)
    max: float = DEFAULT_PRICE_CEILING

    @model_validator(mode='after')
    def _check_order(self):
        if self.min > self.max:
            raise ValueError(f"Preis-Minimum ({self.min}) > Maximum ({self.max})")
        return self


class DateRange(BaseModel):
    """Angefragter Reisezeitraum; nur aktiv wenn beide Grenzen gesetzt sind."""
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_set(self) -> bool:
        return self.start is not None and self.end is not None

    @model_validator(mode='after')
    def _check_order(self):
        if self.is_set and self.start > self.end:
            raise ValueError(f"Zeitraum-Beginn {self.start} liegt nach dem Ende {self.end}")
        return self


class HotelFilters(BaseModel):
    """Alle clientseitigen Filter. Leere Werte und "all" bedeuten: kein Filter."""

    country: str = ALL
    city: str = ALL
    location: str = ALL
    star_rating: Union[int, Literal["all"]] = ALL
    status: str = ALL
    category: str = ALL
    room_types: list[str] = []     # mind. einer muss vorhanden sein
    facilities: list[str] = []     # alle müssen vorhanden sein
    price_range: PriceRange = PriceRange()
    date_range: DateRange = DateRange()
    # Obergrenze des Preis-Sliders; [0, price_ceiling] = kein Preisfilter
    price_ceiling: float = DEFAULT_PRICE_CEILING

    @field_validator("status")
    @classmethod
    def _check_status(cls, v: str) -> str:
        v = (v or ALL).strip().lower()
        if v not in (ALL, "active", "inactive", "draft"):
            raise ValueError(f"Unbekannter Status-Filter: {v}")
        return v

    @field_validator("star_rating", mode="before")
    @classmethod
    def _check_stars(cls, v):
        if v in (None, "", ALL):
            return ALL
        stars = int(v)
        if not 1 <= stars <= 5:
            raise ValueError(f"Sterne-Filter muss zwischen 1 und 5 liegen, nicht {v}")
        return stars

    @property
    def price_active(self) -> bool:
        return self.price_range.min > 0 or self.price_range.max < self.price_ceiling


def default_filters(price_ceiling: float = DEFAULT_PRICE_CEILING) -> HotelFilters:
    """Filter ohne Wirkung (Identität auf jeder Hotelliste)."""
    return HotelFilters(
        price_range=PriceRange(min=0.0, max=price_ceiling),
        price_ceiling=price_ceiling,
    )


class HotelQuery(BaseModel):
    """Serverseitige Filter für select_hotels (Teilmenge von HotelFilters).

    city/country: Teilstring, Groß-/Kleinschreibung egal.
    status/star_rating: exakt.
    """
    city: Optional[str] = None
    country: Optional[str] = None
    status: Optional[str] = None
    star_rating: Optional[int] = None
