"""Clientseitiges Filtern, Suchen, Sortieren und Blättern der Hotelliste.

Alle Funktionen sind rein: Eingabeliste und Hotels bleiben unverändert,
das Ergebnis ist eine neue Liste.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, TypeVar

from models.filters import ALL, HotelFilters, SortDirection, SortField
from models.hotel import Hotel

T = TypeVar("T")


def _is_set(value) -> bool:
    return value not in (None, "", ALL)


def _same(a: str, b: str) -> bool:
    return (a or "").casefold() == (b or "").casefold()


# ─── Filtern ───

def apply_filters(hotels: list[Hotel], filters: HotelFilters) -> list[Hotel]:
    """Wendet alle aktiven Filter (UND-verknüpft) an.

    Reihenfolge: Land, Stadt, Lage, Sterne, Status, Kategorie, Zimmertypen
    (mind. einer), Ausstattung (alle), Preisspanne, Reisezeitraum.
    """
    result = list(hotels)

    if _is_set(filters.country):
        result = [h for h in result if _same(h.country, filters.country)]
    if _is_set(filters.city):
        result = [h for h in result if _same(h.city, filters.city)]
    if _is_set(filters.location):
        result = [h for h in result if _same(h.location, filters.location)]
    if _is_set(filters.star_rating):
        result = [h for h in result if h.star_rating == filters.star_rating]
    if _is_set(filters.status):
        result = [h for h in result if h.status.value == filters.status]
    if _is_set(filters.category):
        result = [h for h in result if _same(h.category, filters.category)]

    if filters.room_types:
        wanted = {name.casefold() for name in filters.room_types}
        result = [
            h for h in result
            if any(name.casefold() in wanted for name in h.room_type_names)
        ]

    if filters.facilities:
        required = {f.casefold() for f in filters.facilities}
        result = [
            h for h in result
            if required <= {f.casefold() for f in h.facilities}
        ]

    if filters.price_active:
        low, high = filters.price_range.min, filters.price_range.max
        # Hotels ohne Zimmertypen haben keinen Preis und fallen heraus
        result = [
            h for h in result
            if h.min_price is not None and low <= h.min_price <= high
        ]

    if filters.date_range.is_set:
        start, end = filters.date_range.start, filters.date_range.end
        result = [
            h for h in result
            if any(rt.overlaps(start, end) for rt in h.room_types)
        ]

    return result


def active_filter_count(filters: HotelFilters) -> int:
    """Anzahl aktiver Filter (für die Anzeige "Filter (n)")."""
    count = sum(1 for value in (
        filters.country, filters.city, filters.location, filters.star_rating,
        filters.status, filters.category,
    ) if _is_set(value))
    count += bool(filters.room_types)
    count += bool(filters.facilities)
    count += filters.price_active
    count += filters.date_range.is_set
    return count


def search_hotels(hotels: list[Hotel], term: str) -> list[Hotel]:
    """Teilstring-Suche in Name, Lage, Land und Stadt (ohne Groß-/Kleinschreibung)."""
    needle = (term or "").strip().casefold()
    if not needle:
        return list(hotels)
    return [
        h for h in hotels
        if needle in h.name.casefold()
        or needle in h.location.casefold()
        or needle in h.country.casefold()
        or needle in h.city.casefold()
    ]


# ─── Sortieren ───

_SORT_KEYS: dict[SortField, Callable[[Hotel], object]] = {
    SortField.NAME: lambda h: h.name.casefold(),
    SortField.COUNTRY: lambda h: h.country.casefold(),
    SortField.CITY: lambda h: h.city.casefold(),
    SortField.STAR_RATING: lambda h: h.star_rating,
    # Ohne Zimmertypen kein Preis: aufsteigend ans Ende
    SortField.MIN_PRICE: lambda h: h.min_price if h.min_price is not None else math.inf,
    SortField.UPDATED_AT: lambda h: _timestamp(h.updated_at),
}


def _timestamp(value: Optional[datetime]) -> float:
    if value is None:
        return -math.inf
    if value.tzinfo is None:
        # Naive Zeitstempel (SQLite) gelten als UTC
        return (value - datetime(1970, 1, 1)).total_seconds()
    return value.timestamp()


def apply_sort(hotels: list[Hotel], sort_field: SortField | str,
               direction: SortDirection | str = SortDirection.ASC) -> list[Hotel]:
    """Stabile Sortierung nach einem Feld; DESC kehrt die Vergleichsrichtung um."""
    key = _SORT_KEYS[SortField(sort_field)]
    return sorted(hotels, key=key, reverse=SortDirection(direction) == SortDirection.DESC)


# ─── Blättern ───

@dataclass
class Page:
    """Eine Seite der Liste (Seiten 1-basiert)."""

    items: list = field(default_factory=list)
    page: int = 1
    per_page: int = 10
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_items / self.per_page))

    @property
    def start(self) -> int:
        """Position des ersten Eintrags (1-basiert, 0 bei leerer Liste)."""
        return 0 if not self.items else (self.page - 1) * self.per_page + 1

    @property
    def end(self) -> int:
        return 0 if not self.items else self.start + len(self.items) - 1


def paginate(items: list[T], page: int = 1, per_page: int = 10) -> Page:
    if per_page < 1:
        raise ValueError(f"per_page muss ≥ 1 sein, nicht {per_page}")
    total_pages = max(1, math.ceil(len(items) / per_page))
    page = min(max(page, 1), total_pages)
    offset = (page - 1) * per_page
    return Page(
        items=list(items[offset:offset + per_page]),
        page=page,
        per_page=per_page,
        total_items=len(items),
    )


# ─── Auswahllisten ───

@dataclass
class FilterOptions:
    countries: list[str] = field(default_factory=list)
    cities: list[str] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    room_types: list[str] = field(default_factory=list)
    facilities: list[str] = field(default_factory=list)


def _distinct(values) -> list[str]:
    seen: dict[str, str] = {}
    for v in values:
        if v and v.casefold() not in seen:
            seen[v.casefold()] = v
    return sorted(seen.values(), key=str.casefold)


def filter_options(hotels: list[Hotel], country: Optional[str] = None,
                   city: Optional[str] = None) -> FilterOptions:
    """Auswahlwerte für die Filter; Städte je Land, Lagen je Stadt eingeschränkt."""
    in_country = [h for h in hotels if not _is_set(country) or _same(h.country, country)]
    in_city = [h for h in in_country if not _is_set(city) or _same(h.city, city)]
    return FilterOptions(
        countries=_distinct(h.country for h in hotels),
        cities=_distinct(h.city for h in in_country),
        locations=_distinct(h.location for h in in_city),
        categories=_distinct(h.category for h in hotels),
        room_types=_distinct(name for h in hotels for name in h.room_type_names),
        facilities=_distinct(f for h in hotels for f in h.facilities),
    )
