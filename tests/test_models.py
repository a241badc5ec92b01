"""Tests für Datenmodelle, Währungsableitung und Zeilen-Umwandlung."""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from config.defaults import currency_for_country, symbol_for_currency
from models.convert import (
    hotel_changes_to_update,
    hotel_from_record,
    hotel_to_insert,
    room_type_changes_to_update,
    room_type_from_record,
    room_type_to_insert,
)
from models.filters import DateRange, HotelFilters, PriceRange, default_filters
from models.hotel import Hotel, HotelStatus
from models.records import HotelRecord, RoomTypeRecord
from models.room_type import Capacity, RoomType, RoomTypeStatus


def _room(name: str = "Deluxe", price: float = 100.0, **kw) -> RoomType:
    return RoomType(name=name, adult_price=price, **kw)


# ─── WÄHRUNG ──────────────────────────────────────────────────────────────────

class TestCurrency:
    def test_known_country(self):
        """Land → Währungscode und Symbol."""
        assert currency_for_country("Thailand") == ("THB", "฿")

    def test_country_case_insensitive(self):
        """Ländernamen werden getrimmt und ohne Groß-/Kleinschreibung verglichen."""
        assert currency_for_country("  india ") == ("INR", "₹")

    def test_uae_short_form(self):
        """Kurzform "UAE" wird erkannt."""
        assert currency_for_country("UAE")[0] == "AED"

    def test_unknown_country_falls_back_to_usd(self):
        """Unbekanntes Land fällt auf USD zurück."""
        assert currency_for_country("Atlantis") == ("USD", "$")
        assert currency_for_country(None) == ("USD", "$")

    def test_symbol_for_code(self):
        assert symbol_for_currency("eur") == "€"
        assert symbol_for_currency("USD") == "$"
        # Unbekannter Code dient selbst als Symbol
        assert symbol_for_currency("XYZ") == "XYZ"


# ─── HOTEL / ZIMMERTYP ────────────────────────────────────────────────────────

class TestHotelModel:
    def test_currency_derived_from_country(self):
        """Ohne Angabe kommt die Währung aus dem Land."""
        h = Hotel(name="Sala", country="Thailand", city="Bangkok")
        assert h.currency == "THB"
        assert h.currency_symbol == "฿"

    def test_explicit_currency_kept(self):
        """Explizite Währung wird nicht überschrieben."""
        h = Hotel(name="Sala", country="Thailand", city="Bangkok", currency="EUR")
        assert h.currency == "EUR"
        assert h.currency_symbol == "€"

    def test_room_types_inherit_currency(self):
        """Zimmertypen ohne eigene Währung übernehmen die des Hotels."""
        h = Hotel(name="Sala", country="India", city="Goa",
                  room_types=[_room(), _room("Suite", currency="USD", currency_symbol="$")])
        assert h.room_types[0].currency == "INR"
        assert h.room_types[1].currency == "USD"

    def test_min_price(self):
        """min_price ist der niedrigste Erwachsenenpreis."""
        h = Hotel(name="A", country="India", city="Goa",
                  room_types=[_room(price=300), _room("Std", price=120)])
        assert h.min_price == 120
        assert h.room_type_names == ["Deluxe", "Std"]

    def test_min_price_without_room_types(self):
        assert Hotel(name="A", country="India", city="Goa").min_price is None

    def test_default_status_is_draft(self):
        """Neue Hotels starten als Entwurf."""
        assert Hotel(name="A", country="X", city="Y").status == HotelStatus.DRAFT

    def test_star_rating_bounds(self):
        """Sterne außerhalb 1–5 sind ungültig."""
        with pytest.raises(ValidationError):
            Hotel(name="A", country="X", city="Y", star_rating=6)

    def test_names_stripped(self):
        """Name, Land und Stadt werden getrimmt."""
        h = Hotel(name="  Sala  ", country=" India ", city=" Goa")
        assert (h.name, h.country, h.city) == ("Sala", "India", "Goa")


class TestRoomTypeModel:
    def test_max_occupancy_defaults_to_capacity(self):
        """max_occupancy = Erwachsene + Kinder, wenn nicht gesetzt."""
        rt = _room(capacity=Capacity(adults=2, children=1))
        assert rt.max_occupancy == 3

    def test_capacity_needs_one_adult(self):
        """Mindestens ein Erwachsener pro Zimmer."""
        with pytest.raises(ValidationError):
            Capacity(adults=0)

    def test_iso_timestamp_trimmed_to_date(self):
        """ISO-Zeitstempel und datetime werden auf das Datum gekürzt."""
        rt = _room(valid_from="2024-06-01T00:00:00Z", valid_to=datetime(2024, 9, 30, 12))
        assert rt.valid_from == date(2024, 6, 1)
        assert rt.valid_to == date(2024, 9, 30)

    def test_overlaps_inclusive(self):
        """Überschneidung schließt beide Grenzen ein."""
        rt = _room(valid_from=date(2024, 6, 1), valid_to=date(2024, 6, 30))
        assert rt.overlaps(date(2024, 6, 30), date(2024, 7, 5))
        assert rt.overlaps(date(2024, 5, 20), date(2024, 6, 1))
        assert not rt.overlaps(date(2024, 7, 1), date(2024, 7, 5))

    def test_overlaps_open_window(self):
        """Ohne Gültigkeitsfenster passt jeder Zeitraum."""
        assert _room().overlaps(date(2030, 1, 1), date(2030, 1, 2))


# ─── FILTER-MODELLE ───────────────────────────────────────────────────────────

class TestFilterModels:
    def test_default_filters_price_inactive(self):
        """Default-Filter haben keinen aktiven Preisfilter."""
        f = default_filters(5000)
        assert not f.price_active
        assert f.price_range.max == 5000

    def test_price_active_when_narrowed(self):
        """Eingeschränkte Preisspanne aktiviert den Preisfilter."""
        assert HotelFilters(price_range=PriceRange(min=10)).price_active
        assert HotelFilters(price_range=PriceRange(max=500)).price_active

    def test_inverted_price_range_rejected(self):
        """Minimum über Maximum ist ungültig."""
        with pytest.raises(ValidationError):
            PriceRange(min=500, max=100)

    def test_date_range_requires_both_ends(self):
        """Zeitraum ist nur mit Beginn und Ende aktiv."""
        assert not DateRange(start=date(2024, 1, 1)).is_set
        assert DateRange(start=date(2024, 1, 1), end=date(2024, 1, 2)).is_set

    def test_star_filter_normalized(self):
        """Leerer Sterne-Filter wird zu "all"."""
        assert HotelFilters(star_rating="").star_rating == "all"
        assert HotelFilters(star_rating="4").star_rating == 4
        with pytest.raises(ValidationError):
            HotelFilters(star_rating=9)

    def test_unknown_status_filter(self):
        """Unbekannter Status-Filter ist ungültig."""
        with pytest.raises(ValidationError):
            HotelFilters(status="archived")


# ─── UMWANDLUNG ───────────────────────────────────────────────────────────────

class TestConvert:
    def test_hotel_roundtrip_through_record(self):
        """Hotel → Insert → Record → Hotel verliert keine Felder."""
        hotel = Hotel(name="Sala", country="Thailand", city="Bangkok",
                      facilities=["Pool"], status="active")
        row = hotel_to_insert(hotel)
        assert row.status == "active"
        assert row.address["city"] == ""

        record = HotelRecord(**row.model_dump(), id="h-1")
        back = hotel_from_record(record)
        assert back.id == "h-1"
        assert back.facilities == ["Pool"]
        assert back.currency == "THB"
        assert back.room_types == []

    def test_record_nulls_become_defaults(self):
        """NULL-Spalten werden zu Modell-Defaults."""
        record = HotelRecord(id="h-2", name="Bare", country="India", city="Goa")
        hotel = hotel_from_record(record)
        assert hotel.star_rating == 3
        assert hotel.category == "Standard"
        assert hotel.facilities == []
        assert hotel.currency == "INR"

    def test_room_type_to_insert_requires_hotel(self):
        """Ohne hotel_id lässt sich kein Zimmertyp einfügen."""
        with pytest.raises(ValueError):
            room_type_to_insert(_room())

    def test_room_type_roundtrip(self):
        """Zimmertyp übersteht den Weg über die Tabellenzeile."""
        rt = _room(capacity=Capacity(adults=3, children=1), status="inactive")
        row = room_type_to_insert(rt, "h-1")
        assert row.capacity == {"adults": 3, "children": 1}
        back = room_type_from_record(RoomTypeRecord(**row.model_dump(), id="r-1"))
        assert back.hotel_id == "h-1"
        assert back.status == RoomTypeStatus.INACTIVE
        assert back.max_occupancy == 4

    def test_hotel_update_only_given_fields(self):
        """Teil-Update enthält nur die übergebenen Felder."""
        update = hotel_changes_to_update({"name": "Neu"})
        assert update.changes() == {"name": "Neu"}

    def test_country_change_rederives_currency(self):
        """Neues Land ohne Währung leitet die Währung neu ab."""
        update = hotel_changes_to_update({"country": "India"})
        assert update.changes() == {"country": "India", "currency": "INR", "currency_symbol": "₹"}

    def test_status_enum_stored_as_value(self):
        """Enum-Status wird als String gespeichert."""
        update = hotel_changes_to_update({"status": HotelStatus.ACTIVE})
        assert update.changes()["status"] == "active"

    @pytest.mark.parametrize("changes", [
        {"id": "x"},
        {"room_types": []},
        {"nonsense": 1},
        {"status": "archived"},
        {"star_rating": 7},
    ])
    def test_invalid_hotel_changes(self, changes):
        """Unbekannte, schreibgeschützte oder ungültige Felder lösen ValueError aus."""
        with pytest.raises(ValueError):
            hotel_changes_to_update(changes)

    def test_room_type_update_capacity_dumped(self):
        """Capacity-Modell wird als dict gespeichert."""
        update = room_type_changes_to_update({"capacity": Capacity(adults=1, children=2)})
        assert update.changes() == {"capacity": {"adults": 1, "children": 2}}

    def test_room_type_update_rejects_readonly(self):
        """Zeitstempel sind nicht per Update änderbar."""
        with pytest.raises(ValueError):
            room_type_changes_to_update({"created_at": datetime.now()})
