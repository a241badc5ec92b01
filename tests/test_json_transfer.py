"""Tests für JSON-Sicherung (Export/Import) und Beispieldaten."""

import json

import pytest

from data.json_transfer import (
    EXPORT_VERSION,
    JsonImportError,
    build_export_data,
    export_hotels_to_json,
    import_hotels_from_json,
)
from data.sample_data import SampleDataGenerator
from data.validation import errors_only, validate_hotel
from models.hotel import Hotel
from models.room_type import RoomType
from repository import HotelInventory, InMemoryHotelStore


def _inventory() -> HotelInventory:
    return HotelInventory(InMemoryHotelStore())


def _seeded_inventory() -> HotelInventory:
    inv = _inventory()
    inv.create(Hotel(name="Sala", country="Thailand", city="Bangkok", status="active",
                     room_types=[RoomType(name="Deluxe", adult_price=4500),
                                 RoomType(name="Suite", adult_price=9000)]))
    inv.create(Hotel(name="Shack", country="India", city="Goa"))
    return inv


class TestJsonExport:
    def test_format(self):
        """Exportformat: Version, Datum, Hotels ohne Zimmertypen, Zimmertypen separat."""
        payload = json.loads(export_hotels_to_json(_seeded_inventory()))
        assert payload["version"] == EXPORT_VERSION
        assert "exportDate" in payload
        assert len(payload["hotels"]) == 2
        assert len(payload["roomTypes"]) == 2
        assert all("room_types" not in h for h in payload["hotels"])

    def test_room_types_reference_hotel(self):
        """Jeder Zimmertyp verweist auf ID und Namen seines Hotels."""
        inv = _seeded_inventory()
        sala = next(h for h in inv.hotels if h.name == "Sala")
        payload = json.loads(export_hotels_to_json(inv))
        for rt in payload["roomTypes"]:
            assert rt["hotel_id"] == sala.id
            assert rt["hotel_name"] == "Sala"

    def test_selected_hotels_only(self):
        """Nur ausgewählte Hotels, unbekannte IDs werden ignoriert."""
        inv = _seeded_inventory()
        shack = next(h for h in inv.hotels if h.name == "Shack")
        payload = json.loads(export_hotels_to_json(inv, [shack.id, "missing"]))
        assert [h["name"] for h in payload["hotels"]] == ["Shack"]
        assert payload["roomTypes"] == []

    def test_build_export_data_aliases(self):
        """JSON-Schlüssel in camelCase."""
        data = build_export_data([])
        dumped = json.loads(data.model_dump_json(by_alias=True))
        assert set(dumped) == {"version", "exportDate", "hotels", "roomTypes"}


class TestJsonImport:
    def test_roundtrip_into_empty_inventory(self):
        """Export lässt sich in einen leeren Bestand importieren."""
        payload = export_hotels_to_json(_seeded_inventory())
        target = _inventory()
        stats = import_hotels_from_json(target, payload)
        assert (stats.imported_hotels, stats.imported_room_types) == (2, 2)
        sala = next(h for h in target.hotels if h.name == "Sala")
        assert sala.room_type_names == ["Deluxe", "Suite"]
        assert sala.currency == "THB"
        assert sala.status.value == "active"

    def test_duplicates_skipped(self):
        """Vorhandene Hotels werden standardmäßig übersprungen."""
        inv = _seeded_inventory()
        stats = import_hotels_from_json(inv, export_hotels_to_json(inv))
        assert stats.imported_hotels == 0
        assert stats.skipped_hotels == 2
        assert all(e.severity == "warning" for e in stats.errors)
        assert len(inv.hotels) == 2

    def test_duplicates_allowed(self):
        """Mit skip_duplicates=False entstehen Kopien."""
        inv = _seeded_inventory()
        stats = import_hotels_from_json(inv, export_hotels_to_json(inv), skip_duplicates=False)
        assert stats.imported_hotels == 2
        assert len(inv.hotels) == 4
        # Externe IDs bleiben eindeutig
        assert len({h.external_id for h in inv.hotels}) == 4

    def test_invalid_hotel_skipped(self):
        """Ungültige Hotels werden übersprungen, gültige importiert."""
        payload = json.dumps({
            "version": "1.0.0",
            "hotels": [
                {"id": "a", "name": "Gut", "country": "India", "city": "Goa"},
                {"id": "b", "name": "Zu viele Sterne", "country": "India", "city": "Goa",
                 "star_rating": 9},
                {"id": "c", "name": "Ohne Stadt", "country": "India", "city": ""},
            ],
            "roomTypes": [],
        })
        stats = import_hotels_from_json(_inventory(), payload)
        assert stats.imported_hotels == 1
        assert stats.skipped_hotels == 2
        assert len(errors_only(stats.errors)) == 2

    def test_orphan_room_types_warned(self):
        """Zimmertyp ohne Hotel erzeugt eine Warnung."""
        payload = json.dumps({
            "hotels": [{"id": "a", "name": "Gut", "country": "India", "city": "Goa"}],
            "roomTypes": [{"hotel_id": "zzz", "name": "Waise"}],
        })
        stats = import_hotels_from_json(_inventory(), payload)
        assert stats.imported_room_types == 0
        assert any(e.severity == "warning" and e.field == "roomTypes" for e in stats.errors)

    def test_invalid_room_type_does_not_block_hotel(self):
        """Fehlerhafter Zimmertyp hält weder Hotel noch andere Zimmertypen auf."""
        payload = json.dumps({
            "hotels": [{"id": "a", "name": "Gut", "country": "India", "city": "Goa"}],
            "roomTypes": [
                {"hotel_id": "a", "name": "Negativ", "adult_price": -1},
                {"hotel_id": "a", "name": "Ok", "adult_price": 10},
            ],
        })
        inv = _inventory()
        stats = import_hotels_from_json(inv, payload)
        assert stats.imported_hotels == 1
        assert (stats.imported_room_types, stats.skipped_room_types) == (1, 1)
        assert inv.hotels[0].room_type_names == ["Ok"]

    def test_statistics_add_up(self):
        """Jeder Zimmertyp zählt als importiert oder übersprungen, auch verwaiste."""
        inv = _seeded_inventory()
        payload = json.loads(export_hotels_to_json(inv))
        payload["hotels"].append({"id": "neu", "name": "Neu", "country": "India", "city": "Delhi"})
        payload["roomTypes"].append({"hotel_id": "neu", "name": "Ok", "adult_price": 10})
        payload["roomTypes"].append({"hotel_id": "zzz", "name": "Waise"})

        stats = import_hotels_from_json(inv, json.dumps(payload))
        # Sala (2 Zimmertypen) und Shack sind Duplikate, dazu ein verwaister Zimmertyp
        assert (stats.imported_hotels, stats.skipped_hotels) == (1, 2)
        assert (stats.imported_room_types, stats.skipped_room_types) == (1, 3)
        assert stats.imported_room_types + stats.skipped_room_types == stats.total_room_types
        assert stats.imported_hotels + stats.skipped_hotels == stats.total_hotels

    @pytest.mark.parametrize("payload", ["{nicht json", "[]", '{"hotels": []}'])
    def test_malformed_payload(self, payload):
        """Unlesbares JSON oder falsche Struktur: JsonImportError."""
        with pytest.raises(JsonImportError):
            import_hotels_from_json(_inventory(), payload)

    def test_missing_lists_reported(self):
        """Fehlende Listen werden einzeln gemeldet."""
        with pytest.raises(JsonImportError) as exc_info:
            import_hotels_from_json(_inventory(), "{}")
        assert {i.field for i in exc_info.value.issues} == {"hotels", "roomTypes"}


class TestSampleData:
    def test_reproducible(self):
        """Gleicher Seed, gleiche Daten."""
        a = SampleDataGenerator(seed=7, year=2025).generate()
        b = SampleDataGenerator(seed=7, year=2025).generate()
        assert [h.name for h in a] == [h.name for h in b]

    def test_hotels_per_city(self):
        """Anzahl Hotels pro Stadt über alle vier Länder."""
        hotels = SampleDataGenerator(seed=1, year=2025).generate(hotels_per_city=1)
        assert len(hotels) == 9
        assert {h.country for h in hotels} == {"Thailand", "UAE", "India", "Singapore"}

    def test_unique_names(self):
        """Hotelnamen sind eindeutig."""
        hotels = SampleDataGenerator(seed=3, year=2025).generate(hotels_per_city=3)
        assert len({h.name for h in hotels}) == len(hotels)

    def test_all_valid(self):
        """Alle erzeugten Hotels bestehen die Validierung."""
        for hotel in SampleDataGenerator(seed=11, year=2025).generate():
            assert errors_only(validate_hotel(hotel)) == []

    def test_currency_per_country(self):
        """Währung passt zum Land."""
        hotels = SampleDataGenerator(seed=5, year=2025).generate(hotels_per_city=1)
        by_country = {h.country: h.currency for h in hotels}
        assert by_country == {"Thailand": "THB", "UAE": "AED", "India": "INR", "Singapore": "SGD"}

    def test_bulk_add_into_inventory(self):
        """Beispieldaten lassen sich komplett anlegen."""
        inv = _inventory()
        results = inv.bulk_add(SampleDataGenerator(seed=2, year=2025).generate(hotels_per_city=1))
        assert all(r.success for r in results)
        assert len(inv.hotels) == 9
