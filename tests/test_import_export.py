"""Tests für Excel-Export, Excel-Import und Import-Vorlage."""

import io
from datetime import date, datetime, timedelta

import openpyxl
import pytest

from config.schema import ImportDefaults
from data.excel_import import ExcelImportError, generate_template, parse_spreadsheet
from export.excel_export import (
    HOTEL_HEADERS,
    HOTELS_SHEET,
    ROOM_TYPE_HEADERS,
    ROOM_TYPES_SHEET,
    ExcelExporter,
    build_spreadsheet,
)
from export.helpers import export_filename, format_datetime, format_price, split_list
from models.hotel import Hotel
from models.room_type import Capacity, RoomType

TODAY = date(2024, 3, 1)


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def _make_hotels() -> list[Hotel]:
    return [
        Hotel(
            name="Sala Sathorn", star_rating=5, category="Luxury", country="Thailand",
            city="Bangkok", location="Sathorn", facilities=["Pool", "Spa"],
            status="active",
            room_types=[
                RoomType(name="Deluxe", adult_price=4500, child_price=2250,
                         capacity=Capacity(adults=2, children=1),
                         valid_from=date(2024, 1, 1), valid_to=date(2024, 12, 31),
                         meal_plan="Bed & Breakfast", inventory=12),
                RoomType(name="Suite", adult_price=9000, child_price=4500),
            ],
        ),
        Hotel(name="Goa Shack", country="India", city="Goa", star_rating=2),
    ]


def _workbook_bytes(sheets: dict[str, list[list]]) -> bytes:
    wb = openpyxl.Workbook()
    for i, (title, rows) in enumerate(sheets.items()):
        ws = wb.active if i == 0 else wb.create_sheet()
        ws.title = title
        for row in rows:
            ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


# ─── EXPORT ───────────────────────────────────────────────────────────────────

class TestExcelExport:
    def test_two_sheets_with_headers(self):
        """Export hat die Blätter Hotels und RoomTypes mit Kopfzeilen."""
        wb = openpyxl.load_workbook(io.BytesIO(build_spreadsheet(_make_hotels())))
        assert wb.sheetnames == [HOTELS_SHEET, ROOM_TYPES_SHEET]
        assert [c.value for c in wb[HOTELS_SHEET][1]] == HOTEL_HEADERS
        assert [c.value for c in wb[ROOM_TYPES_SHEET][1]] == ROOM_TYPE_HEADERS

    def test_one_row_per_hotel_and_room_type(self):
        """Eine Zeile pro Hotel bzw. Zimmertyp."""
        wb = openpyxl.load_workbook(io.BytesIO(build_spreadsheet(_make_hotels())))
        assert wb[HOTELS_SHEET].max_row == 3
        assert wb[ROOM_TYPES_SHEET].max_row == 3

    def test_derived_columns(self):
        """Abgeleitete Spalten: Zimmertypen-Liste und Mindestpreis."""
        wb = openpyxl.load_workbook(io.BytesIO(build_spreadsheet(_make_hotels())))
        ws = wb[HOTELS_SHEET]
        row = {h: c.value for h, c in zip(HOTEL_HEADERS, ws[2])}
        assert row["Hotel Name"] == "Sala Sathorn"
        assert row["Room Types Count"] == 2
        assert row["Room Types"] == "Deluxe, Suite"
        assert row["Min Price"] == 4500
        assert row["Currency"] == "THB"
        assert row["Facilities"] == "Pool, Spa"

    def test_room_type_dates_iso(self):
        """Gültigkeitsdaten stehen als ISO-Datum in der Tabelle."""
        wb = openpyxl.load_workbook(io.BytesIO(build_spreadsheet(_make_hotels())))
        ws = wb[ROOM_TYPES_SHEET]
        row = {h: c.value for h, c in zip(ROOM_TYPE_HEADERS, ws[2])}
        assert row["Hotel Name"] == "Sala Sathorn"
        assert row["Valid From"] == "2024-01-01"
        assert row["Season End"] == "2024-12-31"
        assert row["Adult Rate"] == row["Adult Price"] == 4500

    def test_export_to_file(self, tmp_path):
        """Export legt fehlende Verzeichnisse an."""
        path = ExcelExporter(_make_hotels()).export(tmp_path / "out" / "hotels.xlsx")
        assert path.exists()

    def test_export_filename(self):
        assert export_filename(date(2024, 5, 17)) == "Hotels_Export_2024-05-17.xlsx"


class TestHelpers:
    def test_split_list(self):
        """Kommalisten werden getrimmt, leere Einträge verworfen."""
        assert split_list("Pool, Spa,, WiFi ") == ["Pool", "Spa", "WiFi"]
        assert split_list(None) == []

    def test_format_price(self):
        """Preis mit Symbol und Tausendertrennzeichen."""
        assert format_price(1234.5, "฿") == "฿1,234.50"
        assert format_price(None) == "–"

    def test_format_datetime(self):
        """Zeitstempel im deutschen Format."""
        assert format_datetime(datetime(2024, 3, 1, 9, 5)) == "01.03.2024 09:05"
        assert format_datetime(None) == ""


# ─── IMPORT ───────────────────────────────────────────────────────────────────

class TestExcelImportRoundtrip:
    def test_roundtrip(self):
        """Export und Re-Import liefern dieselben Hotels und Zimmertypen."""
        contents = parse_spreadsheet(build_spreadsheet(_make_hotels()), today=TODAY)
        assert contents.report.ok
        assert [h.name for h in contents.hotels] == ["Sala Sathorn", "Goa Shack"]

        sala = contents.hotels[0]
        assert sala.star_rating == 5
        assert sala.facilities == ["Pool", "Spa"]
        assert sala.status.value == "active"
        assert sala.currency == "THB"
        assert [rt.name for rt in sala.room_types] == ["Deluxe", "Suite"]

        deluxe = sala.room_types[0]
        assert deluxe.adult_price == 4500
        assert deluxe.capacity.children == 1
        assert deluxe.valid_from == date(2024, 1, 1)
        assert deluxe.meal_plan == "Bed & Breakfast"
        assert deluxe.inventory == 12
        assert deluxe.currency == "THB"

        assert contents.hotels[1].room_types == []
        assert len(contents.room_types) == 2

    def test_roundtrip_from_file(self, tmp_path):
        """Import funktioniert auch aus einer Datei."""
        path = ExcelExporter(_make_hotels()).export(tmp_path / "hotels.xlsx")
        contents = parse_spreadsheet(path, today=TODAY)
        assert len(contents.hotels) == 2


class TestExcelImportDefaults:
    def test_empty_cells_get_defaults(self):
        """Leere Zellen bekommen die Import-Defaults."""
        data = _workbook_bytes({
            HOTELS_SHEET: [["Hotel Name", "Country", "City", "Star Rating"],
                           ["Sala", "Thailand", "Bangkok", None]],
            ROOM_TYPES_SHEET: [["Hotel Name", "Room Name", "Adult Price", "Child Price"],
                               ["Sala", "Deluxe", None, ""]],
        })
        contents = parse_spreadsheet(data, today=TODAY)
        hotel = contents.hotels[0]
        assert hotel.star_rating == 3
        assert hotel.status.value == "draft"
        assert hotel.check_in_time == "14:00"

        rt = hotel.room_types[0]
        assert rt.adult_price == 100
        assert rt.child_price == 50
        assert rt.extra_bed_price == 25
        assert rt.capacity.adults == 2
        assert rt.status.value == "active"
        assert rt.valid_from == TODAY
        assert rt.valid_to == TODAY + timedelta(days=365)

    def test_custom_defaults(self):
        """Eigene ImportDefaults ersetzen die eingebauten."""
        data = _workbook_bytes({
            HOTELS_SHEET: [["Hotel Name", "Country", "City"], ["Sala", "Thailand", "Bangkok"]],
            ROOM_TYPES_SHEET: [["Hotel Name", "Room Name"], ["Sala", "Deluxe"]],
        })
        defaults = ImportDefaults(adult_price=999, hotel_status="active")
        contents = parse_spreadsheet(data, defaults, today=TODAY)
        assert contents.hotels[0].status.value == "active"
        assert contents.hotels[0].room_types[0].adult_price == 999

    def test_fallback_column_names(self):
        """Ausweich-Spalten wie Adult Rate und Season Start werden erkannt."""
        data = _workbook_bytes({
            HOTELS_SHEET: [["Hotel Name", "Country", "City"], ["Sala", "Thailand", "Bangkok"]],
            ROOM_TYPES_SHEET: [["Hotel Name", "Room Name", "Adult Rate", "Season Start"],
                               ["Sala", "Deluxe", 450, "2024-06-01"]],
        })
        rt = parse_spreadsheet(data, today=TODAY).hotels[0].room_types[0]
        assert rt.adult_price == 450
        assert rt.valid_from == date(2024, 6, 1)

    def test_missing_hotel_name_gets_placeholder(self):
        """Ohne Namen heißt das Hotel "Imported Hotel <n>"."""
        data = _workbook_bytes({
            HOTELS_SHEET: [["Hotel Name", "Country", "City"], [None, "India", "Goa"]],
        })
        assert parse_spreadsheet(data, today=TODAY).hotels[0].name == "Imported Hotel 1"


class TestExcelImportErrors:
    def test_unparseable_number_reported(self):
        """Unlesbare Zahl wird gemeldet, die Zeile übersprungen, kein Default."""
        data = _workbook_bytes({
            HOTELS_SHEET: [["Hotel Name", "Country", "City"], ["Sala", "Thailand", "Bangkok"]],
            ROOM_TYPES_SHEET: [["Hotel Name", "Room Name", "Adult Price"],
                               ["Sala", "Deluxe", "abc"],
                               ["Sala", "Suite", 200]],
        })
        contents = parse_spreadsheet(data, today=TODAY)
        assert not contents.report.ok
        assert "Adult Price" in contents.report.errors[0]
        assert "Zeile 2" in contents.report.errors[0]
        assert contents.hotels[0].room_type_names == ["Suite"]

    def test_invalid_star_rating_skips_hotel(self):
        """Ungültige Sterne überspringen das Hotel."""
        data = _workbook_bytes({
            HOTELS_SHEET: [["Hotel Name", "Country", "City", "Star Rating"],
                           ["A", "India", "Goa", 9],
                           ["B", "India", "Goa", 4]],
        })
        contents = parse_spreadsheet(data, today=TODAY)
        assert [h.name for h in contents.hotels] == ["B"]
        assert len(contents.report.errors) == 1

    def test_validation_error_skips_hotel(self):
        """Fachlich ungültiges Hotel wird übersprungen und gemeldet."""
        data = _workbook_bytes({
            HOTELS_SHEET: [["Hotel Name", "Country", "City", "Email"],
                           ["A", "India", "Goa", "nicht-gültig"],
                           ["B", "India", "", ""]],
        })
        contents = parse_spreadsheet(data, today=TODAY)
        assert contents.hotels == []
        assert len(contents.report.errors) == 2

    def test_missing_hotels_sheet(self):
        """Ohne Blatt "Hotels" bricht der Import ab."""
        data = _workbook_bytes({"Tabelle1": [["Hotel Name"], ["A"]]})
        with pytest.raises(ExcelImportError, match="Hotels"):
            parse_spreadsheet(data)

    def test_not_a_workbook(self):
        """Keine Excel-Datei: ExcelImportError."""
        with pytest.raises(ExcelImportError):
            parse_spreadsheet(b"kein excel")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ExcelImportError):
            parse_spreadsheet(tmp_path / "fehlt.xlsx")


class TestExcelImportAssociation:
    def test_name_match_case_insensitive(self):
        """Zuordnung über den Hotelnamen ignoriert Groß-/Kleinschreibung."""
        data = _workbook_bytes({
            HOTELS_SHEET: [["Hotel Name", "Country", "City"], ["Sala Sathorn", "Thailand", "Bangkok"]],
            ROOM_TYPES_SHEET: [["Hotel Name", "Room Name"], ["SALA sathorn", "Deluxe"]],
        })
        assert parse_spreadsheet(data, today=TODAY).hotels[0].room_type_names == ["Deluxe"]

    def test_orphan_room_type(self):
        """Zimmertyp ohne Hotel landet nur in der flachen Liste, mit Warnung."""
        data = _workbook_bytes({
            HOTELS_SHEET: [["Hotel Name", "Country", "City"], ["Sala", "Thailand", "Bangkok"]],
            ROOM_TYPES_SHEET: [["Hotel Name", "Room Name"], ["Unbekannt", "Deluxe"]],
        })
        contents = parse_spreadsheet(data, today=TODAY)
        assert contents.hotels[0].room_types == []
        assert [rt.name for rt in contents.room_types] == ["Deluxe"]
        assert any("Unbekannt" in w for w in contents.report.warnings)

    def test_room_types_from_hotel_column(self):
        """Ohne RoomTypes-Blatt kommen die Zimmertypen aus der Spalte "Room Types"."""
        data = _workbook_bytes({
            HOTELS_SHEET: [["Hotel Name", "Country", "City", "Room Types", "Min Price"],
                           ["Sala", "Thailand", "Bangkok", "Deluxe, Suite", 80],
                           ["Shack", "India", "Goa", "Hut", None]],
        })
        contents = parse_spreadsheet(data, today=TODAY)
        assert any(ROOM_TYPES_SHEET in w for w in contents.report.warnings)

        sala, shack = contents.hotels
        assert sala.room_type_names == ["Deluxe", "Suite"]
        assert sala.room_types[0].adult_price == 80
        assert sala.room_types[0].child_price == 40
        assert sala.room_types[0].currency == "THB"
        assert shack.room_types[0].adult_price == 100
        assert shack.room_types[0].child_price == 25


# ─── VORLAGE ──────────────────────────────────────────────────────────────────

class TestTemplate:
    def test_template_sheets(self, tmp_path):
        """Vorlage enthält Hotel- und Zimmertyp-Blatt."""
        path = generate_template(tmp_path / "vorlage.xlsx")
        wb = openpyxl.load_workbook(path)
        assert wb.sheetnames == [HOTELS_SHEET, ROOM_TYPES_SHEET]
        headers = [c.value for c in wb[HOTELS_SHEET][1]]
        assert "Hotel Name" in headers
        assert "Hotel ID" not in headers

    def test_template_example_imports(self, tmp_path):
        """Die Beispielzeilen der Vorlage lassen sich importieren."""
        path = generate_template(tmp_path / "vorlage.xlsx")
        contents = parse_spreadsheet(path, today=TODAY)
        assert contents.report.ok
        assert [h.name for h in contents.hotels] == ["Beispiel Resort"]
        assert contents.hotels[0].room_type_names == ["Deluxe Room"]
