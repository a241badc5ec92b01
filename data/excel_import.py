"""Excel-Import und Template-Generator für Hotels und Zimmertypen.

Template-Generator: Leere Excel-Vorlage mit Kopfzeilen und Beispielzeile.
Import-Funktion:    Excel → Hotels (mit Zimmertypen) + ImportReport.

Jede Spalte hat eine Ersatzkette, z.B. Zimmerpreis: "Adult Price" →
"Adult Rate" → ImportDefaults.adult_price. Der Ersatzwert greift nur bei
fehlender oder leerer Zelle. Steht in der Zelle etwas Unlesbares ("abc"
statt einer Zahl), wird die Zeile mit einem Fehler im Report übersprungen.
"""

import io
import logging
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

from pydantic import BaseModel, ValidationError

from config.defaults import currency_for_country, symbol_for_currency
from config.schema import ImportDefaults
from data.validation import issues_from_pydantic, validate_hotel, validate_room_type
from export.excel_export import HOTEL_HEADERS, HOTELS_SHEET, ROOM_TYPE_HEADERS, ROOM_TYPES_SHEET
from export.helpers import COLORS, split_list
from models.hotel import Address, ContactInfo, Hotel, HotelPolicies
from models.room_type import Capacity, RoomType

logger = logging.getLogger(__name__)

SpreadsheetSource = Union[str, Path, bytes, BinaryIO]


class ExcelImportError(Exception):
    """Fehler beim Excel-Import (Datei unlesbar, Pflichtblatt fehlt)."""


class _CellError(ValueError):
    """Zelle vorhanden, aber nicht lesbar."""


# ─── Ergebnis ─────────────────────────────────────────────────────────────────

class ImportReport(BaseModel):
    """Fehler und Hinweise eines Imports."""

    errors: list[str] = []      # Zeile übersprungen
    warnings: list[str] = []    # Zeile übernommen, aber auffällig
    hotel_rows: int = 0
    room_type_rows: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.ok:
            status = "[bold green]✓ IMPORT OHNE FEHLER[/bold green]"
        else:
            status = f"[bold red]✗ {len(self.errors)} ZEILEN ÜBERSPRUNGEN[/bold red]"

        lines = [status, f"[dim]{self.hotel_rows} Hotel-Zeilen, "
                         f"{self.room_type_rows} Zimmertyp-Zeilen gelesen[/dim]"]
        if self.errors:
            lines.append("\n[red bold]Fehler:[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]Keine Probleme gefunden.[/dim]")

        console.print(Panel("\n".join(lines), title="Excel-Import", border_style="cyan"))


class SpreadsheetContents(BaseModel):
    """Gelesene Daten: Hotels mit zugeordneten Zimmertypen, alle Zimmertypen flach."""

    hotels: list[Hotel] = []
    room_types: list[RoomType] = []
    report: ImportReport = ImportReport()


# ─── TEMPLATE-GENERATOR ───────────────────────────────────────────────────────

_EXAMPLE_HOTEL = {
    "Hotel Name": "Beispiel Resort", "Star Rating": 4, "Category": "Resort",
    "Country": "Thailand", "City": "Phuket", "Location": "Patong Beach",
    "Check-in": "14:00", "Check-out": "12:00", "Facilities": "Pool, Spa, WiFi",
    "Status": "draft",
}

_EXAMPLE_ROOM = {
    "Hotel Name": "Beispiel Resort", "Room Name": "Deluxe Room",
    "Adult Capacity": 2, "Child Capacity": 1, "Max Occupancy": 3,
    "Configuration": "King Bed", "Bed Type": "King", "Adult Price": 120,
    "Child Price": 60, "Extra Bed Price": 25, "Meal Plan": "Breakfast Included",
    "Valid From": "2025-01-01", "Valid To": "2025-12-31", "Inventory": 10,
    "Status": "active",
}

# Beim Einlesen berechnete Spalten, in der Vorlage weggelassen
_TEMPLATE_SKIP = {"Hotel ID", "Room Types Count", "Created", "Updated",
                  "Adult Rate", "Child Rate", "Season Start", "Season End"}


def generate_template(path: Path) -> Path:
    """Erzeugt eine leere Excel-Vorlage mit den Blättern Hotels und RoomTypes.

    Jedes Blatt enthält die Kopfzeile und eine kursive Beispielzeile.
    """
    import openpyxl
    from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
    from openpyxl.utils import get_column_letter

    wb = openpyxl.Workbook()

    hdr_font = Font(bold=True, color="FFFFFF", size=11)
    hdr_fill = PatternFill("solid", fgColor=COLORS["header"])
    ex_font = Font(italic=True, color="888888")
    ex_fill = PatternFill("solid", fgColor=COLORS["example"])
    center = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color=COLORS["border"])
    border = Border(left=thin, right=thin, top=thin, bottom=thin)

    def fill_sheet(ws, headers: list[str], example: dict) -> None:
        headers = [h for h in headers if h not in _TEMPLATE_SKIP]
        for col, h in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=h)
            cell.font = hdr_font
            cell.fill = hdr_fill
            cell.alignment = center
            cell.border = border
            ws.column_dimensions[get_column_letter(col)].width = max(12, len(h) + 4)
            ex = ws.cell(row=2, column=col, value=example.get(h))
            ex.font = ex_font
            ex.fill = ex_fill
            ex.border = border

    ws_hotels = wb.active
    ws_hotels.title = HOTELS_SHEET
    fill_sheet(ws_hotels, HOTEL_HEADERS, _EXAMPLE_HOTEL)
    fill_sheet(wb.create_sheet(ROOM_TYPES_SHEET), ROOM_TYPE_HEADERS, _EXAMPLE_ROOM)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(path))
    return path


# ─── IMPORT ───────────────────────────────────────────────────────────────────

class ExcelImporter:
    """Liest Hotels und Zimmertypen aus einer Arbeitsmappe."""

    def __init__(self, source: SpreadsheetSource,
                 defaults: Optional[ImportDefaults] = None,
                 today: Optional[date] = None) -> None:
        self.source = source
        self.defaults = defaults or ImportDefaults()
        self.today = today or date.today()
        self._wb = None
        self._errors: list[str] = []
        self._warnings: list[str] = []
        self._orphans: list[RoomType] = []
        self._hotel_rows = 0
        self._room_type_rows = 0

    def _open(self):
        import openpyxl
        source = self.source
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        elif isinstance(source, (str, Path)):
            source = str(source)
        try:
            self._wb = openpyxl.load_workbook(source, read_only=True, data_only=True)
        except FileNotFoundError:
            raise ExcelImportError(f"Datei nicht gefunden: {self.source}")
        except Exception as e:
            raise ExcelImportError(f"Fehler beim Öffnen der Excel-Datei: {e}")

    def _get_sheet(self, name: str):
        if self._wb is None:
            self._open()
        for sn in self._wb.sheetnames:
            if sn.strip().lower() == name.strip().lower():
                return self._wb[sn]
        return None

    def _sheet_rows(self, sheet) -> list[tuple[int, dict[str, Any]]]:
        """Tabellenblatt → [(Excel-Zeile, {header: Rohwert})], erste Zeile = Header."""
        rows = list(sheet.iter_rows(values_only=True))
        if not rows:
            return []
        headers = [
            str(h).strip().lower() if h is not None else f"col_{i}"
            for i, h in enumerate(rows[0])
        ]
        result = []
        for excel_row, row in enumerate(rows[1:], 2):
            if all(v is None or (isinstance(v, str) and not v.strip()) for v in row):
                continue
            result.append((excel_row, {
                headers[i]: (v.strip() if isinstance(v, str) else v)
                for i, v in enumerate(row)
                if i < len(headers)
            }))
        return result

    # ── Zellen lesen ────────────────────────────────────────────────────────

    @staticmethod
    def _first(row: dict, keys: tuple[str, ...]) -> tuple[Optional[str], Any]:
        """Erste nicht-leere Spalte der Kette → (Spalte, Rohwert)."""
        for key in keys:
            value = row.get(key.lower())
            if value is not None and value != "":
                return key, value
        return None, None

    def _text(self, row: dict, *keys: str, default: str = "") -> str:
        _, value = self._first(row, keys)
        if value is None:
            return default
        if isinstance(value, time):
            return value.strftime("%H:%M")
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value).strip()

    def _float(self, row: dict, *keys: str, default: Optional[float]) -> Optional[float]:
        key, value = self._first(row, keys)
        if key is None:
            return default
        if isinstance(value, bool):
            raise _CellError(f"'{key}' ist keine Zahl: {value!r}")
        if isinstance(value, (int, float)):
            return float(value)
        try:
            return float(str(value).replace(" ", ""))
        except ValueError:
            raise _CellError(f"'{key}' ist keine Zahl: {value!r}")

    def _int(self, row: dict, *keys: str, default: int) -> int:
        key, _ = self._first(row, keys)
        number = self._float(row, *keys, default=float(default))
        if not number.is_integer():
            raise _CellError(f"'{key}' ist keine ganze Zahl: {number}")
        return int(number)

    def _date(self, row: dict, *keys: str, default: date) -> date:
        key, value = self._first(row, keys)
        if key is None:
            return default
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(str(value)[:10])
        except ValueError:
            raise _CellError(f"'{key}' ist kein Datum (YYYY-MM-DD): {value!r}")

    def _status(self, row: dict, default: str) -> str:
        status = self._text(row, "Status", default=default).lower()
        if status not in ("active", "inactive", "draft"):
            raise _CellError(f"Unbekannter Status: {status!r}")
        return status

    # ── Hotels ──────────────────────────────────────────────────────────────

    def _hotel_from_row(self, index: int, row: dict) -> Hotel:
        d = self.defaults
        country = self._text(row, "Country")
        city = self._text(row, "City")

        stars = self._int(row, "Star Rating", default=d.star_rating)
        if not 1 <= stars <= 5:
            raise _CellError(f"'Star Rating' muss zwischen 1 und 5 liegen, nicht {stars}")

        currency = self._text(row, "Currency").upper()
        symbol = self._text(row, "Currency Symbol")
        if not currency:
            currency, derived = (currency_for_country(country) if country
                                 else (d.currency, d.currency_symbol))
            symbol = symbol or derived
        symbol = symbol or symbol_for_currency(currency)

        defaults = HotelPolicies()
        return Hotel(
            id=self._text(row, "Hotel ID") or None,
            name=self._text(row, "Hotel Name", "Name", default=f"Imported Hotel {index}"),
            star_rating=stars,
            category=self._text(row, "Category", default=d.category),
            description=self._text(row, "Description"),
            country=country,
            city=city,
            location=self._text(row, "Location"),
            address=Address(
                street=self._text(row, "Street", "Address"),
                city=city,
                state=self._text(row, "State"),
                zip_code=self._text(row, "Zip Code"),
                country=country,
            ),
            latitude=self._float(row, "Latitude", default=None),
            longitude=self._float(row, "Longitude", default=None),
            google_map_link=self._text(row, "Google Map Link"),
            contact_info=ContactInfo(
                phone=self._text(row, "Phone"),
                email=self._text(row, "Email"),
                website=self._text(row, "Website"),
            ),
            check_in_time=self._text(row, "Check-in", default=d.check_in_time),
            check_out_time=self._text(row, "Check-out", default=d.check_out_time),
            facilities=split_list(row.get("facilities")),
            amenities=split_list(row.get("amenities")),
            policies=HotelPolicies(
                cancellation=self._text(row, "Cancellation Policy", default=defaults.cancellation),
                children=self._text(row, "Children Policy", default=defaults.children),
                pets=self._text(row, "Pet Policy", default=defaults.pets),
                payment=self._text(row, "Payment Policy", default=defaults.payment),
            ),
            status=self._status(row, d.hotel_status),
            currency=currency,
            currency_symbol=symbol,
        )

    def import_hotels(self) -> list[tuple[Hotel, dict]]:
        """Blatt 'Hotels' → [(Hotel, Rohzeile)]. Fehlt das Blatt: ExcelImportError."""
        sheet = self._get_sheet(HOTELS_SHEET)
        if sheet is None:
            raise ExcelImportError(
                f"Blatt '{HOTELS_SHEET}' fehlt (vorhanden: {', '.join(self._wb.sheetnames)})"
            )
        rows = self._sheet_rows(sheet)
        self._hotel_rows = len(rows)
        if not rows:
            self._warnings.append(f"Blatt '{HOTELS_SHEET}' enthält keine Daten.")

        result = []
        for index, (excel_row, row) in enumerate(rows, 1):
            where = f"{HOTELS_SHEET} Zeile {excel_row}"
            try:
                hotel = self._hotel_from_row(index, row)
            except _CellError as e:
                self._errors.append(f"{where}: {e}")
                continue
            except ValidationError as e:
                for issue in issues_from_pydantic(e):
                    self._errors.append(f"{where}: {issue.field}: {issue.message}")
                continue

            issues = validate_hotel(hotel)
            errors = [i for i in issues if i.severity == "error"]
            for issue in issues:
                target = self._errors if issue.severity == "error" else self._warnings
                target.append(f"{where} ({hotel.name}): {issue.message}")
            if errors:
                continue
            result.append((hotel, row))
        return result

    # ── Zimmertypen ─────────────────────────────────────────────────────────

    def _room_type_from_row(self, row: dict) -> RoomType:
        d = self.defaults
        valid_to_default = self.today + timedelta(days=d.validity_days)
        capacity = Capacity(
            adults=self._int(row, "Adult Capacity", "Max Adults", default=d.adults),
            children=self._int(row, "Child Capacity", "Max Children", default=d.children),
        )
        currency = self._text(row, "Currency").upper() or None
        symbol = self._text(row, "Currency Symbol") or None
        if currency and not symbol:
            symbol = symbol_for_currency(currency)
        return RoomType(
            name=self._text(row, "Room Name", "Room Type", default="Standard Room"),
            description=self._text(row, "Description"),
            configuration=self._text(row, "Configuration", default=d.configuration),
            bed_type=self._text(row, "Bed Type", default=d.bed_type),
            meal_plan=self._text(row, "Meal Plan", default=d.meal_plan),
            capacity=capacity,
            max_occupancy=self._int(row, "Max Occupancy",
                                    default=capacity.total),
            valid_from=self._date(row, "Valid From", "Season Start", default=self.today),
            valid_to=self._date(row, "Valid To", "Season End", default=valid_to_default),
            adult_price=self._float(row, "Adult Price", "Adult Rate", default=d.adult_price),
            child_price=self._float(row, "Child Price", "Child Rate", default=d.child_price),
            extra_bed_price=self._float(row, "Extra Bed Price", default=d.extra_bed_price),
            amenities=split_list(row.get("amenities")),
            inventory=self._int(row, "Inventory", default=d.inventory),
            status=self._status(row, d.room_status),
            currency=currency,
            currency_symbol=symbol,
        )

    def _find_hotel(self, row: dict, hotels: list[Hotel]) -> Optional[Hotel]:
        """Zuordnung über Hotel ID, sonst Hotelname (Groß-/Kleinschreibung egal)."""
        hotel_id = self._text(row, "Hotel ID")
        if hotel_id:
            for hotel in hotels:
                if hotel.id == hotel_id:
                    return hotel
        name = self._text(row, "Hotel Name").casefold()
        if name:
            for hotel in hotels:
                if hotel.name.casefold() == name:
                    return hotel
        return None

    def import_room_types(self, hotels: list[Hotel]) -> Optional[dict[int, list[RoomType]]]:
        """Blatt 'RoomTypes' → {Index des Hotels: [RoomType]} plus flache Liste.

        None, wenn das Blatt fehlt.
        """
        sheet = self._get_sheet(ROOM_TYPES_SHEET)
        if sheet is None:
            return None
        rows = self._sheet_rows(sheet)
        self._room_type_rows = len(rows)

        by_hotel: dict[int, list[RoomType]] = {i: [] for i in range(len(hotels))}
        self._orphans = []
        for excel_row, row in rows:
            where = f"{ROOM_TYPES_SHEET} Zeile {excel_row}"
            try:
                room_type = self._room_type_from_row(row)
            except _CellError as e:
                self._errors.append(f"{where}: {e}")
                continue
            except ValidationError as e:
                for issue in issues_from_pydantic(e):
                    self._errors.append(f"{where}: {issue.field}: {issue.message}")
                continue

            hotel = self._find_hotel(row, hotels)
            issues = validate_room_type(room_type, hotel.name if hotel else "")
            for issue in issues:
                target = self._errors if issue.severity == "error" else self._warnings
                target.append(f"{where}: {issue.message}")
            if any(i.severity == "error" for i in issues):
                continue

            if hotel is None:
                self._warnings.append(
                    f"{where}: Kein passendes Hotel für Zimmertyp '{room_type.name}' "
                    f"(Hotel '{self._text(row, 'Hotel Name')}')"
                )
                self._orphans.append(room_type)
                continue
            index = next(i for i, h in enumerate(hotels) if h is hotel)
            by_hotel[index].append(room_type.model_copy(update={"hotel_id": hotel.id}))
        return by_hotel

    def _room_types_from_hotel_row(self, row: dict) -> list[RoomType]:
        """Ohne Blatt RoomTypes: Namen aus 'Room Types', Preis aus 'Min Price'."""
        d = self.defaults
        names = split_list(row.get("room types"))
        if not names:
            return []
        min_price = self._float(row, "Min Price", default=None)
        adult_price = min_price if min_price is not None else d.adult_price
        child_price = (min_price if min_price is not None else d.child_price) / 2
        return [
            RoomType(
                name=name,
                configuration=d.configuration,
                bed_type=d.bed_type,
                meal_plan=d.meal_plan,
                capacity=Capacity(adults=d.adults, children=d.children),
                valid_from=self.today,
                valid_to=self.today + timedelta(days=d.validity_days),
                adult_price=adult_price,
                child_price=child_price,
                extra_bed_price=self._float(row, "Extra Bed Price", default=d.extra_bed_price),
                inventory=d.inventory,
                status=d.room_status,
            )
            for name in names
        ]

    # ── Vollständiger Import ───────────────────────────────────────────────

    def import_all(self) -> SpreadsheetContents:
        """Liest beide Blätter und ordnet die Zimmertypen den Hotels zu."""
        self._open()
        self._errors = []
        self._warnings = []
        self._orphans = []

        parsed = self.import_hotels()
        hotels = [h for h, _ in parsed]
        by_hotel = self.import_room_types(hotels)

        if by_hotel is None:
            self._warnings.append(
                f"Blatt '{ROOM_TYPES_SHEET}' fehlt: Zimmertypen aus Spalte 'Room Types'."
            )
            by_hotel = {}
            for i, (hotel, row) in enumerate(parsed):
                try:
                    by_hotel[i] = self._room_types_from_hotel_row(row)
                except _CellError as e:
                    self._errors.append(f"{HOTELS_SHEET} ({hotel.name}): {e}")
                    by_hotel[i] = []

        result_hotels = []
        flat: list[RoomType] = []
        for i, hotel in enumerate(hotels):
            room_types = [
                rt.inherit_currency(hotel.currency, hotel.currency_symbol)
                for rt in by_hotel.get(i, [])
            ]
            flat.extend(room_types)
            result_hotels.append(hotel.model_copy(update={"room_types": room_types}))
        flat.extend(self._orphans)

        report = ImportReport(
            errors=self._errors,
            warnings=self._warnings,
            hotel_rows=self._hotel_rows,
            room_type_rows=self._room_type_rows,
        )
        logger.info(
            f"Excel-Import: {len(result_hotels)} Hotels, {len(flat)} Zimmertypen, "
            f"{len(report.errors)} Fehler"
        )
        return SpreadsheetContents(hotels=result_hotels, room_types=flat, report=report)


def parse_spreadsheet(source: SpreadsheetSource,
                      defaults: Optional[ImportDefaults] = None,
                      today: Optional[date] = None) -> SpreadsheetContents:
    """Liest Hotels und Zimmertypen aus einer .xlsx-Datei.

    Args:
        source:   Pfad, Bytes oder binärer Stream
        defaults: Ersatzwerte für leere Zellen
        today:    Bezugsdatum für fehlende Gültigkeitsfenster

    Raises:
        ExcelImportError: Datei unlesbar oder Blatt 'Hotels' fehlt.
    """
    return ExcelImporter(source, defaults, today).import_all()
