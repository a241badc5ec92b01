"""Excel-Export der Hotelliste (openpyxl).

Blatt "Hotels":    eine Zeile pro Hotel
Blatt "RoomTypes": eine Zeile pro Zimmertyp, über Hotel ID / Hotel Name
                   dem Hotel zugeordnet
Das Format ist dasselbe, das data.excel_import wieder einliest.
"""

import io
from pathlib import Path
from typing import Any, Callable

from models.hotel import Hotel
from models.room_type import RoomType

from export.helpers import COLORS, format_date, join_list, status_color

HOTELS_SHEET = "Hotels"
ROOM_TYPES_SHEET = "RoomTypes"


# Spalte → Wert aus dem Hotel
HOTEL_COLUMNS: list[tuple[str, Callable[[Hotel], Any]]] = [
    ("Hotel ID",            lambda h: h.id),
    ("Hotel Name",          lambda h: h.name),
    ("Star Rating",         lambda h: h.star_rating),
    ("Category",            lambda h: h.category),
    ("Description",         lambda h: h.description),
    ("Country",             lambda h: h.country),
    ("City",                lambda h: h.city),
    ("Location",            lambda h: h.location),
    ("Street",              lambda h: h.address.street),
    ("State",               lambda h: h.address.state),
    ("Zip Code",            lambda h: h.address.zip_code),
    ("Latitude",            lambda h: h.latitude),
    ("Longitude",           lambda h: h.longitude),
    ("Google Map Link",     lambda h: h.google_map_link),
    ("Phone",               lambda h: h.contact_info.phone),
    ("Email",               lambda h: h.contact_info.email),
    ("Website",             lambda h: h.contact_info.website),
    ("Check-in",            lambda h: h.check_in_time),
    ("Check-out",           lambda h: h.check_out_time),
    ("Facilities",          lambda h: join_list(h.facilities)),
    ("Amenities",           lambda h: join_list(h.amenities)),
    ("Room Types Count",    lambda h: len(h.room_types)),
    ("Room Types",          lambda h: join_list(h.room_type_names)),
    ("Min Price",           lambda h: h.min_price),
    ("Currency",            lambda h: h.currency),
    ("Currency Symbol",     lambda h: h.currency_symbol),
    ("Status",              lambda h: h.status.value),
    ("Cancellation Policy", lambda h: h.policies.cancellation),
    ("Children Policy",     lambda h: h.policies.children),
    ("Pet Policy",          lambda h: h.policies.pets),
    ("Payment Policy",      lambda h: h.policies.payment),
    ("Created",             lambda h: format_date(h.created_at)),
    ("Updated",             lambda h: format_date(h.updated_at)),
]

# Spalte → Wert aus (Hotel, Zimmertyp)
ROOM_TYPE_COLUMNS: list[tuple[str, Callable[[Hotel, RoomType], Any]]] = [
    ("Hotel ID",        lambda h, r: h.id),
    ("Hotel Name",      lambda h, r: h.name),
    ("Room Name",       lambda h, r: r.name),
    ("Description",     lambda h, r: r.description),
    ("Adult Capacity",  lambda h, r: r.capacity.adults),
    ("Child Capacity",  lambda h, r: r.capacity.children),
    ("Max Occupancy",   lambda h, r: r.max_occupancy),
    ("Configuration",   lambda h, r: r.configuration),
    ("Bed Type",        lambda h, r: r.bed_type),
    ("Adult Price",     lambda h, r: r.adult_price),
    ("Child Price",     lambda h, r: r.child_price),
    ("Extra Bed Price", lambda h, r: r.extra_bed_price),
    ("Adult Rate",      lambda h, r: r.adult_price),
    ("Child Rate",      lambda h, r: r.child_price),
    ("Meal Plan",       lambda h, r: r.meal_plan),
    ("Valid From",      lambda h, r: format_date(r.valid_from)),
    ("Valid To",        lambda h, r: format_date(r.valid_to)),
    ("Season Start",    lambda h, r: format_date(r.valid_from)),
    ("Season End",      lambda h, r: format_date(r.valid_to)),
    ("Amenities",       lambda h, r: join_list(r.amenities)),
    ("Inventory",       lambda h, r: r.inventory),
    ("Status",          lambda h, r: r.status.value),
    ("Currency",        lambda h, r: r.currency or h.currency),
    ("Currency Symbol", lambda h, r: r.currency_symbol or h.currency_symbol),
]

HOTEL_HEADERS = [name for name, _ in HOTEL_COLUMNS]
ROOM_TYPE_HEADERS = [name for name, _ in ROOM_TYPE_COLUMNS]

# Breiten für lange Textspalten, sonst COL_DEFAULT_W
_WIDE_COLUMNS = {
    "Hotel Name": 28, "Room Name": 24, "Description": 40, "Google Map Link": 30,
    "Facilities": 36, "Amenities": 30, "Room Types": 30, "Email": 26, "Website": 28,
    "Cancellation Policy": 36, "Children Policy": 30, "Pet Policy": 24,
    "Payment Policy": 30, "Hotel ID": 38,
}


class ExcelExporter:
    """Schreibt Hotels und ihre Zimmertypen in eine Arbeitsmappe mit zwei Blättern."""

    COL_DEFAULT_W = 14
    ROW_HEADER_H = 22

    def __init__(self, hotels: list[Hotel]):
        self.hotels = hotels

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def build_workbook(self):
        from openpyxl import Workbook
        wb = Workbook()
        ws_hotels = wb.active
        ws_hotels.title = HOTELS_SHEET
        self._write_sheet(
            ws_hotels, HOTEL_HEADERS,
            [[fn(h) for _, fn in HOTEL_COLUMNS] for h in self.hotels],
        )

        ws_rooms = wb.create_sheet(ROOM_TYPES_SHEET)
        self._write_sheet(
            ws_rooms, ROOM_TYPE_HEADERS,
            [[fn(h, r) for _, fn in ROOM_TYPE_COLUMNS]
             for h in self.hotels for r in h.room_types],
        )
        return wb

    def export(self, output_path: Path) -> Path:
        """Speichert die Arbeitsmappe; legt fehlende Verzeichnisse an."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.build_workbook().save(output_path)
        return output_path

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.build_workbook().save(buffer)
        return buffer.getvalue()

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color=COLORS["border"])
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_sheet(self, ws, headers: list[str], rows: list[list]) -> None:
        from openpyxl.styles import Alignment, Font
        from openpyxl.utils import get_column_letter

        border = self._thin_border()
        header_fill = self._fill(COLORS["header"])
        alt_fill = self._fill(COLORS["alt_row"])
        status_col = headers.index("Status") + 1

        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=text)
            cell.fill = header_fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = border
            ws.column_dimensions[get_column_letter(col)].width = _WIDE_COLUMNS.get(
                text, self.COL_DEFAULT_W)
        ws.row_dimensions[1].height = self.ROW_HEADER_H
        ws.freeze_panes = "A2"

        for r, values in enumerate(rows, 2):
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=r, column=col, value=value)
                cell.border = border
                cell.alignment = Alignment(vertical="center")
                if col == status_col:
                    cell.fill = self._fill(status_color(value))
                elif r % 2 == 1:
                    cell.fill = alt_fill


def build_spreadsheet(hotels: list[Hotel]) -> bytes:
    """Hotels → .xlsx-Datei als Bytes (Blätter Hotels und RoomTypes)."""
    return ExcelExporter(hotels).to_bytes()
