"""Gemeinsame Hilfsfunktionen für Excel-Export, Vorlage und CLI-Ausgabe."""

from datetime import date, datetime
from typing import Iterable, Optional

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "header":   "2E6DA4",
    "alt_row":  "D6E4F0",
    "example":  "F5F5F5",
    "active":   "C6EFCE",
    "inactive": "FFC7CE",
    "draft":    "FFEB9C",
    "border":   "BBBBBB",
}


def status_color(status: str) -> str:
    """Hintergrundfarbe der Status-Zelle (active/inactive/draft)."""
    return COLORS.get(status, COLORS["example"])


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


def export_filename(day: Optional[date] = None) -> str:
    """Dateiname des Excel-Exports: Hotels_Export_YYYY-MM-DD.xlsx."""
    return f"Hotels_Export_{(day or date.today()).isoformat()}.xlsx"


def json_export_filename(day: Optional[date] = None) -> str:
    return f"hotels_export_{(day or date.today()).isoformat()}.json"


def join_list(values: Iterable[str]) -> str:
    """['Pool', 'Spa'] → 'Pool, Spa'."""
    return ", ".join(v for v in values if v)


def split_list(raw) -> list[str]:
    """'Pool, Spa,' → ['Pool', 'Spa']. Listen werden übernommen."""
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(v).strip() for v in raw if str(v).strip()]
    return [part.strip() for part in str(raw).split(",") if part.strip()]


def format_date(value: Optional[date]) -> str:
    """ISO-Datum (YYYY-MM-DD) oder leerer String."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def format_datetime(value: Optional[datetime]) -> str:
    """Zeitstempel als DD.MM.YYYY HH:MM oder leerer String."""
    if value is None:
        return ""
    return value.strftime("%d.%m.%Y %H:%M")


def format_price(amount: Optional[float], symbol: Optional[str] = None) -> str:
    """100.0, '$' → '$100.00'; None → '–'."""
    if amount is None:
        return "–"
    return f"{symbol or ''}{amount:,.2f}"
