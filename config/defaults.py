from typing import Optional

from config.schema import (
    AppConfig,
    DatabaseConfig,
    ExternalIdConfig,
    FilterConfig,
    ImportDefaults,
)


# ─── WÄHRUNGEN PRO LAND ───
# Land → (ISO-Code, Symbol). Grundlage für die automatische Hotel-Währung.
# "UAE" ist als Kurzform zusätzlich eingetragen (häufig in Importdateien).

COUNTRY_CURRENCIES: dict[str, tuple[str, str]] = {
    # Asien
    "India":                ("INR", "₹"),
    "China":                ("CNY", "¥"),
    "Japan":                ("JPY", "¥"),
    "Thailand":             ("THB", "฿"),
    "Singapore":            ("SGD", "S$"),
    "Malaysia":             ("MYR", "RM"),
    "Indonesia":            ("IDR", "Rp"),
    "South Korea":          ("KRW", "₩"),
    "Vietnam":              ("VND", "₫"),
    "Philippines":          ("PHP", "₱"),
    "Sri Lanka":            ("LKR", "Rs"),
    "Nepal":                ("NPR", "Rs"),
    "Bhutan":               ("BTN", "Nu"),
    "Maldives":             ("MVR", "Rf"),
    "Cambodia":             ("KHR", "៛"),
    "Laos":                 ("LAK", "₭"),
    "Myanmar":              ("MMK", "K"),
    "Bangladesh":           ("BDT", "৳"),
    # Europa
    "United Kingdom":       ("GBP", "£"),
    "France":               ("EUR", "€"),
    "Germany":              ("EUR", "€"),
    "Italy":                ("EUR", "€"),
    "Spain":                ("EUR", "€"),
    "Netherlands":          ("EUR", "€"),
    "Switzerland":          ("CHF", "Fr"),
    "Austria":              ("EUR", "€"),
    "Belgium":              ("EUR", "€"),
    "Portugal":             ("EUR", "€"),
    "Greece":               ("EUR", "€"),
    "Norway":               ("NOK", "kr"),
    "Sweden":               ("SEK", "kr"),
    "Denmark":              ("DKK", "kr"),
    "Finland":              ("EUR", "€"),
    "Iceland":              ("ISK", "kr"),
    "Ireland":              ("EUR", "€"),
    "Czech Republic":       ("CZK", "Kč"),
    "Poland":               ("PLN", "zł"),
    "Hungary":              ("HUF", "Ft"),
    "Croatia":              ("EUR", "€"),
    "Turkey":               ("TRY", "₺"),
    "Russia":               ("RUB", "₽"),
    # Amerika
    "United States":        ("USD", "$"),
    "Canada":               ("CAD", "C$"),
    "Mexico":               ("MXN", "$"),
    "Brazil":               ("BRL", "R$"),
    "Argentina":            ("ARS", "$"),
    "Chile":                ("CLP", "$"),
    "Peru":                 ("PEN", "S/"),
    "Colombia":             ("COP", "$"),
    "Ecuador":              ("USD", "$"),
    # Afrika
    "South Africa":         ("ZAR", "R"),
    "Egypt":                ("EGP", "£"),
    "Morocco":              ("MAD", "DH"),
    "Kenya":                ("KES", "KSh"),
    "Tanzania":             ("TZS", "TSh"),
    # Ozeanien
    "Australia":            ("AUD", "A$"),
    "New Zealand":          ("NZD", "NZ$"),
    "Fiji":                 ("FJD", "FJ$"),
    # Naher Osten
    "United Arab Emirates": ("AED", "د.إ"),
    "UAE":                  ("AED", "د.إ"),
    "Saudi Arabia":         ("SAR", "﷼"),
    "Qatar":                ("QAR", "﷼"),
    "Kuwait":               ("KWD", "د.ك"),
    "Bahrain":              ("BHD", ".د.ب"),
    "Oman":                 ("OMR", "﷼"),
    "Jordan":               ("JOD", "د.ا"),
    "Lebanon":              ("LBP", "£"),
    "Israel":               ("ILS", "₪"),
}

DEFAULT_CURRENCY: tuple[str, str] = ("USD", "$")

_COUNTRY_LOOKUP = {name.casefold(): value for name, value in COUNTRY_CURRENCIES.items()}
_SYMBOL_LOOKUP = {code: symbol for code, symbol in COUNTRY_CURRENCIES.values()}


def currency_for_country(country: Optional[str]) -> tuple[str, str]:
    """Gibt (Code, Symbol) für ein Land zurück; unbekannt → USD/$."""
    if not country:
        return DEFAULT_CURRENCY
    return _COUNTRY_LOOKUP.get(country.strip().casefold(), DEFAULT_CURRENCY)


def symbol_for_currency(code: str) -> str:
    """Symbol zu einem ISO-Code; unbekannte Codes werden selbst als Symbol genutzt."""
    code = code.strip().upper()
    if code == DEFAULT_CURRENCY[0]:
        return DEFAULT_CURRENCY[1]
    return _SYMBOL_LOOKUP.get(code, code)


# ─── AUSWAHLLISTEN ───
# Vorschlagswerte für Filter und Import-Vorlage (keine Pflichtlisten).

HOTEL_CATEGORIES: list[str] = [
    "Luxury", "Business", "Budget", "Resort", "Boutique",
    "Family", "Beach", "City Center", "Standard",
]

ROOM_TYPE_NAMES: list[str] = [
    "Standard", "Deluxe", "Suite", "Villa", "Penthouse", "Apartment", "Studio",
]

FACILITIES: list[str] = [
    "Swimming Pool", "Gym", "Restaurant", "Bar", "Spa", "WiFi", "Parking",
    "Room Service", "Airport Transfer", "Beach Access", "Business Center",
    "Conference Room",
]

MEAL_PLANS: list[str] = [
    "Room Only", "Bed & Breakfast", "Half Board", "Full Board", "All Inclusive",
]

DEFAULT_POLICIES: dict[str, str] = {
    "cancellation": "Standard 24-hour cancellation policy applies",
    "children": "Children of all ages are welcome",
    "pets": "No pets allowed",
    "payment": "Credit card required for reservation",
}


def default_app_config() -> AppConfig:
    """Komplette Default-Konfiguration (lokale SQLite-Datenbank)."""
    return AppConfig(
        agency_name="Reisebüro",
        database=DatabaseConfig(url="sqlite:///output/hotels.db"),
        external_ids=ExternalIdConfig(start=10001, max_retries=3),
        import_defaults=ImportDefaults(),
        filters=FilterConfig(price_max=10000.0, page_size=10),
    )
