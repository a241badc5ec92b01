from pydantic import BaseModel, Field, field_validator


# ─── DATENBANK ───

class DatabaseConfig(BaseModel):
    """Verbindung zur Hotel-Datenbank."""
    # SQLAlchemy-URL, z.B. "sqlite:///output/hotels.db" oder "postgresql+psycopg://..."
    url: str = Field("sqlite:///output/hotels.db",
        description="SQLAlchemy-Datenbank-URL")
    # SQL-Statements mitloggen
    echo: bool = False


# ─── EXTERNE IDS ───

class ExternalIdConfig(BaseModel):
    """Vergabe der fortlaufenden externen IDs (Hotel und Zimmertyp)."""
    # Startwert wenn noch keine externe ID existiert
    start: int = Field(10001, ge=1,
        description="Erste vergebene externe ID")
    # Versuche insgesamt bei Unique-Konflikt auf external_id
    max_retries: int = Field(3, ge=1, le=10,
        description="Maximale Einfüge-Versuche bei ID-Konflikt")


# ─── IMPORT-DEFAULTS ───

class ImportDefaults(BaseModel):
    """Ersatzwerte für leere Zellen beim Excel-Import.

    Greifen NUR bei fehlender oder leerer Spalte. Nicht lesbare Zahlen
    werden als Fehler im ImportReport gemeldet, nicht ersetzt.
    """
    adult_price: float = Field(100.0, ge=0)
    child_price: float = Field(50.0, ge=0)
    extra_bed_price: float = Field(25.0, ge=0)
    star_rating: int = Field(3, ge=1, le=5)
    adults: int = Field(2, ge=1)
    children: int = Field(1, ge=0)
    inventory: int = Field(10, ge=0)
    configuration: str = "King Bed"
    bed_type: str = "King"
    meal_plan: str = "Room Only"
    category: str = "Standard"
    check_in_time: str = "14:00"
    check_out_time: str = "12:00"
    hotel_status: str = "draft"
    room_status: str = "active"
    currency: str = "USD"
    currency_symbol: str = "$"
    # Gültigkeit neuer Zimmertypen ohne Datum: heute + N Tage
    validity_days: int = Field(365, ge=1)

    @field_validator("hotel_status", "room_status")
    @classmethod
    def _check_status(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("active", "inactive", "draft"):
            raise ValueError(f"Unbekannter Status: {v}")
        return v


# ─── FILTER / LISTEN ───

class FilterConfig(BaseModel):
    """Voreinstellungen für Filter und Listenansicht."""
    # Obergrenze des Preis-Sliders; [0, price_max] gilt als "kein Filter"
    price_max: float = Field(10000.0, gt=0)
    # Einträge pro Seite
    page_size: int = Field(10, ge=1, le=200)


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Ungültiges Log-Level: {v}")
        return v


# ─── GESAMT-KONFIGURATION ───

class AppConfig(BaseModel):
    """Vollständige Konfiguration des Hotel-Inventars."""
    agency_name: str = "Reisebüro"
    database: DatabaseConfig = DatabaseConfig()
    external_ids: ExternalIdConfig = ExternalIdConfig()
    import_defaults: ImportDefaults = ImportDefaults()
    filters: FilterConfig = FilterConfig()
    logging: LoggingConfig = LoggingConfig()
