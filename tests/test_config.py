"""Tests für das Konfigurationssystem (Schema, Defaults, YAML-Manager)."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config.defaults import (
    COUNTRY_CURRENCIES,
    FACILITIES,
    HOTEL_CATEGORIES,
    MEAL_PLANS,
    default_app_config,
)
from config.manager import DB_URL_ENV, ConfigManager
from config.schema import AppConfig, ExternalIdConfig, FilterConfig, ImportDefaults, LoggingConfig


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_app_config_valid(self):
        """Default-Konfiguration ist valide."""
        config = default_app_config()
        assert config.database.url.startswith("sqlite:///")
        assert config.external_ids.start == 10001
        assert config.external_ids.max_retries == 3
        assert config.filters.page_size == 10

    def test_import_defaults(self):
        """Import-Defaults: Preise 100/50/25, drei Sterne, Entwurf, USD."""
        d = ImportDefaults()
        assert (d.adult_price, d.child_price, d.extra_bed_price) == (100.0, 50.0, 25.0)
        assert d.star_rating == 3
        assert d.hotel_status == "draft"
        assert d.room_status == "active"
        assert (d.currency, d.currency_symbol) == ("USD", "$")

    def test_pick_lists_not_empty(self):
        """Auswahllisten sind befüllt."""
        assert "Standard" in HOTEL_CATEGORIES
        assert "Room Only" in MEAL_PLANS
        assert "Swimming Pool" in FACILITIES
        assert len(COUNTRY_CURRENCIES) > 20


class TestSchemaValidation:
    def test_status_normalized(self):
        """Status wird getrimmt und kleingeschrieben."""
        assert ImportDefaults(hotel_status=" Active ").hotel_status == "active"

    def test_unknown_status_rejected(self):
        """Unbekannter Status ist ungültig."""
        with pytest.raises(ValidationError):
            ImportDefaults(room_status="archived")

    def test_log_level_normalized(self):
        """Log-Level wird großgeschrieben, unbekannte abgelehnt."""
        assert LoggingConfig(level="debug").level == "DEBUG"
        with pytest.raises(ValidationError):
            LoggingConfig(level="chatty")

    def test_retry_bounds(self):
        """Mindestens ein Versuch für externe IDs."""
        with pytest.raises(ValidationError):
            ExternalIdConfig(max_retries=0)

    def test_page_size_bounds(self):
        """Seitengröße mindestens 1."""
        with pytest.raises(ValidationError):
            FilterConfig(page_size=0)

    def test_nested_from_dict(self):
        """Teilweise Angaben werden mit Defaults ergänzt."""
        config = AppConfig.model_validate({
            "agency_name": "Fernweh",
            "database": {"url": "sqlite:///:memory:"},
            "import_defaults": {"adult_price": 80},
        })
        assert config.agency_name == "Fernweh"
        assert config.import_defaults.adult_price == 80
        assert config.import_defaults.child_price == 50


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def _manager(self, tmp_path: Path) -> ConfigManager:
        mgr = ConfigManager()
        mgr.CONFIG_DIR = tmp_path
        mgr.DEFAULT_CONFIG = tmp_path / "hotel_config.yaml"
        return mgr

    def test_save_and_load_roundtrip(self, tmp_path: Path, monkeypatch):
        """Speichern und Laden ergibt dieselbe Konfiguration."""
        monkeypatch.delenv(DB_URL_ENV, raising=False)
        mgr = self._manager(tmp_path)
        config = default_app_config().model_copy(update={"agency_name": "Fernweh Reisen"})
        mgr.save(config)
        loaded = mgr.load()
        assert loaded.agency_name == "Fernweh Reisen"
        assert loaded.external_ids.start == config.external_ids.start
        assert loaded.import_defaults == config.import_defaults

    def test_yaml_has_comments(self, tmp_path: Path):
        """Gespeicherte YAML-Datei enthält Kommentare."""
        mgr = self._manager(tmp_path)
        mgr.save(default_app_config())
        text = mgr.DEFAULT_CONFIG.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "Import-Defaults" in text
        assert DB_URL_ENV in text

    def test_first_run_check(self, tmp_path: Path):
        """Erster Start erkannt, solange keine Datei existiert."""
        mgr = self._manager(tmp_path)
        assert mgr.first_run_check() is True
        mgr.save(default_app_config())
        assert mgr.first_run_check() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        """Fehlende Datei: FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ConfigManager().load(tmp_path / "not_there.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        """Ungültige Werte in der Datei: ValueError."""
        path = tmp_path / "bad.yaml"
        path.write_text("filters:\n  page_size: 0\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager().load(path)

    def test_load_or_default_without_file(self, tmp_path: Path, monkeypatch):
        """Ohne Datei kommt die Default-Konfiguration."""
        monkeypatch.delenv(DB_URL_ENV, raising=False)
        config = ConfigManager().load_or_default(tmp_path / "fehlt.yaml")
        assert config == default_app_config()

    def test_env_overrides_database_url(self, tmp_path: Path, monkeypatch):
        """Umgebungsvariable überschreibt die Datenbank-URL."""
        monkeypatch.setenv(DB_URL_ENV, "postgresql+psycopg://user@db/hotels")
        config = ConfigManager().load_or_default(tmp_path / "fehlt.yaml")
        assert config.database.url == "postgresql+psycopg://user@db/hotels"
        assert config.database.echo is False
