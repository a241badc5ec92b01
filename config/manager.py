"""Konfigurationsmanager: Laden, Speichern und Validieren der App-Konfiguration.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
import os
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_app_config
from config.schema import AppConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120

# Überschreibt database.url aus der YAML-Datei
DB_URL_ENV = "HOTEL_INVENTAR_DB"


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Hotel-Inventar - Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "database": (
        "Datenbank",
        "SQLAlchemy-URL. Kann per Umgebungsvariable "
        f"{DB_URL_ENV} überschrieben werden.",
    ),
    "external_ids": (
        "Externe IDs",
        "Fortlaufende Nummern für Hotels und Zimmertypen (Start + Wiederholungen bei Konflikt).",
    ),
    "import_defaults": (
        "Import-Defaults",
        "Ersatzwerte für LEERE Zellen beim Excel-Import.\n"
        "Unlesbare Zahlen werden als Fehler gemeldet, nicht ersetzt.",
    ),
    "filters": (
        "Filter & Listen",
        None,
    ),
    "logging": (
        "Logging",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "hotel_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            config = AppConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e
        return self._apply_env(config)

    def load_or_default(self, path: Optional[Path] = None) -> AppConfig:
        """Wie load(), fällt aber ohne Datei auf die Default-Konfiguration zurück."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            return self._apply_env(default_app_config())
        return self.load(target)

    def _apply_env(self, config: AppConfig) -> AppConfig:
        url = os.environ.get(DB_URL_ENV)
        if not url:
            return config
        return config.model_copy(update={
            "database": config.database.model_copy(update={"url": url})
        })

    # ─── Speichern ───

    def save(self, config: AppConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: AppConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        if "external_ids" in cm:
            ids_map = CommentedMap(cm["external_ids"])
            ids_map.yaml_add_eol_comment("Versuche insgesamt", "max_retries")
            cm["external_ids"] = ids_map

        return cm
