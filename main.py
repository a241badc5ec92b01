"""Hotel-Inventar: Haupt-CLI.

Verwendung:
  python main.py config init                    Konfiguration anlegen
  python main.py config show                    Konfiguration anzeigen
  python main.py db init                        Tabellen anlegen
  python main.py seed                           Beispiel-Hotels einspielen
  python main.py hotels list [Filter]           Hotels filtern, sortieren, blättern
  python main.py hotels show <id>               Hotel mit Zimmertypen
  python main.py hotels search <begriff>        Serverseitige Suche
  python main.py hotels delete <id>             Hotel samt Zimmertypen löschen
  python main.py rooms add <hotel-id>           Zimmertyp anlegen
  python main.py rooms status <id> <status>     Zimmertyp-Status ändern
  python main.py rooms delete <id>              Zimmertyp löschen
  python main.py template                       Excel-Import-Vorlage erzeugen
  python main.py import <datei.xlsx>            Excel importieren
  python main.py export                         Excel exportieren
  python main.py json export|import             JSON-Sicherung
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from data.excel_import import ExcelImportError
from data.json_transfer import JsonImportError
from repository.errors import RepositoryError

console = Console()

DEFAULT_OUTPUT_DIR = Path("output")


def _setup_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _abort(message: str, exc: Optional[Exception] = None) -> None:
    """Fehlermeldung ausgeben und mit Exit-Code 1 beenden."""
    console.print(f"[red bold]{message}[/red bold]")
    if exc is not None:
        console.print(f"[red]{exc}[/red]")
    sys.exit(1)


def _open_inventory(ctx: click.Context):
    """Store aus der Config öffnen, Tabellen sicherstellen, Schnappschuss laden."""
    from repository.inventory import HotelInventory
    from repository.sql import SqlHotelStore

    config = ctx.obj["config"]
    store = SqlHotelStore(config.database.url, echo=config.database.echo)
    ctx.call_on_close(store.close)
    try:
        store.create_schema()
        inventory = HotelInventory(store, config)
        inventory.refresh()
    except RepositoryError as e:
        _abort("Datenbank nicht erreichbar:", e)
    except ValueError as e:
        _abort("Ungültiger Datensatz in der Datenbank:", e)
    return inventory


def _price(hotel) -> str:
    from export.helpers import format_price
    return format_price(hotel.min_price, hotel.currency_symbol)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anlegen oder anzeigen."""


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False, help="Vorhandene Datei überschreiben.")
def config_init(force: bool):
    """Schreibt die Default-Konfiguration als kommentierte YAML-Datei."""
    from config.defaults import default_app_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Mit [bold]--force[/bold] wird sie überschrieben."
        )
        return
    mgr.save(default_app_config())


@cmd_config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    """Zeigt die aktuelle Konfiguration an."""
    config = ctx.obj["config"]

    console.print(Panel(
        f"[bold]{config.agency_name}[/bold]  |  {config.database.url}",
        title="Hotel-Inventar",
        border_style="cyan",
    ))

    ids = config.external_ids
    console.print(
        f"[bold]Externe IDs:[/bold] Start {ids.start} | "
        f"Versuche bei Konflikt: {ids.max_retries}"
    )
    console.print(
        f"[bold]Liste:[/bold] {config.filters.page_size} pro Seite | "
        f"Preis-Obergrenze {config.filters.price_max:,.0f}"
    )

    table = Table(title="Import-Defaults (leere Zellen)", box=box.ROUNDED)
    table.add_column("Feld", style="bold")
    table.add_column("Wert")
    for field, value in config.import_defaults.model_dump().items():
        table.add_row(field, str(value))
    console.print(table)


# ─── DB ───────────────────────────────────────────────────────────────────────

@click.group("db")
def cmd_db():
    """Datenbank verwalten."""


@cmd_db.command("init")
@click.pass_context
def db_init(ctx: click.Context):
    """Legt die Tabellen hotels und hotel_room_types an."""
    inventory = _open_inventory(ctx)
    console.print(
        f"[green]✓[/green] Datenbank bereit: {ctx.obj['config'].database.url} "
        f"({len(inventory.hotels)} Hotels)"
    )


# ─── SEED ─────────────────────────────────────────────────────────────────────

@click.command("seed")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--per-city", default=2, show_default=True, help="Hotels pro Stadt.")
@click.pass_context
def cmd_seed(ctx: click.Context, seed: int, per_city: int):
    """Spielt Beispiel-Hotels mit Zimmertypen ein."""
    from data.sample_data import SampleDataGenerator

    inventory = _open_inventory(ctx)
    gen = SampleDataGenerator(seed=seed)
    hotels = gen.generate(hotels_per_city=per_city)
    gen.print_summary(hotels)

    results = inventory.bulk_add(hotels)
    failed = [r for r in results if not r.success]
    console.print(f"[green]✓[/green] {len(results) - len(failed)} Hotels angelegt")
    for r in failed:
        console.print(f"  [red]• {r.hotel_name}: {r.error}[/red]")


# ─── HOTELS ───────────────────────────────────────────────────────────────────

@click.group("hotels")
def cmd_hotels():
    """Hotels auflisten, anzeigen, suchen, löschen."""


@cmd_hotels.command("list")
@click.option("--country", default="all")
@click.option("--city", default="all")
@click.option("--location", default="all")
@click.option("--stars", default="all", help="Sterne 1-5 oder 'all'.")
@click.option("--status", default="all", type=click.Choice(["all", "active", "inactive", "draft"]))
@click.option("--category", default="all")
@click.option("--room-type", "room_types", multiple=True, help="Mindestens einer davon.")
@click.option("--facility", "facilities", multiple=True, help="Alle davon.")
@click.option("--min-price", type=float, default=0.0)
@click.option("--max-price", type=float, default=None)
@click.option("--from", "date_from", type=click.DateTime(["%Y-%m-%d"]), default=None)
@click.option("--to", "date_to", type=click.DateTime(["%Y-%m-%d"]), default=None)
@click.option("--search", "-s", default="", help="Suche in Name, Lage, Land, Stadt.")
@click.option("--sort", "sort_field", default="name",
              type=click.Choice(["name", "country", "city", "star_rating", "min_price", "updated_at"]))
@click.option("--desc", is_flag=True, default=False, help="Absteigend sortieren.")
@click.option("--page", default=1, show_default=True)
@click.option("--per-page", type=int, default=None)
@click.pass_context
def hotels_list(ctx: click.Context, country, city, location, stars, status, category,
                room_types, facilities, min_price, max_price, date_from, date_to,
                search, sort_field, desc, page, per_page):
    """Listet Hotels gefiltert, sortiert und seitenweise."""
    from analysis.filters import (
        active_filter_count,
        apply_filters,
        apply_sort,
        paginate,
        search_hotels,
    )
    from models.filters import DateRange, HotelFilters, PriceRange, SortDirection

    config = ctx.obj["config"]
    inventory = _open_inventory(ctx)
    ceiling = config.filters.price_max
    try:
        filters = HotelFilters(
            country=country, city=city, location=location, star_rating=stars,
            status=status, category=category,
            room_types=list(room_types), facilities=list(facilities),
            price_range=PriceRange(min=min_price, max=ceiling if max_price is None else max_price),
            date_range=DateRange(
                start=date_from.date() if date_from else None,
                end=date_to.date() if date_to else None,
            ),
            price_ceiling=ceiling,
        )
        hotels = search_hotels(apply_filters(inventory.hotels, filters), search)
        hotels = apply_sort(hotels, sort_field, SortDirection.DESC if desc else SortDirection.ASC)
        result = paginate(hotels, page, per_page or config.filters.page_size)
    except ValueError as e:
        _abort("Ungültige Filter:", e)

    title = f"Hotels ({result.total_items})"
    n_filters = active_filter_count(filters)
    if n_filters:
        title += f"  |  Filter ({n_filters})"
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Ext.", justify="right", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Sterne", justify="center")
    table.add_column("Stadt")
    table.add_column("Land")
    table.add_column("Zimmertypen", justify="right")
    table.add_column("ab", justify="right")
    table.add_column("Status")
    status_style = {"active": "green", "inactive": "red", "draft": "yellow"}
    for h in result.items:
        style = status_style.get(h.status.value, "")
        table.add_row(
            str(h.external_id or ""), h.name, "★" * h.star_rating, h.city, h.country,
            str(len(h.room_types)), _price(h), f"[{style}]{h.status.value}[/{style}]",
        )
    console.print(table)
    console.print(
        f"[dim]{result.start}-{result.end} von {result.total_items}  |  "
        f"Seite {result.page}/{result.total_pages}[/dim]"
    )


@cmd_hotels.command("show")
@click.argument("hotel_id")
@click.pass_context
def hotels_show(ctx: click.Context, hotel_id: str):
    """Zeigt ein Hotel mit allen Zimmertypen."""
    from export.helpers import format_date, format_datetime, format_price, join_list

    inventory = _open_inventory(ctx)
    hotel = inventory.get_hotel_with_room_types(hotel_id)
    if hotel is None:
        _abort(f"Hotel nicht gefunden: {hotel_id}")

    console.print(Panel(
        f"[bold]{hotel.name}[/bold]  {'★' * hotel.star_rating}  |  {hotel.category}\n"
        f"{hotel.location}, {hotel.city}, {hotel.country}\n"
        f"Check-in {hotel.check_in_time}  |  Check-out {hotel.check_out_time}\n"
        f"Ausstattung: {join_list(hotel.facilities) or '-'}\n"
        f"[dim]#{hotel.external_id}  |  {hotel.id}  |  {hotel.status.value}  |  "
        f"geändert {format_datetime(hotel.updated_at) or '-'}[/dim]",
        title="Hotel",
        border_style="cyan",
    ))

    table = Table(title="Zimmertypen", box=box.ROUNDED)
    table.add_column("Ext.", justify="right", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Belegung")
    table.add_column("Erw.", justify="right")
    table.add_column("Kind", justify="right")
    table.add_column("Verpflegung")
    table.add_column("Gültig")
    table.add_column("Status")
    table.add_column("ID", style="dim")
    for rt in hotel.room_types:
        table.add_row(
            str(rt.external_id or ""), rt.name,
            f"{rt.capacity.adults}+{rt.capacity.children} (max {rt.max_occupancy})",
            format_price(rt.adult_price, hotel.currency_symbol),
            format_price(rt.child_price, hotel.currency_symbol),
            rt.meal_plan,
            f"{format_date(rt.valid_from)} - {format_date(rt.valid_to)}",
            rt.status.value,
            rt.id or "",
        )
    console.print(table)


@cmd_hotels.command("search")
@click.argument("term")
@click.pass_context
def hotels_search(ctx: click.Context, term: str):
    """Serverseitige Suche in Name, Stadt und Land."""
    inventory = _open_inventory(ctx)
    try:
        hotels = inventory.search(term)
    except RepositoryError as e:
        _abort("Suche fehlgeschlagen:", e)

    if not hotels:
        console.print(f"[dim]Keine Treffer für '{term}'.[/dim]")
        return
    table = Table(title=f"Suche: {term}", box=box.ROUNDED)
    table.add_column("Name", style="bold")
    table.add_column("Stadt")
    table.add_column("Land")
    table.add_column("ID", style="dim")
    for h in hotels:
        table.add_row(h.name, h.city, h.country, h.id or "")
    console.print(table)


@cmd_hotels.command("delete")
@click.argument("hotel_id")
@click.option("--yes", is_flag=True, default=False, help="Ohne Rückfrage löschen.")
@click.pass_context
def hotels_delete(ctx: click.Context, hotel_id: str, yes: bool):
    """Löscht ein Hotel samt Zimmertypen."""
    inventory = _open_inventory(ctx)
    hotel = inventory.get_by_id(hotel_id)
    if hotel is None:
        _abort(f"Hotel nicht gefunden: {hotel_id}")
    if not yes and not click.confirm(f"'{hotel.name}' wirklich löschen?", default=False):
        return
    try:
        inventory.delete(hotel_id)
    except RepositoryError as e:
        _abort("Löschen fehlgeschlagen:", e)
    console.print(f"[green]✓[/green] Hotel gelöscht: {hotel.name}")


# ─── ROOMS ────────────────────────────────────────────────────────────────────

@click.group("rooms")
def cmd_rooms():
    """Zimmertypen anlegen, Status ändern, löschen."""


@cmd_rooms.command("add")
@click.argument("hotel_id")
@click.option("--name", required=True)
@click.option("--adults", default=2, show_default=True)
@click.option("--children", default=0, show_default=True)
@click.option("--adult-price", type=float, default=0.0)
@click.option("--child-price", type=float, default=0.0)
@click.option("--meal-plan", default="Room Only", show_default=True)
@click.option("--from", "valid_from", type=click.DateTime(["%Y-%m-%d"]), default=None)
@click.option("--to", "valid_to", type=click.DateTime(["%Y-%m-%d"]), default=None)
@click.option("--inventory", "rooms", default=0, help="Anzahl Zimmer.")
@click.pass_context
def rooms_add(ctx: click.Context, hotel_id, name, adults, children, adult_price,
              child_price, meal_plan, valid_from, valid_to, rooms):
    """Legt einen Zimmertyp für ein Hotel an."""
    from pydantic import ValidationError
    from models.room_type import Capacity, RoomType

    inventory = _open_inventory(ctx)
    hotel = inventory.get_by_id(hotel_id)
    if hotel is None:
        _abort(f"Hotel nicht gefunden: {hotel_id}")

    values = dict(
        name=name, capacity=Capacity(adults=adults, children=children),
        adult_price=adult_price, child_price=child_price, meal_plan=meal_plan,
        inventory=rooms, currency=hotel.currency, currency_symbol=hotel.currency_symbol,
    )
    if valid_from:
        values["valid_from"] = valid_from.date()
    if valid_to:
        values["valid_to"] = valid_to.date()
    try:
        created = inventory.add_room_type(RoomType(**values), hotel_id)
    except ValidationError as e:
        _abort("Ungültiger Zimmertyp:", e)
    except (RepositoryError, ValueError) as e:
        _abort("Zimmertyp konnte nicht angelegt werden:", e)
    console.print(f"[green]✓[/green] Zimmertyp angelegt: {created.name} (#{created.external_id})")


@cmd_rooms.command("status")
@click.argument("room_type_id")
@click.argument("status", type=click.Choice(["active", "inactive", "draft"]))
@click.pass_context
def rooms_status(ctx: click.Context, room_type_id: str, status: str):
    """Ändert nur den Status eines Zimmertyps."""
    inventory = _open_inventory(ctx)
    try:
        rt = inventory.set_room_type_status(room_type_id, status)
    except (RepositoryError, ValueError) as e:
        _abort("Status konnte nicht geändert werden:", e)
    console.print(f"[green]✓[/green] {rt.name}: {rt.status.value}")


@cmd_rooms.command("delete")
@click.argument("room_type_id")
@click.pass_context
def rooms_delete(ctx: click.Context, room_type_id: str):
    """Löscht einen Zimmertyp."""
    inventory = _open_inventory(ctx)
    try:
        inventory.delete_room_type(room_type_id)
    except RepositoryError as e:
        _abort("Löschen fehlgeschlagen:", e)
    console.print(f"[green]✓[/green] Zimmertyp gelöscht: {room_type_id}")


# ─── TEMPLATE ─────────────────────────────────────────────────────────────────

@click.command("template")
@click.option("--output", "-o", default=str(DEFAULT_OUTPUT_DIR / "hotel_import_vorlage.xlsx"),
              help="Ausgabepfad für die Excel-Vorlage.")
def cmd_template(output: str):
    """Erzeugt eine leere Excel-Import-Vorlage."""
    from data.excel_import import generate_template

    out_path = generate_template(Path(output))
    console.print(f"[green]✓[/green] Vorlage gespeichert: {out_path}")
    console.print(
        "\nBlätter in der Vorlage:\n"
        "  [cyan]Hotels[/cyan]     - eine Zeile pro Hotel\n"
        "  [cyan]RoomTypes[/cyan]  - eine Zeile pro Zimmertyp (Zuordnung über Hotel Name)"
    )


# ─── IMPORT ───────────────────────────────────────────────────────────────────

@click.command("import")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@click.option("--dry-run", is_flag=True, default=False,
              help="Nur einlesen und prüfen, nichts speichern.")
@click.pass_context
def cmd_import(ctx: click.Context, datei: Path, dry_run: bool):
    """Importiert Hotels und Zimmertypen aus einer Excel-Datei."""
    from data.excel_import import parse_spreadsheet

    config = ctx.obj["config"]
    console.print(f"[bold]Importiere:[/bold] {datei}")
    try:
        contents = parse_spreadsheet(datei, config.import_defaults)
    except ExcelImportError as e:
        _abort("Import fehlgeschlagen:", e)
    contents.report.print_rich()

    if dry_run:
        console.print(f"[dim]Probelauf: {len(contents.hotels)} Hotels gelesen, nichts gespeichert.[/dim]")
        return

    inventory = _open_inventory(ctx)
    results = inventory.bulk_add(contents.hotels)
    failed = [r for r in results if not r.success]
    console.print(f"[green]✓[/green] {len(results) - len(failed)} von {len(results)} Hotels gespeichert")
    for r in failed:
        console.print(f"  [red]• {r.hotel_name}: {r.error}[/red]")
    if failed:
        sys.exit(1)


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.command("export")
@click.option("--output", "-o", default=None, help="Zieldatei (.xlsx).")
@click.pass_context
def cmd_export(ctx: click.Context, output: Optional[str]):
    """Exportiert alle Hotels mit Zimmertypen als Excel."""
    from export.excel_export import ExcelExporter
    from export.helpers import export_filename, today_str

    inventory = _open_inventory(ctx)
    out_path = Path(output) if output else DEFAULT_OUTPUT_DIR / export_filename(date.today())
    path = ExcelExporter(inventory.hotels).export(out_path)
    console.print(f"[green]✓[/green] {len(inventory.hotels)} Hotels exportiert ({today_str()}): {path}")


# ─── JSON ─────────────────────────────────────────────────────────────────────

@click.group("json")
def cmd_json():
    """JSON-Sicherung exportieren oder einspielen."""


@cmd_json.command("export")
@click.option("--output", "-o", default=None, help="Zieldatei (.json).")
@click.option("--hotel", "hotel_ids", multiple=True, help="Nur diese Hotel-IDs.")
@click.pass_context
def json_export(ctx: click.Context, output: Optional[str], hotel_ids: tuple):
    """Schreibt Hotels und Zimmertypen als JSON."""
    from data.json_transfer import export_hotels_to_json
    from export.helpers import json_export_filename

    inventory = _open_inventory(ctx)
    try:
        payload = export_hotels_to_json(inventory, list(hotel_ids) or None)
    except RepositoryError as e:
        _abort("JSON-Export fehlgeschlagen:", e)
    out_path = Path(output) if output else DEFAULT_OUTPUT_DIR / json_export_filename(date.today())
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(payload, encoding="utf-8")
    console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


@cmd_json.command("import")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@click.option("--allow-duplicates", is_flag=True, default=False,
              help="Hotels mit gleichem Namen/Ort trotzdem anlegen.")
@click.pass_context
def json_import(ctx: click.Context, datei: Path, allow_duplicates: bool):
    """Spielt eine JSON-Sicherung ein."""
    from data.json_transfer import import_hotels_from_json

    inventory = _open_inventory(ctx)
    try:
        stats = import_hotels_from_json(
            inventory, datei.read_text(encoding="utf-8"),
            skip_duplicates=not allow_duplicates,
        )
    except JsonImportError as e:
        for issue in e.issues:
            console.print(f"  [red]• {issue.field}: {issue.message}[/red]")
        _abort("JSON-Import fehlgeschlagen:", e)
    stats.print_rich()


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Pfad zur YAML-Konfiguration.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug-Logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool):
    """Hotel-Inventar für Reisebüros: Hotels, Zimmertypen, Preise.

    Starten Sie mit: python main.py config init && python main.py seed
    """
    from config.manager import ConfigManager

    try:
        config = ConfigManager().load_or_default(config_path)
    except (FileNotFoundError, ValueError) as e:
        _abort("Konfiguration nicht lesbar:", e)
    _setup_logging(config.logging.level, verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def main():
    """Einstiegspunkt."""
    cli(obj={})


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_db)
cli.add_command(cmd_seed)
cli.add_command(cmd_hotels)
cli.add_command(cmd_rooms)
cli.add_command(cmd_template)
cli.add_command(cmd_import)
cli.add_command(cmd_export)
cli.add_command(cmd_json)


if __name__ == "__main__":
    main()
