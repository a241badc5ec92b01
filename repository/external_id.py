"""Vergabe fortlaufender externer IDs (Hotels und Zimmertypen).

Die ID ist "höchste vorhandene + 1", beginnend bei 10001. Zwei Clients
können dieselbe ID ziehen; die Datenbank lehnt das zweite INSERT über den
Unique-Constraint ab. Dann wird mit neu gezogener ID erneut eingefügt,
höchstens `max_retries` Versuche insgesamt.
"""

import logging
from typing import Callable, Optional, TypeVar

from repository.base import EntityType, HotelStore
from repository.errors import ExternalIdExhaustedError, UniqueViolationError

logger = logging.getLogger(__name__)

EXTERNAL_ID_START = 10001
MAX_ATTEMPTS = 3

T = TypeVar("T")


def next_external_id(store: HotelStore, entity: EntityType,
                     start: int = EXTERNAL_ID_START) -> int:
    """Nächste freie externe ID der Tabelle (start, falls noch keine existiert)."""
    current = store.max_external_id(entity)
    if current is None:
        return start
    return current + 1


def is_external_id_conflict(exc: Exception) -> bool:
    return isinstance(exc, UniqueViolationError) and exc.column == "external_id"


def allocate(insert: Callable[[int], T],
             generator: Callable[[], int],
             is_conflict: Callable[[Exception], bool] = is_external_id_conflict,
             max_retries: int = MAX_ATTEMPTS) -> T:
    """Fügt mit frisch erzeugter ID ein und wiederholt bei Konflikt.

    Args:
        insert:      schreibt den Datensatz mit der übergebenen ID
        generator:   liefert die nächste Kandidaten-ID (ein Roundtrip)
        is_conflict: erkennt den Unique-Fehler auf der ID-Spalte
        max_retries: Versuche insgesamt

    Andere Fehler werden sofort weitergereicht. Nach `max_retries`
    Konflikten: ExternalIdExhaustedError (mit dem letzten Konflikt als Ursache).
    """
    last_conflict: Optional[Exception] = None
    for attempt in range(1, max_retries + 1):
        candidate = generator()
        try:
            return insert(candidate)
        except Exception as exc:
            if not is_conflict(exc):
                raise
            last_conflict = exc
            logger.warning(
                f"Externe ID {candidate} bereits vergeben "
                f"(Versuch {attempt}/{max_retries})"
            )
    raise ExternalIdExhaustedError(
        f"Keine freie externe ID nach {max_retries} Versuchen."
    ) from last_conflict
