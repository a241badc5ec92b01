"""Fehlerklassen der Datenzugriffsschicht."""

from typing import Optional


class RepositoryError(Exception):
    """Basisklasse: Fehler beim Zugriff auf die Hotel-Datenbank."""


class RecordNotFoundError(RepositoryError):
    """Zeile mit der angefragten ID existiert nicht."""

    def __init__(self, table: str, record_id: str) -> None:
        super().__init__(f"{table}: Eintrag '{record_id}' nicht gefunden.")
        self.table = table
        self.record_id = record_id


class UniqueViolationError(RepositoryError):
    """Eindeutigkeits-Constraint verletzt (z.B. auf external_id)."""

    def __init__(self, table: str, column: str, value: Optional[object] = None) -> None:
        super().__init__(
            f"{table}: Wert {value!r} für Spalte '{column}' ist bereits vergeben."
        )
        self.table = table
        self.column = column
        self.value = value


class ExternalIdExhaustedError(RepositoryError):
    """Alle Versuche zur Vergabe einer freien externen ID sind gescheitert."""
