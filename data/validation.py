"""Fachliche Prüfung von Hotels und Zimmertypen vor dem Schreiben.

Das Pydantic-Modell prüft nur Typen und harte Grenzen (Sterne 1–5,
Belegung ≥ 1). Hier kommen die Regeln aus Formular und Import dazu:
Pflichtfelder, Längen, E-Mail/URL-Format, Preise, Gültigkeitsfenster.
"""

import re
from typing import Literal

from pydantic import BaseModel, ValidationError

from models.hotel import Hotel
from models.room_type import RoomType

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_URL_RE = re.compile(r"^https?://")

MAX_HOTEL_NAME = 200
MAX_PLACE_NAME = 100
MAX_PHONE = 50
MAX_ADDRESS = 500
MAX_HOTEL_DESCRIPTION = 2000
MAX_ROOM_NAME = 100
MAX_ROOM_DESCRIPTION = 1000


class ValidationIssue(BaseModel):
    field: str
    message: str
    severity: Literal["error", "warning"] = "error"


class HotelValidationError(ValueError):
    """Hotel oder Zimmertyp verletzt Pflichtregeln; nichts wurde geschrieben."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(f"{i.field}: {i.message}" for i in issues))


def _check_length(issues: list[ValidationIssue], field: str, value: str,
                  limit: int, label: str, required: bool = False) -> None:
    text = (value or "").strip()
    if not text:
        if required:
            issues.append(ValidationIssue(field=field, message=f"{label} fehlt."))
        return
    if len(text) > limit:
        issues.append(ValidationIssue(
            field=field,
            message=f"{label} darf höchstens {limit} Zeichen lang sein.",
        ))


def validate_hotel(hotel: Hotel) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    _check_length(issues, "name", hotel.name, MAX_HOTEL_NAME, "Hotelname", required=True)
    _check_length(issues, "country", hotel.country, MAX_PLACE_NAME, "Land", required=True)
    _check_length(issues, "city", hotel.city, MAX_PLACE_NAME, "Stadt", required=True)
    _check_length(issues, "contact_info.phone", hotel.contact_info.phone,
                  MAX_PHONE, "Telefonnummer")
    _check_length(issues, "address.street", hotel.address.street,
                  MAX_ADDRESS, "Adresse")
    _check_length(issues, "description", hotel.description,
                  MAX_HOTEL_DESCRIPTION, "Beschreibung")

    email = hotel.contact_info.email
    if email and not _EMAIL_RE.match(email):
        issues.append(ValidationIssue(field="contact_info.email",
                                      message=f"Ungültige E-Mail-Adresse: {email}"))

    website = hotel.contact_info.website
    if website and not _URL_RE.match(website):
        issues.append(ValidationIssue(
            field="contact_info.website",
            message="Website muss mit http:// oder https:// beginnen.",
        ))

    for rt in hotel.room_types:
        for issue in validate_room_type(rt, hotel.name):
            issues.append(issue.model_copy(
                update={"field": f"room_types[{rt.name}].{issue.field}"}
            ))
    return issues


def validate_room_type(room_type: RoomType, hotel_name: str = "") -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    where = f" ({hotel_name})" if hotel_name else ""

    _check_length(issues, "name", room_type.name, MAX_ROOM_NAME,
                  f"Zimmertyp-Name{where}", required=True)
    _check_length(issues, "description", room_type.description,
                  MAX_ROOM_DESCRIPTION, f"Beschreibung von '{room_type.name}'")

    for field, label in (("adult_price", "Erwachsenenpreis"),
                         ("child_price", "Kinderpreis"),
                         ("extra_bed_price", "Zustellbett-Preis")):
        if getattr(room_type, field) < 0:
            issues.append(ValidationIssue(
                field=field,
                message=f"{label} von '{room_type.name}' darf nicht negativ sein.",
            ))

    if room_type.max_occupancy is not None and room_type.max_occupancy < 1:
        issues.append(ValidationIssue(
            field="max_occupancy",
            message=f"Maximale Belegung von '{room_type.name}' muss mindestens 1 sein.",
        ))
    elif room_type.max_occupancy is not None and room_type.max_occupancy < room_type.capacity.adults:
        issues.append(ValidationIssue(
            field="max_occupancy",
            message=f"Maximale Belegung von '{room_type.name}' liegt unter der Erwachsenen-Kapazität.",
            severity="warning",
        ))

    if room_type.inventory < 0:
        issues.append(ValidationIssue(
            field="inventory",
            message=f"Zimmeranzahl von '{room_type.name}' darf nicht negativ sein.",
        ))

    if (room_type.valid_from is not None and room_type.valid_to is not None
            and room_type.valid_from > room_type.valid_to):
        issues.append(ValidationIssue(
            field="valid_to",
            message=(f"Gültigkeit von '{room_type.name}': "
                     f"{room_type.valid_from} liegt nach {room_type.valid_to}."),
        ))
    return issues


def errors_only(issues: list[ValidationIssue]) -> list[ValidationIssue]:
    return [i for i in issues if i.severity == "error"]


def ensure_valid_hotel(hotel: Hotel) -> None:
    """HotelValidationError, falls mindestens ein Fehler (nicht Warnung) vorliegt."""
    errors = errors_only(validate_hotel(hotel))
    if errors:
        raise HotelValidationError(errors)


def ensure_valid_room_type(room_type: RoomType, hotel_name: str = "") -> None:
    errors = errors_only(validate_room_type(room_type, hotel_name))
    if errors:
        raise HotelValidationError(errors)


def issues_from_pydantic(exc: ValidationError, prefix: str = "") -> list[ValidationIssue]:
    """Pydantic-Fehler (z.B. Sterne außerhalb 1–5) als ValidationIssue-Liste."""
    issues = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        issues.append(ValidationIssue(field=f"{prefix}{loc}", message=err["msg"]))
    return issues
