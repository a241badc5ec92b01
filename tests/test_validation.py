"""Tests für die fachliche Validierung von Hotels und Zimmertypen."""

from datetime import date

import pytest
from pydantic import ValidationError

from data.validation import (
    MAX_HOTEL_NAME,
    HotelValidationError,
    ensure_valid_hotel,
    ensure_valid_room_type,
    errors_only,
    issues_from_pydantic,
    validate_hotel,
    validate_room_type,
)
from models.hotel import Address, ContactInfo, Hotel
from models.room_type import Capacity, RoomType


def _hotel(**kw) -> Hotel:
    values = dict(name="Sala", country="Thailand", city="Bangkok")
    values.update(kw)
    return Hotel(**values)


def _fields(issues) -> list[str]:
    return [i.field for i in issues]


class TestValidateHotel:
    def test_valid_hotel(self):
        """Vollständiges Hotel ohne Befund."""
        assert validate_hotel(_hotel()) == []

    def test_required_fields(self):
        """Name, Land und Stadt sind Pflicht."""
        issues = validate_hotel(_hotel(name=" ", country="", city=""))
        assert _fields(issues) == ["name", "country", "city"]

    def test_length_limits(self):
        """Längengrenzen für Name, Beschreibung, Adresse und Telefon."""
        issues = validate_hotel(_hotel(
            name="x" * (MAX_HOTEL_NAME + 1),
            description="d" * 2001,
            address=Address(street="s" * 501),
            contact_info=ContactInfo(phone="1" * 51),
        ))
        assert set(_fields(issues)) == {"name", "description", "address.street", "contact_info.phone"}

    def test_email_and_website(self):
        """E-Mail ohne Top-Level-Domain und Website ohne http(s) sind Fehler."""
        issues = validate_hotel(_hotel(contact_info=ContactInfo(
            email="info@sala", website="www.sala.com")))
        assert _fields(issues) == ["contact_info.email", "contact_info.website"]

    def test_valid_contact(self):
        contact = ContactInfo(email="info@sala.com", website="https://sala.com")
        assert validate_hotel(_hotel(contact_info=contact)) == []

    def test_room_type_issues_prefixed(self):
        """Befunde der Zimmertypen tragen den Zimmertyp im Feldnamen."""
        issues = validate_hotel(_hotel(room_types=[RoomType(name="Deluxe", adult_price=-1)]))
        assert _fields(issues) == ["room_types[Deluxe].adult_price"]


class TestValidateRoomType:
    def test_negative_prices(self):
        """Negative Preise sind Fehler."""
        rt = RoomType(name="A", adult_price=-1, child_price=-1, extra_bed_price=-1)
        assert _fields(validate_room_type(rt)) == ["adult_price", "child_price", "extra_bed_price"]

    def test_validity_window_order(self):
        """valid_from nach valid_to ist ein Fehler."""
        rt = RoomType(name="A", valid_from=date(2024, 6, 1), valid_to=date(2024, 5, 1))
        assert _fields(validate_room_type(rt)) == ["valid_to"]

    def test_occupancy_below_adults_is_warning(self):
        """Belegung unter Erwachsenenzahl ist nur eine Warnung."""
        rt = RoomType(name="A", capacity=Capacity(adults=3), max_occupancy=2)
        issues = validate_room_type(rt)
        assert [i.severity for i in issues] == ["warning"]
        assert errors_only(issues) == []

    def test_zero_occupancy_is_error(self):
        """Belegung 0 ist ein Fehler."""
        rt = RoomType(name="A", max_occupancy=0)
        assert _fields(errors_only(validate_room_type(rt))) == ["max_occupancy"]

    def test_negative_inventory(self):
        assert _fields(validate_room_type(RoomType(name="A", inventory=-2))) == ["inventory"]

    def test_hotel_name_in_message(self):
        """Der Hotelname erscheint in der Meldung."""
        issues = validate_room_type(RoomType(name=""), hotel_name="Sala")
        assert "Sala" in issues[0].message


class TestEnsureValid:
    def test_raises_with_issues(self):
        """HotelValidationError ist ein ValueError und trägt die Befunde."""
        with pytest.raises(HotelValidationError) as exc_info:
            ensure_valid_hotel(_hotel(city=""))
        assert _fields(exc_info.value.issues) == ["city"]
        assert isinstance(exc_info.value, ValueError)

    def test_warnings_do_not_raise(self):
        """Warnungen blockieren nicht."""
        ensure_valid_room_type(RoomType(name="A", capacity=Capacity(adults=3), max_occupancy=2))

    def test_issues_from_pydantic(self):
        """Pydantic-Fehler werden zu ValidationIssues mit Präfix."""
        with pytest.raises(ValidationError) as exc_info:
            Hotel(name="A", country="X", city="Y", star_rating=0)
        issues = issues_from_pydantic(exc_info.value, prefix="A.")
        assert _fields(issues) == ["A.star_rating"]
