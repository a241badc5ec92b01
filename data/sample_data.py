"""Beispieldaten-Generator für das Hotel-Inventar.

Erzeugt realistische Hotels mit Zimmertypen für Demo und Tests:
  - Reiseziele in Thailand, VAE, Indien und Singapur
  - Preise in Landeswährung, je Kategorie skaliert
  - Mischung aus active/draft/inactive, damit Filter etwas zu tun haben
  - Ein Teil der Hotels ohne Zimmertypen (kein Mindestpreis)
"""

import random
from datetime import date
from typing import Optional

from config.defaults import DEFAULT_POLICIES, FACILITIES, MEAL_PLANS
from models.hotel import Address, ContactInfo, Hotel, HotelPolicies, HotelStatus
from models.room_type import Capacity, RoomType

# ─── Reiseziele ───────────────────────────────────────────────────────────────

# Land → [(Stadt, [Lagen], (lat, lon))]
_DESTINATIONS: dict[str, list[tuple[str, list[str], tuple[float, float]]]] = {
    "Thailand": [
        ("Bangkok", ["Sathorn District", "Sukhumvit", "Riverside"], (13.7244, 100.5316)),
        ("Phuket", ["Patong Beach", "Kata Beach", "Kamala"], (7.8961, 98.2970)),
        ("Chiang Mai", ["Old City", "Nimman"], (18.7883, 98.9853)),
    ],
    "UAE": [
        ("Dubai", ["Downtown", "Dubai Marina", "Palm Jumeirah"], (25.1972, 55.2744)),
        ("Abu Dhabi", ["Corniche", "Saadiyat Island"], (24.4539, 54.3773)),
    ],
    "India": [
        ("Mumbai", ["Colaba", "Bandra"], (18.9220, 72.8347)),
        ("Goa", ["Calangute", "Candolim"], (15.5439, 73.7553)),
        ("Jaipur", ["Pink City", "Amer"], (26.9124, 75.7873)),
    ],
    "Singapore": [
        ("Singapore", ["Marina Bay", "Orchard Road", "Sentosa"], (1.2834, 103.8607)),
    ],
}

# Grundpreis Deluxe-Zimmer je Land (Landeswährung)
_BASE_PRICE: dict[str, float] = {
    "Thailand": 4500.0,
    "UAE": 900.0,
    "India": 9000.0,
    "Singapore": 350.0,
}

_NAME_PREFIXES = ["Royal", "Grand", "The", "Golden", "Azure", "Lotus", "Emerald", "Silver"]
_NAME_SUFFIXES = ["Palace", "Resort & Spa", "Residence", "Bay Hotel", "Gardens", "Suites", "Inn"]

# Kategorie → (Sterne, Preisfaktor)
_CATEGORIES: dict[str, tuple[int, float]] = {
    "Luxury": (5, 2.0),
    "Resort": (5, 1.6),
    "Boutique": (4, 1.2),
    "Business": (4, 1.0),
    "Standard": (3, 0.7),
    "Budget": (2, 0.4),
}

# (Name, Konfiguration, Bett, Erw., Kinder, Preisfaktor, Zimmeranzahl)
_ROOM_TEMPLATES: list[tuple[str, str, str, int, int, float, int]] = [
    ("Standard Room", "1 Queen Bed", "Queen", 2, 0, 0.7, 30),
    ("Deluxe Room", "1 King Bed or 2 Twin Beds", "King/Twin", 2, 1, 1.0, 20),
    ("Executive Suite", "1 King Bed + Living Area", "King", 3, 2, 1.9, 8),
    ("Private Pool Villa", "2 Bedrooms + Private Pool", "King", 4, 2, 3.3, 5),
]

_ROOM_AMENITIES = ["Free WiFi", "Air Conditioning", "Minibar", "Coffee Machine",
                   "Safe", "Bathrobe", "Balcony", "Bathtub"]

_STATUS_WEIGHTS = [(HotelStatus.ACTIVE, 6), (HotelStatus.DRAFT, 2), (HotelStatus.INACTIVE, 1)]


class SampleDataGenerator:
    """Erzeugt Beispiel-Hotels (reproduzierbar über seed)."""

    def __init__(self, seed: Optional[int] = None, year: Optional[int] = None) -> None:
        self.rng = random.Random(seed)
        self.year = year or date.today().year
        self._used_names: set[str] = set()

    def _hotel_name(self, city: str) -> str:
        for _ in range(50):
            name = f"{self.rng.choice(_NAME_PREFIXES)} {city} {self.rng.choice(_NAME_SUFFIXES)}"
            if name not in self._used_names:
                break
        else:
            name = f"{name} {len(self._used_names) + 1}"
        self._used_names.add(name)
        return name

    def _room_types(self, country: str, factor: float) -> list[RoomType]:
        base = _BASE_PRICE[country] * factor
        count = self.rng.randint(1, len(_ROOM_TEMPLATES))
        templates = _ROOM_TEMPLATES[:count]
        season = self.rng.choice([(1, 12), (1, 6), (7, 12), (11, 4)])
        start_month, end_month = season
        valid_from = date(self.year, start_month, 1)
        if end_month < start_month:
            valid_to = date(self.year + 1, end_month, 30)
        else:
            valid_to = date(self.year, end_month, 30 if end_month != 12 else 31)

        room_types = []
        for name, config, bed, adults, children, price_factor, inventory in templates:
            adult_price = round(base * price_factor, -1)
            room_types.append(RoomType(
                name=name,
                description=f"{name} mit {config.lower()}",
                configuration=config,
                bed_type=bed,
                meal_plan=self.rng.choice(MEAL_PLANS),
                capacity=Capacity(adults=adults, children=children),
                max_occupancy=adults + children,
                valid_from=valid_from,
                valid_to=valid_to,
                adult_price=adult_price,
                child_price=round(adult_price / 2, -1),
                extra_bed_price=round(adult_price / 3, -1),
                amenities=self.rng.sample(_ROOM_AMENITIES, k=4),
                inventory=inventory,
            ))
        return room_types

    def generate_hotel(self, country: str, city: str, locations: list[str],
                       coords: tuple[float, float]) -> Hotel:
        category = self.rng.choice(list(_CATEGORIES))
        stars, factor = _CATEGORIES[category]
        name = self._hotel_name(city)
        slug = name.lower().replace("&", "and").replace(" ", "-")
        lat = round(coords[0] + self.rng.uniform(-0.05, 0.05), 4)
        lon = round(coords[1] + self.rng.uniform(-0.05, 0.05), 4)
        statuses, weights = zip(*_STATUS_WEIGHTS)

        # Jedes sechste Hotel noch ohne Zimmertypen (Entwurf in Arbeit)
        room_types = [] if self.rng.random() < 1 / 6 else self._room_types(country, factor)

        return Hotel(
            name=name,
            star_rating=stars,
            category=category,
            description=f"{category}-Hotel in {city}, {country}.",
            country=country,
            city=city,
            location=self.rng.choice(locations),
            address=Address(
                street=f"{self.rng.randint(1, 399)} {self.rng.choice(['Main', 'Beach', 'Park', 'River'])} Road",
                city=city,
                state=city,
                zip_code=str(self.rng.randint(10000, 99999)),
                country=country,
            ),
            latitude=lat,
            longitude=lon,
            google_map_link=f"https://maps.google.com/?q={lat},{lon}",
            contact_info=ContactInfo(
                phone=f"+{self.rng.randint(1, 99)} {self.rng.randint(100, 999)} {self.rng.randint(1000, 9999)}",
                email=f"reservations@{slug}.com",
                website=f"https://www.{slug}.com",
            ),
            check_in_time=self.rng.choice(["14:00", "15:00"]),
            check_out_time=self.rng.choice(["11:00", "12:00"]),
            facilities=sorted(self.rng.sample(FACILITIES, k=self.rng.randint(3, 7))),
            amenities=sorted(self.rng.sample(FACILITIES, k=3)),
            policies=HotelPolicies(**DEFAULT_POLICIES),
            status=self.rng.choices(statuses, weights=weights)[0],
            room_types=room_types,
        )

    def generate(self, hotels_per_city: int = 2) -> list[Hotel]:
        """Erzeugt hotels_per_city Hotels für jede Stadt aller Reiseziele."""
        hotels = []
        for country, cities in _DESTINATIONS.items():
            for city, locations, coords in cities:
                for _ in range(hotels_per_city):
                    hotels.append(self.generate_hotel(country, city, locations, coords))
        return hotels

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, hotels: list[Hotel]) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Beispieldaten", box=box.ROUNDED)
        table.add_column("Land", style="bold cyan")
        table.add_column("Hotels", justify="right")
        table.add_column("Zimmertypen", justify="right")
        table.add_column("Währung")

        by_country: dict[str, list[Hotel]] = {}
        for h in hotels:
            by_country.setdefault(h.country, []).append(h)
        for country, group in by_country.items():
            table.add_row(
                country, str(len(group)),
                str(sum(len(h.room_types) for h in group)),
                f"{group[0].currency} ({group[0].currency_symbol})",
            )
        console.print(table)
