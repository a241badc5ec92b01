"""HotelStore auf SQLAlchemy Core (SQLite lokal, PostgreSQL produktiv)."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    create_engine,
    delete,
    func,
    insert,
    or_,
    select,
    update,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.filters import HotelQuery
from models.records import (
    HotelInsert,
    HotelRecord,
    HotelUpdate,
    RoomTypeInsert,
    RoomTypeRecord,
    RoomTypeUpdate,
)
from repository.base import EntityType, HotelStore
from repository.errors import RecordNotFoundError, RepositoryError, UniqueViolationError

logger = logging.getLogger(__name__)

metadata = MetaData()

hotels_table = Table(
    "hotels", metadata,
    Column("id", String(36), primary_key=True),
    Column("external_id", Integer),
    Column("name", String(200), nullable=False),
    Column("star_rating", Integer),
    Column("category", String(100)),
    Column("description", Text),
    Column("country", String(100), nullable=False),
    Column("city", String(100), nullable=False),
    Column("location", String(200)),
    Column("address", JSON),
    Column("latitude", Float),
    Column("longitude", Float),
    Column("google_map_link", Text),
    Column("contact_info", JSON),
    Column("check_in_time", String(10)),
    Column("check_out_time", String(10)),
    Column("facilities", JSON),
    Column("amenities", JSON),
    Column("images", JSON),
    Column("policies", JSON),
    Column("status", String(20), nullable=False, default="draft"),
    Column("currency", String(3)),
    Column("currency_symbol", String(10)),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
    Column("last_updated", DateTime(timezone=True)),
    UniqueConstraint("external_id", name="uq_hotels_external_id"),
)

room_types_table = Table(
    "hotel_room_types", metadata,
    Column("id", String(36), primary_key=True),
    Column("external_id", Integer),
    # Kein ON DELETE CASCADE: Zimmertypen löscht der Client vor dem Hotel
    Column("hotel_id", String(36), ForeignKey("hotels.id"), nullable=False, index=True),
    Column("name", String(100), nullable=False),
    Column("description", Text),
    Column("configuration", String(100)),
    Column("bed_type", String(100)),
    Column("meal_plan", String(100)),
    Column("capacity", JSON, nullable=False),
    Column("max_occupancy", Integer),
    Column("valid_from", Date),
    Column("valid_to", Date),
    Column("adult_price", Float, nullable=False, default=0.0),
    Column("child_price", Float, nullable=False, default=0.0),
    Column("extra_bed_price", Float, nullable=False, default=0.0),
    Column("amenities", JSON),
    Column("images", JSON),
    Column("inventory", Integer, nullable=False, default=0),
    Column("status", String(20), nullable=False, default="active"),
    Column("currency", String(3)),
    Column("currency_symbol", String(10)),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
    UniqueConstraint("external_id", name="uq_hotel_room_types_external_id"),
)

_TABLES = {
    EntityType.HOTEL: hotels_table,
    EntityType.ROOM_TYPE: room_types_table,
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _contains(term: str) -> str:
    """LIKE-Muster für Teilstring-Suche; % und _ im Suchtext gelten wörtlich."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _translate(exc: SQLAlchemyError, table: str, values: Optional[dict] = None) -> RepositoryError:
    """SQLAlchemy-Fehler → RepositoryError (Unique auf external_id erkennbar)."""
    if isinstance(exc, IntegrityError) and "external_id" in str(exc.orig):
        value = (values or {}).get("external_id")
        return UniqueViolationError(table, "external_id", value)
    return RepositoryError(f"{table}: {exc}")


class SqlHotelStore(HotelStore):
    """Tabellen-Client über eine SQLAlchemy-Engine.

    Jede öffentliche Methode läuft in genau einer Transaktion (engine.begin()).
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.engine = create_engine(url, echo=echo)

    def create_schema(self) -> None:
        """Legt beide Tabellen an, falls sie fehlen."""
        metadata.create_all(self.engine)
        logger.info(f"Schema angelegt: {self.engine.url.render_as_string(hide_password=True)}")

    def close(self) -> None:
        self.engine.dispose()

    # ─── Hilfen ───

    def _fetch_all(self, stmt) -> list[dict[str, Any]]:
        try:
            with self.engine.begin() as conn:
                return [dict(row._mapping) for row in conn.execute(stmt)]
        except SQLAlchemyError as exc:
            raise RepositoryError(str(exc)) from exc

    def _fetch_one(self, table: Table, record_id: str) -> dict[str, Any]:
        rows = self._fetch_all(select(table).where(table.c.id == record_id))
        if not rows:
            raise RecordNotFoundError(table.name, record_id)
        return rows[0]

    def _insert_rows(self, table: Table, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if not rows:
            return []
        now = _now()
        for row in rows:
            row["id"] = str(uuid.uuid4())
            row["created_at"] = now
            row["updated_at"] = now
            if table is hotels_table:
                row["last_updated"] = now
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(table), rows)
                ids = [row["id"] for row in rows]
                fetched = {
                    r.id: dict(r._mapping)
                    for r in conn.execute(select(table).where(table.c.id.in_(ids)))
                }
        except SQLAlchemyError as exc:
            raise _translate(exc, table.name, rows[0] if len(rows) == 1 else None) from exc
        return [fetched[i] for i in ids]

    def _update_row(self, table: Table, record_id: str, values: dict[str, Any]) -> dict[str, Any]:
        now = _now()
        values = {**values, "updated_at": now}
        if table is hotels_table:
            values["last_updated"] = now
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    update(table).where(table.c.id == record_id).values(**values)
                )
                if result.rowcount == 0:
                    raise RecordNotFoundError(table.name, record_id)
                row = conn.execute(select(table).where(table.c.id == record_id)).one()
        except SQLAlchemyError as exc:
            raise _translate(exc, table.name, values) from exc
        return dict(row._mapping)

    def _delete_where(self, table: Table, condition) -> int:
        try:
            with self.engine.begin() as conn:
                return conn.execute(delete(table).where(condition)).rowcount
        except SQLAlchemyError as exc:
            raise _translate(exc, table.name) from exc

    # ─── hotels ───

    def select_hotels(self, query: Optional[HotelQuery] = None) -> list[HotelRecord]:
        stmt = select(hotels_table)
        if query is not None:
            if query.city:
                stmt = stmt.where(hotels_table.c.city.ilike(_contains(query.city), escape="\\"))
            if query.country:
                stmt = stmt.where(hotels_table.c.country.ilike(_contains(query.country), escape="\\"))
            if query.status:
                stmt = stmt.where(hotels_table.c.status == query.status)
            if query.star_rating:
                stmt = stmt.where(hotels_table.c.star_rating == query.star_rating)
        stmt = stmt.order_by(hotels_table.c.created_at.desc())
        return [HotelRecord.model_validate(r) for r in self._fetch_all(stmt)]

    def get_hotel(self, hotel_id: str) -> HotelRecord:
        return HotelRecord.model_validate(self._fetch_one(hotels_table, hotel_id))

    def insert_hotel(self, hotel: HotelInsert) -> HotelRecord:
        row = self._insert_rows(hotels_table, [hotel.model_dump()])[0]
        return HotelRecord.model_validate(row)

    def update_hotel(self, hotel_id: str, changes: HotelUpdate) -> HotelRecord:
        row = self._update_row(hotels_table, hotel_id, changes.changes())
        return HotelRecord.model_validate(row)

    def delete_hotel(self, hotel_id: str) -> None:
        self._delete_where(hotels_table, hotels_table.c.id == hotel_id)

    def search_hotels(self, term: str) -> list[HotelRecord]:
        pattern = _contains(term)
        stmt = (
            select(hotels_table)
            .where(or_(
                hotels_table.c.name.ilike(pattern, escape="\\"),
                hotels_table.c.city.ilike(pattern, escape="\\"),
                hotels_table.c.country.ilike(pattern, escape="\\"),
            ))
            .order_by(hotels_table.c.name)
        )
        return [HotelRecord.model_validate(r) for r in self._fetch_all(stmt)]

    # ─── hotel_room_types ───

    def select_room_types(self, hotel_id: str) -> list[RoomTypeRecord]:
        stmt = (
            select(room_types_table)
            .where(room_types_table.c.hotel_id == hotel_id)
            .order_by(room_types_table.c.name)
        )
        return [RoomTypeRecord.model_validate(r) for r in self._fetch_all(stmt)]

    def select_all_room_types(self) -> list[RoomTypeRecord]:
        stmt = select(room_types_table).order_by(room_types_table.c.name)
        return [RoomTypeRecord.model_validate(r) for r in self._fetch_all(stmt)]

    def get_room_type(self, room_type_id: str) -> RoomTypeRecord:
        return RoomTypeRecord.model_validate(self._fetch_one(room_types_table, room_type_id))

    def insert_room_type(self, room_type: RoomTypeInsert) -> RoomTypeRecord:
        row = self._insert_rows(room_types_table, [room_type.model_dump()])[0]
        return RoomTypeRecord.model_validate(row)

    def insert_room_types(self, room_types: list[RoomTypeInsert]) -> list[RoomTypeRecord]:
        rows = self._insert_rows(room_types_table, [rt.model_dump() for rt in room_types])
        return [RoomTypeRecord.model_validate(r) for r in rows]

    def update_room_type(self, room_type_id: str, changes: RoomTypeUpdate) -> RoomTypeRecord:
        row = self._update_row(room_types_table, room_type_id, changes.changes())
        return RoomTypeRecord.model_validate(row)

    def delete_room_type(self, room_type_id: str) -> None:
        self._delete_where(room_types_table, room_types_table.c.id == room_type_id)

    def delete_room_types_for_hotel(self, hotel_id: str) -> int:
        return self._delete_where(room_types_table, room_types_table.c.hotel_id == hotel_id)

    # ─── external_id ───

    def max_external_id(self, entity: EntityType) -> Optional[int]:
        table = _TABLES[entity]
        try:
            with self.engine.begin() as conn:
                return conn.execute(select(func.max(table.c.external_id))).scalar()
        except SQLAlchemyError as exc:
            raise RepositoryError(str(exc)) from exc

    def external_id_exists(self, entity: EntityType, value: int) -> bool:
        table = _TABLES[entity]
        rows = self._fetch_all(select(table.c.id).where(table.c.external_id == value).limit(1))
        return bool(rows)
