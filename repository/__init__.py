from repository.errors import (
    ExternalIdExhaustedError,
    RecordNotFoundError,
    RepositoryError,
    UniqueViolationError,
)
from repository.base import EntityType, HotelStore
from repository.memory import InMemoryHotelStore
from repository.sql import SqlHotelStore
from repository.external_id import EXTERNAL_ID_START, MAX_ATTEMPTS, allocate, next_external_id
from repository.inventory import BulkResult, HotelInventory

__all__ = [
    "ExternalIdExhaustedError",
    "RecordNotFoundError",
    "RepositoryError",
    "UniqueViolationError",
    "EntityType",
    "HotelStore",
    "InMemoryHotelStore",
    "SqlHotelStore",
    "EXTERNAL_ID_START",
    "MAX_ATTEMPTS",
    "allocate",
    "next_external_id",
    "BulkResult",
    "HotelInventory",
]
