from models.room_type import Capacity, RoomType, RoomTypeStatus
from models.hotel import Address, ContactInfo, Hotel, HotelPolicies, HotelStatus
from models.records import (
    HotelInsert,
    HotelRecord,
    HotelUpdate,
    RoomTypeInsert,
    RoomTypeRecord,
    RoomTypeUpdate,
)
from models.filters import (
    DateRange,
    HotelFilters,
    HotelQuery,
    PriceRange,
    SortDirection,
    SortField,
    default_filters,
)

__all__ = [
    "Capacity",
    "RoomType",
    "RoomTypeStatus",
    "Address",
    "ContactInfo",
    "Hotel",
    "HotelPolicies",
    "HotelStatus",
    "HotelInsert",
    "HotelRecord",
    "HotelUpdate",
    "RoomTypeInsert",
    "RoomTypeRecord",
    "RoomTypeUpdate",
    "DateRange",
    "HotelFilters",
    "HotelQuery",
    "PriceRange",
    "SortDirection",
    "SortField",
    "default_filters",
]
