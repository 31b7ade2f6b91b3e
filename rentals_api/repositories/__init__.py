"""
Repository layer for data access operations.
Each repository owns the queries and the commit/rollback handling for its tables.
"""

from rentals_api.repositories.base import BaseRepository
from rentals_api.repositories.user import UserRepository
from rentals_api.repositories.owner import OwnerRepository
from rentals_api.repositories.catalog import LookupRepository, AmenityRepository, PropertyClassRepository
from rentals_api.repositories.property import PropertyRepository, ListingFilters, UnknownReferenceError
from rentals_api.repositories.booking import AvailabilityRepository, ReservationRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "OwnerRepository",
    "LookupRepository",
    "AmenityRepository",
    "PropertyClassRepository",
    "PropertyRepository",
    "ListingFilters",
    "UnknownReferenceError",
    "AvailabilityRepository",
    "ReservationRepository",
]
