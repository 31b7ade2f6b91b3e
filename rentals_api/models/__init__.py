"""
Database models for the rentals API.
Importing this package registers every table on Base.metadata.
"""

from rentals_api.models.owner import Owner
from rentals_api.models.user import User
from rentals_api.models.property import Property, PropertyStatus
from rentals_api.models.details import (
    PropertyPricing,
    PropertyLocation,
    PropertyHouseRules,
    PropertyPaymentMethods,
    DEFAULT_POPULAR_DESTINATION,
)
from rentals_api.models.image import PropertyImage
from rentals_api.models.catalog import Amenity, PropertyClass, PropertyAmenity, PropertyPropertyClass
from rentals_api.models.nearby import (
    PropertyNearbyPlace,
    PropertyNearbyBeach,
    PropertyNearbyAirport,
    PropertyNearbyRestaurant,
)
from rentals_api.models.apartment import PropertyApartment, ApartmentRoom
from rentals_api.models.booking import PropertyAvailability, Reservation, ReservationStatus, PaymentStatus

__all__ = [
    "Owner",
    "User",
    "Property",
    "PropertyStatus",
    "PropertyPricing",
    "PropertyLocation",
    "PropertyHouseRules",
    "PropertyPaymentMethods",
    "DEFAULT_POPULAR_DESTINATION",
    "PropertyImage",
    "Amenity",
    "PropertyClass",
    "PropertyAmenity",
    "PropertyPropertyClass",
    "PropertyNearbyPlace",
    "PropertyNearbyBeach",
    "PropertyNearbyAirport",
    "PropertyNearbyRestaurant",
    "PropertyApartment",
    "ApartmentRoom",
    "PropertyAvailability",
    "Reservation",
    "ReservationStatus",
    "PaymentStatus",
]
