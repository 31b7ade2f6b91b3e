"""
Pydantic schemas for property requests and responses.
A listing is submitted as one payload: root fields plus nested sections for
pricing, location, images, amenities, classes, nearby places, apartments,
house rules and payment methods.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
from decimal import Decimal
from rentals_api.models.property import PropertyStatus
from rentals_api.models.details import DEFAULT_POPULAR_DESTINATION
from rentals_api.schemas.owner import OwnerPublicResponse
from rentals_api.schemas.catalog import AmenityResponse, PropertyClassResponse
import math
import re

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

ROOT_FIELDS = (
    "title", "short_description", "full_description", "about_building",
    "max_guests", "bedrooms", "bathrooms", "parking_spaces", "area_m2",
    "allows_pets", "property_style", "property_class", "bed_types",
    "minimum_stay", "maximum_stay", "check_in_time", "check_out_time",
    "pet_policy", "cancellation_policy", "external_link",
)

# Root fields that map to NOT NULL columns
REQUIRED_ROOT_FIELDS = (
    "title", "short_description", "max_guests", "bedrooms", "bathrooms",
    "parking_spaces", "allows_pets", "property_class", "minimum_stay",
)

SECTION_FIELDS = (
    "pricing", "location", "house_rules", "payment_methods", "images",
    "amenity_ids", "class_ids", "nearby_places", "nearby_beaches",
    "nearby_airports", "nearby_restaurants", "apartments",
)


# Sections

class PricingSection(BaseModel):
    """Prices in BRL. Fees default to zero."""

    monthly_rent: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, examples=[3500.00])
    daily_rate: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, examples=[350.00])
    condominium_fee: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    iptu_fee: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    monthly_cleaning_fee: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    other_fees: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    includes_kitchen_utensils: bool = False
    includes_furniture: bool = False
    includes_electricity: bool = False
    includes_internet: bool = False
    includes_linens: bool = False
    includes_water: bool = False


class LocationSection(BaseModel):
    full_address: str = Field(..., min_length=1, examples=["Av. Beira Mar, 1000"])
    neighborhood: str = Field(..., min_length=1, max_length=100, examples=["Meireles"])
    municipality: str = Field(..., min_length=1, max_length=100)
    city: str = Field(..., min_length=1, max_length=100, examples=["Fortaleza"])
    state: str = Field(..., min_length=1, max_length=50, examples=["CE"])
    zip_code: str = Field(..., min_length=1, max_length=10, examples=["60165-121"])
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)
    popular_destination: str = Field(DEFAULT_POPULAR_DESTINATION, max_length=100)

    @field_validator('full_address', 'neighborhood', 'municipality', 'city', 'state', 'zip_code')
    @classmethod
    def strip_text(cls, v):
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @model_validator(mode='after')
    def validate_coordinates(self):
        """Validate that both coordinates are provided together or both are None."""
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Both latitude and longitude must be provided together, or both must be None")
        return self


class HouseRulesSection(BaseModel):
    check_in_rule: Optional[str] = None
    check_out_rule: Optional[str] = None
    cancellation_rule: Optional[str] = None
    children_rule: Optional[str] = None
    pets_rule: Optional[str] = None
    beds_rule: Optional[str] = None
    age_restriction_rule: Optional[str] = None
    groups_rule: Optional[str] = None


class PaymentMethodsSection(BaseModel):
    accepts_visa: bool = False
    accepts_american_express: bool = False
    accepts_master_card: bool = False
    accepts_maestro: bool = False
    accepts_elo: bool = False
    accepts_diners_club: bool = False
    accepts_pix: bool = False
    accepts_cash: bool = False


class ImageInput(BaseModel):
    """Image reference. The first image in the list becomes the cover."""

    image_url: str = Field(..., min_length=1, max_length=1000, examples=["/uploads/properties/3f2c.jpg"])
    alt_text: Optional[str] = Field(None, max_length=255)


class NearbyPoint(BaseModel):
    """Place of interest near the listing."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Praia de Iracema"])
    distance: str = Field(..., min_length=1, max_length=50, examples=["2,5 km"])


class ApartmentRoomSection(BaseModel):
    room_number: int = Field(..., ge=1)
    double_beds: int = Field(0, ge=0)
    large_beds: int = Field(0, ge=0)
    extra_large_beds: int = Field(0, ge=0)
    single_beds: int = Field(0, ge=0)
    sofa_beds: int = Field(0, ge=0)


class ApartmentSection(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Apartamento 101"])
    total_bathrooms: int = Field(0, ge=0)
    has_living_room: bool = False
    living_room_has_sofa_bed: bool = False
    has_kitchen: bool = False
    kitchen_has_stove: bool = False
    kitchen_has_fridge: bool = False
    kitchen_has_minibar: bool = False
    has_balcony: bool = False
    balcony_has_sea_view: bool = False
    has_crib: bool = False
    rooms: List[ApartmentRoomSection] = Field(default_factory=list)


# Requests

class PropertyFields(BaseModel):
    """Root listing fields, all optional so that updates can send a subset."""

    title: Optional[str] = Field(None, min_length=3, max_length=255, examples=["Casa pé na areia no Cumbuco"])
    short_description: Optional[str] = Field(None, min_length=1)
    full_description: Optional[str] = None
    about_building: Optional[str] = None
    max_guests: Optional[int] = Field(None, ge=1, le=100)
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    parking_spaces: Optional[int] = Field(None, ge=0, le=50)
    area_m2: Optional[Decimal] = Field(None, gt=0, max_digits=8, decimal_places=2)
    allows_pets: Optional[bool] = None
    property_style: Optional[str] = Field(None, max_length=100, examples=["Casa"])
    property_class: Optional[str] = Field(None, max_length=50)
    bed_types: Optional[str] = None
    minimum_stay: Optional[int] = Field(None, ge=1, description="Minimum stay in nights")
    maximum_stay: Optional[int] = Field(None, ge=1, description="Maximum stay in days")
    check_in_time: Optional[str] = Field(None, examples=["14:00"])
    check_out_time: Optional[str] = Field(None, examples=["11:00"])
    pet_policy: Optional[str] = None
    cancellation_policy: Optional[str] = None
    external_link: Optional[str] = Field(None, max_length=500)

    # Sections. None leaves a section untouched on update; a list replaces it.
    pricing: Optional[PricingSection] = None
    location: Optional[LocationSection] = None
    house_rules: Optional[HouseRulesSection] = None
    payment_methods: Optional[PaymentMethodsSection] = None
    images: Optional[List[ImageInput]] = None
    amenity_ids: Optional[List[int]] = None
    class_ids: Optional[List[int]] = None
    nearby_places: Optional[List[NearbyPoint]] = None
    nearby_beaches: Optional[List[NearbyPoint]] = None
    nearby_airports: Optional[List[NearbyPoint]] = None
    nearby_restaurants: Optional[List[NearbyPoint]] = None
    apartments: Optional[List[ApartmentSection]] = None

    @field_validator('title', 'short_description')
    @classmethod
    def validate_text(cls, v):
        if v is not None:
            if not v.strip():
                raise ValueError("Field cannot be empty")
            return v.strip()
        return v

    @field_validator('check_in_time', 'check_out_time')
    @classmethod
    def validate_time(cls, v):
        """Times are stored as HH:MM."""
        if v is not None and not TIME_PATTERN.match(v):
            raise ValueError("Time must use the HH:MM format")
        return v

    @model_validator(mode='after')
    def validate_stay_range(self):
        if self.minimum_stay is not None and self.maximum_stay is not None:
            if self.maximum_stay < self.minimum_stay:
                raise ValueError("maximum_stay cannot be shorter than minimum_stay")
        return self


class PropertyCreate(PropertyFields):
    """Schema for creating a listing with all of its sections."""

    title: str = Field(..., min_length=3, max_length=255, examples=["Casa pé na areia no Cumbuco"])
    short_description: str = Field(..., min_length=1)
    max_guests: int = Field(..., ge=1, le=100)
    bedrooms: int = Field(..., ge=0, le=50)
    bathrooms: int = Field(..., ge=0, le=50)
    parking_spaces: int = Field(0, ge=0, le=50)
    allows_pets: bool = False
    property_class: str = Field("Normal", max_length=50)
    minimum_stay: int = Field(1, ge=1, description="Minimum stay in nights")

    pricing: PricingSection
    location: LocationSection
    images: List[ImageInput] = Field(default_factory=list)
    amenity_ids: List[int] = Field(default_factory=list)
    class_ids: List[int] = Field(default_factory=list)
    nearby_places: List[NearbyPoint] = Field(default_factory=list)
    nearby_beaches: List[NearbyPoint] = Field(default_factory=list)
    nearby_airports: List[NearbyPoint] = Field(default_factory=list)
    nearby_restaurants: List[NearbyPoint] = Field(default_factory=list)
    apartments: List[ApartmentSection] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Casa pé na areia no Cumbuco",
                "short_description": "Casa com piscina a 50 m da praia",
                "max_guests": 8,
                "bedrooms": 4,
                "bathrooms": 3,
                "allows_pets": True,
                "property_style": "Casa",
                "minimum_stay": 2,
                "pricing": {"monthly_rent": 6000.00, "daily_rate": 450.00},
                "location": {
                    "full_address": "Rua das Dunas, 20",
                    "neighborhood": "Cumbuco",
                    "municipality": "Caucaia",
                    "city": "Caucaia",
                    "state": "CE",
                    "zip_code": "61619-000",
                    "popular_destination": "Cumbuco"
                },
                "images": [{"image_url": "/uploads/properties/cover.jpg"}],
                "amenity_ids": [1, 2],
                "nearby_beaches": [{"name": "Praia do Cumbuco", "distance": "50 m"}]
            }
        }
    }


class PropertyUpdate(PropertyFields):
    """
    Partial update. Root fields that are sent are written; sections that are sent
    replace the stored ones, and sections left out are kept.
    """

    @model_validator(mode='after')
    def reject_null_required_fields(self):
        for name in REQUIRED_ROOT_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class PropertyStatusUpdate(BaseModel):
    status: PropertyStatus = Field(..., description="active publishes the listing, pending hides it")


def split_property_payload(payload: PropertyFields, partial: bool = False) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Split a listing payload into root column values and child sections.

    With partial=True only the fields the client actually sent are returned,
    which is what update semantics need.
    """
    root = payload.model_dump(include=set(ROOT_FIELDS), exclude_unset=partial)
    sections = payload.model_dump(include=set(SECTION_FIELDS), exclude_unset=partial)
    sections = {name: value for name, value in sections.items() if value is not None}
    return root, sections


# Responses

class PricingResponse(BaseModel):
    monthly_rent: float
    daily_rate: float
    condominium_fee: Optional[float] = None
    iptu_fee: Optional[float] = None
    monthly_cleaning_fee: Optional[float] = None
    other_fees: Optional[float] = None
    includes_kitchen_utensils: bool
    includes_furniture: bool
    includes_electricity: bool
    includes_internet: bool
    includes_linens: bool
    includes_water: bool


class LocationResponse(BaseModel):
    full_address: str
    neighborhood: str
    municipality: str
    city: str
    state: str
    zip_code: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    popular_destination: str


class PropertyImageResponse(BaseModel):
    id: int
    image_url: str
    alt_text: Optional[str] = None
    display_order: int
    is_main: bool


class ApartmentResponse(ApartmentSection):
    id: int


class PropertyDetailResponse(BaseModel):
    """Full listing with every section."""

    id: str
    owner_id: Optional[str] = None
    title: str
    short_description: str
    full_description: Optional[str] = None
    about_building: Optional[str] = None
    max_guests: int
    bedrooms: int
    bathrooms: int
    parking_spaces: int
    area_m2: Optional[float] = None
    allows_pets: bool
    property_style: Optional[str] = None
    property_class: str
    bed_types: Optional[str] = None
    minimum_stay: int
    maximum_stay: Optional[int] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    pet_policy: Optional[str] = None
    cancellation_policy: Optional[str] = None
    external_link: Optional[str] = None
    status: PropertyStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    owner: Optional[OwnerPublicResponse] = None
    pricing: Optional[PricingResponse] = None
    location: Optional[LocationResponse] = None
    house_rules: Optional[HouseRulesSection] = None
    payment_methods: Optional[PaymentMethodsSection] = None
    images: List[PropertyImageResponse] = Field(default_factory=list)
    amenities: List[AmenityResponse] = Field(default_factory=list)
    classes: List[PropertyClassResponse] = Field(default_factory=list)
    nearby_places: List[NearbyPoint] = Field(default_factory=list)
    nearby_beaches: List[NearbyPoint] = Field(default_factory=list)
    nearby_airports: List[NearbyPoint] = Field(default_factory=list)
    nearby_restaurants: List[NearbyPoint] = Field(default_factory=list)
    apartments: List[ApartmentResponse] = Field(default_factory=list)


class PropertySummaryResponse(BaseModel):
    """Card data used by listings: only the cover image is included."""

    id: str
    owner_id: Optional[str] = None
    title: str
    short_description: str
    max_guests: int
    bedrooms: int
    bathrooms: int
    allows_pets: bool
    property_style: Optional[str] = None
    status: PropertyStatus
    daily_rate: Optional[float] = None
    monthly_rent: Optional[float] = None
    city: Optional[str] = None
    neighborhood: Optional[str] = None
    popular_destination: Optional[str] = None
    main_image_url: Optional[str] = None
    class_names: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class PropertyListResponse(BaseModel):
    """Schema for paginated property list response."""

    properties: List[PropertySummaryResponse] = Field(..., description="List of properties")
    total: int = Field(..., description="Total number of properties matching the criteria", examples=[150])
    page: int = Field(..., description="Current page number", examples=[1])
    page_size: int = Field(..., description="Number of properties per page", examples=[20])
    total_pages: int = Field(..., description="Total number of pages", examples=[8])
    has_next: bool = Field(..., description="Whether there are more pages")
    has_previous: bool = Field(..., description="Whether there are previous pages")

    @classmethod
    def from_page(cls, properties: list, total: int, page: int, page_size: int) -> "PropertyListResponse":
        total_pages = math.ceil(total / page_size) if total > 0 else 1
        return cls(
            properties=[PropertySummaryResponse.model_validate(prop.to_summary_dict()) for prop in properties],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1
        )


class FeaturedPropertiesResponse(BaseModel):
    """Active listings tagged with a property class."""

    class_name: str
    properties: List[PropertySummaryResponse]
    total: int
