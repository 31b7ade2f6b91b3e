"""
Pydantic schemas for the amenity and property class lookup tables.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List


def _strip_name(v):
    if v is None:
        return v
    if not v.strip():
        raise ValueError("Name cannot be empty")
    return v.strip()


class AmenityCreate(BaseModel):
    """Schema for creating an amenity."""

    name: str = Field(..., min_length=1, max_length=100, examples=["Piscina"])
    category: str = Field(
        "comum",
        max_length=50,
        description="Grouping used on the listing page (comum, apartamento, edificio, localizacao)",
        examples=["edificio"]
    )
    icon: Optional[str] = Field(None, max_length=50, description="Icon identifier", examples=["waves"])
    description: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _strip_name(v)


class AmenityUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, max_length=50)
    icon: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _strip_name(v)


class AmenityResponse(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True


class AmenityGroup(BaseModel):
    """Amenities of one category."""

    category: str
    amenities: List[AmenityResponse]


class PropertyClassCreate(BaseModel):
    """Schema for creating a property class."""

    name: str = Field(..., min_length=1, max_length=100, examples=["Imóvel em Destaque"])
    description: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _strip_name(v)


class PropertyClassUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _strip_name(v)


class PropertyClassResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool = True


class PropertyClassUsage(PropertyClassResponse):
    """Class with the number of properties tagged with it."""

    property_count: int
