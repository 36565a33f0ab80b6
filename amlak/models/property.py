"""Property listing models."""

from enum import Enum
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, Field, field_validator

from amlak.utils.formatting import to_wire_number

T = TypeVar("T")

NO_CONSTRAINT = "all"


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"
    LAND = "land"
    COMMERCIAL = "commercial"


class PropertyStatus(str, Enum):
    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"
    OFF_MARKET = "off_market"


class ListingType(str, Enum):
    """Listing types stored by the backend."""
    SALE = "sale"
    RENT = "rent"


class FormListingType(str, Enum):
    """Listing types offered in forms and filters."""
    SALE = "sale"
    RENT = "rent"
    PARTNERSHIP = "partnership"


class PropertyImage(BaseModel):
    """Image attached to a property."""
    url: str
    id: Optional[str] = None
    key: Optional[str] = None
    is_featured: bool = False
    created_at: Optional[str] = None


class Property(BaseModel):
    """Property listing as returned by the backend."""
    id: str = Field(..., description="Property ID")
    title: str
    description: Optional[str] = None
    property_type: PropertyType
    status: PropertyStatus
    listing_type: ListingType
    address: str
    city: str
    district: Optional[str] = None
    area: Optional[str] = Field(None, description="Area in square meters, string encoded")
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    price: Optional[str] = Field(None, description="Price in toman, string encoded")
    features: dict[str, bool] = Field(default_factory=dict)
    images: list[PropertyImage] = Field(default_factory=list)
    featured_image: Optional[str] = None
    is_featured: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("area", "price", mode="before")
    @classmethod
    def _numbers_as_text(cls, value):
        # Decimal columns may come back as JSON numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("features", mode="before")
    @classmethod
    def _null_features(cls, value):
        return {} if value is None else value

    @field_validator("images", mode="before")
    @classmethod
    def _image_urls(cls, value):
        # Rows created from the admin form store plain URLs
        if value is None:
            return []
        return [{"url": item} if isinstance(item, str) else item for item in value]

    @property
    def cover_image(self) -> Optional[str]:
        """Featured image, falling back to the first gallery image."""
        if self.featured_image:
            return self.featured_image
        return self.images[0].url if self.images else None


class PaginatedResponse(BaseModel, Generic[T]):
    """Listing envelope."""
    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    results: list[T]


class UploadResponse(BaseModel):
    """Object storage upload result."""
    url: str


class PropertyCreate(BaseModel):
    """Payload accepted by the create operation."""
    title: str
    description: Optional[str] = None
    property_type: PropertyType
    status: PropertyStatus
    listing_type: FormListingType
    address: str
    city: str
    district: Optional[str] = None
    area: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    price: Optional[float] = None
    features: dict[str, bool] = Field(default_factory=dict)
    images: list[str] = Field(default_factory=list)
    featured_image: Optional[str] = None
    is_featured: bool = False


class PropertyFilters(BaseModel):
    """Public catalog filter state.

    ``"all"`` on property_type, listing_type and bedrooms, and an empty string
    everywhere else, mean no constraint.
    """
    property_type: Optional[str] = NO_CONSTRAINT
    listing_type: Optional[str] = NO_CONSTRAINT
    city: Optional[str] = ""
    min_area: Optional[str] = ""
    max_area: Optional[str] = ""
    min_price: Optional[str] = ""
    max_price: Optional[str] = ""
    bedrooms: Optional[str] = NO_CONSTRAINT

    @field_validator("*", mode="before")
    @classmethod
    def _numbers_as_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return to_wire_number(value)
        return value
