"""Admin and sign-in form models.

Forms hold raw string input the way the panel collects it and are validated
before any request is sent. Error messages are the Persian strings shown next
to each field.
"""

import math
import re
from typing import Any, Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from amlak.models.property import (
    FormListingType,
    PropertyCreate,
    PropertyStatus,
    PropertyType,
)
from amlak.utils.errors import FormValidationError
from amlak.utils.formatting import to_latin_digits

F = TypeVar("F", bound=BaseModel)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 5
DEFAULT_CITY = "تهران"
AMENITIES = (
    "has_elevator",
    "has_storage",
    "has_balcony",
    "has_pool",
    "has_gym",
    "has_security",
)


def _fail(message: str):
    raise PydanticCustomError("form_field", message)


def validate_form(form_cls: Type[F], data: dict[str, Any]) -> F:
    """Build a form model, turning pydantic errors into FormValidationError."""
    try:
        return form_cls.model_validate(data)
    except ValidationError as e:
        errors: dict[str, str] = {}
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "__root__"
            errors.setdefault(field, error["msg"])
        raise FormValidationError(errors) from e


class SignInForm(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.match(value):
            _fail("ایمیل معتبر وارد کنید")
        return value

    @field_validator("password")
    @classmethod
    def _long_enough(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            _fail(f"رمز عبور باید حداقل {MIN_PASSWORD_LENGTH} کاراکتر باشد")
        return value


def _to_float(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    number = float(to_latin_digits(value).replace(",", ""))
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return number


def _to_int(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    return int(to_latin_digits(value))


class PropertyForm(BaseModel):
    """New listing form."""
    title: str
    description: Optional[str] = ""
    property_type: PropertyType = PropertyType.APARTMENT
    status: PropertyStatus = PropertyStatus.AVAILABLE
    listing_type: FormListingType = FormListingType.SALE
    address: str
    city: str = DEFAULT_CITY
    district: Optional[str] = ""
    area: str
    bedrooms: Optional[str] = "0"
    bathrooms: Optional[str] = "0"
    price: str
    has_elevator: bool = False
    has_storage: bool = False
    has_balcony: bool = False
    has_pool: bool = False
    has_gym: bool = False
    has_security: bool = False
    is_featured: bool = False

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        if len(value.strip()) < 2:
            _fail("عنوان را وارد کنید")
        return value.strip()

    @field_validator("address")
    @classmethod
    def _address(cls, value: str) -> str:
        if len(value.strip()) < 2:
            _fail("آدرس را وارد کنید")
        return value.strip()

    @field_validator("city")
    @classmethod
    def _city(cls, value: str) -> str:
        if not value.strip():
            _fail("شهر را وارد کنید")
        return value.strip()

    @field_validator("area")
    @classmethod
    def _area(cls, value: str) -> str:
        value = value.strip()
        if not value:
            _fail("متراژ الزامی است")
        try:
            _to_float(value)
        except ValueError:
            _fail("متراژ باید عدد باشد")
        return value

    @field_validator("price")
    @classmethod
    def _price(cls, value: str) -> str:
        value = value.strip()
        if not value:
            _fail("قیمت الزامی است")
        try:
            _to_float(value)
        except ValueError:
            _fail("قیمت باید عدد باشد")
        return value

    @field_validator("bedrooms", "bathrooms")
    @classmethod
    def _room_count(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return value
        value = value.strip()
        try:
            _to_int(value)
        except ValueError:
            _fail("تعداد باید عدد صحیح باشد")
        return value

    def to_payload(self, images: Optional[list[str]] = None) -> PropertyCreate:
        """Convert form input into a create payload with the uploaded image URLs."""
        images = list(images or [])
        return PropertyCreate(
            title=self.title,
            description=self.description or None,
            property_type=self.property_type,
            status=self.status,
            listing_type=self.listing_type,
            address=self.address,
            city=self.city,
            district=self.district or None,
            area=_to_float(self.area),
            bedrooms=_to_int(self.bedrooms),
            bathrooms=_to_int(self.bathrooms),
            price=_to_float(self.price),
            features={name: getattr(self, name) for name in AMENITIES},
            images=images,
            featured_image=images[0] if images else None,
            is_featured=self.is_featured,
        )
