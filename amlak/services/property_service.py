"""Property listing queries, mutations and image uploads."""

import mimetypes
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO, Optional, Sequence, Union
from urllib.parse import quote

from pydantic import ValidationError
from ulid import ULID

from amlak.models.forms import PropertyForm, validate_form
from amlak.models.property import (
    PaginatedResponse,
    Property,
    PropertyCreate,
    PropertyFilters,
    UploadResponse,
)
from amlak.services.api_client import ApiClient, parse_response
from amlak.services.property_filters import build_listing_params, map_listing_type
from amlak.utils.errors import AmlakError, ContractViolationError, ImageUploadError
from amlak.utils.formatting import to_wire_number
from amlak.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

PROPERTIES_PATH = "/rest/v1/properties"
IMAGE_BUCKET = "property-images"
STORAGE_OBJECT_PATH = "/storage/v1/object"

ImageSource = Union[bytes, BinaryIO, str, os.PathLike]
# A path, or (original file name, contents)
ImageFile = Union[str, os.PathLike, tuple[str, Union[bytes, BinaryIO]]]


def generate_image_filename(original_name: str, now: Optional[datetime] = None) -> str:
    """Storage object name: a lowercase ULID plus the original extension."""
    now = now or datetime.now(timezone.utc)
    stem = str(ULID.from_datetime(now)).lower()
    suffix = Path(original_name).suffix.lower()
    return f"{stem}{suffix}"


def build_create_body(payload: PropertyCreate) -> dict[str, Any]:
    """Wire body for the create call.

    Area and price travel as strings; a missing price is sent as "0".
    """
    body = payload.model_dump(mode="json")
    body["listing_type"] = map_listing_type(payload.listing_type)
    body["area"] = to_wire_number(payload.area) if payload.area else None
    body["price"] = to_wire_number(payload.price) if payload.price else "0"
    return body


def _first_property(data: Any) -> Optional[Property]:
    if data is None:
        return None
    if isinstance(data, list):
        return parse_response(Property, data[0], "property") if data else None
    if isinstance(data, dict) and "results" in data:
        results = data.get("results") or []
        return parse_response(Property, results[0], "property") if results else None
    return parse_response(Property, data, "property")


def _read_image(source: ImageSource) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, (str, os.PathLike)):
        return Path(source).read_bytes()
    return source.read()


class PropertyService:
    """Listing operations on top of ApiClient."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def _fetch_list(self, params: Optional[dict[str, str]], auth: bool) -> list[Property]:
        data = await self.client.request(PROPERTIES_PATH, params=params, auth=auth)
        page = parse_response(PaginatedResponse[Property], data, "property listing")
        return page.results

    async def fetch_properties(self, filters: Optional[PropertyFilters] = None) -> list[Property]:
        """Public catalog: available listings matching the filters."""
        params = build_listing_params(filters)
        properties = await self._fetch_list(params, auth=False)
        logger.info("Fetched catalog", filter_params=params, result_count=len(properties))
        return properties

    async def fetch_property_by_id(self, property_id: str) -> Optional[Property]:
        data = await self.client.request(PROPERTIES_PATH, params={"id": property_id})
        return _first_property(data)

    async def fetch_admin_properties(self) -> list[Property]:
        """Every listing the signed-in user may see, unfiltered."""
        properties = await self._fetch_list(None, auth=True)
        logger.info("Fetched admin listings", result_count=len(properties))
        return properties

    async def create_property(self, payload: Union[PropertyCreate, dict[str, Any]]) -> Property:
        """Create a listing and return the stored representation."""
        if not isinstance(payload, PropertyCreate):
            try:
                payload = PropertyCreate.model_validate(payload)
            except ValidationError as e:
                raise ContractViolationError(f"Invalid property payload: {e}") from e

        data = await self.client.request(
            PROPERTIES_PATH,
            "POST",
            auth=True,
            headers={"Content-Type": "application/json", "Prefer": "return=representation"},
            json_body=build_create_body(payload),
        )
        # Representation may come back as a one-row array
        if isinstance(data, list):
            if not data:
                raise ContractViolationError("Create returned no representation")
            data = data[0]
        created = parse_response(Property, data, "created property")
        logger.info("Property created", property_id=created.id, image_count=len(payload.images))
        return created

    async def create_from_form(
        self,
        form: Union[PropertyForm, dict[str, Any]],
        images: Optional[list[str]] = None,
    ) -> Property:
        """Validate admin form input, then create the listing."""
        if not isinstance(form, PropertyForm):
            form = validate_form(PropertyForm, form)
        return await self.create_property(form.to_payload(images))

    async def delete_property(self, property_id: str) -> None:
        """Permanently delete a listing."""
        await self.client.request(
            f"{PROPERTIES_PATH}/{quote(str(property_id), safe='')}",
            "DELETE",
            auth=True,
        )
        logger.info("Property deleted", property_id=property_id)

    async def upload_property_image(self, file: ImageSource, filename: str) -> str:
        """Upload one image under the given object name and return its public URL.

        The name is used as-is; callers pick unique names.
        """
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        data = await self.client.request_form(
            f"{STORAGE_OBJECT_PATH}/{IMAGE_BUCKET}/{quote(filename, safe='')}",
            {"file": (filename, _read_image(file), content_type)},
            auth=True,
        )
        return parse_response(UploadResponse, data, "upload").url

    async def upload_property_images(self, files: Sequence[ImageFile]) -> list[str]:
        """Upload images one after another, returning URLs in input order.

        Stops at the first failure and raises ImageUploadError with the URLs
        already uploaded. Those objects stay in storage.
        """
        urls: list[str] = []
        for item in files:
            if isinstance(item, tuple):
                original_name, source = item
            else:
                original_name, source = Path(item).name, item
            object_name = generate_image_filename(original_name)

            try:
                urls.append(await self.upload_property_image(source, object_name))
            except (AmlakError, OSError) as e:
                logger.error(
                    "Image upload failed, earlier uploads kept",
                    object_name=object_name,
                    uploaded_count=len(urls),
                    error=str(e),
                )
                raise ImageUploadError(object_name, urls, e) from e

        logger.info("Images uploaded", uploaded_count=len(urls))
        return urls
