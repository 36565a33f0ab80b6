"""HTTP client for the listing backend with uniform headers and error handling."""

import json
from typing import Any, Mapping, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from amlak.services.session_store import SessionStore
from amlak.utils.config import ApiConfig, get_api_config
from amlak.utils.errors import ContractViolationError, RequestError, ResponseParseError
from amlak.utils.logging import (
    get_correlation_id,
    get_structured_logger,
    log_timing,
    mask_sensitive_data,
)
from amlak.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)

API_KEY_HEADER = "apikey"
DEFAULT_ERROR_MESSAGE = "Request failed"

M = TypeVar("M", bound=BaseModel)


def parse_response(model: Type[M], data: Any, what: str) -> M:
    """Validate a decoded response body against the expected model."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ContractViolationError(f"Unexpected {what} response: {e}") from e


class ApiClient:
    """Builds, sends and normalizes backend requests.

    Usable as an async context manager; the underlying connection pool is
    closed on exit when the client created it.
    """

    def __init__(
        self,
        session_store: SessionStore,
        config: Optional[ApiConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session_store = session_store
        self.config = config or get_api_config()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            transport=transport,
            timeout=self.config.timeout_seconds,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def build_url(self, path: str) -> str:
        return f"{self.config.base_url}{path}"

    def build_headers(self, auth: bool = False, extra: Optional[Mapping[str, str]] = None) -> dict[str, str]:
        """Standard headers plus caller extras; bearer auth only when a token is stored."""
        headers = {"Accept": "application/json"}
        if extra:
            headers.update(extra)

        if self.config.api_key:
            headers[API_KEY_HEADER] = self.config.api_key

        correlation_id = get_correlation_id()
        if correlation_id:
            headers[LoggingConfig.LOG_CORRELATION_ID_HEADER] = correlation_id

        if auth:
            token = self.session_store.get_access_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        return headers

    async def request(
        self,
        path: str,
        method: str = "GET",
        *,
        auth: bool = False,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
        json_body: Any = None,
        files: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Returns None for 204 responses. Raises RequestError for non-2xx
        statuses and transport failures, ResponseParseError for a success
        body that is not JSON.
        """
        url = self.build_url(path)
        request_headers = self.build_headers(auth, headers)

        with log_timing("api_request", logger=logger, method=method, path=path):
            try:
                response = await self._client.request(
                    method,
                    url,
                    headers=request_headers,
                    params=params,
                    json=json_body,
                    files=files,
                )
            except httpx.TransportError as e:
                logger.error("Request did not complete", method=method, path=path, error=str(e))
                raise RequestError(0, str(e) or DEFAULT_ERROR_MESSAGE) from e

        if not response.is_success:
            message = response.text
            logger.warning(
                "Request rejected by backend",
                method=method,
                path=path,
                status_code=response.status_code,
                response_preview=mask_sensitive_data(message[:200]),
            )
            raise RequestError(response.status_code, message or DEFAULT_ERROR_MESSAGE)

        logger.info("Request succeeded", method=method, path=path, status_code=response.status_code)

        if response.status_code == 204:
            return None

        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"Invalid JSON in response to {method} {path}: {e}") from e

    async def request_form(
        self,
        path: str,
        files: Mapping[str, Any],
        *,
        auth: bool = False,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """POST a multipart form; same header and error handling as request()."""
        return await self.request(path, "POST", auth=auth, headers=headers, files=files)
