"""One-stop wiring of session, HTTP client and services."""

from typing import Optional

import httpx

from amlak.services.api_client import ApiClient
from amlak.services.auth_service import AuthService
from amlak.services.property_service import PropertyService
from amlak.services.session_store import SessionStore, create_session_store
from amlak.utils.config import ApiConfig, get_api_config
from amlak.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


class Backend:
    """Async context manager holding one client context.

    >>> async with Backend() as backend:
    ...     await backend.auth.sign_in_with_password(email, password)
    ...     listings = await backend.properties.fetch_admin_properties()
    """

    def __init__(
        self,
        config: Optional[ApiConfig] = None,
        session_store: Optional[SessionStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or get_api_config()
        self.session = session_store or create_session_store(self.config.session_file)
        self.api = ApiClient(self.session, self.config, transport=transport)
        self.auth = AuthService(self.api, self.session)
        self.properties = PropertyService(self.api)
        logger.debug("Backend initialized", base_url=self.config.base_url)

    async def __aenter__(self) -> "Backend":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Backend operation error",
                error=str(exc_val),
                error_type=exc_type.__name__,
            )
        await self.api.aclose()
        return False
