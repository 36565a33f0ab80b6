"""Password sign-in and sign-out against the backend token endpoints."""

from typing import Optional

from amlak.models.forms import SignInForm, validate_form
from amlak.models.user import Session, TokenResponse, User
from amlak.services.api_client import ApiClient, parse_response
from amlak.services.session_store import SessionStore
from amlak.utils.logging import get_structured_logger, mask_sensitive_data

logger = get_structured_logger(__name__)

TOKEN_PATH = "/auth/v1/token?grant_type=password"
LOGOUT_PATH = "/auth/v1/logout"


class AuthService:
    """Moves the client between signed-out and signed-in.

    There is no token refresh; an expired access token shows up as a
    RequestError from whichever call used it.
    """

    def __init__(self, client: ApiClient, session_store: SessionStore):
        self.client = client
        self.session_store = session_store

    async def sign_in_with_password(self, email: str, password: str) -> User:
        """Exchange credentials for tokens, store the session, return the user."""
        data = await self.client.request(
            TOKEN_PATH,
            "POST",
            headers={"Content-Type": "application/json"},
            json_body={"email": email, "password": password, "grant_type": "password"},
        )
        token = parse_response(TokenResponse, data, "token")

        self.session_store.store(
            Session(
                access_token=token.access_token,
                refresh_token=token.refresh_token,
                user=token.user,
            )
        )
        logger.info(
            "Signed in",
            user_id=token.user.id,
            email=mask_sensitive_data(token.user.email),
            role=token.user.role.value,
        )
        return token.user

    async def sign_in_form(self, email: str, password: str) -> User:
        """Validate sign-in input locally, then sign in."""
        form = validate_form(SignInForm, {"email": email, "password": password})
        return await self.sign_in_with_password(form.email, form.password)

    async def sign_out(self) -> None:
        """Revoke the refresh token and clear the local session.

        With no refresh token stored this only clears. If the logout call
        fails the error propagates and the session is kept, so the caller can
        retry or clear explicitly.
        """
        refresh_token = self.session_store.get_refresh_token()
        if not refresh_token:
            self.session_store.clear()
            logger.info("Sign-out without refresh token, cleared local session")
            return

        await self.client.request(
            LOGOUT_PATH,
            "POST",
            auth=True,
            headers={"Content-Type": "application/json"},
            json_body={"refresh_token": refresh_token},
        )

        self.session_store.clear()
        logger.info("Signed out")

    def current_user(self) -> Optional[User]:
        return self.session_store.get_user()
