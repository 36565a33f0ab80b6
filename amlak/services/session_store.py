"""Sign-in session persistence over a pluggable key/value storage."""

import json
import os
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from pydantic import ValidationError

from amlak.models.user import Session, User
from amlak.utils.logging import get_structured_logger, mask_token

logger = get_structured_logger(__name__)

ACCESS_TOKEN_KEY = "auth_access_token"
REFRESH_TOKEN_KEY = "auth_refresh_token"
USER_KEY = "auth_user"

SESSION_KEYS = (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY)
SESSION_FILE_MODE = 0o600


class SessionStorage(Protocol):
    """Minimal string key/value storage, same surface as a browser localStorage."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Storage that lives as long as the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage:
    """Storage persisted as a JSON object in a single file.

    Every call re-reads the file, so separate processes sharing the path see
    each other's writes. An unreadable or corrupt file reads as empty.
    """

    def __init__(self, path: Union[str, os.PathLike]):
        self.path = Path(path).expanduser()

    def _load(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning("Session file unreadable", path=str(self.path), error=str(e))
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Session file is not valid JSON, ignoring", path=str(self.path))
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Tokens inside; owner read/write only
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SESSION_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.chmod(self.path, SESSION_FILE_MODE)

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class NullStorage:
    """Storage for contexts with no persistent client state; reads nothing, keeps nothing."""

    def get_item(self, key: str) -> Optional[str]:
        return None

    def set_item(self, key: str, value: str) -> None:
        return None

    def remove_item(self, key: str) -> None:
        return None


class SessionStore:
    """Reads and writes the access token, refresh token and user.

    Nothing is cached in memory; each read goes to storage. The store does
    not check whether tokens are still valid.
    """

    def __init__(self, storage: Optional[SessionStorage] = None):
        self.storage: SessionStorage = storage if storage is not None else NullStorage()

    def store(self, session: Session) -> None:
        self.storage.set_item(ACCESS_TOKEN_KEY, session.access_token)
        self.storage.set_item(REFRESH_TOKEN_KEY, session.refresh_token)
        self.storage.set_item(USER_KEY, session.user.model_dump_json())
        logger.debug(
            "Session stored",
            user_id=session.user.id,
            access_token=mask_token(session.access_token),
        )

    def clear(self) -> None:
        for key in SESSION_KEYS:
            self.storage.remove_item(key)
        logger.debug("Session cleared")

    def get_access_token(self) -> Optional[str]:
        return self.storage.get_item(ACCESS_TOKEN_KEY) or None

    def get_refresh_token(self) -> Optional[str]:
        return self.storage.get_item(REFRESH_TOKEN_KEY) or None

    def get_user(self, as_model: bool = True) -> Optional[Union[User, dict[str, Any]]]:
        """Stored user, or None when unset or unreadable."""
        raw = self.storage.get_item(USER_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored user is not valid JSON")
            return None
        if not as_model:
            return data
        try:
            return User.model_validate(data)
        except ValidationError:
            logger.warning("Stored user does not match the user shape")
            return None

    def get_session(self) -> Optional[Session]:
        """Full session when all three parts are present."""
        access_token = self.get_access_token()
        refresh_token = self.get_refresh_token()
        user = self.get_user()
        if not (access_token and refresh_token and user):
            return None
        return Session(access_token=access_token, refresh_token=refresh_token, user=user)

    def is_authenticated(self) -> bool:
        return self.get_user() is not None


def create_session_store(session_file: Optional[str] = None) -> SessionStore:
    """Session store backed by a file when a path is given, otherwise in memory."""
    if session_file:
        return SessionStore(FileStorage(session_file))
    return SessionStore(MemoryStorage())
