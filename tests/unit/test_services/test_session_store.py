"""Tests for session persistence."""

import json
import os
import stat

import pytest

from amlak.models.user import Session, User
from amlak.services.session_store import (
    ACCESS_TOKEN_KEY,
    FileStorage,
    MemoryStorage,
    NullStorage,
    REFRESH_TOKEN_KEY,
    SessionStore,
    USER_KEY,
    create_session_store,
)


def make_session(user: User) -> Session:
    return Session(access_token="AT", refresh_token="RT", user=user)


@pytest.mark.unit
def test_store_then_read_back(session_store, sample_user):
    """Test stored values are returned by the getters."""
    session_store.store(make_session(sample_user))

    assert session_store.get_access_token() == "AT"
    assert session_store.get_refresh_token() == "RT"
    assert session_store.get_user() == sample_user
    assert session_store.is_authenticated() is True


@pytest.mark.unit
def test_store_writes_fixed_keys(session_store, memory_storage, sample_user):
    """Test the three storage keys and the serialized user."""
    session_store.store(make_session(sample_user))

    assert memory_storage.data[ACCESS_TOKEN_KEY] == "AT"
    assert memory_storage.data[REFRESH_TOKEN_KEY] == "RT"
    assert json.loads(memory_storage.data[USER_KEY]) == {
        "id": "1",
        "email": "a@b.com",
        "role": "admin",
        "is_active": True,
    }


@pytest.mark.unit
def test_get_user_raw_mapping(session_store, sample_user):
    session_store.store(make_session(sample_user))

    assert session_store.get_user(as_model=False)["email"] == "a@b.com"


@pytest.mark.unit
def test_clear_removes_everything(signed_in_store, memory_storage):
    """Test clear leaves nothing behind."""
    signed_in_store.clear()

    assert signed_in_store.get_user() is None
    assert signed_in_store.get_access_token() is None
    assert signed_in_store.get_refresh_token() is None
    assert signed_in_store.get_session() is None
    assert memory_storage.data == {}


@pytest.mark.unit
def test_clear_on_empty_store_is_noop(session_store):
    session_store.clear()
    session_store.clear()

    assert session_store.get_user() is None


@pytest.mark.unit
def test_clear_keeps_unrelated_keys(sample_user):
    storage = MemoryStorage({"theme": "dark"})
    store = SessionStore(storage)
    store.store(make_session(sample_user))

    store.clear()

    assert storage.data == {"theme": "dark"}


@pytest.mark.unit
def test_empty_store_reads_absent(session_store):
    assert session_store.get_user() is None
    assert session_store.get_access_token() is None
    assert session_store.get_refresh_token() is None
    assert session_store.is_authenticated() is False


@pytest.mark.unit
def test_corrupt_user_reads_absent():
    """Test malformed stored user does not raise."""
    store = SessionStore(MemoryStorage({USER_KEY: "{not json"}))

    assert store.get_user() is None


@pytest.mark.unit
def test_user_with_wrong_shape_reads_absent():
    store = SessionStore(MemoryStorage({USER_KEY: json.dumps({"id": "1"})}))

    assert store.get_user() is None
    assert store.get_user(as_model=False) == {"id": "1"}


@pytest.mark.unit
def test_null_storage_reads_absent_and_ignores_writes(sample_user):
    """Test the no-client-context storage."""
    store = SessionStore(NullStorage())

    store.store(make_session(sample_user))

    assert store.get_user() is None
    assert store.get_access_token() is None
    assert store.get_refresh_token() is None
    store.clear()


@pytest.mark.unit
def test_default_storage_is_null(sample_user):
    store = SessionStore()
    store.store(make_session(sample_user))

    assert store.get_access_token() is None


@pytest.mark.unit
def test_get_session_requires_all_parts(sample_user):
    store = SessionStore(MemoryStorage({ACCESS_TOKEN_KEY: "AT", USER_KEY: sample_user.model_dump_json()}))

    assert store.get_session() is None


@pytest.mark.unit
def test_file_storage_survives_new_instance(tmp_path, sample_user):
    """Test a session written to file is visible to a fresh store."""
    path = tmp_path / "nested" / "session.json"
    SessionStore(FileStorage(path)).store(make_session(sample_user))

    reloaded = SessionStore(FileStorage(path))

    assert reloaded.get_access_token() == "AT"
    assert reloaded.get_user() == sample_user


@pytest.mark.unit
@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_file_storage_is_owner_only(tmp_path, sample_user):
    """Test the session file is readable by its owner only, even if it existed."""
    path = tmp_path / "session.json"
    path.write_text("{}", encoding="utf-8")
    path.chmod(0o644)

    SessionStore(FileStorage(path)).store(make_session(sample_user))

    assert stat.S_IMODE(path.stat().st_mode) == 0o600


@pytest.mark.unit
def test_file_storage_missing_or_corrupt_file(tmp_path):
    path = tmp_path / "session.json"
    storage = FileStorage(path)
    assert storage.get_item(ACCESS_TOKEN_KEY) is None

    path.write_text("garbage", encoding="utf-8")
    assert storage.get_item(ACCESS_TOKEN_KEY) is None


@pytest.mark.unit
def test_file_storage_clear(tmp_path, sample_user):
    path = tmp_path / "session.json"
    store = SessionStore(FileStorage(path))
    store.store(make_session(sample_user))

    store.clear()

    assert json.loads(path.read_text(encoding="utf-8")) == {}


@pytest.mark.unit
def test_create_session_store_picks_backend(tmp_path):
    assert isinstance(create_session_store().storage, MemoryStorage)
    assert isinstance(create_session_store(str(tmp_path / "s.json")).storage, FileStorage)
