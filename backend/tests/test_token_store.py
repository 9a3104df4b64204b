"""Tests for the file-backed token store."""

from mediqueue.token_store import TokenStore, TOKEN_KEY, SESSION_TOKEN_KEY, SESSION_EXPIRY_KEY


def test_missing_file_reads_as_empty(token_store):
    assert token_store.get_token() is None
    assert token_store.get_item("anything") is None


def test_set_get_remove(token_store):
    token_store.set_item(TOKEN_KEY, "abc")
    assert token_store.get_token() == "abc"
    token_store.remove_item(TOKEN_KEY)
    assert token_store.get_token() is None


def test_writes_are_visible_to_other_instances(tmp_path):
    path = str(tmp_path / "nested" / "storage.json")
    writer, reader = TokenStore(path), TokenStore(path)
    writer.set_item(TOKEN_KEY, "first")
    assert reader.get_token() == "first"
    writer.set_item(TOKEN_KEY, "second")
    assert reader.get_token() == "second"


def test_clear_session_keeps_other_keys(token_store):
    token_store.set_item(TOKEN_KEY, "abc")
    token_store.set_item(SESSION_TOKEN_KEY, "sess")
    token_store.set_item(SESSION_EXPIRY_KEY, "2024-01-05T10:00:00Z")
    token_store.set_item("language", "en")

    token_store.clear_session()

    assert token_store.get_token() is None
    assert token_store.get_session_token() is None
    assert token_store.get_item(SESSION_EXPIRY_KEY) is None
    assert token_store.get_item("language") == "en"


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")
    store = TokenStore(str(path))
    assert store.get_token() is None
    store.set_item(TOKEN_KEY, "fresh")
    assert store.get_token() == "fresh"
