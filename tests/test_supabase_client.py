from shipdash.db import supabase as supabase_module
from shipdash.db.supabase import get_supabase_client


def test_unconfigured_client_is_none(monkeypatch):
    monkeypatch.setattr(supabase_module.settings, "supabase_url", None)
    monkeypatch.setattr(supabase_module.settings, "supabase_key", None)
    get_supabase_client.cache_clear()
    try:
        assert get_supabase_client() is None
    finally:
        get_supabase_client.cache_clear()


def test_explicit_credentials_are_cached_per_project(monkeypatch):
    created = []

    def fake_create_client(url, key):
        created.append((url, key))
        return object()

    monkeypatch.setattr(supabase_module, "create_client", fake_create_client)
    get_supabase_client.cache_clear()
    try:
        first = get_supabase_client("https://demo.supabase.co", "anon-key")
        again = get_supabase_client("https://demo.supabase.co", "anon-key")
    finally:
        get_supabase_client.cache_clear()

    assert first is again
    assert created == [("https://demo.supabase.co", "anon-key")]


def test_client_creation_failure_returns_none(monkeypatch):
    def broken_create_client(url, key):
        raise ValueError("Invalid API key")

    monkeypatch.setattr(supabase_module, "create_client", broken_create_client)
    get_supabase_client.cache_clear()
    try:
        assert get_supabase_client("https://demo.supabase.co", "bad") is None
    finally:
        get_supabase_client.cache_clear()
