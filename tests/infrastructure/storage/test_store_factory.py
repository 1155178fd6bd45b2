"""Tests for row store backend selection."""

import pytest

from influencer_trust.infrastructure.storage.factory import create_row_store
from influencer_trust.infrastructure.storage.memory_store import InMemoryRowStore
from influencer_trust.infrastructure.storage.supabase_store import SupabaseRowStore


def test_defaults_to_memory_without_supabase(monkeypatch):
    """Test the default backend without Supabase settings."""
    monkeypatch.delenv("STORE_BACKEND", raising=False)
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    assert isinstance(create_row_store(), InMemoryRowStore)


def test_defaults_to_supabase_when_configured(monkeypatch):
    """Test that a Supabase URL selects the Supabase backend."""
    monkeypatch.delenv("STORE_BACKEND", raising=False)
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "anon")
    assert isinstance(create_row_store(), SupabaseRowStore)


def test_explicit_backend_wins(monkeypatch):
    """Test STORE_BACKEND and the explicit argument."""
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("STORE_BACKEND", "Memory")
    assert isinstance(create_row_store(), InMemoryRowStore)
    assert isinstance(create_row_store("supabase"), SupabaseRowStore)


def test_unknown_backend():
    """Test that typos are reported."""
    with pytest.raises(ValueError):
        create_row_store("sqlite")
