"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest
from fakes import FakeDump, FakeLookup, Peer, StaticSource

from headline_bot.config import Settings
from headline_bot.crypto.keys import Identity, PrivateKey
from headline_bot.exceptions import TransportError
from headline_bot.news.cache import HeadlineCache
from headline_bot.news.feed import FeedItem


@pytest.fixture
def test_settings() -> Settings:
    """Provide settings for testing."""
    return Settings(
        dump_service_url="http://dump.test",
        lookup_service_url="http://lookup.test",
        blockchain_node_url="http://registry.test",
        poll_interval=0.01,
        refresh_interval=0.01,
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def identity() -> Identity:
    return Identity(name="news", private_key=PrivateKey.generate())


@pytest.fixture
def alice() -> Peer:
    return Peer("alice")


@pytest.fixture
def lookup(identity: Identity, alice: Peer) -> FakeLookup:
    return FakeLookup(
        {
            identity.name: identity.private_key.public_key,
            alice.name: alice.key.public_key,
        }
    )


@pytest.fixture
def dump() -> FakeDump:
    return FakeDump()


@pytest.fixture
def source() -> StaticSource:
    return StaticSource(
        [
            FeedItem(url="https://news.test/1", title="Front line update", text="Front line text"),
            FeedItem(url="https://news.test/2", title="Ceasefire talks", text="Full article text"),
        ]
    )


@pytest.fixture
def cache(source: StaticSource) -> HeadlineCache:
    cache = HeadlineCache(source)
    cache.refresh()
    return cache


@pytest.fixture
def transport_error() -> TransportError:
    return TransportError("connection refused")
