import datetime

import pytest

from unilite.session import InMemorySessionRegistry, Session, session_registry
from unilite.session.registry import SessionRegistryBase


class FakeClock:
    def __init__(self):
        self.now = datetime.datetime(2026, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += datetime.timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def clocked_registry(clock):
    return InMemorySessionRegistry(ttl_seconds=24 * 60 * 60, clock=clock)


def test_create_returns_unique_hex_identifiers(registry):
    ids = {registry.create() for _ in range(50)}
    assert len(ids) == 50
    for sid in ids:
        assert len(sid) == 32
        int(sid, 16)


def test_created_session_has_24h_horizon(clocked_registry, clock):
    sid = clocked_registry.create()
    session = clocked_registry.get(sid)
    assert session.created_at == clock.now
    assert session.expires_at - session.created_at == datetime.timedelta(hours=24)
    assert len(list(session.cookies)) == 0


def test_get_refreshes_last_used(clocked_registry, clock):
    sid = clocked_registry.create()
    clock.advance(minutes=5)
    session = clocked_registry.get(sid)
    assert session.last_used == clock.now
    assert session.last_used > session.created_at


def test_get_unknown_or_empty_returns_none(registry):
    assert registry.get("does-not-exist") is None
    assert registry.get("") is None
    assert registry.get(None) is None


def test_invalidate_is_idempotent(registry):
    sid = registry.create()
    registry.invalidate(sid)
    assert registry.get(sid) is None
    registry.invalidate(sid)
    registry.invalidate(None)
    assert len(registry) == 0


def test_expired_session_is_evicted_on_lookup(clocked_registry, clock):
    sid = clocked_registry.create()
    clock.advance(hours=24, seconds=1)
    assert clocked_registry.get(sid) is None
    assert sid not in clocked_registry


def test_sweep_removes_only_expired(clocked_registry, clock):
    old = clocked_registry.create()
    clock.advance(hours=23)
    fresh = clocked_registry.create()
    clock.advance(hours=2)

    assert clocked_registry.sweep() == 1
    assert old not in clocked_registry
    assert fresh in clocked_registry


def test_create_sweeps_expired_sessions(clocked_registry, clock):
    old = clocked_registry.create()
    clock.advance(days=2)
    clocked_registry.create()
    assert old not in clocked_registry
    assert len(clocked_registry) == 1


def test_sessions_have_separate_cookie_jars(registry):
    a = registry.get(registry.create())
    b = registry.get(registry.create())
    assert a.cookies is not b.cookies
    assert a.lock is not b.lock


def test_session_to_dict():
    now = datetime.datetime(2026, 1, 1, tzinfo=datetime.timezone.utc)
    session = Session.new("abc123", datetime.timedelta(hours=1), now=now)
    data = session.to_dict()
    assert data["sessionId"] == "abc123"
    assert data["createdAt"] == now.isoformat()
    assert data["expiresAt"] == (now + datetime.timedelta(hours=1)).isoformat()
    assert data["cookieCount"] == 0


def test_session_registry_factory():
    assert isinstance(session_registry("InMemorySessionRegistry"), InMemorySessionRegistry)
    assert isinstance(session_registry(), SessionRegistryBase)
    with pytest.raises(ValueError):
        session_registry("RedisSessionRegistry")
    with pytest.raises(ValueError):
        session_registry("Session")
