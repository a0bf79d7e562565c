"""Unit tests for SessionManager."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from rdjson_viewer.service.session_manager import SessionManager, SessionNotFoundError
from tests.conftest import SAMPLE_RDJSON


class TestSessionLifecycle:
    def test_create_session(self, session_manager: SessionManager) -> None:
        info = session_manager.create_session()
        assert len(info.session_id) == 32
        assert info.diagnostic_count == 0
        assert info.metadata == {}

    def test_create_with_metadata(self, session_manager: SessionManager) -> None:
        info = session_manager.create_session(metadata={"user": "alice"})
        assert info.metadata == {"user": "alice"}

    def test_get_state(self, session_manager: SessionManager) -> None:
        info = session_manager.create_session()
        state = session_manager.get_state(info.session_id)
        assert state.collection is None
        assert state.raw_text == ""

    def test_state_persists_between_calls(self, session_manager: SessionManager) -> None:
        info = session_manager.create_session()
        session_manager.get_state(info.session_id).load(SAMPLE_RDJSON, "rdjson")
        assert session_manager.get_session(info.session_id).diagnostic_count == 4
        assert session_manager.get_state(info.session_id).collection is not None

    def test_get_state_missing_raises(self, session_manager: SessionManager) -> None:
        with pytest.raises(SessionNotFoundError, match="not found"):
            session_manager.get_state("nonexist123")

    def test_get_session(self, session_manager: SessionManager) -> None:
        info = session_manager.create_session()
        retrieved = session_manager.get_session(info.session_id)
        assert retrieved.session_id == info.session_id
        assert retrieved.last_accessed_at >= info.last_accessed_at

    def test_close_session(self, session_manager: SessionManager) -> None:
        info = session_manager.create_session()
        session_manager.close_session(info.session_id)
        with pytest.raises(SessionNotFoundError):
            session_manager.get_state(info.session_id)

    def test_close_missing_raises(self, session_manager: SessionManager) -> None:
        with pytest.raises(SessionNotFoundError, match="not found"):
            session_manager.close_session("nonexist123")

    def test_list_sessions(self, session_manager: SessionManager) -> None:
        session_manager.create_session()
        session_manager.create_session()
        assert len(session_manager.list_sessions()) == 2

    def test_active_count(self, session_manager: SessionManager) -> None:
        assert session_manager.active_count == 0
        session_manager.create_session()
        session_manager.create_session()
        assert session_manager.active_count == 2


class TestDefaultSession:
    def test_default_created_lazily(self, session_manager: SessionManager) -> None:
        assert session_manager.active_count == 0
        state = session_manager.get_or_create_default()
        assert session_manager.get_or_create_default() is state
        assert session_manager.active_count == 1

    def test_default_not_listed(self, session_manager: SessionManager) -> None:
        session_manager.get_or_create_default()
        session_manager.create_session()
        assert len(session_manager.list_sessions()) == 1


class TestExpiry:
    def test_expired_session_raises(self) -> None:
        mgr = SessionManager(ttl_seconds=0, cleanup_interval=9999)
        info = mgr.create_session()
        time.sleep(0.01)
        with pytest.raises(SessionNotFoundError, match="expired"):
            mgr.get_state(info.session_id)

    def test_expired_not_listed(self) -> None:
        mgr = SessionManager(ttl_seconds=0, cleanup_interval=9999)
        mgr.create_session()
        time.sleep(0.01)
        assert mgr.list_sessions() == []
        assert mgr.active_count == 0

    def test_purge_expired(self) -> None:
        mgr = SessionManager(ttl_seconds=0, cleanup_interval=9999)
        mgr.create_session()
        time.sleep(0.01)
        mgr._purge_expired()
        assert mgr._sessions == {}

    def test_cleanup_thread_start_stop(self) -> None:
        mgr = SessionManager(ttl_seconds=3600, cleanup_interval=1)
        mgr.start()
        mgr.start()  # second start is a no-op
        assert mgr._cleanup_thread is not None
        mgr.stop()
        assert mgr._cleanup_thread is None


class TestConcurrency:
    def test_concurrent_creates(self, session_manager: SessionManager) -> None:
        with ThreadPoolExecutor(max_workers=8) as pool:
            infos = list(pool.map(lambda _: session_manager.create_session(), range(50)))
        assert len({i.session_id for i in infos}) == 50
        assert session_manager.active_count == 50
