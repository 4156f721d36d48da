"""Unit tests for ConnectionState and ConnectionStore."""

from interpreter_service.models.events import Role
from interpreter_service.session.connection import ConnectionStore


class TestConnectionState:
    def test_join_and_leave(self):
        state = ConnectionStore().create("sid-1")
        assert not state.in_session

        state.join("S1", Role.STUDENT)
        state.language = "en"
        assert state.in_session

        state.leave()
        assert not state.in_session
        assert state.language is None

    def test_join_clears_mute(self):
        state = ConnectionStore().create("sid-1")
        state.is_muted = True

        state.join("S1", Role.COUNSELOR)

        assert state.is_muted is False


class TestConnectionStore:
    def test_create_get_delete(self):
        store = ConnectionStore()

        state = store.create("sid-1")

        assert store.get("sid-1") is state
        assert store.count() == 1
        assert store.delete("sid-1") is state
        assert store.get("sid-1") is None
        assert store.delete("sid-1") is None

    def test_get_or_create(self):
        store = ConnectionStore()

        first = store.get_or_create("sid-1")

        assert store.get_or_create("sid-1") is first
