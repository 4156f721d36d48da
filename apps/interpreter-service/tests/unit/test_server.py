"""Unit tests for the HTTP side of the ASGI application."""

import pytest
import socketio
from fastapi.testclient import TestClient

from interpreter_service import __version__
from interpreter_service.server import create_app


@pytest.fixture
def app(runtime):
    return create_app(runtime=runtime)


@pytest.fixture
def client(app):
    with TestClient(app.fastapi_app) as test_client:
        yield test_client


class TestHttpEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["mode"] == "mock"
        assert "timestamp" in body

    def test_api_info(self, client):
        response = client.get("/api")

        assert response.status_code == 200
        assert response.json() == {
            "name": "Counseling Interpreter API",
            "version": __version__,
            "description": "Real-time bilingual interpretation system for psychological counseling",
        }

    def test_metrics(self, client):
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "interpreter_errors_total" in response.text


class TestAppWiring:
    def test_exposes_components(self, app, runtime):
        assert isinstance(app, socketio.ASGIApp)
        assert isinstance(app.sio, socketio.AsyncServer)
        assert app.runtime is runtime

    def test_socketio_handlers_registered(self, app):
        handlers = app.sio.handlers["/"]

        for event in (
            "connect",
            "disconnect",
            "session:join",
            "session:leave",
            "control:mute",
            "control:unmute",
            "audio:start",
            "audio:chunk",
            "audio:stop",
        ):
            assert event in handlers

    def test_shutdown_on_lifespan_exit(self, app, runtime, synthesizers):
        with TestClient(app.fastapi_app):
            pass

        assert all(s.shutdown_calls == 1 for s in synthesizers.values())
