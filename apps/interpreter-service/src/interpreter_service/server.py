"""Socket.IO server setup for the Interpreter Service.

Creates a FastAPI app combined with a Socket.IO AsyncServer.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import socketio
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from interpreter_service import __version__
from interpreter_service.config import InterpreterConfig, get_config
from interpreter_service.handlers.audio import register_audio_handlers
from interpreter_service.handlers.lifecycle import register_lifecycle_handlers
from interpreter_service.handlers.session import register_session_handlers
from interpreter_service.runtime import InterpreterRuntime

logger = logging.getLogger(__name__)

SERVICE_NAME = "Counseling Interpreter API"
SERVICE_DESCRIPTION = "Real-time bilingual interpretation system for psychological counseling"


def create_app(
    config: InterpreterConfig | None = None,
    runtime: InterpreterRuntime | None = None,
) -> socketio.ASGIApp:
    """Create FastAPI + Socket.IO ASGI application.

    Args:
        config: Service configuration (loaded from the environment if omitted).
        runtime: Pre-built runtime, mainly for tests.

    Returns:
        Combined ASGI app with FastAPI and Socket.IO.

    Raises:
        ValueError: If configuration is invalid.
    """
    if config is None:
        config = runtime.config if runtime is not None else get_config()
    if runtime is None:
        runtime = InterpreterRuntime.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await runtime.shutdown()

    # Create FastAPI app for HTTP endpoints
    fastapi_app = FastAPI(
        title=SERVICE_NAME,
        description=SERVICE_DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if config.server.cors_origins == "*" else config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @fastapi_app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "mode": config.providers.mode,
        }

    @fastapi_app.get("/api")
    async def api_info():
        """Service description."""
        return {
            "name": SERVICE_NAME,
            "version": __version__,
            "description": SERVICE_DESCRIPTION,
        }

    # Prometheus metrics endpoint
    @fastapi_app.get("/metrics")
    async def metrics_endpoint():
        """
        Prometheus metrics endpoint.

        Returns metrics in Prometheus text format including:
        - Stage timing histograms (STT, translation, TTS)
        - Utterance latency histogram
        - Error counters by code
        - Active session and pipeline gauges
        """
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    sio = socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=config.server.cors_origins,
        logger=False,  # Use our own logger
        engineio_logger=False,
        ping_interval=config.server.ping_interval,
        ping_timeout=config.server.ping_timeout,
        max_http_buffer_size=config.server.max_buffer_size,
    )

    register_lifecycle_handlers(sio, runtime)
    register_session_handlers(sio, runtime)
    register_audio_handlers(sio, runtime)

    logger.info(f"Interpreter Service handlers registered: mode={config.providers.mode}")

    # Combine FastAPI and Socket.IO into single ASGI app
    app = socketio.ASGIApp(
        socketio_server=sio,
        other_asgi_app=fastapi_app,
    )
    # Exposed for tests and embedding
    app.fastapi_app = fastapi_app
    app.sio = sio
    app.runtime = runtime

    return app
