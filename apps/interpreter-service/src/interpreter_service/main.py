"""ASGI entry point for the Interpreter Service.

Provides the FastAPI + Socket.IO app for uvicorn:

    uvicorn interpreter_service.main:app
"""

from .server import create_app

app = create_app()
