"""Main entry point for the Interpreter Service.

Starts the FastAPI + Socket.IO server with uvicorn.
"""

import logging
import sys

import uvicorn

from interpreter_service.config import InterpreterConfig, set_config
from interpreter_service.observability.logger import setup_logging
from interpreter_service.server import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point for the Interpreter Service."""
    try:
        config = InterpreterConfig.from_env()
    except ValueError as e:
        setup_logging()
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    setup_logging(config.observability.log_level, config.observability.log_format)
    set_config(config)

    logger.info(
        f"Starting Interpreter Service on {config.server.host}:{config.server.port} "
        f"(mode={config.providers.mode})"
    )

    app = create_app(config)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.observability.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)
    server.run()


if __name__ == "__main__":
    main()
