"""Main entry point for the JSON Form Builder REST API server."""

import asyncio
import sys
from typing import Optional

import structlog
import uvicorn

from .api.app import create_app
from .api.server import JSONFormServer
from .config.loader import load_config
from .utils.logging_config import setup_logging as setup_stdlib_logging


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None, json_logging: bool = False) -> None:
    """Set up structured logging."""
    setup_stdlib_logging(log_level=log_level, log_file=log_file, enable_json_logging=json_logging)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


async def main(config_path: Optional[str] = None) -> None:
    """Main entry point for the REST API server."""
    if config_path is None and len(sys.argv) > 1:
        config_path = sys.argv[1]

    config = load_config(config_path)
    setup_logging(config.log_level, config.log_file, config.json_logging)
    logger = structlog.get_logger(__name__)

    logger.info("Starting JSON Form Builder REST API server...")

    server = JSONFormServer(config=config)
    app = create_app(server)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.api_config.host,
        port=config.api_config.port,
        log_level=config.log_level.lower(),
        reload=False
    )
    uvicorn_server = uvicorn.Server(uvicorn_config)

    try:
        logger.info("Server starting", host=config.api_config.host, port=config.api_config.port)
        await uvicorn_server.serve()
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.error(f"Server startup failed: {e}", exc_info=True)
        raise
    finally:
        server.stop()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
