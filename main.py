"""
Online Presence Audit API - Main Entry Point
"""
import uvicorn

from presence_audit.audit_logging import configure_logging, get_logger
from presence_audit.config import get_settings

logger = get_logger(__name__)


def main():
    """Run the FastAPI server."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    logger.info(
        "server_starting",
        url=f"http://{settings.host}:{settings.port}",
        docs=f"http://{settings.host}:{settings.port}/docs",
        debug=settings.debug,
    )

    # Run server
    uvicorn.run(
        "presence_audit.api:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
    )


if __name__ == "__main__":
    main()
