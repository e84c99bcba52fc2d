import logging

import uvicorn

from app.core.app_factory import create_app
from app.core.config import settings

logger = logging.getLogger(__name__)

app = create_app()


def run() -> None:
    """Serve the API with Uvicorn on the configured host and port."""
    logger.info(
        "Book API is running on http://%s:%s",
        settings.app.host,
        settings.app.port,
        extra={"host": settings.app.host, "port": settings.app.port},
    )
    # log_config=None keeps the handlers installed by configure_logging
    uvicorn.run(app, host=settings.app.host, port=settings.app.port, log_config=None)


if __name__ == "__main__":
    run()
