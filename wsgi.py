"""WSGI entry point: ``gunicorn wsgi:app``."""

import logging
import os

from Folio.api.server import create_app
from Folio.config.settings import get_settings

logger = logging.getLogger("FOLIO.WSGI")

settings = get_settings()
app = create_app(settings)


if __name__ == "__main__":
    if os.getenv("FLASK_ENV") == "development" or settings.api.debug:
        logger.info(f"Development server on {settings.api.host}:{settings.api.port}")
        app.run(host=settings.api.host, port=settings.api.port, debug=True, use_reloader=False)
    else:
        workers = os.getenv("GUNICORN_WORKERS", "2")
        logger.info(f"Run the production server with: gunicorn wsgi:app -w {workers}")
