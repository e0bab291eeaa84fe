import logging
import sys

from core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging() -> logging.Logger:
    """Configure the shared application logger once."""
    app_logger = logging.getLogger("pesca_pro")
    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app_logger.addHandler(handler)
    app_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    app_logger.propagate = False
    return app_logger


logger = setup_logging()
