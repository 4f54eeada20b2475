"""
Logging setup for the Campaign CRM API.
"""
import logging

from crm_backend.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None) -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT
    )
    # Engine echo is controlled by SQL_ECHO, keep the rest of sqlalchemy quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
