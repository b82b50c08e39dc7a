import logging
from datetime import datetime, timezone

from app.config import settings


class UTCFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        record_time = datetime.fromtimestamp(record.created, timezone.utc)
        return record_time.strftime(datefmt) if datefmt else record_time.isoformat()


def setup_logging() -> logging.Logger:
    """Attach a single stream handler to the root logger (idempotent)."""
    logger = logging.getLogger()
    if not logger.handlers:
        formatter = UTCFormatter(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(settings.LOG_LEVEL)
    return logger
