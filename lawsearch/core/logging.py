import logging
import sys

import structlog
from loguru import logger


def configure_logging(level: str = "INFO") -> None:
    level = level.upper()
    logging.basicConfig(level=level, stream=sys.stderr)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
    # la CLI scrive i suoi messaggi con loguru
    logger.remove()
    logger.add(sys.stderr, level=level)
