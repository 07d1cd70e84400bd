"""Central logging configuration.

Module loggers (`logging.getLogger(__name__)`) propagate to the `deckhand`
logger configured here; output goes to stderr so CLI stdout stays clean.
"""
import logging
from logging.config import dictConfig


def _dict_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            }
        },
        "loggers": {
            "deckhand": {"level": level, "handlers": ["console"], "propagate": False},
        },
    }


def configure_logging(level: str = "WARNING") -> None:
    """Configure deckhand logging once.

    If the deckhand logger already has handlers only the level is updated,
    to avoid duplicate output when called again (tests, reloaders).
    """
    logger = logging.getLogger("deckhand")
    if logger.handlers:
        logger.setLevel(level)
        return
    dictConfig(_dict_config(level))
