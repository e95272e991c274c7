import logging, logging.config
from typing import Optional

# Pipeline stages log through these; their level can differ from the root's
FEED_LOGGERS = ("app.services.feed_service", "app.main")


def setup_logging(level: str = "INFO", access_log: bool = True, feed_level: Optional[str] = None):
    level = level.upper()
    feed_level = (feed_level or level).upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                        "datefmt": "%H:%M:%S"},
            # feed lines carry the pipeline stage instead of the module path
            "feed": {"format": "%(asctime)s %(levelname)s [feed:%(funcName)s] %(message)s",
                     "datefmt": "%H:%M:%S"},
            # Uvicorn pre-formats access log lines
            "access_simple": {"format": "%(message)s"},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
            "feed":    {"class": "logging.StreamHandler", "formatter": "feed"},
            "access":  {"class": "logging.StreamHandler", "formatter": "access_simple"},
        },
        "loggers": {
            **{name: {"level": feed_level, "handlers": ["feed"], "propagate": False}
               for name in FEED_LOGGERS},
            "uvicorn.error":  {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": ("INFO" if access_log else "WARNING"),
                               "handlers": ["access"], "propagate": False},
            # outbound feed requests only show up when the pipeline is being debugged
            "httpx":          {"level": ("DEBUG" if feed_level == "DEBUG" else "WARNING")},
        },
        "root": {"level": level, "handlers": ["console"]},
    })
