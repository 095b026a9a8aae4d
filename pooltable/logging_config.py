import logging.config

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
        },
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    # httpx logs every request at INFO
    "loggers": {"httpx": {"level": "WARNING"}},
}


def configure_logging(level: str = "INFO") -> None:
    config = dict(LOGGING_CONFIG, root={"level": level, "handlers": ["console"]})
    logging.config.dictConfig(config)
