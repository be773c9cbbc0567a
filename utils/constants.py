import os
import pathlib


BASE_DIR = pathlib.Path(".").parent.absolute()
LOG_DIR = os.getenv("LOG_DIR", os.path.join(BASE_DIR, "logs"))
os.makedirs(LOG_DIR, exist_ok=True)

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters":{
        "verbose": {"format": "%(asctime)s %(levelname)s [%(name)s] %(filename)s:%(lineno)d  %(message)s"},
        "simple": {"format": "%(levelname)s [%(name)s] %(message)s"}
    },
    "handlers": {
        "console": {
            "level": LOG_LEVEL,
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
        "app": {
            "level": LOG_LEVEL,
            "class": "logging.handlers.TimedRotatingFileHandler",
            "formatter": "verbose",
            "filename": os.path.join(LOG_DIR, "app.log"),
            "when": "W4",
            "interval": 1,
            "backupCount": 7,
        },
    },
    "loggers": {
        "app": {
            "handlers": ["console", "app"],
            "level": LOG_LEVEL,
            "propagate": False
        },
        "sms": {
            "handlers": ["console", "app"],
            "level": LOG_LEVEL,
            "propagate": False
        },
        "uvicorn.error": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False
        },
    },
}
