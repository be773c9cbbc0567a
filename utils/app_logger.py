import functools
import inspect
import logging
import logging.config

from utils.constants import LOGGING_CONFIG

logging.config.dictConfig(LOGGING_CONFIG)


def createLogger(name="app"):
    return logging.getLogger(name)


def exceptionlogs(message, log="app"):
    """Log message with the active exception's traceback. Call from an except block."""
    logging.getLogger(log).exception(message)


def functionlogs(log="app"):
    """Log entry into the wrapped function at debug level.

    Works for both sync and async callables and keeps the signature intact,
    so it can sit between a FastAPI route decorator and the handler.
    """
    logger = logging.getLogger(log)

    def decorator(func):
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                logger.debug(f"Calling {func.__module__}.{func.__name__}")
                return await func(*args, **kwargs)
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger.debug(f"Calling {func.__module__}.{func.__name__}")
            return func(*args, **kwargs)
        return wrapper

    return decorator
