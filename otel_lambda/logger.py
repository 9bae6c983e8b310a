import logging
import os

_LOG_LEVEL_ENV_VARS = ("OTEL_LAMBDA_LOG_LEVEL", "OTEL_LOG_LEVEL")

try:
    _level_mapping = logging.getLevelNamesMapping()
except AttributeError:
    # python < 3.11
    _level_mapping = {name: num for num, name in logging._levelToName.items()}
# Aliases used by the OpenTelemetry and Lambda extension log settings
_level_mapping.update(
    {
        "TRACE": 5,
        "WARN": logging.WARNING,
        "FATAL": logging.CRITICAL,
        "OFF": 100,
    }
)


def _configured_level():
    for key in _LOG_LEVEL_ENV_VARS:
        val = os.environ.get(key)
        if val:
            return val.strip().upper()
    return "INFO"


def initialize_logging(name):
    """Set the level of the `name` logger from the environment.

    OTEL_LAMBDA_LOG_LEVEL takes precedence over OTEL_LOG_LEVEL.
    """
    logger = logging.getLogger(name)
    str_level = _configured_level()
    level = _level_mapping.get(str_level)
    if level is None:
        logger.setLevel(logging.INFO)
        logger.warning("Invalid log level: %s Defaulting to INFO", str_level)
    else:
        logger.setLevel(level)
    return logger
