import logging
import sys

from carservice.settings import settings

SERVICE_NAME = "carservice"

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Noisy third-party loggers, held at WARNING unless the service itself runs at DEBUG.
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "alembic.runtime.migration")


def configure_logging() -> None:
    """Configure the root logger based on settings.

    JSON records carry a constant ``service`` field so bill events can be
    filtered out of a shared log stream.  Call ``reconfigure()`` after Alembic
    migrations, whose ``fileConfig`` replaces the root handlers.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)

    if settings.log_json:
        from pythonjsonlogger.json import JsonFormatter

        handler.setFormatter(
            JsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
                static_fields={"service": SERVICE_NAME},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    quiet_level = logging.NOTSET if level <= logging.DEBUG else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


reconfigure = configure_logging
