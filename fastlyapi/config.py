"""Client constants and logging profiles."""

from __future__ import annotations

import abc
import logging
import sys
from typing import Dict, List, Type

import structlog

__all__ = [
    "FASTLY_API_ROOT",
    "Config",
    "DevelopmentConfig",
    "TestConfig",
    "ProductionConfig",
    "config",
    "configure_logging",
]

FASTLY_API_ROOT = "https://api.fastly.com"
"""Base URL of the Fastly REST API. Only requests sent under this prefix
carry the ``Fastly-Key`` header.
"""


def _shared_processors() -> List[structlog.typing.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


class Config(abc.ABC):
    """Logging profile baseclass."""

    LOG_LEVEL: int = logging.INFO

    @classmethod
    def _init_stdlib_logger(cls) -> None:
        stream_handler = logging.StreamHandler(stream=sys.stdout)
        stream_handler.setFormatter(logging.Formatter("%(message)s"))
        logger = logging.getLogger("fastlyapi")
        if logger.hasHandlers():
            logger.handlers.clear()
        logger.addHandler(stream_handler)
        logger.setLevel(cls.LOG_LEVEL)

    @classmethod
    @abc.abstractmethod
    def init_logging(cls) -> None:
        pass


class DevelopmentConfig(Config):
    """Local development profile."""

    LOG_LEVEL = logging.DEBUG

    @classmethod
    def init_logging(cls) -> None:
        cls._init_stdlib_logger()
        structlog.configure(
            processors=_shared_processors()
            + [
                structlog.processors.KeyValueRenderer(
                    key_order=["event", "method", "url", "status"],
                ),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )


class TestConfig(Config):
    """Test profile (for the py.test harness)."""

    LOG_LEVEL = logging.DEBUG

    @classmethod
    def init_logging(cls) -> None:
        cls._init_stdlib_logger()
        structlog.configure(
            processors=_shared_processors()
            + [
                structlog.processors.KeyValueRenderer(
                    key_order=["event", "method", "url", "status"],
                ),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            # Tests reconfigure structlog between runs.
            cache_logger_on_first_use=False,
        )


class ProductionConfig(Config):
    """Production profile, rendering log events as JSON."""

    @classmethod
    def init_logging(cls) -> None:
        cls._init_stdlib_logger()
        structlog.configure(
            processors=_shared_processors()
            + [structlog.processors.JSONRenderer()],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )


config: Dict[str, Type[Config]] = {
    "development": DevelopmentConfig,
    "testing": TestConfig,
    "production": ProductionConfig,
    "default": ProductionConfig,
}


def configure_logging(profile: str = "default") -> None:
    """Configure the ``fastlyapi`` logger and structlog for an application.

    The library never calls this itself; applications that do not configure
    structlog on their own can call it once at start-up.

    Parameters
    ----------
    profile : `str`
        One of ``"development"``, ``"testing"``, ``"production"`` or
        ``"default"``.

    Raises
    ------
    KeyError
        Raised if `profile` is unknown.
    """
    config[profile].init_logging()
