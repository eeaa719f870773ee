"""Client for the Fastly CDN REST API."""

from fastlyapi.client import FastlyClient
from fastlyapi.exceptions import (
    FastlyError,
    InvalidArgumentError,
    NameConflictError,
    NoActiveVersionError,
    TransportError,
)
from fastlyapi.options import RequestOptions
from fastlyapi.version import get_version

__all__ = [
    "__version__",
    "FastlyClient",
    "RequestOptions",
    "FastlyError",
    "InvalidArgumentError",
    "NameConflictError",
    "NoActiveVersionError",
    "TransportError",
]

__version__: str = get_version()
