"""Custom exceptions."""

from __future__ import annotations

from typing import Optional

import requests

__all__ = [
    "FastlyError",
    "InvalidArgumentError",
    "TransportError",
    "NameConflictError",
    "NoActiveVersionError",
]


class FastlyError(Exception):
    """Base class for errors raised by the Fastly API client."""


class InvalidArgumentError(FastlyError, ValueError):
    """Raised when a caller omits a required argument or passes one the
    client cannot use (for example, a relative URL to
    `~fastlyapi.client.FastlyClient.purge`).
    """


class TransportError(FastlyError, requests.HTTPError):
    """The Fastly API (or another host) answered with a non-2xx status.

    This is also a `requests.HTTPError`, so the original ``response`` stays
    attached and code written against requests can catch it as usual.
    """

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status code of the failed response."""
        if self.response is None:
            return None
        return self.response.status_code


class NameConflictError(FastlyError):
    """A VCL file with the requested name already exists in the config
    version.
    """

    def __init__(self, service_id: str, version: int, name: str) -> None:
        self.service_id = service_id
        self.version = version
        self.name = name
        super().__init__(
            f"VCL {name!r} already exists in version {version} of "
            f"service {service_id}"
        )


class NoActiveVersionError(FastlyError):
    """No config version of the service is active, so a default version
    number could not be resolved.
    """
