"""Utilities for unit testing code that uses `fastlyapi.FastlyClient`
together with the ``responses`` library.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs

import responses

from fastlyapi.config import FASTLY_API_ROOT

__all__ = [
    "SERVICE_ID",
    "API_KEY",
    "service_url",
    "make_version",
    "make_vcl",
    "mock_versions",
    "form_body",
]

SERVICE_ID = "SU1Z0isxPaozGVKXdv0eY"
"""A made-up Fastly service ID."""

API_KEY = "d3cafb4dde4dbeef"
"""A made-up Fastly API key."""


def service_url(*parts: Any, service_id: str = SERVICE_ID) -> str:
    """Absolute API URL under ``/service/{service_id}``."""
    segments = [FASTLY_API_ROOT, "service", service_id]
    segments.extend(str(p) for p in parts)
    return "/".join(segments)


def make_version(
    number: int,
    active: bool = False,
    service_id: str = SERVICE_ID,
    **kwargs: Any,
) -> Dict[str, Any]:
    """Build a config version resource as the API returns it."""
    version = {
        "service_id": service_id,
        "number": number,
        "active": active,
        "locked": active,
        "deployed": False,
        "staging": False,
        "testing": False,
        "comment": "",
    }
    version.update(kwargs)
    return version


def make_vcl(
    name: str,
    version: int,
    main: bool = False,
    content: str = "sub vcl_recv {}",
    service_id: str = SERVICE_ID,
) -> Dict[str, Any]:
    """Build a VCL resource as the API returns it."""
    return {
        "name": name,
        "content": content,
        "main": main,
        "version": version,
        "service_id": service_id,
    }


def mock_versions(
    versions: List[Dict[str, Any]], service_id: str = SERVICE_ID
) -> None:
    """Register the version list endpoint with the active ``responses``
    mock.
    """
    responses.add(
        responses.GET,
        service_url("version", service_id=service_id),
        json=versions,
    )


def form_body(call: Any) -> Dict[str, List[str]]:
    """Parse the url-encoded body of a recorded ``responses`` call."""
    body: Optional[Any] = call.request.body
    if body is None:
        return {}
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    return parse_qs(body)
