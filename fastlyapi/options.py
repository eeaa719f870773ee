"""Pydantic model for per-request options of
`fastlyapi.client.FastlyClient.request`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel

__all__ = ["RequestOptions"]


class RequestOptions(BaseModel):
    """Options for a single request to the Fastly API."""

    soft_purge: bool = False
    """Send ``Fastly-Soft-Purge: 1`` so that a purge marks content as stale
    instead of removing it.
    """

    headers: Optional[Dict[str, str]] = None
    """Extra headers. These override the headers the client computes,
    including ``Fastly-Key``.
    """

    form: Optional[Dict[str, Any]] = None
    """Body fields, sent as ``application/x-www-form-urlencoded``."""

    transport_options: Optional[Dict[str, Any]] = None
    """Keyword arguments passed to `requests.Session.request`, applied after
    every computed value (``method``, ``url``, ``headers``, ``data``) so that
    they win. Use this for edge cases such as ``timeout`` or ``verify``.
    """
