"""py.test fixtures available to all test modules without explicit import."""

from __future__ import annotations

import logging
from typing import Iterator

import pytest
import structlog

from fastlyapi import FastlyClient
from fastlyapi.testutils import API_KEY


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo any logging configuration made by a test."""
    yield
    structlog.reset_defaults()
    logging.getLogger("fastlyapi").handlers.clear()


@pytest.fixture
def client() -> Iterator[FastlyClient]:
    """A client using the test API key."""
    with FastlyClient(API_KEY) as c:
        yield c
