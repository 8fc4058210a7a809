"""Common fixtures for authenticator tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog

from .utils import RFC_SEEDS


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


@pytest.fixture()
def rfc_seeds() -> dict[str, bytes]:
    return dict(RFC_SEEDS)


@pytest.fixture()
def sha1_seed() -> bytes:
    return RFC_SEEDS["SHA1"]
