"""Shared secret generation."""
from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Final

from . import base32
from .errors import InvalidArgument
from .logging import get_logger

__all__ = ["DEFAULT_SECRET_LENGTH", "GeneratedSecret", "generate_secret", "generate_secret_bytes", "random_base32"]


DEFAULT_SECRET_LENGTH: Final[int] = 20

logger = get_logger("authenticator.provisioning")


@dataclass(frozen=True, slots=True)
class GeneratedSecret:
    """Fresh key material and its Base32 representation."""

    secret_bytes: bytes
    base32: str

    def __repr__(self) -> str:
        return f"GeneratedSecret(length={len(self.secret_bytes)})"


def generate_secret_bytes(length: int = DEFAULT_SECRET_LENGTH) -> bytes:
    """Return *length* bytes from the operating system's CSPRNG.

    Lengths that are a multiple of 5 bytes encode to Base32 without a partial
    trailing group.
    """

    if not isinstance(length, int) or isinstance(length, bool) or length < 1:
        raise InvalidArgument(f"length must be a positive integer, got {length!r}")
    if (length * 8) % 5:
        logger.debug("secret_length_not_base32_aligned", length=length)
    return secrets.token_bytes(length)


def generate_secret(length: int = DEFAULT_SECRET_LENGTH) -> GeneratedSecret:
    material = generate_secret_bytes(length)
    return GeneratedSecret(secret_bytes=material, base32=base32.encode(material))


def random_base32(length: int = DEFAULT_SECRET_LENGTH) -> str:
    """Return a random Base32 secret without padding."""

    return generate_secret(length).base32
