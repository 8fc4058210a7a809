"""Google Authenticator compatible TOTP primitives.

Provides the RFC 4648 Base32 codec, RFC 4226/6238 code generation and
verification, secret provisioning and ``otpauth://`` enrollment URIs.  All
operations are stateless; persisting secrets is left to the caller.
"""
from __future__ import annotations

from . import base32
from .errors import InvalidArgument
from .provisioning import GeneratedSecret, generate_secret, generate_secret_bytes, random_base32
from .totp import (
    TOTP,
    HashAlgorithm,
    TOTPCode,
    compute_code,
    compute_hotp,
    format_code,
    verify_code,
)
from .uri import build_uri

__all__ = [
    "GeneratedSecret",
    "HashAlgorithm",
    "InvalidArgument",
    "TOTP",
    "TOTPCode",
    "base32",
    "build_uri",
    "compute_code",
    "compute_hotp",
    "format_code",
    "generate_secret",
    "generate_secret_bytes",
    "random_base32",
    "verify_code",
]
