"""Time-based One Time Password engine following RFC 4226 and RFC 6238.

The functional API (:func:`compute_hotp`, :func:`compute_code` and
:func:`verify_code`) operates on raw secret bytes and keeps no state between
calls.  :class:`TOTP` wraps it behind the ``pyotp``-style object interface for
callers holding a Base32 secret.
"""
from __future__ import annotations

import hashlib
import hmac
import math
import struct
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Final, Iterable

from . import base32
from .errors import InvalidArgument
from .logging import get_logger

__all__ = [
    "HashAlgorithm",
    "MAX_PERIOD",
    "MIN_PERIOD",
    "SUPPORTED_DIGITS",
    "TOTP",
    "TOTPCode",
    "check_digits",
    "check_period",
    "check_secret",
    "compute_code",
    "compute_hotp",
    "format_code",
    "seconds_remaining",
    "timecode",
    "verify_code",
]


MIN_PERIOD: Final[int] = 1
MAX_PERIOD: Final[int] = 120
SUPPORTED_DIGITS: Final[frozenset[int]] = frozenset({6, 8})
_MAX_COUNTER: Final[int] = 2**64

logger = get_logger("authenticator.totp")

TimeInput = int | float | datetime


class HashAlgorithm(str, Enum):
    """HMAC hash functions accepted by authenticator apps."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digestmod(self) -> Callable[..., Any]:
        return _DIGESTS[self]

    @classmethod
    def parse(cls, value: "HashAlgorithm | str") -> "HashAlgorithm":
        """Return the member for *value*, accepting names like ``sha-256``."""

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidArgument(f"Unsupported algorithm: {value!r}")
        normalised = value.strip().upper().replace("-", "").replace("_", "")
        try:
            return cls(normalised)
        except ValueError:
            raise InvalidArgument(f"Unsupported algorithm: {value!r}") from None


_DIGESTS: Final = {
    HashAlgorithm.SHA1: hashlib.sha1,
    HashAlgorithm.SHA256: hashlib.sha256,
    HashAlgorithm.SHA512: hashlib.sha512,
}


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_period(period: int) -> int:
    if not _is_int(period) or not MIN_PERIOD <= period <= MAX_PERIOD:
        raise InvalidArgument(
            f"period must be an integer between {MIN_PERIOD} and {MAX_PERIOD}, got {period!r}"
        )
    return period


def check_digits(digits: int) -> int:
    if not _is_int(digits) or digits not in SUPPORTED_DIGITS:
        raise InvalidArgument(f"digits must be 6 or 8, got {digits!r}")
    return digits


def check_secret(secret: bytes) -> bytes:
    if not isinstance(secret, (bytes, bytearray, memoryview)):
        raise InvalidArgument("secret must be a bytes-like object")
    material = bytes(secret)
    if not material:
        raise InvalidArgument("secret must not be empty")
    return material


def _epoch_seconds(for_time: TimeInput | None) -> int:
    if for_time is None:
        timestamp: float = time.time()
    elif isinstance(for_time, datetime):
        # Naive datetimes are taken to be UTC.
        if for_time.tzinfo is None:
            for_time = for_time.replace(tzinfo=timezone.utc)
        timestamp = for_time.timestamp()
    elif isinstance(for_time, (int, float)) and not isinstance(for_time, bool):
        timestamp = for_time
    else:
        raise InvalidArgument(f"Unsupported time value: {for_time!r}")
    if not math.isfinite(timestamp) or timestamp < 0:
        raise InvalidArgument(f"time must be a non-negative finite timestamp, got {for_time!r}")
    return int(timestamp)


def timecode(for_time: TimeInput | None, period: int) -> int:
    """Return the time-step counter ``floor(seconds / period)``."""

    check_period(period)
    return _epoch_seconds(for_time) // period


def seconds_remaining(for_time: TimeInput | None, period: int) -> int:
    """Return the seconds left before the code for *for_time* rotates."""

    check_period(period)
    return period - _epoch_seconds(for_time) % period


def _hotp(secret: bytes, counter: int, algorithm: HashAlgorithm, digits: int) -> str:
    message = struct.pack(">Q", counter)
    digest = hmac.new(secret, message, algorithm.digestmod).digest()
    offset = digest[-1] & 0x0F
    truncated = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF
    return str(truncated % 10**digits).zfill(digits)


def compute_hotp(
    secret: bytes,
    counter: int,
    algorithm: HashAlgorithm | str = HashAlgorithm.SHA1,
    digits: int = 6,
) -> str:
    """Return the RFC 4226 HOTP value of *secret* at *counter*."""

    key = check_secret(secret)
    resolved = HashAlgorithm.parse(algorithm)
    check_digits(digits)
    if not _is_int(counter) or not 0 <= counter < _MAX_COUNTER:
        raise InvalidArgument(f"counter must be an unsigned 64-bit integer, got {counter!r}")
    return _hotp(key, counter, resolved, digits)


def format_code(code: str, *, split: bool = False) -> str:
    """Return *code*, optionally with a single space at its midpoint."""

    if not split:
        return code
    middle = len(code) // 2
    return f"{code[:middle]} {code[middle:]}"


@dataclass(frozen=True, slots=True)
class TOTPCode:
    """A generated code together with its validity window."""

    code: str
    seconds_remaining: int
    counter: int

    def formatted(self, *, split: bool = False) -> str:
        return format_code(self.code, split=split)

    def __str__(self) -> str:
        return self.code


def compute_code(
    secret: bytes,
    period: int = 30,
    algorithm: HashAlgorithm | str = HashAlgorithm.SHA1,
    digits: int = 6,
    for_time: TimeInput | None = None,
) -> TOTPCode:
    """Compute the RFC 6238 code for *secret* at *for_time* (default: now).

    All arguments are validated before the HMAC is evaluated; out-of-contract
    values raise :class:`~authenticator.errors.InvalidArgument`.
    """

    key = check_secret(secret)
    check_period(period)
    resolved = HashAlgorithm.parse(algorithm)
    check_digits(digits)
    seconds = _epoch_seconds(for_time)

    counter = seconds // period
    if counter >= _MAX_COUNTER:
        raise InvalidArgument(f"time is beyond the 64-bit counter range: {for_time!r}")
    code = _hotp(key, counter, resolved, digits)
    logger.debug(
        "totp_code_computed",
        algorithm=resolved.value,
        period=period,
        digits=digits,
        counter=counter,
    )
    return TOTPCode(code=code, seconds_remaining=period - seconds % period, counter=counter)


def _clean_code(code: str | int, digits: int) -> str:
    if isinstance(code, bool):
        return ""
    if isinstance(code, int):
        return str(code).zfill(digits)
    return "".join(ch for ch in str(code).strip() if ch.isalnum())


def verify_code(
    secret: bytes,
    code: str | int,
    period: int = 30,
    algorithm: HashAlgorithm | str = HashAlgorithm.SHA1,
    digits: int = 6,
    for_time: TimeInput | None = None,
    valid_window: int = 0,
) -> bool:
    """Return ``True`` when *code* matches a counter within *valid_window* steps."""

    key = check_secret(secret)
    check_period(period)
    resolved = HashAlgorithm.parse(algorithm)
    check_digits(digits)
    if not _is_int(valid_window) or valid_window < 0:
        raise InvalidArgument("valid_window must be a non-negative integer")
    current = _epoch_seconds(for_time) // period

    candidate = _clean_code(code, digits)
    if len(candidate) != digits or not (candidate.isascii() and candidate.isdigit()):
        logger.debug("totp_code_malformed", length=len(candidate), digits=digits)
        return False

    counters: Iterable[int] = range(
        max(current - valid_window, 0),
        min(current + valid_window, _MAX_COUNTER - 1) + 1,
    )
    matched = False
    for counter in counters:
        # No early exit: the whole window is scanned.
        if hmac.compare_digest(_hotp(key, counter, resolved, digits), candidate):
            matched = True
    logger.debug(
        "totp_code_verified",
        algorithm=resolved.value,
        period=period,
        counter=current,
        valid_window=valid_window,
        matched=matched,
    )
    return matched


class TOTP:
    """Time-based One Time Password generator bound to a Base32 secret."""

    def __init__(
        self,
        secret: str,
        interval: int = 30,
        digits: int = 6,
        algorithm: HashAlgorithm | str = HashAlgorithm.SHA1,
    ) -> None:
        self.secret = secret
        self.interval = check_period(interval)
        self.digits = check_digits(digits)
        self.algorithm = HashAlgorithm.parse(algorithm)
        self._key = check_secret(base32.decode(secret))

    def byte_secret(self) -> bytes:
        return self._key

    def now(self) -> str:
        return self.at(None)

    def at(self, for_time: TimeInput | None) -> str:
        return self.generate(for_time).code

    def generate(self, for_time: TimeInput | None = None) -> TOTPCode:
        return compute_code(self._key, self.interval, self.algorithm, self.digits, for_time)

    def remaining(self, for_time: TimeInput | None = None) -> int:
        return seconds_remaining(for_time, self.interval)

    def verify(
        self,
        otp: str | int,
        for_time: TimeInput | None = None,
        valid_window: int = 0,
    ) -> bool:
        return verify_code(
            self._key,
            otp,
            self.interval,
            self.algorithm,
            self.digits,
            for_time=for_time,
            valid_window=valid_window,
        )

    def provisioning_uri(self, name: str, issuer_name: str | None = None) -> str:
        from .uri import build_uri

        return build_uri(
            base32.encode(self._key),
            name,
            issuer=issuer_name,
            period=self.interval,
            algorithm=self.algorithm,
            digits=self.digits,
        )

    def __repr__(self) -> str:
        return (
            f"TOTP(interval={self.interval}, digits={self.digits}, "
            f"algorithm={self.algorithm.value})"
        )
