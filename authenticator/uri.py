"""Enrollment descriptors (``otpauth://`` URIs) and their QR rendering."""
from __future__ import annotations

from typing import TextIO
from urllib.parse import quote, urlencode

import qrcode

from .errors import InvalidArgument
from .totp import HashAlgorithm, check_digits, check_period

__all__ = ["build_uri", "render_qr"]


def _require_text(value: str | None, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"{name} must be a non-empty string")
    return value.strip()


def build_uri(
    secret: str,
    label: str,
    *,
    issuer: str | None = None,
    period: int = 30,
    algorithm: HashAlgorithm | str = HashAlgorithm.SHA1,
    digits: int = 6,
) -> str:
    """Return the Key URI understood by Google Authenticator style apps.

    Parameters are emitted in a fixed order; ``issuer`` is omitted when not
    provided.
    """

    secret_text = _require_text(secret, "secret")
    label_text = _require_text(label, "label")
    check_period(period)
    check_digits(digits)
    resolved = HashAlgorithm.parse(algorithm)

    params: dict[str, str] = {"secret": secret_text}
    if issuer is not None and issuer.strip():
        params["issuer"] = issuer.strip()
    params["period"] = str(period)
    params["algorithm"] = resolved.value
    params["digits"] = str(digits)
    query = urlencode(params, quote_via=quote, safe="")
    return f"otpauth://totp/{quote(label_text, safe='')}?{query}"


def render_qr(uri: str, stream: TextIO) -> None:
    """Write *uri* to *stream* as a QR code drawn with text blocks."""

    qr = qrcode.QRCode(border=2)
    qr.add_data(uri)
    qr.make(fit=True)
    qr.print_ascii(out=stream, invert=True)
