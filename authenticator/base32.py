"""RFC 4648 Base32 codec without padding.

Secrets typed in by humans tend to carry spaces, dashes and lowercase
letters, so :func:`decode` filters anything outside the alphabet instead of
rejecting it.  Both directions work on an explicit bit accumulator: bytes are
shifted in most-significant bit first and drained in 5-bit (encode) or 8-bit
(decode) groups.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping

from .logging import get_logger

__all__ = ["ALPHABET", "encode", "decode"]


ALPHABET: Final[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_VALUES: Final[Mapping[str, int]] = MappingProxyType(
    {char: value for value, char in enumerate(ALPHABET)}
)

logger = get_logger("authenticator.base32")


def encode(data: bytes) -> str:
    """Encode *data* as unpadded Base32 text.

    A trailing group shorter than five bits is filled with zero bits on the
    right, so ``len(result) == ceil(len(data) * 8 / 5)``.
    """

    buffer = 0
    bits = 0
    output: list[str] = []
    for byte in bytes(data):
        buffer = (buffer << 8) | byte
        bits += 8
        while bits >= 5:
            bits -= 5
            output.append(ALPHABET[(buffer >> bits) & 0x1F])
        buffer &= (1 << bits) - 1
    if bits:
        output.append(ALPHABET[(buffer << (5 - bits)) & 0x1F])
    return "".join(output)


def decode(text: str) -> bytes:
    """Decode Base32 *text* into bytes.

    The text is uppercased first (so a dotless ``ı`` counts as ``I``), then
    characters outside the alphabet are skipped.  Bits left over after the
    last complete byte are dropped.
    """

    buffer = 0
    bits = 0
    discarded = 0
    output = bytearray()
    for char in text.upper():
        value = _VALUES.get(char)
        if value is None:
            discarded += 1
            continue
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            output.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    if discarded:
        logger.debug("base32_characters_discarded", count=discarded)
    return bytes(output)
