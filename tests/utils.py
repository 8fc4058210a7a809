"""Shared test data."""

from __future__ import annotations

import json

# RFC 6238 Appendix B seeds, one per hash function.
RFC_SEEDS = {
    "SHA1": b"12345678901234567890",
    "SHA256": b"12345678901234567890123456789012",
    "SHA512": b"1234567890123456789012345678901234567890123456789012345678901234",
}

RFC_SHA1_BASE32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


def logged_events(caplog, name: str) -> list[dict]:
    """Return the JSON payloads emitted through the stdlib logger *name*."""

    return [json.loads(record.getMessage()) for record in caplog.records if record.name == name]
