"""Exceptions raised by the authenticator core."""
from __future__ import annotations

__all__ = ["InvalidArgument"]


class InvalidArgument(ValueError):
    """Raised when a parameter falls outside its supported range or set."""
