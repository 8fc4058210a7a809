"""Command line interface for generating secrets and one-time codes."""
from __future__ import annotations

import argparse
import sys
from typing import Callable, Optional, Sequence, TextIO

from pydantic import ValidationError

from . import base32
from .config import TOTPSettings, load_settings
from .errors import InvalidArgument
from .logging import bind_contextvars, clear_contextvars, get_logger, setup_logging
from .provisioning import generate_secret
from .totp import compute_code, verify_code
from .uri import build_uri, render_qr

__all__ = ["main"]

logger = get_logger("authenticator.cli")

Handler = Callable[[argparse.Namespace, TOTPSettings, TextIO], int]


def _canonical_secret(text: str) -> str:
    """Return *text* re-encoded without separators, rejecting empty secrets."""

    material = base32.decode(text)
    if not material:
        raise InvalidArgument("secret does not contain any Base32 characters")
    return base32.encode(material)


def _uri_for(secret: str, settings: TOTPSettings) -> str:
    return build_uri(
        secret,
        settings.label,
        issuer=settings.issuer,
        period=settings.period,
        algorithm=settings.algorithm,
        digits=settings.digits,
    )


def _cmd_secret(args: argparse.Namespace, settings: TOTPSettings, out: TextIO) -> int:
    generated = generate_secret(settings.secret_length)
    uri = _uri_for(generated.base32, settings)
    print(generated.base32, file=out)
    print(uri, file=out)
    if args.qr:
        render_qr(uri, out)
    return 0


def _cmd_code(args: argparse.Namespace, settings: TOTPSettings, out: TextIO) -> int:
    result = compute_code(
        base32.decode(args.secret),
        settings.period,
        settings.algorithm,
        settings.digits,
        for_time=args.time,
    )
    print(result.formatted(split=args.split), file=out)
    print(f"expires in {result.seconds_remaining}s", file=out)
    return 0


def _cmd_verify(args: argparse.Namespace, settings: TOTPSettings, out: TextIO) -> int:
    valid = verify_code(
        base32.decode(args.secret),
        args.code,
        settings.period,
        settings.algorithm,
        settings.digits,
        for_time=args.time,
        valid_window=settings.valid_window,
    )
    print("valid" if valid else "invalid", file=out)
    return 0 if valid else 1


def _cmd_uri(args: argparse.Namespace, settings: TOTPSettings, out: TextIO) -> int:
    uri = _uri_for(_canonical_secret(args.secret), settings)
    print(uri, file=out)
    if args.qr:
        render_qr(uri, out)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--period", type=int, help="Time step in seconds (1-120).")
    common.add_argument("--digits", type=int, choices=(6, 8), help="Code length.")
    common.add_argument(
        "--algorithm",
        help="HMAC hash function: SHA1, SHA256 or SHA512.",
    )

    timed = argparse.ArgumentParser(add_help=False)
    timed.add_argument(
        "--time",
        type=float,
        help="Unix timestamp to compute the code for instead of the current time.",
    )

    enrollment = argparse.ArgumentParser(add_help=False)
    enrollment.add_argument("--label", help="Account label shown by the authenticator app.")
    enrollment.add_argument("--issuer", help="Issuer shown by the authenticator app.")
    enrollment.add_argument("--qr", action="store_true", help="Print a QR code of the URI.")

    parser = argparse.ArgumentParser(
        prog="authenticator",
        description="Generate TOTP secrets and codes compatible with Google Authenticator.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    secret = subparsers.add_parser(
        "secret",
        parents=[common, enrollment],
        help="Generate a new shared secret and its enrollment URI.",
    )
    secret.add_argument("--length", type=int, help="Secret length in bytes.")
    secret.set_defaults(handler=_cmd_secret)

    code = subparsers.add_parser(
        "code",
        parents=[common, timed],
        help="Print the current code for a Base32 secret.",
    )
    code.add_argument("secret", help="Base32 secret.")
    code.add_argument("--split", action="store_true", help="Insert a space in the middle of the code.")
    code.set_defaults(handler=_cmd_code)

    verify = subparsers.add_parser(
        "verify",
        parents=[common, timed],
        help="Check a code against a Base32 secret.",
    )
    verify.add_argument("secret", help="Base32 secret.")
    verify.add_argument("code", help="Code to check.")
    verify.add_argument("--window", type=int, help="Accepted time steps before and after now.")
    verify.set_defaults(handler=_cmd_verify)

    uri = subparsers.add_parser(
        "uri",
        parents=[common, enrollment],
        help="Print the otpauth:// enrollment URI for an existing secret.",
    )
    uri.add_argument("secret", help="Base32 secret.")
    uri.set_defaults(handler=_cmd_uri)

    return parser


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(
            period=args.period,
            digits=args.digits,
            algorithm=args.algorithm,
            secret_length=getattr(args, "length", None),
            label=getattr(args, "label", None),
            issuer=getattr(args, "issuer", None),
            valid_window=getattr(args, "window", None),
        )
    except ValidationError as exc:
        parser.error(_format_validation_error(exc))

    setup_logging(level=settings.log_level)
    bind_contextvars(command=args.command)
    handler: Handler = args.handler
    try:
        status = handler(args, settings, sys.stdout)
    except InvalidArgument as exc:
        logger.warning("invalid_argument", error=str(exc))
        parser.error(str(exc))
    finally:
        clear_contextvars()
    logger.debug("command_completed", command=args.command, status=status)
    return status


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
