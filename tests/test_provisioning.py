import logging
import re

import pytest

from authenticator import base32
from authenticator.errors import InvalidArgument
from authenticator.provisioning import (
    DEFAULT_SECRET_LENGTH,
    generate_secret,
    generate_secret_bytes,
    random_base32,
)

from .utils import logged_events


def test_default_secret_is_160_bits():
    generated = generate_secret()

    assert len(generated.secret_bytes) == DEFAULT_SECRET_LENGTH == 20
    assert len(generated.base32) == 32
    assert re.fullmatch(r"[A-Z2-7]+", generated.base32)
    assert base32.decode(generated.base32) == generated.secret_bytes


@pytest.mark.parametrize("length", [1, 5, 10, 32, 64])
def test_custom_lengths(length):
    assert len(generate_secret_bytes(length)) == length


def test_secrets_are_unique():
    assert len({random_base32() for _ in range(50)}) == 50


@pytest.mark.parametrize("length", [0, -5, 2.5, True, "20"])
def test_rejects_invalid_lengths(length):
    with pytest.raises(InvalidArgument):
        generate_secret_bytes(length)


def test_secret_bytes_come_from_secrets_module(monkeypatch):
    monkeypatch.setattr("authenticator.provisioning.secrets.token_bytes", lambda n: b"\x00" * n)

    generated = generate_secret(5)

    assert generated.secret_bytes == b"\x00" * 5
    assert generated.base32 == "AAAAAAAA"


def test_repr_hides_key_material(monkeypatch):
    monkeypatch.setattr("authenticator.provisioning.secrets.token_bytes", lambda n: b"\x07" * n)

    generated = generate_secret(10)

    assert repr(generated) == "GeneratedSecret(length=10)"
    assert generated.base32 not in repr(generated)


def test_unaligned_length_is_accepted_and_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="authenticator.provisioning")

    generated = generate_secret(16)

    assert len(generated.secret_bytes) == 16
    assert base32.decode(generated.base32) == generated.secret_bytes
    (event,) = logged_events(caplog, "authenticator.provisioning")
    assert event["event"] == "secret_length_not_base32_aligned"
    assert event["length"] == 16
    assert event["level"] == "debug"
