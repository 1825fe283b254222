"""Tests for token rendering and parsing."""

from base64 import urlsafe_b64encode

import pytest

from credhash.security.errors import InvalidConfiguration, MalformedToken
from credhash.security.formats import (
    MAX_COST,
    MIN_COST,
    FormatVersion,
    iterations,
    parse_token,
    render_token,
)

SALT = bytes(range(16))
KEY = bytes(range(100, 116))
VERSION = FormatVersion.PBKDF2_HMAC_SHA1


def _payload(raw: bytes) -> str:
    return urlsafe_b64encode(raw).rstrip(b"=").decode()


def test_version_parameters():
    assert VERSION.prefix == "$31$"
    assert VERSION.salt_size == 16
    assert VERSION.key_size == 16
    assert VERSION.algorithm.name == "sha1"


def test_from_token():
    assert FormatVersion.from_token("$31$4$whatever") is VERSION


@pytest.mark.parametrize("token", ["$32$4$abc", "31$4$abc", "", " $31$4$abc"])
def test_from_token_unknown(token):
    with pytest.raises(MalformedToken, match="unknown format prefix"):
        FormatVersion.from_token(token)


def test_iterations():
    assert iterations(0) == 1
    assert iterations(4) == 16
    assert iterations(16) == 65536
    assert iterations(30) == 2**30
    assert (MIN_COST, MAX_COST) == (0, 30)


def test_iterations_error_type():
    with pytest.raises(InvalidConfiguration):
        iterations(31)
    with pytest.raises(MalformedToken):
        iterations(-1, error=MalformedToken)


def test_render_token():
    token = render_token(VERSION, 7, SALT, KEY)

    assert token == "$31$7$" + _payload(SALT + KEY)
    assert "=" not in token


def test_render_cost_has_no_leading_zeros():
    assert render_token(VERSION, 0, SALT, KEY).startswith("$31$0$")
    assert render_token(VERSION, 30, SALT, KEY).startswith("$31$30$")


def test_parse_token():
    parts = parse_token(render_token(VERSION, 12, SALT, KEY))

    assert parts.version is VERSION
    assert parts.cost == 12
    assert parts.salt == SALT
    assert parts.key == KEY


def test_parse_longer_key():
    """Keys longer than the default size are kept whole."""
    key = bytes(32)
    parts = parse_token("$31$3$" + _payload(SALT + key))

    assert parts.key == key


@pytest.mark.parametrize(
    "token",
    [
        "$31$$" + _payload(SALT + KEY),
        "$31$-1$" + _payload(SALT + KEY),
        "$31$1a$" + _payload(SALT + KEY),
        "$31$٤$" + _payload(SALT + KEY),
        "$31$31$" + _payload(SALT + KEY),
        "$31$004$" + _payload(SALT + KEY),
        "$31$" + "1" * 5000 + "$" + _payload(SALT + KEY),
        "$31$4$" + _payload(SALT + KEY) + "\n",
        "$31$4$" + _payload(SALT + KEY) + "=",
        "$31$4$" + _payload(SALT + KEY).replace("A", "+", 1),
        "$31$4$" + _payload(SALT + KEY)[:42],
        "$31$4$" + _payload(SALT),
        "$31$4$" + "A" * 45,
    ],
)
def test_parse_malformed(token):
    with pytest.raises(MalformedToken):
        parse_token(token)


def test_malformed_errors_name_the_reason():
    with pytest.raises(MalformedToken, match="cost is not a one or two digit"):
        parse_token("$31$x$" + _payload(SALT + KEY))
    with pytest.raises(MalformedToken, match="base64"):
        parse_token("$31$4$" + "A" * 45)


def test_parse_overlong_cost_is_malformed():
    """Cost fields too long to convert to int are rejected before conversion."""
    with pytest.raises(MalformedToken, match="one or two digit"):
        parse_token("$31$" + "1" * 5000 + "$" + "A" * 43)
