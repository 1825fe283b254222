# third-party imports
from cryptography.hazmat.primitives import hashes
from loguru import logger

# built-in imports
from base64 import urlsafe_b64decode, urlsafe_b64encode
from binascii import Error as BinasciiError
from enum import Enum
from re import compile as re_compile

# local imports
from .errors import CredentialHasherError, InvalidConfiguration, MalformedToken
from .types import TokenParts

MIN_COST = 0
MAX_COST = 30

_COST_PATTERN = re_compile(r"[0-9]{1,2}")
_PAYLOAD_PATTERN = re_compile(r"[A-Za-z0-9_-]{43,}")


class FormatVersion(Enum):
    """Supported token format versions.

    Each member carries the literal prefix that tags its tokens together with
    the parameters its keys are derived with. New derivation schemes are added
    as new members; tokens of older members keep parsing unchanged.
    """

    PBKDF2_HMAC_SHA1 = ("$31$", hashes.SHA1, 16, 16)

    def __init__(
        self,
        prefix: str,
        hash_type: type[hashes.HashAlgorithm],
        salt_size: int,
        key_size: int,
    ) -> None:
        self.prefix = prefix
        self.hash_type = hash_type
        self.salt_size = salt_size
        self.key_size = key_size

    @property
    def algorithm(self) -> hashes.HashAlgorithm:
        return self.hash_type()

    @classmethod
    def from_token(cls, token: str) -> "FormatVersion":
        """Find the format version a token was written with.

        Args:
            token (str): The token to inspect.

        Raises:
            MalformedToken: If no known prefix starts the token.

        Returns:
            FormatVersion: The matching format version.
        """
        if not isinstance(token, str):
            raise _malformed(f"token must be str, not {type(token).__name__}")

        for version in cls:
            if token.startswith(version.prefix):
                return version

        raise _malformed("unknown format prefix")


def iterations(
    cost: int, error: type[CredentialHasherError] = InvalidConfiguration
) -> int:
    """Convert a cost into the number of derivation iterations.

    Args:
        cost (int): The exponential cost, from MIN_COST to MAX_COST.
        error (type[CredentialHasherError], optional): Error to raise for an
            invalid cost. Defaults to InvalidConfiguration.

    Returns:
        int: 2 to the power of cost.
    """
    if isinstance(cost, bool) or not isinstance(cost, int):
        raise error(f"Cost must be an integer, not {type(cost).__name__}.")
    if not MIN_COST <= cost <= MAX_COST:
        raise error(f"Cost must be between {MIN_COST} and {MAX_COST}, got {cost}.")
    return 1 << cost


def render_token(version: FormatVersion, cost: int, salt: bytes, key: bytes) -> str:
    """Encode the parts of a token into its textual form.

    Args:
        version (FormatVersion): The format version to tag the token with.
        cost (int): The cost the key was derived with.
        salt (bytes): The salt the key was derived with.
        key (bytes): The derived key.

    Returns:
        str: The token.
    """
    payload = urlsafe_b64encode(salt + key).rstrip(b"=").decode("ascii")
    return f"{version.prefix}{cost}${payload}"


def parse_token(token: str) -> TokenParts:
    """Split a token into its parts.

    Args:
        token (str): The token to parse.

    Raises:
        MalformedToken: If the token does not have a valid layout.

    Returns:
        TokenParts: Format version, cost, salt and key of the token.
    """
    version = FormatVersion.from_token(token)

    cost_str, sep, payload = token[len(version.prefix) :].partition("$")

    if not sep:
        raise _malformed("missing cost separator")

    if _COST_PATTERN.fullmatch(cost_str) is None:
        raise _malformed("cost is not a one or two digit decimal number")

    cost = int(cost_str)
    iterations(cost, error=MalformedToken)

    if _PAYLOAD_PATTERN.fullmatch(payload) is None:
        raise _malformed("payload is not at least 43 base64url characters")

    try:
        raw = urlsafe_b64decode(payload + "=" * (-len(payload) % 4))
    except BinasciiError as e:
        raise _malformed("payload is not valid base64") from e

    if len(raw) <= version.salt_size:
        raise _malformed("payload is shorter than the salt")

    return TokenParts(
        version=version,
        cost=cost,
        salt=raw[: version.salt_size],
        key=raw[version.salt_size :],
    )


def _malformed(reason: str) -> MalformedToken:
    logger.debug(f"Rejected token: {reason}")
    return MalformedToken(f"Malformed token: {reason}.")
