# third-party imports
from loguru import logger

# built-in imports
from asyncio import to_thread
from os import urandom
from threading import Lock
from typing import Any

# local imports
from .compare import constant_time_equals
from .errors import InvalidConfiguration
from .formats import FormatVersion, iterations, parse_token, render_token
from .kdf import RandomSource, derive, generate_salt
from .types import HasherPresets


class CredentialHasher:

    PRESETS: dict[str, HasherPresets] = {
        "default": {"cost": 16},
        "fast": {"cost": 10},
        "strong": {"cost": 20},
    }

    DEFAULT_COST = PRESETS["default"]["cost"]

    def __init__(
        self,
        cost: int = DEFAULT_COST,
        version: FormatVersion = FormatVersion.PBKDF2_HMAC_SHA1,
        random_source: RandomSource = urandom,
    ) -> None:
        """Hash secrets into self-describing tokens and verify secrets against them.

        Instances hold no mutable state besides the lock around random draws
        and can be shared between threads.

        Args:
            cost (int, optional): Exponential cost for new tokens, derivation runs
                2**cost iterations. Must be between 0 and 30. Defaults to 16.
            version (FormatVersion, optional): Format version for new tokens.
                Defaults to FormatVersion.PBKDF2_HMAC_SHA1.
            random_source (RandomSource, optional): Cryptographically secure source
                of random bytes used for salts. Calls to it are serialized by a
                per-instance lock, so it does not need to be thread-safe.
                Defaults to os.urandom.

        Raises:
            InvalidConfiguration: If cost or version is not usable.
        """
        iterations(cost)

        if not isinstance(version, FormatVersion):
            raise InvalidConfiguration(f"Unsupported format version: {version!r}.")

        self._cost = cost
        self._version = version
        self._random_source = random_source
        self._random_lock = Lock()

        logger.debug(f"CredentialHasher using {version.name} with cost {cost}.")

    @property
    def cost(self) -> int:
        return self._cost

    @cost.setter
    def cost(self, _: Any) -> None:
        raise AttributeError(
            "Cost is fixed at construction." " Create a new CredentialHasher instead."
        )

    @property
    def version(self) -> FormatVersion:
        return self._version

    @version.setter
    def version(self, _: Any) -> None:
        raise AttributeError(
            "Format version is fixed at construction."
            " Create a new CredentialHasher instead."
        )

    @classmethod
    def from_preset(cls, name: str, **kwargs: Any) -> "CredentialHasher":
        """Create a hasher from one of the named PRESETS.

        Args:
            name (str): Name of the preset.
            **kwargs: Further arguments for the constructor. They take precedence
                over the preset, so cost=... overrides the preset cost.

        Raises:
            InvalidConfiguration: If there is no preset with that name.

        Returns:
            CredentialHasher: The configured hasher.
        """
        try:
            presets = cls.PRESETS[name]
        except KeyError as e:
            raise InvalidConfiguration(f"Unknown preset: {name!r}.") from e
        return cls(**{**presets, **kwargs})

    def hash(self, secret: bytes) -> str:
        """Hash a secret for storage.

        Every call draws a fresh salt, so hashing the same secret twice gives
        two different tokens.

        Args:
            secret (bytes): The secret to hash.

        Returns:
            str: The token to store.
        """
        _check_secret(secret)

        version = self._version
        with self._random_lock:
            salt = generate_salt(version.salt_size, self._random_source)
        key = derive(
            bytes(secret),
            salt,
            iterations(self._cost),
            version.key_size,
            version.algorithm,
        )

        logger.debug(f"Hashed secret with {version.name} at cost {self._cost}.")

        return render_token(version, self._cost, salt, key)

    def verify(self, secret: bytes, token: str) -> bool:
        """Check a secret against a stored token.

        The cost is taken from the token, not from this hasher, so tokens
        created at any cost keep verifying after the configured cost changes.

        Args:
            secret (bytes): The secret to check.
            token (str): A token created by hash().

        Raises:
            MalformedToken: If the token cannot be parsed.

        Returns:
            bool: True if the secret matches the token.
        """
        _check_secret(secret)

        parts = parse_token(token)
        candidate = derive(
            bytes(secret),
            parts.salt,
            iterations(parts.cost),
            len(parts.key),
            parts.version.algorithm,
        )
        matches = constant_time_equals(parts.key, candidate)

        logger.debug(
            f"Verified secret with {parts.version.name} at cost {parts.cost}:"
            f" {'match' if matches else 'no match'}."
        )

        return matches

    def needs_rehash(self, token: str) -> bool:
        """Check whether a token was created with weaker settings than configured.

        Args:
            token (str): The token to check.

        Raises:
            MalformedToken: If the token cannot be parsed.

        Returns:
            bool: True if the token's cost is below the configured cost or it uses
                another format version.
        """
        parts = parse_token(token)
        return parts.version is not self._version or parts.cost < self._cost

    def verify_and_update(self, secret: bytes, token: str) -> tuple[bool, str | None]:
        """Verify a secret and create a replacement token if the stored one is outdated.

        Args:
            secret (bytes): The secret to check.
            token (str): The stored token.

        Raises:
            MalformedToken: If the token cannot be parsed.

        Returns:
            tuple[bool, str | None]: Whether the secret matched, and a new token
                to store in place of the old one or None if no update is needed.
        """
        if not self.verify(secret, token):
            return False, None
        if self.needs_rehash(token):
            logger.debug(
                f"Upgrading token to {self._version.name} at cost {self._cost}."
            )
            return True, self.hash(secret)
        return True, None

    async def hash_async(self, secret: bytes) -> str:
        """Run hash() in a worker thread.

        Args:
            secret (bytes): The secret to hash.

        Returns:
            str: The token to store.
        """
        return await to_thread(self.hash, secret)

    async def verify_async(self, secret: bytes, token: str) -> bool:
        """Run verify() in a worker thread.

        Args:
            secret (bytes): The secret to check.
            token (str): A token created by hash().

        Returns:
            bool: True if the secret matches the token.
        """
        return await to_thread(self.verify, secret, token)


def _check_secret(secret: bytes) -> None:
    if not isinstance(secret, (bytes, bytearray, memoryview)):
        raise TypeError(
            f"Secret must be a bytes-like object, not {type(secret).__name__}."
            " Encode text secrets before hashing them."
        )
