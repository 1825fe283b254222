# third-party imports
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

# built-in imports
from os import urandom
from typing import Callable

RandomSource = Callable[[int], bytes]


def derive(
    secret: bytes,
    salt: bytes,
    iterations: int,
    length: int,
    algorithm: hashes.HashAlgorithm | None = None,
) -> bytes:
    """Derive a key from a secret with PBKDF2.

    Args:
        secret (bytes): The secret to derive from.
        salt (bytes): The salt to use.
        iterations (int): Number of PBKDF2 iterations.
        length (int): Length of the derived key in bytes.
        algorithm (hashes.HashAlgorithm | None, optional): Inner HMAC hash.
            If None, will use SHA1. Defaults to None.

    Returns:
        bytes: The derived key.
    """
    return PBKDF2HMAC(
        algorithm=algorithm or hashes.SHA1(),
        length=length,
        salt=salt,
        iterations=iterations,
    ).derive(secret)


def generate_salt(n: int = 16, random_source: RandomSource = urandom) -> bytes:
    """Generates a random salt of size n.

    Args:
        n (int, optional): The size of the salt in bytes. Defaults to 16.
        random_source (RandomSource, optional): Source of random bytes. Callers
            sharing a source that is not thread-safe must serialize calls.
            Defaults to os.urandom.

    Returns:
        bytes: The salt.
    """
    salt = random_source(n)
    if len(salt) != n:
        raise RuntimeError(f"Random source returned {len(salt)} bytes, expected {n}.")
    return salt
