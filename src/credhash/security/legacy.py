# third-party imports
from cryptography.hazmat.primitives import hashes

# local imports
from .compare import constant_time_equals
from .kdf import generate_salt


class SaltedSha512Hasher:
    """Single-round salted SHA-512 digests.

    Only meant for checking digests written by older systems so they can be
    migrated to CredentialHasher tokens. Do not use it for new secrets.
    """

    @classmethod
    def hash(cls, secret: bytes, salt: bytes) -> str:
        """Hash a secret with a salt.

        Args:
            secret (bytes): The secret to hash.
            salt (bytes): The salt, fed to the digest before the secret.

        Returns:
            str: The digest as lowercase hex.
        """
        digest = hashes.Hash(hashes.SHA512())
        digest.update(salt)
        digest.update(secret)
        return digest.finalize().hex()

    @classmethod
    def verify(cls, secret: bytes, digest: str, salt: bytes) -> bool:
        """Check a secret against a stored digest.

        Args:
            secret (bytes): The secret to check.
            digest (str): The stored hex digest.
            salt (bytes): The salt the digest was created with.

        Raises:
            TypeError: If digest is not a str.

        Returns:
            bool: True if the secret matches the digest.
        """
        if not isinstance(digest, str):
            raise TypeError(f"Digest must be str, not {type(digest).__name__}.")

        return constant_time_equals(
            digest.lower().encode("utf-8"), cls.hash(secret, salt).encode("utf-8")
        )

    @classmethod
    def generate_salt(cls, n: int = 16) -> bytes:
        return generate_salt(n)
