class CredentialHasherError(ValueError):
    """Base class for errors raised while hashing or verifying credentials."""


class InvalidConfiguration(CredentialHasherError):
    """A hasher was configured with an unusable cost, preset or format version."""


class MalformedToken(CredentialHasherError):
    """A token does not have the layout of any supported format version."""
