"""Shared test fixtures."""

import pytest

from credhash.security.hasher import CredentialHasher


@pytest.fixture()
def hasher():
    """A hasher cheap enough to run many derivations."""
    return CredentialHasher(cost=4)


@pytest.fixture()
def token(hasher):
    """A token for b"correct horse" created at cost 4."""
    return hasher.hash(b"correct horse")
