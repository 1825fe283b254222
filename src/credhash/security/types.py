from typing import TYPE_CHECKING, TypedDict, NamedTuple

if TYPE_CHECKING:
    from .formats import FormatVersion


class HasherPresets(TypedDict):
    cost: int


class TokenParts(NamedTuple):
    version: "FormatVersion"
    cost: int
    salt: bytes
    key: bytes
