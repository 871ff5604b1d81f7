"""
Entity naming.

Every declared entity carries a kind-specific prefix. Names are lowercased and
spaces become hyphens before the prefix is applied.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, field_validator


def normalize_name(prefix: str, name: str) -> str:
    """
    Normalize an entity name and apply its prefix.

    Spaces are replaced before trimming, so leading or trailing spaces end up
    as leading or trailing hyphens: ``normalize_name("test-", " a b ")`` is
    ``"test--a-b-"``.

    Args:
        prefix: Kind-specific prefix (e.g. ``sbq-``)
        name: Raw name as declared

    Returns:
        Prefixed, normalized name
    """
    prefix = prefix.lower()
    name = name.lower().replace(" ", "-").strip()
    return name if name.startswith(prefix) else f"{prefix}{name}"


class EntityWithPrefix(BaseModel):
    """Base model for named entities; ``name`` is stored normalized."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    prefix: ClassVar[str] = ""

    name: str

    @field_validator('name')
    @classmethod
    def apply_prefix(cls, v: str) -> str:
        return normalize_name(cls.prefix, v)
