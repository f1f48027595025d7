"""
tokenkeeper.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) handed to the token service.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, as produced by a credential resolver.
    """

    id: int | str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def get(self, name: str) -> Any:
        if name == "id":
            return self.id
        return self.attributes.get(name)


# --- Module Notes -----------------------------------------------------------
# The token core only reads from `Principal`; resolvers own how it is populated.
