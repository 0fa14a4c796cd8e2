"""Resolution of blacklist tokens to numeric block/item identifiers."""

from __future__ import annotations

import re
from collections.abc import Mapping

from blockguard.blacklist.protocols import ItemNameRegistryProtocol

# Host registries report an unknown name with this identifier.
NO_SUCH_ITEM = 0

_NUMERIC_TOKEN = re.compile(r"^[+-]?\d+$")


class MappingItemNameRegistry:
    """Case-insensitive in-memory registry of item names."""

    def __init__(self, names: Mapping[str, int] | None = None):
        self._names = {name.strip().lower(): identifier for name, identifier in (names or {}).items()}

    def name_to_identifier(self, name: str) -> int | None:
        return self._names.get(name.strip().lower())

    def register(self, name: str, identifier: int) -> None:
        self._names[name.strip().lower()] = identifier

    def __len__(self) -> int:
        return len(self._names)


class IdentifierResolver:
    """
    Map a configuration token to an identifier.

    Numeric tokens are taken literally. Anything else is looked up in the host's
    name registry; a miss, or the registry's "no such item" value, resolves to None.
    """

    def __init__(self, registry: ItemNameRegistryProtocol):
        self._registry = registry

    def resolve(self, token: str) -> int | None:
        """
        Resolve a token to an identifier.

        Args:
            token: Numeric id or symbolic name, surrounding whitespace ignored

        Returns:
            The identifier, or None when the token cannot be resolved
        """
        token = token.strip()
        if not token:
            return None

        if _NUMERIC_TOKEN.match(token):
            return int(token)

        identifier = self._registry.name_to_identifier(token)
        if identifier is None or identifier == NO_SUCH_ITEM:
            return None
        return identifier
