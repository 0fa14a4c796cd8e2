"""
Collaborator protocols for the blacklist rule subsystem.

Explicit typing.Protocol definitions for everything the host game server supplies.
The rule engine depends only on these contracts, never on concrete host classes.
"""

# pylint: disable=unnecessary-ellipsis  # Reason: Protocol method bodies use ... per typing.Protocol convention

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from blockguard.blacklist.models import ActionKind, AuditRecord


class ActorProtocol(Protocol):
    """An entity (normally a player) whose action triggered an event."""

    @property
    def name(self) -> str:
        """Stable identity of the actor, used for audit records and per-actor state."""
        ...

    def is_in_group(self, group: str) -> bool:
        """Return True if the actor belongs to the named permission group."""
        ...


class ItemNameRegistryProtocol(Protocol):
    """Host lookup from symbolic block/item names to numeric identifiers."""

    def name_to_identifier(self, name: str) -> int | None:
        """Return the identifier for a name, or None (or 0) if there is no such item."""
        ...


class AuditSinkProtocol(Protocol):
    """Destination for structured denial records."""

    def write(self, record: AuditRecord) -> None:
        """Record one denied action."""
        ...


class ActorStateProtocol(Protocol):
    """Per-actor transient state kept for the lifetime of a session."""

    def record_denial(self, actor_name: str, identifier: int, action: ActionKind) -> None:
        """Note that an action by this actor was suppressed."""
        ...

    def forget(self, actor_name: str) -> None:
        """Discard everything held for an actor that has disconnected."""
        ...
