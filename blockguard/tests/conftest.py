"""
Test configuration and fixtures for the BlockGuard test suite.

Provides lightweight stand-ins for the host collaborators (players, the item name
registry, the audit sink) so the rule engine can be exercised in isolation.
"""

import os
from dataclasses import dataclass, field
from unittest.mock import Mock

import pytest

os.environ.setdefault("LOGGING_ENVIRONMENT", "unit_test")

from blockguard.blacklist.denial_tracker import DenialTracker  # noqa: E402
from blockguard.blacklist.dispatch import BlacklistDispatcher  # noqa: E402
from blockguard.blacklist.identifier_resolver import IdentifierResolver, MappingItemNameRegistry  # noqa: E402
from blockguard.blacklist.parser import parse_blacklist  # noqa: E402


@dataclass
class FakePlayer:
    """Minimal actor implementing the actor protocol."""

    name: str
    groups: set[str] = field(default_factory=set)

    def is_in_group(self, group: str) -> bool:
        return group in self.groups


@pytest.fixture
def item_names():
    """Symbolic names known to the fake host."""
    return {
        "stone": 1,
        "grass": 2,
        "dirt": 3,
        "cobblestone": 4,
        "tnt": 46,
        "lava": 10,
        "flint_and_steel": 259,
        "lava_bucket": 327,
    }


@pytest.fixture
def registry(item_names):
    return MappingItemNameRegistry(item_names)


@pytest.fixture
def resolver(registry):
    return IdentifierResolver(registry)


@pytest.fixture
def audit_sink():
    """Audit sink that records writes."""
    return Mock()


@pytest.fixture
def tracker():
    return DenialTracker()


@pytest.fixture
def make_dispatcher(resolver, audit_sink, tracker):
    """Build a dispatcher with the given blacklist text already loaded."""

    def _make(text: str = "") -> BlacklistDispatcher:
        index = parse_blacklist(text, resolver)
        return BlacklistDispatcher(resolver, audit=audit_sink, actor_state=tracker, index=index)

    return _make


@pytest.fixture
def guest():
    return FakePlayer(name="Wilbur", groups={"default"})


@pytest.fixture
def builder():
    return FakePlayer(name="Lavinia", groups={"default", "builders"})


@pytest.fixture
def admin():
    return FakePlayer(name="Armitage", groups={"admins"})
