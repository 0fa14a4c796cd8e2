"""
Blacklist rule subsystem.

Parses the blacklist file into a rule index and evaluates host events (right-click,
left-click, disconnect) against it.

Usage:
    from blockguard.blacklist import MappingItemNameRegistry, create_dispatcher

    dispatcher = create_dispatcher(MappingItemNameRegistry({"tnt": 46}))
    if dispatcher.on_right_click_attempt(player, placed, clicked, held_item):
        ...  # cancel the event
"""

from .denial_tracker import DenialTracker
from .dispatch import BlacklistDispatcher
from .entry import FrozenRuleEntryError, RuleEntry
from .factory import create_dispatcher
from .identifier_resolver import NO_SUCH_ITEM, IdentifierResolver, MappingItemNameRegistry
from .index import RuleIndex, RuleIndexBuilder
from .models import ActionKind, AuditRecord
from .parser import BlacklistParser, load_blacklist_file, parse_blacklist

__all__ = [
    "ActionKind",
    "AuditRecord",
    "BlacklistDispatcher",
    "BlacklistParser",
    "DenialTracker",
    "FrozenRuleEntryError",
    "IdentifierResolver",
    "MappingItemNameRegistry",
    "NO_SUCH_ITEM",
    "RuleEntry",
    "RuleIndex",
    "RuleIndexBuilder",
    "create_dispatcher",
    "load_blacklist_file",
    "parse_blacklist",
]
