"""
The identifier -> rule entry index built from a blacklist file.

Aliasing is explicit: each identifier maps to a slot in an arena of entries, and
every identifier named in one section points at the same slot.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from blockguard.blacklist.entry import RuleEntry


class RuleIndexBuilder:
    """Mutable staging area used while a blacklist is being parsed."""

    def __init__(self) -> None:
        self._entries: list[RuleEntry] = []
        self._slots: dict[int, int] = {}

    def new_section(self, identifiers: list[int]) -> RuleEntry:
        """
        Create one entry and bind every identifier to it.

        Earlier bindings for the same identifiers are replaced, so the last section
        naming an identifier wins.
        """
        entry = RuleEntry()
        slot = len(self._entries)
        self._entries.append(entry)
        for identifier in identifiers:
            self._slots[identifier] = slot
        return entry

    def __len__(self) -> int:
        return len(self._slots)

    def build(self) -> RuleIndex | None:
        """
        Freeze the staged entries into an index.

        Returns:
            The index, or None when no identifier was ever registered
        """
        if not self._slots:
            return None

        live_slots = sorted(set(self._slots.values()))
        renumber = {old: new for new, old in enumerate(live_slots)}
        entries = tuple(self._entries[old] for old in live_slots)
        for entry in entries:
            entry.freeze()
        slots = {identifier: renumber[slot] for identifier, slot in self._slots.items()}
        return RuleIndex(entries, slots)


class RuleIndex(Mapping[int, RuleEntry]):
    """Read-only mapping of identifiers to their (possibly shared) rule entries."""

    def __init__(self, entries: tuple[RuleEntry, ...], slots: dict[int, int]):
        self._entries = entries
        self._slots = MappingProxyType(dict(slots))

    def __getitem__(self, identifier: int) -> RuleEntry:
        return self._entries[self._slots[identifier]]

    def __iter__(self) -> Iterator[int]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def entries(self) -> tuple[RuleEntry, ...]:
        """Distinct rule entries, one per surviving section."""
        return self._entries

    def slot_of(self, identifier: int) -> int | None:
        return self._slots.get(identifier)

    def aliases_of(self, identifier: int) -> frozenset[int]:
        """Return every identifier sharing a rule entry with the given one."""
        slot = self._slots.get(identifier)
        if slot is None:
            return frozenset()
        return frozenset(other for other, other_slot in self._slots.items() if other_slot == slot)

    def __repr__(self) -> str:
        return f"RuleIndex(identifiers={len(self._slots)}, entries={len(self._entries)})"
