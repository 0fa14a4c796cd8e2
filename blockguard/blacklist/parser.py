"""
Blacklist file parser.

The format is line oriented:

    ; comment
    # comment
    [46,tnt,flint_and_steel]
    on-right=trusted
    ignore-groups=admins,moderators

A bracketed header names the identifiers of a section; the option lines below it
configure the single rule entry that all of those identifiers share. Problems in the
content (unknown names or options, stray lines) are logged and skipped, never raised.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from pathlib import Path

from blockguard.blacklist.entry import RuleEntry
from blockguard.blacklist.identifier_resolver import IdentifierResolver
from blockguard.blacklist.index import RuleIndex, RuleIndexBuilder
from blockguard.exceptions import BlacklistLoadError
from blockguard.structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

COMMENT_PREFIXES = (";", "#")

_SECTION_HEADER = re.compile(r"^\[(.*)\]$")

OPTION_SETTERS: dict[str, Callable[[RuleEntry, list[str]], None]] = {
    "ignore-groups": RuleEntry.set_ignore_groups,
    "on-destroy": RuleEntry.set_destroy_groups,
    "on-left": RuleEntry.set_left_click_groups,
    "on-right": RuleEntry.set_right_click_groups,
}


def _split_values(raw: str) -> list[str]:
    return [value.strip() for value in raw.split(",") if value.strip()]


class _SectionContext:
    """Entry and identifiers of the most recent section header."""

    __slots__ = ("entry", "identifiers")

    def __init__(self, entry: RuleEntry | None, identifiers: list[int]):
        self.entry = entry
        self.identifiers = identifiers


class BlacklistParser:
    """Single-use parser turning blacklist text into a RuleIndex."""

    def __init__(self, resolver: IdentifierResolver, source: str = "<text>"):
        self._resolver = resolver
        self._source = source
        self._builder = RuleIndexBuilder()
        self._section: _SectionContext | None = None
        self.warning_count = 0

    def parse(self, lines: str | Iterable[str]) -> RuleIndex | None:
        """
        Parse blacklist text.

        Args:
            lines: The whole text, or an iterable of its lines

        Returns:
            The rule index, or None if no identifier was registered
        """
        if isinstance(lines, str):
            lines = lines.splitlines()

        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.strip()
            if not line or line.startswith(COMMENT_PREFIXES):
                continue

            header = _SECTION_HEADER.match(line)
            if header:
                self._parse_header(header.group(1), line_number)
            elif self._section is not None:
                self._parse_option(line, line_number)
            else:
                self._warn("Found blacklist option with no heading", line_number, line=line)

        index = self._builder.build()
        self._section = None
        logger.info(
            "Blacklist parsed",
            source=self._source,
            identifiers=len(index) if index is not None else 0,
            entries=len(index.entries) if index is not None else 0,
            warnings=self.warning_count,
        )
        return index

    def _parse_header(self, content: str, line_number: int) -> None:
        identifiers: list[int] = []
        for token in content.split(","):
            token = token.strip()
            if not token:
                continue
            identifier = self._resolver.resolve(token)
            if identifier is None:
                # The rest of the header is dropped; what resolved so far is kept.
                self._warn("Unknown block name in blacklist", line_number, token=token)
                break
            if identifier not in identifiers:
                identifiers.append(identifier)

        entry = self._builder.new_section(identifiers) if identifiers else None
        self._section = _SectionContext(entry, identifiers)

    def _parse_option(self, line: str, line_number: int) -> None:
        key, separator, raw_value = line.partition("=")
        values = _split_values(raw_value)
        if not separator or not values:
            self._warn("Found blacklist option with no value", line_number, line=line)
            return

        option = key.strip().lower()
        setter = OPTION_SETTERS.get(option)
        if setter is None:
            self._warn("Unknown blacklist option", line_number, option=key.strip(), line=line)
            return

        section = self._section
        if section is not None and section.entry is not None:
            setter(section.entry, values)

    def _warn(self, message: str, line_number: int, **context) -> None:
        self.warning_count += 1
        logger.warning(message, source=self._source, line_number=line_number, **context)


def parse_blacklist(
    lines: str | Iterable[str],
    resolver: IdentifierResolver,
    *,
    source: str = "<text>",
) -> RuleIndex | None:
    """
    Parse blacklist text into a rule index.

    Args:
        lines: The whole text, or an iterable of its lines
        resolver: Resolver for identifier tokens in section headers
        source: Name used in warnings (normally the file name)

    Returns:
        The rule index, or None meaning "no blacklist configured"
    """
    return BlacklistParser(resolver, source=source).parse(lines)


def load_blacklist_file(path: Path | str, resolver: IdentifierResolver) -> RuleIndex | None:
    """
    Read and parse a blacklist file.

    Args:
        path: Location of the blacklist file
        resolver: Resolver for identifier tokens in section headers

    Returns:
        The rule index, or None meaning "no blacklist configured"

    Raises:
        BlacklistLoadError: If the file is missing, unreadable, or not UTF-8
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise BlacklistLoadError(
            f"Blacklist file does not exist: {file_path}", path=str(file_path), reason="missing"
        ) from exc
    except UnicodeDecodeError as exc:
        raise BlacklistLoadError(
            f"Blacklist file is not valid UTF-8: {file_path}", path=str(file_path), reason="encoding"
        ) from exc
    except OSError as exc:
        raise BlacklistLoadError(
            f"Could not read blacklist file {file_path}: {exc}", path=str(file_path), reason="unreadable"
        ) from exc

    return parse_blacklist(text, resolver, source=file_path.name)
