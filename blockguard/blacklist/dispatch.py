"""
Blacklist event dispatch.

The host game server calls these entry points for every right-click, left-click and
disconnect. Each call looks the relevant identifiers up in the current rule index and
returns True when the host should suppress the action.

The index is replaced wholesale on reload: a new one is built off to the side and
published with a single attribute assignment. Every entry point reads the published
reference once, so a call never sees a mixture of two loads.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from blockguard.blacklist.identifier_resolver import IdentifierResolver
from blockguard.blacklist.index import RuleIndex
from blockguard.blacklist.models import ActionKind
from blockguard.blacklist.parser import load_blacklist_file, parse_blacklist
from blockguard.blacklist.protocols import ActorProtocol, ActorStateProtocol, AuditSinkProtocol
from blockguard.exceptions import BlacklistLoadError
from blockguard.structured_logging.blacklist_audit import blacklist_audit_logger
from blockguard.structured_logging.enhanced_logging_config import get_logger, log_exception_once

logger = get_logger(__name__)


class BlacklistDispatcher:
    """Evaluate host events against the loaded blacklist."""

    def __init__(
        self,
        resolver: IdentifierResolver,
        *,
        audit: AuditSinkProtocol | None = None,
        actor_state: ActorStateProtocol | None = None,
        index: RuleIndex | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            resolver: Resolver used when (re)loading blacklist text
            audit: Sink for denial records (defaults to the blacklist audit channel)
            actor_state: Per-actor transient state, told about denials and disconnects
            index: Initial rule index; None means no blacklist is configured
        """
        self._resolver = resolver
        self._audit = audit if audit is not None else blacklist_audit_logger
        self._actor_state = actor_state
        self._index = index
        self._reload_lock = threading.Lock()

    @property
    def index(self) -> RuleIndex | None:
        return self._index

    @property
    def is_configured(self) -> bool:
        return self._index is not None

    # Host event entry points -----------------------------------------------------------

    def on_right_click_attempt(
        self,
        actor: ActorProtocol,
        placed_target: Any,
        clicked_target: Any,
        held_identifier: int,
    ) -> bool:
        """
        Handle a right-click with an item in hand.

        The placed and clicked blocks are part of the host event but play no part in
        the decision; only the held item's rule is consulted.

        Returns:
            True if the action should be suppressed
        """
        index = self._index
        if index is None:
            return False

        entry = index.get(held_identifier)
        if entry is None:
            return False

        if not entry.evaluate_right_click(held_identifier, actor, audit=self._audit):
            self._record_denial(actor, held_identifier, ActionKind.RIGHT_CLICK)
            return True
        return False

    def on_left_click_attempt(self, actor: ActorProtocol, held_identifier: int, target_block_identifier: int) -> bool:
        """
        Handle a left-click on a block.

        The held item's left-click hook is checked first, then the target block's
        destroy hook.

        Returns:
            True if the action should be suppressed
        """
        index = self._index
        if index is None:
            return False

        held_entry = index.get(held_identifier)
        if held_entry is not None and not held_entry.evaluate_left_click(held_identifier, actor, audit=self._audit):
            self._record_denial(actor, held_identifier, ActionKind.LEFT_CLICK)
            return True

        block_entry = index.get(target_block_identifier)
        if block_entry is None:
            return False

        # evaluate_destroy reports "allowed" like the click hooks; a denied destroy
        # suppresses the left-click.
        destroy_blocked = not block_entry.evaluate_destroy(target_block_identifier, actor, audit=self._audit)
        if destroy_blocked:
            self._record_denial(actor, target_block_identifier, ActionKind.DESTROY)
        return destroy_blocked

    def on_disconnect(self, actor: ActorProtocol) -> None:
        """
        Discard per-actor transient state for a disconnecting actor.

        Runs even when no blacklist is configured, since strikes gathered under an
        earlier load would otherwise outlive the session.
        """
        if self._actor_state is None:
            return
        self._actor_state.forget(actor.name)

    # Reload ----------------------------------------------------------------------------

    def reload(self, text: str | Iterable[str], *, source: str = "<text>") -> bool:
        """
        Replace the rule index with one parsed from text.

        Content problems are logged as warnings and never fail the reload.

        Returns:
            True once the new index (or "no blacklist") is published
        """
        with self._reload_lock:
            new_index = parse_blacklist(text, self._resolver, source=source)
            self._publish(new_index, source)
        return True

    def reload_from_path(self, path: Path | str) -> bool:
        """
        Replace the rule index with one loaded from a file.

        If the file cannot be read the previous index stays in place.

        Returns:
            True if the file was loaded, False if the previous index was retained
        """
        with self._reload_lock:
            try:
                new_index = load_blacklist_file(path, self._resolver)
            except BlacklistLoadError as exc:
                log_exception_once(
                    logger,
                    "warning",
                    "Could not load blacklist, keeping previous rules",
                    exc=exc,
                    path=exc.path,
                    reason=exc.reason,
                    previous_configured=self._index is not None,
                )
                return False
            self._publish(new_index, str(path))
        return True

    def _publish(self, new_index: RuleIndex | None, source: str) -> None:
        self._index = new_index
        if new_index is None:
            logger.info("No blacklist configured, all actions permitted", source=source)
        else:
            logger.info(
                "Blacklist loaded",
                source=source,
                identifiers=len(new_index),
                entries=len(new_index.entries),
            )

    def _record_denial(self, actor: ActorProtocol, identifier: int, action: ActionKind) -> None:
        if self._actor_state is not None:
            self._actor_state.record_denial(actor.name, identifier, action)
