"""
Per-identifier blacklist policy.

A RuleEntry holds up to three action hooks (destroy, left-click, right-click). A hook
that was never configured is unrestricted. A configured hook holds the set of groups
exempt from it; ignore-groups adds exemptions to every configured hook. Anyone else
is denied, and each denial writes one audit record.
"""

from __future__ import annotations

from collections.abc import Iterable

from blockguard.blacklist.models import ActionKind, AuditRecord
from blockguard.blacklist.protocols import ActorProtocol, AuditSinkProtocol
from blockguard.structured_logging.blacklist_audit import blacklist_audit_logger
from blockguard.structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class FrozenRuleEntryError(RuntimeError):
    """Raised when a rule entry is modified after its index has been built."""


class RuleEntry:
    """Blacklist policy shared by every identifier named in one section."""

    __slots__ = ("_hooks", "_ignore_groups", "_frozen")

    def __init__(self) -> None:
        self._hooks: dict[ActionKind, frozenset[str]] = {}
        self._ignore_groups: frozenset[str] = frozenset()
        self._frozen = False

    # Parse-time configuration ----------------------------------------------------------

    def set_ignore_groups(self, groups: Iterable[str]) -> None:
        self._check_mutable()
        self._ignore_groups = frozenset(groups)

    def set_destroy_groups(self, groups: Iterable[str]) -> None:
        self._set_hook(ActionKind.DESTROY, groups)

    def set_left_click_groups(self, groups: Iterable[str]) -> None:
        self._set_hook(ActionKind.LEFT_CLICK, groups)

    def set_right_click_groups(self, groups: Iterable[str]) -> None:
        self._set_hook(ActionKind.RIGHT_CLICK, groups)

    def freeze(self) -> None:
        """Reject further configuration; called once the owning index is built."""
        self._frozen = True

    def _set_hook(self, action: ActionKind, groups: Iterable[str]) -> None:
        self._check_mutable()
        self._hooks[action] = frozenset(groups)

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenRuleEntryError("Rule entries cannot change after the blacklist is built")

    # Inspection ------------------------------------------------------------------------

    @property
    def ignore_groups(self) -> frozenset[str]:
        return self._ignore_groups

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def hook_groups(self, action: ActionKind) -> frozenset[str] | None:
        """Return the groups configured on a hook, or None if it is unrestricted."""
        return self._hooks.get(action)

    def is_restricted(self, action: ActionKind) -> bool:
        return action in self._hooks

    def exempt_groups(self, action: ActionKind) -> frozenset[str] | None:
        """Return every group that bypasses a hook, or None if it is unrestricted."""
        groups = self._hooks.get(action)
        if groups is None:
            return None
        return groups | self._ignore_groups

    # Evaluation ------------------------------------------------------------------------

    def evaluate_right_click(
        self, identifier: int, actor: ActorProtocol, *, audit: AuditSinkProtocol | None = None
    ) -> bool:
        """Return True if the actor may right-click with this item."""
        return self._evaluate(ActionKind.RIGHT_CLICK, identifier, actor, audit)

    def evaluate_left_click(
        self, identifier: int, actor: ActorProtocol, *, audit: AuditSinkProtocol | None = None
    ) -> bool:
        """Return True if the actor may left-click with this item."""
        return self._evaluate(ActionKind.LEFT_CLICK, identifier, actor, audit)

    def evaluate_destroy(
        self, identifier: int, actor: ActorProtocol, *, audit: AuditSinkProtocol | None = None
    ) -> bool:
        """Return True if the actor may destroy this block."""
        return self._evaluate(ActionKind.DESTROY, identifier, actor, audit)

    def _evaluate(
        self,
        action: ActionKind,
        identifier: int,
        actor: ActorProtocol,
        audit: AuditSinkProtocol | None,
    ) -> bool:
        exempt = self.exempt_groups(action)
        if exempt is None:
            return True

        if any(actor.is_in_group(group) for group in exempt):
            return True

        sink = audit if audit is not None else blacklist_audit_logger
        sink.write(AuditRecord(actor=actor.name, identifier=identifier, action=action))
        logger.debug("Blacklist hook denied action", actor=actor.name, identifier=identifier, action=action.value)
        return False

    def __repr__(self) -> str:
        hooks = {action.value: sorted(groups) for action, groups in self._hooks.items()}
        return f"RuleEntry(hooks={hooks}, ignore_groups={sorted(self._ignore_groups)})"
