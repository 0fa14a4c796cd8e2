"""Value types shared by the blacklist rule subsystem."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ActionKind(Enum):
    """The kind of interaction being evaluated against a rule entry."""

    DESTROY = "destroy"
    LEFT_CLICK = "left_click"
    RIGHT_CLICK = "right_click"


DENY = "deny"


@dataclass(frozen=True)
class AuditRecord:
    """One denied action, as written to the audit channel."""

    actor: str
    identifier: int
    action: ActionKind
    decision: str = DENY
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary for logging."""
        return {
            "actor": self.actor,
            "identifier": self.identifier,
            "action": self.action.value,
            "decision": self.decision,
            "timestamp": self.timestamp.isoformat(),
        }
