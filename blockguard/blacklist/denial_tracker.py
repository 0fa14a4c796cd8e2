"""In-memory registry of blacklist strikes per connected actor."""

from __future__ import annotations

from collections import Counter
from threading import RLock

from blockguard.blacklist.models import ActionKind
from blockguard.structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class DenialTracker:
    """Count suppressed actions per actor until the actor disconnects."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._strikes: dict[str, Counter[tuple[int, ActionKind]]] = {}

    # Actor state protocol implementations ---------------------------------------------

    def record_denial(self, actor_name: str, identifier: int, action: ActionKind) -> None:
        with self._lock:
            counter = self._strikes.setdefault(actor_name, Counter())
            counter[(identifier, action)] += 1
            total = counter.total()

        logger.debug(
            "Blacklist strike recorded",
            actor=actor_name,
            identifier=identifier,
            action=action.value,
            total_strikes=total,
        )

    def forget(self, actor_name: str) -> None:
        with self._lock:
            removed = self._strikes.pop(actor_name, None)

        if removed:
            logger.debug("Blacklist strikes cleared for actor", actor=actor_name, total_strikes=removed.total())

    # Registry helpers ------------------------------------------------------------------

    def strikes(self, actor_name: str, identifier: int | None = None, action: ActionKind | None = None) -> int:
        """Return the number of strikes for an actor, optionally narrowed to one identifier and/or action."""
        with self._lock:
            counter = self._strikes.get(actor_name)
            if counter is None:
                return 0
            return sum(
                count
                for (strike_identifier, strike_action), count in counter.items()
                if (identifier is None or strike_identifier == identifier)
                and (action is None or strike_action == action)
            )

    def get_snapshot(self) -> dict[str, int]:
        """Return total strikes per actor for diagnostics."""

        with self._lock:
            return {actor: counter.total() for actor, counter in self._strikes.items()}
