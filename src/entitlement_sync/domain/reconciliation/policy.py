"""Safety policy for deleting entitlements that vanished from the source.

A degraded upstream response that still parses (an empty page, a truncated
listing) looks exactly like a mass cancellation. The guard refuses the whole
delete-by-absence batch once it reaches the configured size.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from entitlement_sync.config.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RemovalVeto:
    """Recorded when a removal batch was refused."""

    candidates: int
    threshold: int


@dataclass(frozen=True, slots=True)
class RemovalDecision[T]:
    approved: tuple[T, ...]
    veto: RemovalVeto | None = None

    @property
    def vetoed(self) -> bool:
        return self.veto is not None


@dataclass(frozen=True, slots=True)
class RemovalGuard:
    max_removals: int

    def __post_init__(self) -> None:
        if self.max_removals < 0:
            raise ConfigurationError("max_removals must not be negative")

    def evaluate[T](self, candidates: Sequence[T]) -> RemovalDecision[T]:
        """Approve every candidate, or none when the batch reaches ``max_removals``."""

        if candidates and len(candidates) >= self.max_removals:
            veto = RemovalVeto(candidates=len(candidates), threshold=self.max_removals)
            log.warning(
                "Max removals threshold reached, not deleting missing entitlements: "
                "count=%s, threshold=%s",
                veto.candidates,
                veto.threshold,
            )
            return RemovalDecision(approved=(), veto=veto)
        return RemovalDecision(approved=tuple(candidates))
