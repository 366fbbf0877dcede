"""Outcome types for routing an inbound message."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from supportbot.schemas.message import MessageRead


@dataclass(frozen=True)
class StepResult:
    """Outcome of a best-effort step. A failure is recorded, never raised."""

    step: str
    ok: bool
    value: Any = None
    error: Optional[str] = None
    skipped: bool = False

    @classmethod
    def success(cls, step: str, value: Any = None) -> "StepResult":
        return cls(step=step, ok=True, value=value)

    @classmethod
    def skip(cls, step: str, reason: str) -> "StepResult":
        """The step did not apply (e.g. a policy excludes it). Not a failure."""
        return cls(step=step, ok=True, value=reason, skipped=True)

    @classmethod
    def failure(cls, step: str, error: BaseException | str) -> "StepResult":
        return cls(step=step, ok=False, error=str(error))


class RouteAction(str, Enum):
    USER_MESSAGE = "user_message"
    SUPPORT_REPLY = "support_reply"
    IGNORED = "ignored"
    DROPPED = "dropped"


@dataclass
class RouteResult:
    action: RouteAction
    message: Optional[MessageRead] = None
    steps: list[StepResult] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def ignored(cls, reason: str) -> "RouteResult":
        return cls(action=RouteAction.IGNORED, reason=reason)

    @classmethod
    def dropped(cls, reason: str) -> "RouteResult":
        return cls(action=RouteAction.DROPPED, reason=reason)

    def step(self, name: str) -> Optional[StepResult]:
        """Last recorded result for a step name."""
        for result in reversed(self.steps):
            if result.step == name:
                return result
        return None
