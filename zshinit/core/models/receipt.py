"""
Receipt model — the outcome of one side-effecting step.

Steps that touch the outside world (clone, wrapper write, framework
install, dotfile copy, chsh) report what happened through a Receipt
instead of raising. Recoverable failures end up here with the captured
output attached.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Result of a single provisioning step.

    ``step`` names the kind of work (``"plugin"``, ``"dotfile"``, ...),
    ``target`` the thing it was done to (a plugin name, a path).
    """

    step: str
    target: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    # Receipts are built when their step ends
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the step succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the step failed."""
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @classmethod
    def success(
        cls,
        step: str,
        target: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(step=step, target=target, status="ok", output=output, **kwargs)

    @classmethod
    def failure(
        cls,
        step: str,
        target: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(step=step, target=target, status="failed", error=error, **kwargs)

    @classmethod
    def skip(
        cls,
        step: str,
        target: str,
        reason: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a skip receipt."""
        return cls(step=step, target=target, status="skipped", output=reason, **kwargs)
