"""Models for execution and integrity results."""

from dataclasses import dataclass
from typing import Literal

OutcomeStatus = Literal["success", "failure", "timeout", "error"]
IntegrityStatus = Literal["ok", "modified", "missing", "error"]


@dataclass(frozen=True, kw_only=True)
class ExecutionOutcome:
    """Result of running one batch of tests under one profile.

    Contains only the outcome - the caller knows the profile and group.
    """

    status: OutcomeStatus
    duration: float
    message: str | None = None

    @property
    def passed(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True, kw_only=True)
class IntegrityReport:
    """Diagnostic produced by checking one protected file."""

    path: str
    expected_line_count: int
    actual_line_count: int | None
    status: IntegrityStatus
    diff: str = ""
    message: str | None = None

    @property
    def violated(self) -> bool:
        return self.status != "ok"
