"""Matrix execution of test groups across runner profiles, and scoring."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from grade_matrix.models.definition import RunnerProfile, TestGroupDefinition
from grade_matrix.models.result import ExecutionOutcome
from grade_matrix.runners.base import TestRunner

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class GroupFailure:
    """Where and how a group first failed."""

    profile: str
    outcome: ExecutionOutcome


@dataclass(kw_only=True)
class TestGroup:
    """Mutable per-run state of a test group.

    ``failed`` is write-once: after ``mark_failed`` the group stays failed
    for the rest of the run and keeps its first failure.
    """

    __test__ = False

    name: str
    tests: Sequence[str]
    weight: int
    _failure: GroupFailure | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_definition(cls, definition: TestGroupDefinition) -> "TestGroup":
        return cls(
            name=definition.name,
            tests=tuple(definition.tests),
            weight=definition.weight,
        )

    @property
    def failed(self) -> bool:
        return self._failure is not None

    @property
    def failure(self) -> GroupFailure | None:
        return self._failure

    def mark_failed(self, profile: str, outcome: ExecutionOutcome) -> None:
        if self._failure is None:
            self._failure = GroupFailure(profile=profile, outcome=outcome)


@dataclass(frozen=True, kw_only=True)
class ExecutionRecord:
    """One batch execution performed by the matrix."""

    profile: str
    group: str
    outcome: ExecutionOutcome


@dataclass(frozen=True, kw_only=True)
class MatrixExecutor:
    """Runs every not-yet-failed group under each profile, in declared order.

    Profiles form the outer loop so a group that only breaks under a late
    profile (e.g. a data race seen only with thread sanitizer) is still
    caught, while a group that already failed is never run again. Batches
    run one at a time; each ``execute`` is awaited before the next starts.
    """

    runner: TestRunner
    profiles: Sequence[RunnerProfile]

    async def run(self, groups: Sequence[TestGroup]) -> Sequence[ExecutionRecord]:
        """Execute the matrix, marking groups failed in place.

        Returns:
            Every execution performed, in order.

        """
        records: list[ExecutionRecord] = []

        for profile in self.profiles:
            log.info("Running with %s...", profile.name)

            for group in groups:
                if group.failed:
                    log.debug("Skipping %s, failed under %s", group.name, group.failure.profile)
                    continue

                log.info("    Testing %s...", group.name)
                outcome = await self._execute(profile, group)
                records.append(
                    ExecutionRecord(profile=profile.name, group=group.name, outcome=outcome)
                )

                if not outcome.passed:
                    log.info(
                        "    %s %s under %s: %s",
                        group.name,
                        outcome.status,
                        profile.name,
                        outcome.message or "no details",
                    )
                    group.mark_failed(profile.name, outcome)

        return records

    async def _execute(self, profile: RunnerProfile, group: TestGroup) -> ExecutionOutcome:
        """Run one batch; a runner that raises counts as a failed batch."""
        try:
            return await self.runner.execute(profile, group.tests)
        except Exception as e:
            log.error(
                "Runner error for %s under %s: %s", group.name, profile.name, e, exc_info=e
            )
            return ExecutionOutcome(status="error", duration=0.0, message=str(e))


def score(groups: Iterable[TestGroup]) -> int:
    """Sum the weights of groups that never failed."""
    return sum(group.weight for group in groups if not group.failed)


def max_score(groups: Iterable[TestGroup]) -> int:
    """Sum the weights of all groups."""
    return sum(group.weight for group in groups)
