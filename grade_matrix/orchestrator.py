"""Grading orchestrator: integrity check, test matrix, score."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from grade_matrix.integrity import check_integrity
from grade_matrix.matrix import ExecutionRecord, MatrixExecutor, TestGroup, max_score, score
from grade_matrix.models.definition import GradingDefinition, IntegrityPolicy
from grade_matrix.models.result import ExecutionOutcome, IntegrityReport
from grade_matrix.runners.base import TestRunner

log = logging.getLogger(__name__)

INTEGRITY_PROFILE = "integrity"


@dataclass(frozen=True, kw_only=True)
class GradingResult:
    """Final state of a grading run."""

    groups: Sequence[TestGroup]
    executions: Sequence[ExecutionRecord]
    integrity: Sequence[IntegrityReport]
    aborted: bool = False

    @property
    def score(self) -> int:
        return score(self.groups)

    @property
    def max_score(self) -> int:
        return max_score(self.groups)

    @property
    def integrity_violations(self) -> Sequence[IntegrityReport]:
        return [report for report in self.integrity if report.violated]


@dataclass(frozen=True, kw_only=True)
class GradingOrchestrator:
    """Grades one submission with one runner backend."""

    runner: TestRunner
    submission_path: Path

    async def grade(
        self,
        definition: GradingDefinition,
        integrity_policy: IntegrityPolicy | None = None,
    ) -> GradingResult:
        """Run the integrity check, then the test matrix.

        Args:
            definition: Grading definition for the assignment
            integrity_policy: Overrides the definition's policy when given.
                ``advisory`` only reports violations; ``fatal`` fails every
                group without running any test.

        Returns:
            Groups in their final state with the execution log and the
            integrity reports

        """
        policy = integrity_policy or definition.integrity_policy
        groups = [TestGroup.from_definition(group) for group in definition.groups]

        log.info("Checking %d protected file(s)...", len(definition.integrity))
        reports = await check_integrity(
            self.submission_path, definition.integrity, definition.baseline_revision
        )
        violations = [report for report in reports if report.violated]

        if violations and policy == "fatal":
            log.warning(
                "Integrity policy is fatal and %d file(s) failed the check; "
                "skipping all tests",
                len(violations),
            )
            outcome = ExecutionOutcome(
                status="error",
                duration=0.0,
                message="Integrity violation: "
                + ", ".join(report.path for report in violations),
            )
            for group in groups:
                group.mark_failed(INTEGRITY_PROFILE, outcome)
            return GradingResult(
                groups=groups, executions=[], integrity=reports, aborted=True
            )

        if violations:
            log.warning(
                "%d protected file(s) failed the integrity check; grading continues",
                len(violations),
            )

        executor = MatrixExecutor(runner=self.runner, profiles=definition.runners)
        executions = await executor.run(groups)
        log.info("Test matrix completed: %d batch execution(s)", len(executions))

        return GradingResult(groups=groups, executions=executions, integrity=reports)
