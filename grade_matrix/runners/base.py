"""Abstract base class for test runner backends."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from grade_matrix.models.definition import RunnerProfile
from grade_matrix.models.result import ExecutionOutcome


@dataclass(frozen=True, kw_only=True)
class TestRunner(ABC):
    """Abstract base for backends that build and run a batch of tests.

    The profile is opaque to the grading core; backends decide which
    compiler flags and runtime instrumentation it stands for.
    """

    __test__ = False

    @abstractmethod
    async def execute(
        self,
        profile: RunnerProfile,
        tests: Sequence[str],
    ) -> ExecutionOutcome:
        """Run a batch of tests and return a single aggregate outcome.

        Args:
            profile: Build/runtime configuration to run under
            tests: Test identifiers, meaningful only to the backend

        Returns:
            ``success`` only if every test in the batch passed. Any failing
            test, crash, timeout or sanitizer report fails the batch.

        """
