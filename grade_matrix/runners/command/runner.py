"""Command runner implementation."""

import asyncio
import logging
import os
import shlex
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from grade_matrix.models.definition import RunnerProfile
from grade_matrix.models.result import ExecutionOutcome
from grade_matrix.runners.base import TestRunner
from grade_matrix.runners.command.config import CommandRunnerConfig
from grade_matrix.runners.process import run_process, tail

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class CommandRunner(TestRunner):
    """Runs a whole batch through one shell command; exit status 0 passes."""

    config: CommandRunnerConfig
    submission_path: Path

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: CommandRunnerConfig, submission_path: Path
    ) -> AsyncGenerator["CommandRunner", None]:
        """Create runner bound to a submission directory."""
        yield cls(config=config, submission_path=submission_path)

    def render_command(self, profile: RunnerProfile, tests: Sequence[str]) -> str:
        """Expand the command template for a batch."""
        return self.config.command.format(
            profile=profile.name,
            tests=shlex.join(tests),
            release=self.config.release_flag if profile.release else "",
            sanitizer=profile.sanitizer or "",
        )

    def build_env(self, profile: RunnerProfile) -> dict[str, str]:
        env = dict(os.environ)
        env.update(self.config.env)
        if profile.sanitizer is not None:
            env.update(self.config.sanitizer_env.get(profile.sanitizer, {}))
        return env

    async def execute(
        self, profile: RunnerProfile, tests: Sequence[str]
    ) -> ExecutionOutcome:
        """Run the rendered command once for the whole batch."""
        loop = asyncio.get_running_loop()
        start = loop.time()

        result = await run_process(
            [self.config.shell, "-c", self.render_command(profile, tests)],
            cwd=self.submission_path,
            env=self.build_env(profile),
            timeout=self.config.timeout,
        )
        duration = loop.time() - start

        if result.timed_out:
            return ExecutionOutcome(
                status="timeout",
                duration=duration,
                message=f"Batch timed out (limit={self.config.timeout}s)",
            )

        if result.returncode != 0:
            log.info(
                "Batch failed under %s (exit status %s)\n%s",
                profile.name,
                result.returncode,
                tail(result.stderr or result.stdout),
            )
            return ExecutionOutcome(
                status="failure",
                duration=duration,
                message=f"Exit status {result.returncode}",
            )

        return ExecutionOutcome(status="success", duration=duration)
