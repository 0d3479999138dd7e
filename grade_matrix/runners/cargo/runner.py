"""Cargo runner implementation."""

import asyncio
import logging
import os
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from grade_matrix.models.definition import RunnerProfile
from grade_matrix.models.result import ExecutionOutcome
from grade_matrix.runners.base import TestRunner
from grade_matrix.runners.cargo.config import CargoRunnerConfig
from grade_matrix.runners.process import run_process, tail

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class CargoRunner(TestRunner):
    """Runs Rust unit tests one at a time with ``cargo test --exact``."""

    config: CargoRunnerConfig
    submission_path: Path

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: CargoRunnerConfig, submission_path: Path
    ) -> AsyncGenerator["CargoRunner", None]:
        """Create runner bound to a submission directory."""
        yield cls(config=config, submission_path=submission_path)

    def build_command(self, profile: RunnerProfile, test: str) -> list[str]:
        """Build the cargo invocation for one test under a profile."""
        args = [self.config.cargo]

        toolchain = (
            self.config.sanitizer_toolchain if profile.sanitizer else self.config.toolchain
        )
        if toolchain:
            args.append(f"+{toolchain}")

        args.append("test")
        if profile.release:
            args.append("--release")
        if profile.sanitizer:
            args.extend(["--target", self.config.target])
        args.extend(self.config.extra_args)
        args.extend([test, "--", "--exact"])
        return args

    def build_env(self, profile: RunnerProfile) -> dict[str, str]:
        """Build the process environment for a profile."""
        env = dict(os.environ)
        if profile.sanitizer is None:
            return env

        rustflags = env.get("RUSTFLAGS", "")
        env["RUSTFLAGS"] = f"{rustflags} -Z sanitizer={profile.sanitizer}".strip()

        if profile.sanitizer == "address":
            env["ASAN_OPTIONS"] = "detect_leaks=1"
        else:
            # libtest worker threads are not TSan-instrumented.
            env["RUST_TEST_THREADS"] = "1"
            if self.config.tsan_suppressions:
                env["TSAN_OPTIONS"] = f"suppressions={self.config.tsan_suppressions}"
        return env

    async def execute(
        self, profile: RunnerProfile, tests: Sequence[str]
    ) -> ExecutionOutcome:
        """Run each test in order, stopping at the first one that fails."""
        loop = asyncio.get_running_loop()
        start = loop.time()
        env = self.build_env(profile)

        for test in tests:
            result = await run_process(
                self.build_command(profile, test),
                cwd=self.submission_path,
                env=env,
                timeout=self.config.timeout,
            )

            if result.timed_out:
                log.info("Test timed out under %s: %s", profile.name, test)
                return ExecutionOutcome(
                    status="timeout",
                    duration=loop.time() - start,
                    message=f"Test timed out: {test} (limit={self.config.timeout}s)",
                )

            if result.returncode != 0:
                log.info(
                    "Test failed under %s: %s (exit status %s)\n%s",
                    profile.name,
                    test,
                    result.returncode,
                    tail(result.stderr),
                )
                return ExecutionOutcome(
                    status="failure",
                    duration=loop.time() - start,
                    message=f"Test failed: {test} (exit status {result.returncode})",
                )

        return ExecutionOutcome(status="success", duration=loop.time() - start)
