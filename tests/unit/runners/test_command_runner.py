"""Tests for the command runner."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from grade_matrix.models.definition import RunnerProfile
from grade_matrix.runners.command import CommandRunner, CommandRunnerConfig
from grade_matrix.runners.process import ProcessResult

ASAN_RELEASE = RunnerProfile(name="asan-release", release=True, sanitizer="address")
DEBUG = RunnerProfile(name="debug")


def make_runner(**kwargs: object) -> CommandRunner:
    config = CommandRunnerConfig.model_validate(
        {"command": "make test PROFILE={profile} {release} TESTS={tests}", **kwargs}
    )
    return CommandRunner(config=config, submission_path=Path("/submission"))


class TestRenderCommand:
    """Tests for CommandRunner.render_command."""

    def test_expands_placeholders(self) -> None:
        """Fills profile, release flag and quoted tests."""
        runner = make_runner()

        command = runner.render_command(ASAN_RELEASE, ["a::b", "it's"])

        assert command == (
            "make test PROFILE=asan-release --release TESTS=a::b 'it'\"'\"'s'"
        )

    def test_debug_has_empty_release_flag(self) -> None:
        """Debug profiles render an empty release flag."""
        runner = make_runner(command="run {release}|{sanitizer}|{profile}")

        assert runner.render_command(DEBUG, ["t"]) == "run ||debug"


class TestBuildEnv:
    """Tests for CommandRunner.build_env."""

    def test_merges_sanitizer_env(self) -> None:
        """Sanitizer-specific variables apply only to instrumented profiles."""
        runner = make_runner(
            env={"CARGO_TERM_COLOR": "never"},
            sanitizer_env={"address": {"ASAN_OPTIONS": "detect_leaks=1"}},
        )

        with patch.dict("os.environ", {}, clear=True):
            asan = runner.build_env(ASAN_RELEASE)
            debug = runner.build_env(DEBUG)

        assert asan == {"CARGO_TERM_COLOR": "never", "ASAN_OPTIONS": "detect_leaks=1"}
        assert debug == {"CARGO_TERM_COLOR": "never"}


class TestExecute:
    """Tests for CommandRunner.execute."""

    @pytest.mark.parametrize(
        ("result", "status"),
        [
            (ProcessResult(returncode=0, stdout="", stderr=""), "success"),
            (ProcessResult(returncode=2, stdout="", stderr="boom"), "failure"),
            (
                ProcessResult(returncode=None, stdout="", stderr="", timed_out=True),
                "timeout",
            ),
        ],
    )
    async def test_maps_process_result(
        self, result: ProcessResult, status: str
    ) -> None:
        """Exit status 0 passes; anything else fails the batch."""
        runner = make_runner(timeout=30)

        with patch(
            "grade_matrix.runners.command.runner.run_process",
            new_callable=AsyncMock,
            return_value=result,
        ) as mock_run:
            outcome = await runner.execute(DEBUG, ["a", "b"])

        assert outcome.status == status
        mock_run.assert_awaited_once()
        assert mock_run.await_args.args[0] == [
            "/bin/sh",
            "-c",
            "make test PROFILE=debug  TESTS=a b",
        ]
        assert mock_run.await_args.kwargs["timeout"] == 30
