"""Command runner manifest."""

from grade_matrix.runners.command.config import CommandRunnerConfig
from grade_matrix.runners.command.runner import CommandRunner
from grade_matrix.runners.manifest import RunnerManifest

command_manifest = RunnerManifest(
    config_cls=CommandRunnerConfig,
    runner_factory=CommandRunner.from_config,
)
