"""Command runner module."""

from grade_matrix.runners.command.config import CommandRunnerConfig
from grade_matrix.runners.command.manifest import command_manifest
from grade_matrix.runners.command.runner import CommandRunner

__all__ = ["CommandRunner", "CommandRunnerConfig", "command_manifest"]
