"""Cargo runner manifest."""

from grade_matrix.runners.cargo.config import CargoRunnerConfig
from grade_matrix.runners.cargo.runner import CargoRunner
from grade_matrix.runners.manifest import RunnerManifest

cargo_manifest = RunnerManifest(
    config_cls=CargoRunnerConfig,
    runner_factory=CargoRunner.from_config,
)
