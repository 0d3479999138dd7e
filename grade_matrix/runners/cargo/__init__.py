"""Cargo runner module."""

from grade_matrix.runners.cargo.config import CargoRunnerConfig
from grade_matrix.runners.cargo.manifest import cargo_manifest
from grade_matrix.runners.cargo.runner import CargoRunner

__all__ = ["CargoRunner", "CargoRunnerConfig", "cargo_manifest"]
