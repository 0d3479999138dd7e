"""Loading of runner backends from entry points."""

from importlib.metadata import entry_points
from typing import Any

from grade_matrix.runners.manifest import RunnerManifest

ENTRY_POINT_GROUP = "grade_matrix.runners"


class RunnerNotFoundError(Exception):
    """Raised when a runner backend is not found."""


def load_runner_manifest(key: str) -> RunnerManifest[Any]:
    """Load a runner manifest by key.

    Args:
        key: The runner key as registered in pyproject.toml
             (e.g., "cargo", "command")

    Returns:
        The runner manifest instance

    Raises:
        RunnerNotFoundError: If no runner with the given key is found

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            manifest: RunnerManifest[Any] = entry.load()
            return manifest

    available = sorted(e.name for e in entries)
    raise RunnerNotFoundError(
        f"Runner '{key}' not found. Available runners: {available}"
    )
