"""Configuration for the command runner."""

from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, Field


class CommandRunnerConfig(BaseModel):
    """Configuration for the command runner.

    ``command`` is a shell template. Placeholders:
    - ``{profile}``: profile name
    - ``{tests}``: shell-quoted, space-separated test identifiers
    - ``{release}``: ``release_flag`` for optimized profiles, empty otherwise
    - ``{sanitizer}``: sanitizer name, empty when not instrumented
    """

    command: str
    shell: str = "/bin/sh"
    release_flag: str = "--release"
    timeout: float | None = Field(default=None, gt=0, description="Seconds per batch")
    env: Mapping[str, str] = Field(default_factory=dict)
    sanitizer_env: Mapping[Literal["address", "thread"], Mapping[str, str]] = Field(
        default_factory=dict
    )
