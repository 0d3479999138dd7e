"""Configuration for the cargo runner."""

from collections.abc import Sequence

from pydantic import BaseModel, Field


class CargoRunnerConfig(BaseModel):
    """Configuration for the cargo runner.

    Sanitized profiles need a nightly toolchain and an explicit target so
    that ``-Z sanitizer`` instruments only the test binary and not the
    build scripts.
    """

    cargo: str = "cargo"
    toolchain: str | None = None
    sanitizer_toolchain: str = "nightly"
    target: str = "x86_64-unknown-linux-gnu"
    timeout: float = Field(default=60.0, gt=0, description="Seconds per test")
    tsan_suppressions: str | None = None
    extra_args: Sequence[str] = ()
