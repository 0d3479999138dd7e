"""Subprocess execution shared by runner backends."""

import asyncio
import contextlib
import logging
import os
import signal
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)

# Seconds to wait for output pipes to close after the process group is killed.
KILL_GRACE_PERIOD = 5.0


@dataclass(frozen=True, kw_only=True)
class ProcessResult:
    """Exit status and captured output of a finished process."""

    returncode: int | None
    stdout: str
    stderr: str
    timed_out: bool = False


async def run_process(
    args: Sequence[str],
    *,
    cwd: Path,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> ProcessResult:
    """Run a process to completion, killing it when the timeout expires.

    The process runs in its own session so that a timeout kills everything
    it started (e.g. the test binary spawned by ``cargo test``), not only
    the direct child.

    Raises:
        RuntimeError: If the executable cannot be started

    """
    log.debug("Running %s in %s", " ".join(args), cwd)
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as e:
        raise RuntimeError(f"Cannot run {args[0]}: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
    except TimeoutError:
        log.debug("Killing process group %d after %ss", process.pid, timeout)
        kill_process_group(process.pid)
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), KILL_GRACE_PERIOD
            )
        except TimeoutError:
            # A descendant left the session and still holds the pipes.
            await process.wait()
            stdout, stderr = b"", b""
        return ProcessResult(
            returncode=None,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
            timed_out=True,
        )

    return ProcessResult(
        returncode=process.returncode,
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
    )


def kill_process_group(pid: int) -> None:
    """Send SIGKILL to a process group; a group that already exited is ignored."""
    with contextlib.suppress(ProcessLookupError):
        os.killpg(pid, signal.SIGKILL)


def tail(text: str, lines: int = 20) -> str:
    """Return the last lines of process output for log messages."""
    return "\n".join(text.rstrip().splitlines()[-lines:])
