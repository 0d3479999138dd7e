"""Detect tampering with instructor-provided files in a submission."""

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from grade_matrix.models.definition import IntegrityRecord
from grade_matrix.models.result import IntegrityReport

logger = logging.getLogger(__name__)


async def check_integrity(
    submission_path: Path,
    records: Sequence[IntegrityRecord],
    baseline_revision: str,
) -> Sequence[IntegrityReport]:
    """Check every protected file, in declared order.

    Args:
        submission_path: Root of the submission's git repository
        records: Files that must match the baseline
        baseline_revision: Revision used for records that do not name one

    Returns:
        One report per record.

    """
    reports: list[IntegrityReport] = []
    for record in records:
        report = await check_diff(
            submission_path, record, record.baseline_revision or baseline_revision
        )
        log_report(report)
        reports.append(report)
    return reports


async def check_diff(
    submission_path: Path,
    record: IntegrityRecord,
    baseline_revision: str,
) -> IntegrityReport:
    """Compare one file against its line count and the baseline revision.

    Per-file problems are reported, never raised: a missing file yields a
    ``missing`` report; an unreadable file or a git failure yields an
    ``error`` report.
    """
    try:
        line_count = count_lines(submission_path / record.path)
    except OSError as e:
        return IntegrityReport(
            path=record.path,
            expected_line_count=record.expected_line_count,
            actual_line_count=None,
            status="error",
            message=f"Cannot read {record.path}: {e}",
        )

    try:
        diff = await get_diff(submission_path, record.path, baseline_revision)
    except RuntimeError as e:
        return IntegrityReport(
            path=record.path,
            expected_line_count=record.expected_line_count,
            actual_line_count=line_count,
            status="error",
            message=str(e),
        )

    if line_count is None:
        return IntegrityReport(
            path=record.path,
            expected_line_count=record.expected_line_count,
            actual_line_count=None,
            status="missing",
            diff=diff,
            message=f"File not found: {record.path}",
        )

    problems: list[str] = []
    if line_count != record.expected_line_count:
        problems.append(
            f"expected {record.expected_line_count} lines, found {line_count}"
        )
    if diff:
        problems.append(f"differs from {baseline_revision}")

    return IntegrityReport(
        path=record.path,
        expected_line_count=record.expected_line_count,
        actual_line_count=line_count,
        status="modified" if problems else "ok",
        diff=diff,
        message="; ".join(problems) or None,
    )


def count_lines(file_path: Path) -> int | None:
    """Count newline-terminated lines like ``wc -l``; None if the file is missing.

    Raises:
        OSError: If the file exists but cannot be read

    """
    try:
        data = file_path.read_bytes()
    except (FileNotFoundError, IsADirectoryError):
        return None
    return data.count(b"\n")


async def get_diff(repo_path: Path, file_path: str, revision: str) -> str:
    """Get the diff of a file's working tree contents against a revision.

    Works for files deleted since the revision, which show up as a full
    removal.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            "git",
            "diff",
            "--no-color",
            revision,
            "--",
            file_path,
            cwd=repo_path,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise RuntimeError(f"Cannot run git: {e}") from e

    stdout, stderr = await process.communicate()

    if process.returncode != 0:
        raise RuntimeError(
            f"Git diff failed: {stderr.decode(errors='replace').strip()}"
        )

    return stdout.decode(errors="replace")


def log_report(report: IntegrityReport) -> None:
    """Log a report: violations as warnings with the diff, clean files as info."""
    if not report.violated:
        logger.info("Integrity ok: %s (%d lines)", report.path, report.actual_line_count)
        return

    logger.warning(
        "Integrity %s: %s: %s", report.status, report.path, report.message
    )
    if report.diff:
        logger.warning("Diff for %s:\n%s", report.path, report.diff.rstrip("\n"))
