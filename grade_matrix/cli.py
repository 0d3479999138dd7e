"""CLI entry point for the grading harness."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from grade_matrix.definition_loader import load_grading_definition
from grade_matrix.models.definition import IntegrityPolicy
from grade_matrix.orchestrator import GradingOrchestrator, GradingResult
from grade_matrix.runners.loading import RunnerNotFoundError, load_runner_manifest

EXIT_OK = 0
EXIT_BELOW_MAX = 1
EXIT_USAGE = 2

STATUS_SYMBOLS = {
    "success": "✓",
    "failure": "✗",
    "error": "!",
    "timeout": "⏱",
}


def log_results_summary(log: logging.Logger, result: GradingResult) -> None:
    """Log a formatted summary of integrity reports and group results."""
    log.info("=" * 80)
    log.info("Grading Summary:")
    log.info("=" * 80)

    for report in result.integrity:
        if report.violated:
            log.info("! %s: %s (%s)", report.path, report.status, report.message)
        else:
            log.info("✓ %s: unmodified", report.path)

    for group in result.groups:
        if group.failure is None:
            log.info("✓ %s: passed (%d/%d)", group.name, group.weight, group.weight)
            continue
        outcome = group.failure.outcome
        log.info(
            "%s %s: %s under %s (0/%d)",
            STATUS_SYMBOLS.get(outcome.status, "?"),
            group.name,
            outcome.status,
            group.failure.profile,
            group.weight,
        )
        if outcome.message:
            log.info("  Message: %s", outcome.message)


def format_output(result: GradingResult) -> dict[str, Any]:
    """Format a grading result for JSON output."""
    return {
        "score": result.score,
        "max_score": result.max_score,
        "aborted": result.aborted,
        "groups": [
            {
                "name": group.name,
                "weight": group.weight,
                "failed": group.failed,
                "failed_under": group.failure.profile if group.failure else None,
                "status": group.failure.outcome.status if group.failure else "success",
                "message": group.failure.outcome.message if group.failure else None,
            }
            for group in result.groups
        ],
        "executions": [
            {
                "profile": record.profile,
                "group": record.group,
                "status": record.outcome.status,
                "duration": record.outcome.duration,
                "message": record.outcome.message,
            }
            for record in result.executions
        ],
        "integrity": [
            {
                "path": report.path,
                "status": report.status,
                "expected_line_count": report.expected_line_count,
                "actual_line_count": report.actual_line_count,
                "message": report.message,
                "diff": report.diff,
            }
            for report in result.integrity
        ],
    }


async def run(
    definition_path: Path,
    submission_path: Path,
    runner_key: str,
    runner_config_json: str,
    integrity_policy: IntegrityPolicy | None = None,
    json_output: bool = False,
    strict: bool = False,
) -> int:
    """Grade a submission and return the exit code."""
    log = logging.getLogger("grade_matrix")

    try:
        definition = await load_grading_definition(definition_path)
        manifest = load_runner_manifest(runner_key)
        config = manifest.config_cls(**json.loads(runner_config_json))
    except (
        FileNotFoundError,
        ValueError,
        RunnerNotFoundError,
        TypeError,
        ValidationError,
    ) as e:
        log.error("Cannot start grading: %s", e)
        return EXIT_USAGE

    log.info(
        "Grading %s with runner %s (%d group(s) x %d profile(s))",
        submission_path,
        runner_key,
        len(definition.groups),
        len(definition.runners),
    )

    async with manifest.runner_factory(config, submission_path) as runner:
        orchestrator = GradingOrchestrator(runner=runner, submission_path=submission_path)
        result = await orchestrator.grade(definition, integrity_policy)

    log_results_summary(log, result)

    if json_output:
        print(json.dumps(format_output(result), indent=2))
    print(f"Score: {result.score} / {result.max_score}")

    if strict and result.score < result.max_score:
        return EXIT_BELOW_MAX
    return EXIT_OK


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Grade a submission across a matrix of build profiles"
    )
    parser.add_argument(
        "--definition",
        type=Path,
        required=True,
        help="Path to the YAML grading definition",
    )
    parser.add_argument(
        "--submission-path",
        type=Path,
        default=Path.cwd(),
        help="Root of the submission's git repository (default: current directory)",
    )
    parser.add_argument(
        "--runner",
        default="cargo",
        help="Runner key (cargo, command)",
    )
    parser.add_argument(
        "--runner-config",
        default="{}",
        help="JSON configuration for the runner",
    )
    parser.add_argument(
        "--integrity-policy",
        choices=["advisory", "fatal"],
        default=None,
        help="Override the definition's integrity policy",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON report before the score line",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when the score is below the maximum",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            definition_path=args.definition,
            submission_path=args.submission_path,
            runner_key=args.runner,
            runner_config_json=args.runner_config,
            integrity_policy=args.integrity_policy,
            json_output=args.json,
            strict=args.strict,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
