"""Tests for grading definition models."""

import pytest
from pydantic import ValidationError

from grade_matrix.models.definition import (
    DEFAULT_PROFILES,
    GradingDefinition,
    RunnerProfile,
    TestGroupDefinition,
)


def group(name: str) -> TestGroupDefinition:
    return TestGroupDefinition(name=name, weight=10, tests=[f"{name}::test::it"])


def test_defaults() -> None:
    """Omitted fields fall back to HEAD, advisory and the six default profiles."""
    definition = GradingDefinition(version="1.0", groups=[group("cache")])

    assert definition.baseline_revision == "HEAD"
    assert definition.integrity_policy == "advisory"
    assert definition.integrity == []
    assert [profile.name for profile in definition.runners] == [
        "debug",
        "release",
        "asan-debug",
        "asan-release",
        "tsan-debug",
        "tsan-release",
    ]


def test_default_profiles_cover_sanitizer_matrix() -> None:
    """Default profiles combine every sanitizer with debug and release."""
    combos = {(profile.release, profile.sanitizer) for profile in DEFAULT_PROFILES}

    assert combos == {
        (release, sanitizer)
        for release in (False, True)
        for sanitizer in (None, "address", "thread")
    }


def test_rejects_negative_weight() -> None:
    """Weights must be non-negative."""
    with pytest.raises(ValidationError):
        TestGroupDefinition(name="cache", weight=-1, tests=["t"])


def test_rejects_empty_test_list() -> None:
    """A group needs at least one test."""
    with pytest.raises(ValidationError):
        TestGroupDefinition(name="cache", weight=1, tests=[])


def test_rejects_blank_test_identifier() -> None:
    """Blank test identifiers are rejected."""
    with pytest.raises(ValidationError, match="must not be blank"):
        TestGroupDefinition(name="cache", weight=1, tests=["ok", "  "])


def test_rejects_duplicate_group_names() -> None:
    """Group names must be unique."""
    with pytest.raises(ValidationError, match="duplicate group names: cache"):
        GradingDefinition(version="1.0", groups=[group("cache"), group("cache")])


def test_rejects_duplicate_runner_names() -> None:
    """Runner profile names must be unique."""
    with pytest.raises(ValidationError, match="duplicate runner names: debug"):
        GradingDefinition(
            version="1.0",
            groups=[group("cache")],
            runners=[RunnerProfile(name="debug"), RunnerProfile(name="debug")],
        )


def test_rejects_empty_runner_list() -> None:
    """At least one runner profile is required."""
    with pytest.raises(ValidationError, match="at least one runner profile"):
        GradingDefinition(version="1.0", groups=[group("cache")], runners=[])


def test_rejects_unknown_sanitizer() -> None:
    """Only address and thread sanitizers are supported."""
    with pytest.raises(ValidationError):
        RunnerProfile(name="msan", sanitizer="memory")


def test_rejects_unknown_keys() -> None:
    """Misspelled keys are rejected instead of ignored."""
    with pytest.raises(ValidationError):
        GradingDefinition.model_validate(
            {
                "version": "1.0",
                "groups": [{"name": "cache", "weight": 1, "tests": ["t"]}],
                "integrity_polcy": "fatal",
            }
        )


def test_profiles_are_immutable() -> None:
    """Runner profiles cannot be changed after creation."""
    profile = RunnerProfile(name="debug")

    with pytest.raises(ValidationError):
        profile.release = True  # type: ignore[misc]
