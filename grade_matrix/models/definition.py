"""Models for grading definitions loaded from YAML files."""

from collections.abc import Sequence
from typing import Literal

from pydantic import Field, field_validator, model_validator

from grade_matrix.models.base import Model

Sanitizer = Literal["address", "thread"]
IntegrityPolicy = Literal["advisory", "fatal"]


class RunnerProfile(Model):
    """A build/runtime configuration under which test batches are executed."""

    name: str = Field(..., min_length=1, description="Profile name, e.g. 'asan-release'")
    release: bool = Field(default=False, description="Build with optimizations")
    sanitizer: Sanitizer | None = Field(
        default=None, description="Runtime instrumentation to enable"
    )


DEFAULT_PROFILES: Sequence[RunnerProfile] = (
    RunnerProfile(name="debug"),
    RunnerProfile(name="release", release=True),
    RunnerProfile(name="asan-debug", sanitizer="address"),
    RunnerProfile(name="asan-release", release=True, sanitizer="address"),
    RunnerProfile(name="tsan-debug", sanitizer="thread"),
    RunnerProfile(name="tsan-release", release=True, sanitizer="thread"),
)


class TestGroupDefinition(Model):
    """Static declaration of a weighted bundle of tests."""

    __test__ = False

    name: str = Field(..., min_length=1, description="Module name, e.g. 'cache'")
    weight: int = Field(..., ge=0, description="Points awarded if the group never fails")
    tests: Sequence[str] = Field(..., min_length=1, description="Test identifiers")

    @field_validator("tests")
    @classmethod
    def _reject_blank_identifiers(cls, tests: Sequence[str]) -> Sequence[str]:
        if any(not test.strip() for test in tests):
            raise ValueError("test identifiers must not be blank")
        return tests


class IntegrityRecord(Model):
    """A file the student must leave untouched."""

    path: str = Field(..., min_length=1, description="Path relative to the submission")
    expected_line_count: int = Field(..., ge=0)
    baseline_revision: str | None = Field(
        default=None,
        description="Revision to diff against (defaults to the definition's)",
    )


class GradingDefinition(Model):
    """Complete grading definition for one assignment."""

    version: str = Field(..., description="Definition schema version")
    baseline_revision: str = Field(default="HEAD")
    integrity_policy: IntegrityPolicy = Field(default="advisory")
    integrity: Sequence[IntegrityRecord] = Field(default_factory=list)
    runners: Sequence[RunnerProfile] = Field(default=DEFAULT_PROFILES)
    groups: Sequence[TestGroupDefinition] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_unique_names(self) -> "GradingDefinition":
        for label, names in (
            ("group", [group.name for group in self.groups]),
            ("runner", [runner.name for runner in self.runners]),
        ):
            duplicates = sorted({name for name in names if names.count(name) > 1})
            if duplicates:
                raise ValueError(f"duplicate {label} names: {', '.join(duplicates)}")
        if not self.runners:
            raise ValueError("at least one runner profile is required")
        return self
