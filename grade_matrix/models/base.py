"""Base model configuration for grading definitions and runner configs."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model that rejects unknown keys.

    Grading definitions are written by hand; a misspelled key must fail
    loudly instead of silently falling back to a default.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
