"""Load grading definitions from YAML files."""

import asyncio
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from grade_matrix.models.definition import GradingDefinition

log = logging.getLogger(__name__)


async def load_grading_definition(definition_path: Path) -> GradingDefinition:
    """Load and validate a grading definition.

    Args:
        definition_path: Path to the YAML grading definition

    Returns:
        The validated grading definition

    Raises:
        FileNotFoundError: If the definition file does not exist
        ValueError: If the file is empty, is not valid YAML, or does not
            match the grading definition schema

    """
    if not definition_path.is_file():
        raise FileNotFoundError(f"Definition file not found: {definition_path}")

    content = await asyncio.to_thread(definition_path.read_text, encoding="utf-8")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {definition_path}: {e}") from e

    if data is None:
        raise ValueError(f"Empty definition file: {definition_path}")

    try:
        definition = GradingDefinition.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid grading definition schema: {e}") from e

    log.debug(
        "Loaded definition %s: %d group(s), %d runner(s), %d integrity record(s)",
        definition_path,
        len(definition.groups),
        len(definition.runners),
        len(definition.integrity),
    )
    return definition
