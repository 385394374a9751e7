"""Load spec definitions from YAML spec files."""

import asyncio
from pathlib import Path

import yaml
from pydantic import ValidationError

from e2e_runner.errors import SpecDefinitionError
from e2e_runner.models.definition import SpecDefinition


async def load_spec_definition(path: Path) -> SpecDefinition:
    """Read and validate a spec file.

    Args:
        path: Path to a YAML spec file

    Returns:
        The validated spec definition

    Raises:
        OSError: If the file cannot be read
        SpecDefinitionError: If the file is not UTF-8 text, not valid YAML, or
            fails validation

    """
    try:
        content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SpecDefinitionError(f"Spec file {path} is not UTF-8 text: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SpecDefinitionError(f"Invalid YAML in {path}: {e}") from e

    try:
        return SpecDefinition.model_validate(data)
    except ValidationError as e:
        raise SpecDefinitionError(f"Invalid spec definition in {path}: {e}") from e
