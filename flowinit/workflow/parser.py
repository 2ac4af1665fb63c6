# flowinit/workflow/parser.py
"""Load workflow definitions exported by the workflow builder."""

from pathlib import Path
from typing import Any, Dict, Union

import structlog
import yaml
from pydantic import ValidationError

from flowinit.workflow.models import WorkflowDefinition

logger = structlog.get_logger(__name__)


class WorkflowLoadError(ValueError):
    """Raised when a workflow definition cannot be read or validated."""


def parse_workflow_string(content: str) -> WorkflowDefinition:
    """Parse a workflow definition from a YAML or JSON string."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise WorkflowLoadError(f"Invalid workflow document: {e}") from e

    if data is None:
        data = {}
    if isinstance(data, list):
        # Bare step lists are accepted as a workflow without declared conditions
        data = {"workflow": data}
    if not isinstance(data, dict):
        raise WorkflowLoadError(f"Workflow document must be a mapping, got {type(data).__name__}")

    return parse_workflow_data(data)


def parse_workflow_data(data: Dict[str, Any]) -> WorkflowDefinition:
    """Validate an already-decoded workflow mapping."""
    try:
        definition = WorkflowDefinition.model_validate(data)
    except ValidationError as e:
        raise WorkflowLoadError(f"Workflow validation error: {e}") from e

    logger.debug(
        "workflow_parsed",
        steps=len(definition.workflow),
        conditions=list(definition.conditions),
    )
    return definition


def parse_workflow_file(workflow_file: Union[str, Path]) -> WorkflowDefinition:
    """Parse a workflow definition from a YAML or JSON file."""
    path = Path(workflow_file)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise WorkflowLoadError(f"Cannot read workflow file {path}: {e}") from e
    return parse_workflow_string(content)
