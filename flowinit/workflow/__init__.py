"""Workflow definition models and loaders."""

from .models import (
    Comparison,
    Condition,
    Step,
    StepType,
    TargetObjectType,
    WorkflowDefinition,
)
from .parser import WorkflowLoadError, parse_workflow_data, parse_workflow_file, parse_workflow_string

__all__ = [
    'Comparison',
    'Condition',
    'Step',
    'StepType',
    'TargetObjectType',
    'WorkflowDefinition',
    'WorkflowLoadError',
    'parse_workflow_data',
    'parse_workflow_file',
    'parse_workflow_string',
]
