"""Workflow Initializer Compiler."""

__version__ = "0.1.0"

from flowinit.compiler import generate_initializer_class, get_workflow_category_for_target_object_type
from flowinit.workflow import TargetObjectType, WorkflowDefinition, parse_workflow_file

__all__ = [
    "TargetObjectType",
    "WorkflowDefinition",
    "generate_initializer_class",
    "get_workflow_category_for_target_object_type",
    "parse_workflow_file",
]
