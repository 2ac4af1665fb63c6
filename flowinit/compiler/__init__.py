# flowinit/compiler/__init__.py
"""Workflow-to-initializer compiler."""

from .branches import BranchAnalyzer, ConditionalBranch, get_step_completion_state, identify_conditional_branches
from .completion import CompletionStateResolver
from .conditions import CompiledCondition, ConditionCompiler, ConditionResolution, compile_condition
from .emitter import (
    InitializerEmitter,
    export_initializers,
    generate_initializer_class,
    get_workflow_category_for_target_object_type,
    initializer_filename,
)
from .heuristics import BranchHeuristic, RoleBasedHeuristic, TextContainsHeuristic
from .profiles import PROFILES, TargetObjectProfile, get_profile

__all__ = [
    'BranchAnalyzer',
    'BranchHeuristic',
    'CompiledCondition',
    'CompletionStateResolver',
    'ConditionCompiler',
    'ConditionResolution',
    'ConditionalBranch',
    'InitializerEmitter',
    'PROFILES',
    'RoleBasedHeuristic',
    'TargetObjectProfile',
    'TextContainsHeuristic',
    'compile_condition',
    'export_initializers',
    'generate_initializer_class',
    'get_profile',
    'get_step_completion_state',
    'get_workflow_category_for_target_object_type',
    'identify_conditional_branches',
    'initializer_filename',
]
