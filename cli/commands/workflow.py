# cli/commands/workflow.py
"""Workflow inspection commands."""

import sys
from pathlib import Path
from typing import Optional

import click

from flowinit.compiler.branches import BranchAnalyzer, get_step_completion_state
from flowinit.compiler.conditions import ConditionCompiler
from flowinit.compiler.emitter import InitializerEmitter, get_workflow_category_for_target_object_type
from flowinit.compiler.profiles import get_profile
from flowinit.workflow.models import TargetObjectType
from flowinit.workflow.parser import WorkflowLoadError, parse_workflow_file

TARGET_CHOICES = [target.value for target in TargetObjectType]


@click.group()
def workflow():
    """Inspect workflow builder exports - validate, show branches and categories."""
    pass


# ============================================================================
# Workflow Commands
# ============================================================================

@workflow.command()
@click.argument('workflow_file', type=click.Path(exists=True, path_type=Path))
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def validate(workflow_file: Path, verbose: bool):
    """Validate a workflow definition file."""
    try:
        definition = parse_workflow_file(workflow_file)
    except WorkflowLoadError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(f"✅ Valid workflow: {workflow_file.name}")
    click.echo(f"   Steps: {len(definition.workflow)}")
    click.echo(f"   Conditions: {len(definition.conditions)}")

    compiler = ConditionCompiler()
    unresolved = [
        name for name, condition in definition.conditions.items()
        if compiler.compile(condition) is None
    ]
    if unresolved:
        click.echo(f"⚠️  Conditions that cannot be compiled: {', '.join(unresolved)}")

    if verbose:
        for step in definition.workflow:
            token = get_step_completion_state(step) or '-'
            click.echo(f"  • {step.title or '(untitled)'} [{step.step_type}] -> {token}")


@workflow.command()
@click.argument('workflow_file', type=click.Path(exists=True, path_type=Path))
@click.option('--target', '-t', type=click.Choice(TARGET_CHOICES),
              help='Only analyze the steps this target object type considers')
def branches(workflow_file: Path, target: Optional[str]):
    """Show conditional branches and the completion states they gate."""
    try:
        definition = parse_workflow_file(workflow_file)
    except WorkflowLoadError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    steps = list(definition.workflow)
    if target:
        steps = InitializerEmitter().select_steps(get_profile(target), definition)

    found = BranchAnalyzer().identify_conditional_branches(steps)
    if not found:
        click.echo("📭 No conditional branches found")
        return

    click.echo(f"🔀 Conditional branches ({len(found)}):")
    for name, branch in found.items():
        click.echo(f"  • {name}")
        for step in branch.steps:
            click.echo(f"      step: {step.title}")
        for state in branch.completion_states:
            click.echo(f"      completes: {state}")


@workflow.command()
@click.argument('target', type=click.Choice(TARGET_CHOICES))
def category(target: str):
    """Show the workflow category a target object type covers."""
    click.echo(get_workflow_category_for_target_object_type(target))
