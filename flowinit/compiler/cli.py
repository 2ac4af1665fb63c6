# flowinit/compiler/cli.py
"""CLI commands for generating Ruby initializer classes."""

import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from flowinit.config import get_settings
from flowinit.compiler.emitter import export_initializers, generate_initializer_class
from flowinit.compiler.profiles import PROFILES
from flowinit.logging import configure_logging
from flowinit.workflow.models import TargetObjectType
from flowinit.workflow.parser import WorkflowLoadError, parse_workflow_file

TARGET_CHOICES = [target.value for target in TargetObjectType]


def _resolve_college(college: Optional[str]) -> str:
    college = college or get_settings().default_college
    if not college:
        raise click.UsageError("A college is required (--college or FLOWINIT_DEFAULT_COLLEGE).")
    return college.lower().replace(" ", "")


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.pass_context
def generate(ctx, verbose: bool):
    """Generate initializer classes from workflow builder exports."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level, settings.log_format)


@generate.command()
@click.argument('workflow_file', type=click.Path(exists=True, path_type=Path))
@click.option('--college', '-c', help='College identifier, e.g. "northwood"')
@click.option('--target', '-t', type=click.Choice(TARGET_CHOICES), required=True,
              help='Target object type the initializer attaches to')
@click.option('--output', '-o', type=click.Path(path_type=Path),
              help='Write to this file instead of stdout')
@click.pass_context
def initializer(ctx, workflow_file: Path, college: Optional[str], target: str, output: Optional[Path]):
    """Generate a single initializer class."""
    try:
        definition = parse_workflow_file(workflow_file)
        code = generate_initializer_class(definition, _resolve_college(college), target)
    except WorkflowLoadError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(code + "\n", encoding="utf-8")
        click.echo(f"✅ Wrote {output}")
    else:
        click.echo(code)


@generate.command(name='all')
@click.argument('workflow_file', type=click.Path(exists=True, path_type=Path))
@click.option('--college', '-c', help='College identifier, e.g. "northwood"')
@click.option('--target', '-t', 'targets', multiple=True, type=click.Choice(TARGET_CHOICES),
              help='Restrict to these target object types (default: all)')
@click.option('--output', '-o', type=click.Path(path_type=Path),
              help='Output directory (default: settings output_dir)')
@click.option('--force', '-f', is_flag=True, help='Overwrite existing initializer files')
@click.pass_context
def all_initializers(ctx, workflow_file: Path, college: Optional[str], targets: Tuple[str, ...],
                     output: Optional[Path], force: bool):
    """Generate one initializer file per target object type."""
    verbose = ctx.obj.get('verbose', False)
    college = _resolve_college(college)
    output = output or Path(get_settings().output_dir)
    selected = [TargetObjectType(t) for t in targets] or list(PROFILES)

    existing = [
        output / PROFILES[target].filename(college)
        for target in selected
        if (output / PROFILES[target].filename(college)).exists()
    ]
    if existing and not force:
        click.echo(f"❌ {existing[0]} already exists. Use --force to overwrite.", err=True)
        sys.exit(1)

    try:
        definition = parse_workflow_file(workflow_file)
    except WorkflowLoadError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(f"📖 Loaded {len(definition.workflow)} steps, {len(definition.conditions)} conditions")
    written = export_initializers(definition, college, output, selected)

    for target, path in written.items():
        click.echo(f"   {target.value}: {path}")
    if verbose:
        click.echo(f"📁 Location: {output.absolute()}")
    click.echo(f"🎉 Generated {len(written)} initializer(s)")
