# cli/main.py
"""Main CLI entry point for the Workflow Initializer Compiler."""

import click

from flowinit import __version__


@click.group()
@click.version_option(version=__version__)
def cli():
    """Workflow Initializer Compiler CLI - turn workflow builder exports into initializer classes."""
    pass


def register_commands():
    """Register all CLI command groups."""
    from cli.commands.workflow import workflow
    cli.add_command(workflow)

    from flowinit.compiler.cli import generate
    cli.add_command(generate)


register_commands()


if __name__ == '__main__':
    cli()
