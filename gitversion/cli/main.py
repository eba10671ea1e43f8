"""gitversion CLI"""

import click

from gitversion import __version__
from gitversion.cli.calculate import calculate
from gitversion.cli.classify import classify

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="gitversion")
@click.pass_context
def cli(ctx):
    """
    Calculate semantic versions from git history.
    """
    ctx.ensure_object(dict)


cli.add_command(add_debug_option(calculate))
cli.add_command(add_debug_option(classify))

add_debug_option(cli)

if __name__ == "__main__":
    cli(obj={})
