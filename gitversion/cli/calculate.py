"""CLI command to calculate the version of a repository."""

from pathlib import Path
from typing import Optional

import click

from gitversion.cli.error_formatting import pretty_print_parse_error
from gitversion.cli.utils.logging import logger
from gitversion.config import ConfigAccessor, load_configuration
from gitversion.constants import WorkflowType
from gitversion.git import GitRepository
from gitversion.model.validation import ConfigurationParseError, ValidationError
from gitversion.output import OutputFormat, format_version
from gitversion.versioning import IncrementField, VersionCalculator, VersioningError
from gitversion.versioning.exceptions import NotARepositoryError


def fail(ctx: click.Context, message: str) -> None:
    """Print an error to stderr and exit with status 1."""
    click.echo(f"[ERROR] {message}", err=True)
    ctx.exit(1)


def forced_increment(major: bool, minor: bool, patch: bool) -> Optional[IncrementField]:
    """The single increment selected by --major/--minor/--patch, if any."""
    selected = [
        field
        for field, flag in (
            (IncrementField.major, major),
            (IncrementField.minor, minor),
            (IncrementField.patch, patch),
        )
        if flag
    ]
    if len(selected) > 1:
        raise click.UsageError("Only one of --major, --minor and --patch may be given.")
    return selected[0] if selected else None


@click.command(name="calculate")
@click.option("--branch", "-b", default=None, help="Branch to version (default: current branch).")
@click.option(
    "--workflow",
    "-w",
    type=click.Choice([workflow.value for workflow in WorkflowType], case_sensitive=False),
    default=None,
    help="Branching workflow (default: gitflow).",
)
@click.option("--major", is_flag=True, default=False, help="Force a major increment.")
@click.option("--minor", is_flag=True, default=False, help="Force a minor increment.")
@click.option("--patch", is_flag=True, default=False, help="Force a patch increment.")
@click.option("--next-version", default=None, help="Use this version as the base version.")
@click.option(
    "--output",
    "-o",
    type=click.Choice([fmt.value for fmt in OutputFormat], case_sensitive=False),
    default=None,
    help="Output format (default: text).",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: GitVersion.yml in the repository root).",
)
@click.option(
    "--path",
    "-C",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory inside the repository.",
)
@click.pass_context
def calculate(
    ctx,
    branch: Optional[str],
    workflow: Optional[str],
    major: bool,
    minor: bool,
    patch: bool,
    next_version: Optional[str],
    output: Optional[str],
    config: Optional[Path],
    path: Path,
):
    """Calculate the semantic version of the current commit."""
    increment = forced_increment(major, minor, patch)

    settings = ConfigAccessor().defaults()
    workflow = workflow or settings["workflow"]
    output = output or settings["output"]

    repository = GitRepository(path)
    try:
        if not repository.is_repository():
            raise NotARepositoryError(str(path))

        configuration = load_configuration(config, repo_root=repository.root)
        resolution = VersionCalculator(repository, configuration).calculate(
            branch=branch,
            workflow=WorkflowType(workflow.lower()),
            forced_increment=increment,
            next_version=next_version,
        )
        click.echo(format_version(resolution, output))
    except ConfigurationParseError as e:
        fail(ctx, pretty_print_parse_error(e))
    except (VersioningError, ValidationError, ValueError) as e:
        logger.debug(f"Version calculation failed: {e!r}")
        fail(ctx, str(e))
