"""CLI command to show which branch policy applies to a branch."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from gitversion.cli.calculate import fail
from gitversion.cli.error_formatting import pretty_print_parse_error
from gitversion.config import ConfigAccessor, load_configuration
from gitversion.constants import WorkflowType
from gitversion.git import GitRepository
from gitversion.model.validation import ConfigurationParseError, ValidationError
from gitversion.versioning import BranchClassification, BranchClassifier


def _flag(value: bool) -> str:
    return "yes" if value else "no"


def classification_table(classification: BranchClassification) -> Table:
    """Render a branch classification as a two-column table."""
    policy = classification.policy
    prevent = policy.prevent_increment

    table = Table(title=f"Branch '{classification.branch_name}'")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value")

    table.add_row("Policy", classification.policy_name)
    table.add_row("Branch type", classification.branch_type.value)
    table.add_row("Regex", policy.regex or "-")
    table.add_row("Increment", policy.increment.value)
    table.add_row("Label", classification.render_label() or "-")
    table.add_row("Main branch", _flag(policy.is_main_branch))
    table.add_row("Release branch", _flag(policy.is_release_branch))
    table.add_row("Tracks release branches", _flag(policy.tracks_release_branches))
    table.add_row("Track merge message", _flag(policy.track_merge_message))
    table.add_row("Prevent increment of merged branch", _flag(prevent.of_merged_branch))
    table.add_row(
        "Prevent increment when tagged", _flag(prevent.when_current_commit_tagged)
    )
    table.add_row("Prevent increment when merged", _flag(prevent.when_branch_merged))
    return table


@click.command(name="classify")
@click.argument("branch")
@click.option(
    "--workflow",
    "-w",
    type=click.Choice([workflow.value for workflow in WorkflowType], case_sensitive=False),
    default=None,
    help="Branching workflow (default: gitflow).",
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
    help="Directory searched for the configuration file.",
)
@click.pass_context
def classify(
    ctx, branch: str, workflow: Optional[str], config: Optional[Path], path: Path
):
    """Show the branch policy that applies to BRANCH."""
    workflow = workflow or ConfigAccessor().defaults()["workflow"]

    repository = GitRepository(path)
    repo_root = repository.root if repository.is_repository() else path

    try:
        configuration = load_configuration(config, repo_root=repo_root)
        classification = BranchClassifier(configuration.branches).classify(branch)
        classification = classification.for_workflow(WorkflowType(workflow.lower()))
    except ConfigurationParseError as e:
        fail(ctx, pretty_print_parse_error(e))
        return
    except (ValidationError, ValueError) as e:
        fail(ctx, str(e))
        return

    Console().print(classification_table(classification))
