"""
Batch deletion of matched resources.

execute() shows the matched set, asks once for confirmation (unless
skipped), then deletes each item on its own accessor, counting successes and
failures. One failed delete never stops the rest of the batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import click

from .config import BOLD, SGR0
from .errors import KubectlError
from .scope import ResourceRef, ScopedAccessor


@dataclass
class MutationOutcome:
    """Counts for one delete run; aborted is set when confirmation was refused."""

    deleted: int = 0
    failed: int = 0
    aborted: bool = False


def is_affirmative(answer: str) -> bool:
    """Only "y" or "Y" confirms."""
    return answer.strip().lower() == "y"


def prompt_confirmation(count: int) -> bool:
    """Ask on stdout and read one line from stdin; EOF counts as "no"."""
    click.echo(f"\nDelete all {count} resources? [y/N]: ", nl=False)
    answer = click.get_text_stream("stdin").readline()
    return is_affirmative(answer)


def execute(
    matched: list[ResourceRef],
    accessor: ScopedAccessor,
    confirm: Callable[[int], bool] = prompt_confirmation,
    skip_confirm: bool = False,
) -> MutationOutcome:
    """
    Delete every matched resource after confirmation.

    Args:
        matched: Resources to delete, in the order they were listed.
        accessor: Accessor the resources were listed through; each item is
            deleted through accessor.for_namespace(item.namespace) so that
            items gathered across namespaces are addressed in their own one.
        confirm: Called once with the number of matches; False aborts.
        skip_confirm: Delete without calling confirm (--yes).

    Returns:
        Deleted and failed counts; aborted is set when confirmation was refused.
    """
    outcome = MutationOutcome()
    if not matched:
        click.echo("No resources matched your pattern.")
        return outcome

    click.echo(f"{BOLD}The following {accessor.resource.name} match your regex:{SGR0}")
    for ref in matched:
        click.echo(f"  {ref}")

    if not skip_confirm and not confirm(len(matched)):
        click.echo("Aborted.")
        outcome.aborted = True
        return outcome

    for ref in matched:
        target = accessor.for_namespace(ref.namespace)
        try:
            target.delete(ref.name)
        except KubectlError as exc:
            click.echo(f"Failed to delete {ref}: {exc}", err=True)
            outcome.failed += 1
        else:
            click.echo(f"Deleted {ref}")
            outcome.deleted += 1

    click.echo(f"\n✅ {outcome.deleted} deleted, ❌ {outcome.failed} failed.")
    return outcome
