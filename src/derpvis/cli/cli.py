import logging
import os
from pathlib import Path

import click

from derpvis.cli.ensure import Ensure
from derpvis.cli.output import machine_output, user_output
from derpvis.core.context import DerpvisContext, create_context
from derpvis.core.entries import add_entry, remove_entry
from derpvis.core.env_import import ENV_VAR, import_env_folders
from derpvis.core.errors import DerpvisError
from derpvis.core.registry import format_entry_line, list_entries
from derpvis.core.sync import format_summary, pull_all, push_all

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])
DEBUG_ENV_VAR = "DERPVIS_DEBUG"


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--add",
    "-a",
    "add_path",
    type=click.Path(path_type=Path),
    help="Folder to add to monitoring.",
)
@click.option("-c", "use_current", is_flag=True, help="Add the current folder.")
@click.option("-l", "list_", is_flag=True, help="List monitored folders.")
@click.option(
    "--remove",
    "-r",
    "remove_index",
    type=int,
    metavar="INDEX",
    help="Stop monitoring the folder at INDEX (as shown by -l).",
)
@click.option("-p", "push", is_flag=True, help="Commit and push local changes.")
@click.version_option(package_name="derpvis")
@click.pass_context
def cli(
    click_ctx: click.Context,
    add_path: Path | None,
    use_current: bool,
    list_: bool,
    remove_index: int | None,
    push: bool,
) -> None:
    """Keep a set of git checkouts in sync with their remotes.

    Without options, every monitored folder is pulled (or cloned if missing).
    When several options are given, the first of add, list, remove and push
    wins. Folders listed in DERPVIS_FOLDERS as 'path(source)' tokens are
    imported first.
    """
    try:
        # Only create context if not already provided (e.g., by tests)
        if click_ctx.obj is None:
            click_ctx.obj = create_context()
        ctx: DerpvisContext = click_ctx.obj

        import_env_folders(ctx, os.environ.get(ENV_VAR))
        _dispatch(ctx, add_path, use_current, list_, remove_index, push)
    except DerpvisError as e:
        Ensure.fail(str(e))


def _dispatch(
    ctx: DerpvisContext,
    add_path: Path | None,
    use_current: bool,
    list_: bool,
    remove_index: int | None,
    push: bool,
) -> None:
    if add_path is not None or use_current:
        _add(ctx, add_path)
        return

    if list_:
        for index, entry in list_entries(ctx.registry):
            machine_output(format_entry_line(index, entry))
        return

    if remove_index is not None:
        _remove(ctx, remove_index)
        return

    summary = push_all(ctx) if push else pull_all(ctx)
    if summary.results:
        user_output(format_summary(summary))
    if not summary.ok:
        raise SystemExit(1)


def _add(ctx: DerpvisContext, add_path: Path | None) -> None:
    entry, created = add_entry(ctx, add_path)
    if created:
        ctx.feedback.success(f"Added {entry.path} ({entry.source})")
    else:
        ctx.feedback.info(f"Folder already exists! Updated source of {entry.path}")


def _remove(ctx: DerpvisContext, remove_index: int) -> None:
    removed = remove_entry(ctx, remove_index)
    if removed is None:
        ctx.feedback.warning(f"No folder at index {remove_index}")
        return
    ctx.feedback.success(f"Removed {removed.path}")


def main() -> None:
    """CLI entry point used by the `derpvis` console script."""
    if os.environ.get(DEBUG_ENV_VAR):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")
    cli()
