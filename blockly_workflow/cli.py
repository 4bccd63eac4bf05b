"""Typer CLI entrypoint for blockly-workflow."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import configure_logging, debug_enabled, try_load_environment
from .exceptions import GateFailedError, WorkflowError
from .forks import ForkService
from .models import GateKind
from .workflow import WorkflowService, render_info

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
    help="Branch, review and fork workflow helpers for Blockly development.",
    context_settings={"help_option_names": ["-h", "--help"]},
)

# Unknown options inside a command are reported and ignored rather than rejected.
LENIENT = {"allow_extra_args": True, "ignore_unknown_options": True}
PASSTHROUGH = {"--help", "-h", "--version"}


@dataclass(slots=True)
class AppState:
    workflow: WorkflowService
    forks: ForkService
    console: Console


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"bw {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the blockly-workflow version and exit.",
    ),
) -> None:
    _ = version  # handled via callback
    if isinstance(ctx.obj, AppState):
        return
    configure_logging(debug_enabled())
    console = Console()
    env = try_load_environment()
    repo_path = Path.cwd()
    ctx.obj = AppState(
        workflow=WorkflowService(env=env, repo_path=repo_path, console=console),
        forks=ForkService(env=env, repo_path=repo_path, console=console),
        console=console,
    )


def _require_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):  # pragma: no cover
        raise typer.Exit(1)
    return state


def _guard(state: AppState, action: Callable[[], object]) -> None:
    """Print workflow errors and return; only a failed gate ends the process non-zero."""

    try:
        action()
    except GateFailedError as exc:
        state.console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
    except WorkflowError as exc:
        state.console.print(f"[yellow]{escape(str(exc))}[/yellow]")


def _warn_ignored(state: AppState, tokens: Sequence[str]) -> None:
    for token in tokens:
        kind = "option" if token.startswith("-") else "argument"
        state.console.print(f"[yellow]Ignoring unknown {kind}: {escape(token)}[/yellow]")


def _single_argument(ctx: typer.Context, state: AppState, value: Optional[str]) -> str:
    tokens = ([value] if value is not None else []) + list(ctx.args)
    positionals = [token for token in tokens if not token.startswith("-")]
    options = [token for token in tokens if token.startswith("-")]
    _warn_ignored(state, options + positionals[1:])
    return positionals[0] if positionals else ""


@app.command("help", context_settings=LENIENT)
def show_help(ctx: typer.Context) -> None:
    """Show this message."""
    _warn_ignored(_require_state(ctx), ctx.args)
    typer.echo(ctx.parent.get_help() if ctx.parent else ctx.get_help())


@app.command("start", context_settings=LENIENT)
def start(
    ctx: typer.Context,
    branch: Optional[str] = typer.Argument(None, help="Name of the new branch."),
) -> None:
    """Begin a new branch in the workspace."""
    state = _require_state(ctx)
    name = _single_argument(ctx, state, branch)
    _guard(state, lambda: state.workflow.start(name))


@app.command("close", context_settings=LENIENT)
def close(ctx: typer.Context) -> None:
    """Delete the current branch on origin and abandon it locally."""
    state = _require_state(ctx)
    _warn_ignored(state, ctx.args)
    _guard(state, state.workflow.close)


@app.command("push", context_settings=LENIENT)
def push(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Force-push the branch."),
    notest: bool = typer.Option(False, "--notest", help="Skip running tests before pushing."),
) -> None:
    """Run tests, then push HEAD to origin as <user>-<branch> for review."""
    state = _require_state(ctx)
    _warn_ignored(state, ctx.args)
    _guard(state, lambda: state.workflow.push(force=force, run_tests=not notest))


@app.command("pull", context_settings=LENIENT)
def pull(ctx: typer.Context) -> None:
    """Sync the workspace from the remote."""
    state = _require_state(ctx)
    _warn_ignored(state, ctx.args)
    _guard(state, state.workflow.pull)


@app.command("rebase", context_settings=LENIENT)
def rebase(
    ctx: typer.Context,
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Rebase interactively."),
) -> None:
    """Rebase the workspace onto master."""
    state = _require_state(ctx)
    _warn_ignored(state, ctx.args)
    _guard(state, lambda: state.workflow.rebase(interactive=interactive))


@app.command("test", context_settings=LENIENT)
def run_tests(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show build tool output."),
) -> None:
    """Run the project's tests."""
    state = _require_state(ctx)
    _warn_ignored(state, ctx.args)
    _guard(state, lambda: state.workflow.run_gate(GateKind.TEST, verbose=verbose))


@app.command("lint", context_settings=LENIENT)
def run_lint(ctx: typer.Context) -> None:
    """Run the project's linter."""
    state = _require_state(ctx)
    _warn_ignored(state, ctx.args)
    _guard(state, lambda: state.workflow.run_gate(GateKind.LINT))


@app.command("fclone", context_settings=LENIENT)
def fork_clone(
    ctx: typer.Context,
    project: Optional[str] = typer.Argument(None, help="One of web, android, ios, devtools."),
) -> None:
    """Clone your fork and register google's repository as upstream."""
    state = _require_state(ctx)
    name = _single_argument(ctx, state, project)
    _guard(state, lambda: state.forks.clone_fork(name))


@app.command("fupdate", context_settings=LENIENT)
def fork_update(ctx: typer.Context) -> None:
    """Sync master and develop from upstream into your fork."""
    state = _require_state(ctx)
    _warn_ignored(state, ctx.args)
    _guard(state, state.forks.update_fork)


@app.command("fbranch", context_settings=LENIENT)
def fork_branch(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Branch to create or reset."),
) -> None:
    """Create or reset a local branch at upstream/develop."""
    state = _require_state(ctx)
    branch = _single_argument(ctx, state, name)
    _guard(state, lambda: state.forks.branch_from_fork(branch))


@app.command("info", context_settings=LENIENT)
def info(ctx: typer.Context) -> None:
    """Show the environment, current branch and remote identities."""
    state = _require_state(ctx)
    _warn_ignored(state, ctx.args)
    _guard(state, lambda: render_info(state.workflow.describe(), state.console))


def command_names() -> set[str]:
    return {command.name for command in app.registered_commands if command.name}


def resolve_args(argv: Sequence[str]) -> list[str]:
    """Unknown or missing commands show the help text instead of failing."""

    args = list(argv)
    if not args:
        return ["--help"]
    if args[0] in PASSTHROUGH or args[0] in command_names():
        return args
    return ["--help"]


def run(argv: Sequence[str] | None = None) -> None:
    args = resolve_args(sys.argv[1:] if argv is None else argv)
    app(args=args, prog_name="bw")


__all__ = ["app", "run"]
