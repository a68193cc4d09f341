"""CLI interface for fugo."""

from __future__ import annotations

import json
import logging
import shutil
import sys
from typing import Callable

import click

from fugo import __version__
from fugo.audit import AuditLog
from fugo.core.discovery import discover
from fugo.core.runner import BackgroundRunner
from fugo.core.session import Command, UninstallSession
from fugo.models.events import DiscoveryFinished, Key, Resize, Tick
from fugo.models.installation import DiscoveryResult
from fugo.settings import Settings
from fugo.utils import bytes_to_human
from fugo.view import render, render_installations, spinner_line

log = logging.getLogger(__name__)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@click.group(invoke_without_command=True)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.version_option(__version__, prog_name="fugo")
@click.pass_context
def main(ctx: click.Context, verbose: int) -> None:
    """fugo: find and safely remove Go installations.

    Without a subcommand, runs the interactive uninstaller.
    """
    _setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        ctx.invoke(uninstall)


# ── uninstall ────────────────────────────────────────────────────────────

@main.command()
@click.option(
    "--dry-run/--live",
    "dry_run",
    default=None,
    help="Start in dry-run (default) or live mode; toggle with 'd' at the prompt",
)
@click.pass_context
def uninstall(ctx: click.Context, dry_run: bool | None) -> None:
    """Detect Go installations and remove them after a 3-step confirmation."""
    settings = Settings.instance()
    if dry_run is None:
        dry_run = settings.dry_run_default()

    session = UninstallSession(
        audit=AuditLog(settings.log_dir()),
        backup_dir=settings.backup_dir(),
        dry_run=dry_run,
    )
    extra = settings.extra_paths()
    code = run_session(session, BackgroundRunner(), lambda: discover(extra_paths=extra))
    ctx.exit(code)


def run_session(
    session: UninstallSession,
    runner: BackgroundRunner,
    discover_fn: Callable[[], DiscoveryResult],
) -> int:
    """Drive *session* until it reaches a terminal phase; return the exit code."""
    interactive = sys.stdout.isatty()
    width, height = shutil.get_terminal_size()
    session.dispatch(Resize(width, height))

    try:
        runner.start("discovery", lambda: DiscoveryFinished(discover_fn()))
    except RuntimeError as e:
        session.fail(f"could not start discovery: {e}")

    try:
        while not session.finished:
            if session.awaiting_input:
                _show(session, interactive)
                event = _read_key(session)
            else:
                event = runner.next_event()

            command = session.dispatch(event)
            if isinstance(event, Tick) and interactive:
                click.echo("\r" + spinner_line(session.snapshot()), nl=False)

            match command:
                case Command.QUIT:
                    break
                case Command.RUN_BACKUP | Command.RUN_DELETE:
                    try:
                        name, job = session.job_for(command)
                        runner.start(name, job)
                    except RuntimeError as e:
                        session.fail(f"could not start background operation: {e}")
    except (KeyboardInterrupt, click.Abort):
        session.dispatch(Key("quit"))

    _show(session, interactive)
    if session.error:
        click.echo(f"Error: {session.error}", err=True)
    return session.exit_code


def _show(session: UninstallSession, interactive: bool) -> None:
    if interactive:
        click.clear()
    click.echo(render(session.snapshot()))


def _read_key(session: UninstallSession) -> Key:
    """Read one line; ``q`` quits, ``d`` toggles dry-run, anything else is an answer."""
    step = (session.sequencer.step or 0) + 1
    line = click.prompt(f"Step {step}/3", default="", show_default=False)
    match line.strip().lower():
        case "q":
            return Key("quit")
        case "d":
            return Key("toggle")
        case _:
            return Key("submit", line)


# ── scan ─────────────────────────────────────────────────────────────────

@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def scan(as_json: bool) -> None:
    """List Go installations (preview only, never deletes)."""
    settings = Settings.instance()
    result = discover(extra_paths=settings.extra_paths())

    if result.error:
        if as_json:
            click.echo(json.dumps({"status": "error", "error": result.error}, indent=2))
        else:
            click.echo(f"Error: {result.error}", err=True)
        sys.exit(1)

    if as_json:
        data = {
            "status": "ok",
            "primary_path": str(result.primary_path) if result.primary_path else None,
            "permissions_ok": result.permissions_ok,
            "versions": list(result.versions),
            "total_bytes": result.total_bytes,
            "installations": [
                {
                    "path": str(i.path),
                    "version": i.version,
                    "source": i.source.value,
                    "size_bytes": i.size_bytes,
                    "permissions": i.permissions,
                    "verified": i.verified,
                }
                for i in result.installations
            ],
        }
        click.echo(json.dumps(data, indent=2))
        return

    if not result.installations:
        click.echo("No Go installations found.")
        return

    click.echo()
    for line in render_installations(result.installations):
        click.echo(line)

    perm = (
        click.style("ok", fg="green")
        if result.permissions_ok
        else click.style("insufficient (run with sudo)", fg="yellow")
    )
    click.echo(f"Primary root: {result.primary_path}")
    click.echo(f"Permissions:  {perm}")
    click.echo(f"Total size:   {click.style(bytes_to_human(result.total_bytes), fg='green', bold=True)}\n")


# ── config ───────────────────────────────────────────────────────────────

@main.command("config")
@click.argument("key", required=False)
@click.argument("value", required=False)
def config_cmd(key: str | None, value: str | None) -> None:
    """Show settings, or set KEY to VALUE (parsed as JSON when possible)."""
    settings = Settings.instance()
    if key is None:
        click.echo(json.dumps(settings.as_dict(), indent=2))
        click.echo(click.style(f"# {settings.path}", fg="bright_black"))
        return
    if value is None:
        click.echo(json.dumps(settings.get(key), indent=2))
        return

    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    settings.set(key, parsed)
    click.echo(f"{key} = {json.dumps(parsed)}")
