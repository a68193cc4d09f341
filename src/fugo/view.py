"""Terminal rendering of session snapshots."""

from __future__ import annotations

from typing import Any, Sequence

import click

from fugo.core.session import Phase, ViewModel
from fugo.models.installation import Installation
from fugo.utils import bytes_to_human

BANNER = r"""
  _____      ____
 |  ___|   _/ ___| ___
 | |_ | | | | |  _ / _ \
 |  _|| |_| | |_| | (_) |
 |_|   \__,_|\____|\___/
"""

SUBTITLE = "The Go Uninstaller"

SPINNER_FRAMES = ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷")

STYLES: dict[str, dict[str, Any]] = {
    "title": {"fg": "magenta", "bold": True},
    "subtitle": {"fg": "magenta"},
    "info": {"fg": "bright_black"},
    "warning": {"fg": "red"},
    "success": {"fg": "green"},
    "highlight": {"fg": "blue", "bold": True},
    "accent": {"fg": "yellow"},
}

_BUSY_MESSAGES = {
    Phase.LOADING: "Detecting Go installations...",
    Phase.CREATING_BACKUP: "Creating safety backup...",
    Phase.DELETING: "Removing Go installations...",
}


def styled(role: str, text: str) -> str:
    return click.style(text, **STYLES[role])


def spinner_line(vm: ViewModel) -> str:
    """One-line progress indicator for phases that wait on background work."""
    frame = SPINNER_FRAMES[vm.spinner_frame % len(SPINNER_FRAMES)]
    return f"{styled('accent', frame)} {_BUSY_MESSAGES.get(vm.phase, 'Working...')}"


def header() -> str:
    lines = [styled("title", line) for line in BANNER.strip("\n").splitlines()]
    lines.append(styled("subtitle", SUBTITLE))
    return "\n".join(lines) + "\n"


def render(vm: ViewModel) -> str:
    """Full screen for *vm*."""
    match vm.phase:
        case Phase.LOADING | Phase.CREATING_BACKUP | Phase.DELETING:
            body = spinner_line(vm)
        case Phase.NOTHING_FOUND:
            body = _render_nothing_found()
        case Phase.CONFIRM:
            body = _render_confirm(vm)
        case Phase.DRY_RUN_COMPLETE:
            body = _render_dry_run(vm)
        case Phase.COMPLETE:
            body = _render_complete(vm)
        case Phase.CANCELLED:
            body = styled("info", "Operation cancelled. Nothing was deleted.")
        case Phase.FAILED:
            body = styled("warning", f"Error: {vm.error}")
        case _:
            body = ""
    return f"{header()}\n{body}\n"


def _render_nothing_found() -> str:
    return "\n".join([
        styled("warning", "No Go installations found!"),
        "If you believe Go is installed but not detected, run this tool with admin/sudo privileges.",
    ])


def render_installations(installations: Sequence[Installation]) -> list[str]:
    lines = [styled("highlight", f"Detected {len(installations)} Go installation(s):"), ""]
    for install in installations:
        lines.append(f"  {styled('accent', '●')} {install.version}")
        lines.append(f"     Path: {install.path}")
        lines.append(f"     Source: {install.source.value} | Size: {bytes_to_human(install.size_bytes)}")
        lines.append(f"     Permissions: {install.permissions}")
        lines.append("")
    return lines


def _render_confirm(vm: ViewModel) -> str:
    lines = render_installations(vm.installations)

    if vm.permissions_ok:
        lines.append(styled("success", "Permissions check passed"))
    else:
        lines.append(styled("warning", "WARNING: Insufficient permissions detected!"))
        lines.append(styled("info", "   Run with sudo/admin privileges for complete removal"))
    lines.append("")

    if vm.dry_run:
        lines.append(styled("highlight", "DRY RUN MODE ENABLED - No files will be deleted"))
    else:
        lines.append(styled("warning", "LIVE MODE - Files WILL be permanently deleted!"))

    lines.append("")
    lines.append(styled("warning", "CRITICAL WARNING: This will permanently delete:"))
    lines.extend(styled("warning", f"  {target}") for target in vm.targets)
    lines.append(styled("info", f"Backup location: {vm.backup_dir}"))
    lines.append("")
    lines.append(f"Step {(vm.step or 0) + 1}/3: {vm.prompt}")
    lines.append(styled("info", "Enter to continue, 'd' toggles dry-run, 'q' quits"))
    return "\n".join(lines)


def _render_dry_run(vm: ViewModel) -> str:
    lines = [styled("success", "DRY RUN COMPLETED"), "", "The following operations would be performed:", ""]
    for install in vm.installations:
        lines.append(f"  Back up: {install.path} ({install.source.value})")
    for target in vm.targets:
        lines.append(f"  Remove:  {target}")
    kept = [i.path for i in vm.installations if i.path not in vm.targets]
    if kept:
        lines.append("")
        lines.append(styled("info", "Not removed by this run:"))
        lines.extend(f"  {path}" for path in kept)
    lines.append("")
    lines.append(styled("info", "No files were actually deleted in dry-run mode"))
    return "\n".join(lines)


def _render_complete(vm: ViewModel) -> str:
    if vm.error:
        return "\n".join([
            styled("warning", f"Error: {vm.error}"),
            f"Backup available at: {vm.backup_dir}",
        ])
    if vm.deletion_complete:
        return "\n".join([
            styled("success", f"Success! Removed {len(vm.removed)} Go installation(s):"),
            *(f"  {path}" for path in vm.removed),
            styled("info", f"Backup created at: {vm.backup_dir}"),
            f"Check the log at {vm.log_path} for details.",
            "You may need to clean up your PATH environment variable manually.",
        ])
    return ""
