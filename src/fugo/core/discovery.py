"""One full discovery pass, as run once at startup."""

from __future__ import annotations

import logging
from pathlib import Path

from fugo.core.inspector import detect_installations, reported_versions
from fugo.core.prober import DEFAULT_ROOT, DiscoveryError, detect_os_family, primary_install_path
from fugo.core.privileges import permissions_ok
from fugo.models.installation import DiscoveryResult, Installation, Source

log = logging.getLogger(__name__)


def discover(os_family: str | None = None, extra_paths: list[Path] | None = None) -> DiscoveryResult:
    """Locate the primary install root and every Go installation.

    A critical or implausible install root is returned as ``error``
    instead of being raised; nothing else is probed in that case. The
    primary root is probed along with the static roots, so the deletion
    target is always listed (and backed up) when it exists.
    """
    os_family = os_family or detect_os_family()
    try:
        primary = primary_install_path(os_family)
    except DiscoveryError as e:
        log.warning("Discovery vetoed: %s", e)
        return DiscoveryResult(error=str(e))

    versions = reported_versions(primary)
    perm_ok = permissions_ok(DEFAULT_ROOT, os_family)
    installations = detect_installations(os_family, extra_paths, derived=primary)
    primary = deletion_target(primary, installations)
    log.info("Found %d Go installation(s), primary root %s", len(installations), primary)

    return DiscoveryResult(
        installations=tuple(installations),
        primary_path=primary,
        permissions_ok=perm_ok,
        versions=tuple(versions),
    )


def deletion_target(primary: Path, installations: list[Installation]) -> Path:
    """Keep *primary* if it exists, else fall back to a discovered installation.

    Non-gvm installations are preferred; gvm directories are removed
    alongside the primary root anyway.
    """
    try:
        primary.stat()
    except FileNotFoundError:
        log.debug("Primary root %s does not exist", primary)
    except OSError as e:
        log.debug("Cannot stat primary root %s: %s", primary, e)
        return primary
    else:
        return primary

    fallback = next(
        (i for i in installations if i.source is not Source.VERSION_MANAGER),
        installations[0] if installations else None,
    )
    if fallback is None:
        return primary
    log.info("Primary root %s does not exist, targeting %s instead", primary, fallback.path)
    return fallback.path
