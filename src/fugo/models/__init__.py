"""fugo data models."""

from fugo.models.installation import (
    UNKNOWN_PERMISSIONS,
    UNKNOWN_VERSION,
    DiscoveryResult,
    Installation,
    Source,
)
from fugo.models.outcome import BackupOutcome, DeleteOutcome

__all__ = [
    "BackupOutcome",
    "DeleteOutcome",
    "DiscoveryResult",
    "Installation",
    "Source",
    "UNKNOWN_PERMISSIONS",
    "UNKNOWN_VERSION",
]
