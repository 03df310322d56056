"""Index domain models.

This module defines the data structures used while building the
index: OS mount entries, the reasons a mount is not indexed, and the
summary reported after a completed update.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RejectionReason(str, Enum):
    """Why an enumerated mount is not part of the retained set.

    Attributes:
        VIRTUAL: Pseudo filesystem without backing storage.
        FILESYSTEM_TYPE: Filesystem type is not in the allow-list.
        NESTED: Mount lies below another retained mount.
        DUPLICATE: Same mount point was already enumerated.
    """

    VIRTUAL = "virtual"
    FILESYSTEM_TYPE = "filesystem_type"
    NESTED = "nested"
    DUPLICATE = "duplicate"


@dataclass(frozen=True, slots=True)
class MountEntry:
    """A filesystem attached to the global namespace.

    Attributes:
        path: Absolute mount point.
        filesystem_type: Filesystem type as reported by the OS (e.g., "ext4").
        is_virtual: True for dummy filesystems with no backing store.
    """

    path: str
    filesystem_type: str
    is_virtual: bool = False

    def __post_init__(self) -> None:
        """Validate mount data after initialization."""
        if not self.path:
            msg = "Mount path cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class MountCandidate:
    """An enumerated mount together with the filtering decision.

    Attributes:
        mount: The enumerated mount.
        rejection: Why the mount is skipped, or None when it is retained.
    """

    mount: MountEntry
    rejection: RejectionReason | None = None

    @property
    def retained(self) -> bool:
        """Check if this mount is indexed."""
        return self.rejection is None


@dataclass(frozen=True, slots=True)
class UpdateSummary:
    """Result of a completed index rebuild.

    Attributes:
        path_count: Number of paths written to the index.
        mount_count: Number of mounts traversed.
        mounts: Mount points traversed, in traversal order.
        skipped_entries: Entries that could not be read during the walk.
        duration_seconds: Wall-clock time of the update.
        finished_at: Completion time in ISO 8601 format (UTC).
    """

    path_count: int
    mount_count: int
    mounts: tuple[str, ...]
    skipped_entries: int
    duration_seconds: float
    finished_at: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary representation of the summary.
        """
        return {
            "path_count": self.path_count,
            "mount_count": self.mount_count,
            "mounts": list(self.mounts),
            "skipped_entries": self.skipped_entries,
            "duration_seconds": self.duration_seconds,
            "finished_at": self.finished_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UpdateSummary":
        """Deserialize from dictionary.

        Args:
            data: Dictionary containing summary data.

        Returns:
            UpdateSummary instance.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a field has the wrong type.
        """
        return cls(
            path_count=int(data["path_count"]),
            mount_count=int(data["mount_count"]),
            mounts=tuple(str(m) for m in data["mounts"]),
            skipped_entries=int(data.get("skipped_entries", 0)),
            duration_seconds=float(data["duration_seconds"]),
            finished_at=str(data["finished_at"]),
        )
