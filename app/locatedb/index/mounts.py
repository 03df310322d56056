"""Mount discovery for index builds.

Enumerates the OS mount table through psutil, keeps real filesystems
of known types, and removes mounts nested below other retained mounts
so that no subtree is walked twice.
"""

import logging
import os
from collections.abc import Callable, Iterable

import psutil

from locatedb.core.errors import MountEnumerationError
from locatedb.index.models import MountCandidate, MountEntry, RejectionReason

logger = logging.getLogger(__name__)

# Filesystem types backed by real storage. Compared case-insensitively.
DEFAULT_FILESYSTEM_TYPES: tuple[str, ...] = (
    # FAT family
    "fat12",
    "fat16",
    "fat32",
    "vfat",
    "msdos",
    "exfat",
    # Windows
    "ntfs",
    "ntfs3",
    "fuseblk",
    "refs",
    # Apple / OS2 / BSD
    "hfs",
    "hfs+",
    "hfsplus",
    "hpfs",
    "apfs",
    "ufs",
    # Linux
    "ext2",
    "ext3",
    "ext4",
    "btrfs",
    "xfs",
    "f2fs",
    "zfs",
)

_NO_DEVICE = ("", "none")


def is_strict_descendant(path: str, ancestor: str) -> bool:
    """Check if a path lies strictly below another path.

    ``/home/user`` is a strict descendant of ``/home`` and of ``/``;
    ``/home`` is not a descendant of itself, and ``/homework`` is not a
    descendant of ``/home``.

    Args:
        path: Candidate descendant.
        ancestor: Candidate ancestor.

    Returns:
        True if path starts with ancestor followed by a separator.
    """
    if path == ancestor:
        return False
    prefix = ancestor if ancestor.endswith(os.sep) else ancestor + os.sep
    return path.startswith(prefix)


def has_ancestor(path: str, others: Iterable[str]) -> bool:
    """Check if any of the given paths is a proper ancestor of path."""
    return any(is_strict_descendant(path, other) for other in others)


def dedupe_mounts(mounts: Iterable[MountEntry]) -> list[MountEntry]:
    """Remove duplicate and nested mounts.

    A mount point seen more than once is kept once (first occurrence).
    A mount is then retained iff no other mount is a proper ancestor of
    its path. Order of first appearance is preserved.

    Args:
        mounts: Candidate mounts.

    Returns:
        Mounts with no nesting relationship among them.
    """
    unique: dict[str, MountEntry] = {}
    for mount in mounts:
        unique.setdefault(mount.path, mount)

    paths = list(unique)
    return [mount for mount in unique.values() if not has_ancestor(mount.path, paths)]


def enumerate_os_mounts() -> list[MountEntry]:
    """Read the OS mount table.

    psutil omits dummy filesystems (proc, sysfs, tmpfs, ...) unless
    ``all=True`` is passed; any mount only present in the full listing,
    or without a backing device, is flagged as virtual.

    Returns:
        Every mount known to the OS, in mount table order.

    Raises:
        MountEnumerationError: If the mount table cannot be read.
    """
    try:
        partitions = psutil.disk_partitions(all=True)
        physical = {p.mountpoint for p in psutil.disk_partitions(all=False)}
    except (OSError, NotImplementedError, psutil.Error) as e:
        raise MountEnumerationError(f"Cannot enumerate mounted filesystems: {e}") from e

    return [
        MountEntry(
            path=p.mountpoint,
            filesystem_type=p.fstype,
            is_virtual=p.mountpoint not in physical or p.device in _NO_DEVICE,
        )
        for p in partitions
        if p.mountpoint
    ]


class MountCatalog:
    """Selects the mounts an index build walks.

    Args:
        filesystem_types: Allowed filesystem types (case-insensitive).
        enumerate_mounts: Mount table source. Defaults to the OS mount table.
    """

    def __init__(
        self,
        *,
        filesystem_types: Iterable[str] = DEFAULT_FILESYSTEM_TYPES,
        enumerate_mounts: Callable[[], list[MountEntry]] | None = None,
    ) -> None:
        self._filesystem_types = frozenset(t.casefold() for t in filesystem_types)
        self._enumerate = enumerate_mounts or enumerate_os_mounts

    def is_allowed_type(self, filesystem_type: str) -> bool:
        """Check if a filesystem type is in the allow-list."""
        return filesystem_type.casefold() in self._filesystem_types

    def _filter_reason(self, mount: MountEntry) -> RejectionReason | None:
        """Apply the virtual and filesystem type filters to one mount."""
        if mount.is_virtual:
            return RejectionReason.VIRTUAL
        if not self.is_allowed_type(mount.filesystem_type):
            return RejectionReason.FILESYSTEM_TYPE
        return None

    def candidates(self) -> list[MountCandidate]:
        """Classify every enumerated mount.

        Returns:
            One MountCandidate per mount table entry, in table order,
            with the reason it is skipped (None for retained mounts).

        Raises:
            MountEnumerationError: If the mount table cannot be read.
        """
        decisions: list[tuple[MountEntry, RejectionReason | None]] = []
        eligible: list[str] = []
        for mount in self._enumerate():
            rejection = self._filter_reason(mount)
            if rejection is None and mount.path in eligible:
                rejection = RejectionReason.DUPLICATE
            elif rejection is None:
                eligible.append(mount.path)
            decisions.append((mount, rejection))

        candidates: list[MountCandidate] = []
        for mount, rejection in decisions:
            if rejection is None and has_ancestor(mount.path, eligible):
                rejection = RejectionReason.NESTED
            if rejection is not None:
                logger.debug(
                    "Skipping mount %s (%s): %s",
                    mount.path,
                    mount.filesystem_type,
                    rejection.value,
                )
            candidates.append(MountCandidate(mount=mount, rejection=rejection))
        return candidates

    def discover(self) -> list[MountEntry]:
        """Return the retained mount set.

        Returns:
            Mounts of allowed, non-virtual filesystems, none of which is
            nested below another.

        Raises:
            MountEnumerationError: If the mount table cannot be read.
        """
        eligible = [m for m in self._enumerate() if self._filter_reason(m) is None]
        retained = dedupe_mounts(eligible)
        logger.debug("Retained mounts: %s", ", ".join(m.path for m in retained) or "none")
        return retained


def discover_mounts(filesystem_types: Iterable[str] = DEFAULT_FILESYSTEM_TYPES) -> list[MountEntry]:
    """Discover the retained mounts of the running system.

    Args:
        filesystem_types: Allowed filesystem types.

    Returns:
        Retained mounts in mount table order.

    Raises:
        MountEnumerationError: If the mount table cannot be read.
    """
    return MountCatalog(filesystem_types=filesystem_types).discover()
