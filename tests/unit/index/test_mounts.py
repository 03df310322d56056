"""Tests for mount discovery and nesting deduplication."""

import itertools
from collections import namedtuple
from unittest.mock import patch

import pytest
from locatedb.core.errors import MountEnumerationError
from locatedb.index.models import MountEntry, RejectionReason
from locatedb.index.mounts import (
    DEFAULT_FILESYSTEM_TYPES,
    MountCatalog,
    dedupe_mounts,
    discover_mounts,
    enumerate_os_mounts,
    is_strict_descendant,
)

Partition = namedtuple("Partition", "device mountpoint fstype opts")


def _mount(path: str, fstype: str = "ext4", virtual: bool = False) -> MountEntry:
    return MountEntry(path=path, filesystem_type=fstype, is_virtual=virtual)


def _catalog(*mounts: MountEntry, **kwargs: object) -> MountCatalog:
    return MountCatalog(enumerate_mounts=lambda: list(mounts), **kwargs)  # type: ignore[arg-type]


class TestIsStrictDescendant:
    """Tests for the ancestor predicate."""

    def test_child_is_descendant(self) -> None:
        """A path below another path is a strict descendant."""
        assert is_strict_descendant("/home/user", "/home") is True

    def test_deep_child_is_descendant(self) -> None:
        """Descendants may be several levels deep."""
        assert is_strict_descendant("/mnt/a/b/c", "/mnt") is True

    def test_everything_is_below_root(self) -> None:
        """Every other absolute path is a descendant of /."""
        assert is_strict_descendant("/home", "/") is True

    def test_same_path_is_not_descendant(self) -> None:
        """A path is not a strict descendant of itself."""
        assert is_strict_descendant("/home", "/home") is False
        assert is_strict_descendant("/", "/") is False

    def test_shared_prefix_is_not_descendant(self) -> None:
        """A sibling sharing a name prefix is not a descendant."""
        assert is_strict_descendant("/homework", "/home") is False

    def test_ancestor_is_not_descendant(self) -> None:
        """The relation is not symmetric."""
        assert is_strict_descendant("/home", "/home/user") is False


class TestDedupeMounts:
    """Tests for nesting deduplication."""

    def test_nested_mount_removed(self) -> None:
        """A mount below another mount is dropped."""
        result = dedupe_mounts([_mount("/data"), _mount("/data/archive")])
        assert [m.path for m in result] == ["/data"]

    def test_nested_mount_removed_regardless_of_order(self) -> None:
        """The ancestor wins even when listed after its descendant."""
        result = dedupe_mounts([_mount("/data/archive"), _mount("/data")])
        assert [m.path for m in result] == ["/data"]

    def test_root_absorbs_everything(self) -> None:
        """With / present, all other mounts are nested."""
        result = dedupe_mounts([_mount("/home"), _mount("/"), _mount("/boot/efi", "vfat")])
        assert [m.path for m in result] == ["/"]

    def test_siblings_kept(self) -> None:
        """Unrelated mounts are all retained, in order."""
        result = dedupe_mounts([_mount("/mnt/a"), _mount("/mnt/b"), _mount("/srv")])
        assert [m.path for m in result] == ["/mnt/a", "/mnt/b", "/srv"]

    def test_prefix_sibling_kept(self) -> None:
        """/homework is not nested in /home."""
        result = dedupe_mounts([_mount("/home"), _mount("/homework")])
        assert [m.path for m in result] == ["/home", "/homework"]

    def test_duplicate_path_kept_once(self) -> None:
        """The same mount point listed twice is kept once (first wins)."""
        first = _mount("/data", "ext4")
        second = _mount("/data", "xfs")
        assert dedupe_mounts([first, second]) == [first]

    def test_empty(self) -> None:
        """No candidates means no mounts."""
        assert dedupe_mounts([]) == []

    @pytest.mark.parametrize(
        "paths",
        [
            ["/", "/home", "/home/user", "/mnt", "/mnt/usb"],
            ["/a/b/c", "/a", "/a/b", "/x", "/x/y", "/xy"],
            ["/srv/data", "/srv", "/srv/data/old", "/srvx", "/opt"],
        ],
    )
    def test_no_nesting_in_result(self, paths: list[str]) -> None:
        """No retained mount is a strict descendant of another, in any order."""
        for order in itertools.permutations(paths):
            result = dedupe_mounts([_mount(p) for p in order])
            retained = [m.path for m in result]
            for a, b in itertools.permutations(retained, 2):
                assert not is_strict_descendant(a, b)
            # Every dropped mount is covered by a retained ancestor
            for p in paths:
                assert p in retained or any(is_strict_descendant(p, r) for r in retained)


class TestMountCatalog:
    """Tests for MountCatalog filtering."""

    def test_virtual_mounts_dropped(self) -> None:
        """Virtual filesystems are never retained."""
        catalog = _catalog(_mount("/"), _mount("/mnt/ram", "ext4", virtual=True))
        assert [m.path for m in catalog.discover()] == ["/"]

    def test_unknown_types_dropped(self) -> None:
        """Filesystem types outside the allow-list are not retained."""
        catalog = _catalog(_mount("/mnt/a", "ext4"), _mount("/mnt/net", "nfs4"))
        assert [m.path for m in catalog.discover()] == ["/mnt/a"]

    def test_type_match_is_case_insensitive(self) -> None:
        """Type names are compared without regard to case."""
        catalog = _catalog(_mount("/mnt/win", "NTFS"), _mount("/mnt/mac", "HFS+"))
        assert [m.path for m in catalog.discover()] == ["/mnt/win", "/mnt/mac"]

    def test_custom_allow_list(self) -> None:
        """A custom allow-list replaces the defaults."""
        catalog = _catalog(
            _mount("/mnt/a", "ext4"),
            _mount("/mnt/b", "nfs"),
            filesystem_types=["nfs"],
        )
        assert [m.path for m in catalog.discover()] == ["/mnt/b"]

    def test_filtered_ancestor_does_not_hide_child(self) -> None:
        """Only eligible mounts count as ancestors during deduplication."""
        catalog = _catalog(_mount("/", "overlay"), _mount("/data", "ext4"))
        assert [m.path for m in catalog.discover()] == ["/data"]

    def test_defaults_cover_common_types(self) -> None:
        """Default allow-list contains the usual real filesystems."""
        for fstype in ("ext4", "vfat", "exfat", "ntfs", "fuseblk", "apfs", "hfsplus", "btrfs"):
            assert fstype in DEFAULT_FILESYSTEM_TYPES

    def test_candidates_report_reasons(self) -> None:
        """candidates() explains why each mount is skipped."""
        catalog = _catalog(
            _mount("/"),
            _mount("/proc", "proc", virtual=True),
            _mount("/mnt/net", "cifs"),
            _mount("/home"),
            _mount("/", "ext4"),
        )
        reasons = [(c.mount.path, c.rejection) for c in catalog.candidates()]
        assert reasons == [
            ("/", None),
            ("/proc", RejectionReason.VIRTUAL),
            ("/mnt/net", RejectionReason.FILESYSTEM_TYPE),
            ("/home", RejectionReason.NESTED),
            ("/", RejectionReason.DUPLICATE),
        ]

    def test_candidates_agree_with_discover(self) -> None:
        """Retained candidates are exactly the discovered mounts."""
        catalog = _catalog(
            _mount("/mnt/a"),
            _mount("/mnt/a/b"),
            _mount("/mnt/c", "xfs"),
            _mount("/sys", "sysfs", virtual=True),
        )
        retained = [c.mount for c in catalog.candidates() if c.retained]
        assert retained == catalog.discover()

    def test_enumeration_error_propagates(self) -> None:
        """Errors from the mount source reach the caller."""

        def failing() -> list[MountEntry]:
            raise MountEnumerationError("no mount table")

        catalog = MountCatalog(enumerate_mounts=failing)
        with pytest.raises(MountEnumerationError, match="no mount table"):
            catalog.discover()


class TestEnumerateOsMounts:
    """Tests for reading the OS mount table through psutil."""

    @staticmethod
    def _partitions(all: bool = False) -> list[Partition]:  # noqa: A002
        physical = [
            Partition("/dev/sda1", "/", "ext4", "rw"),
            Partition("/dev/sdb1", "/mnt/usb", "vfat", "rw"),
        ]
        virtual = [
            Partition("proc", "/proc", "proc", "rw"),
            Partition("none", "/run/shm", "ext4", "rw"),
        ]
        return physical + virtual if all else physical

    def test_flags_virtual_mounts(self) -> None:
        """Mounts missing from the physical listing are virtual."""
        with patch("locatedb.index.mounts.psutil.disk_partitions", side_effect=self._partitions):
            entries = enumerate_os_mounts()

        flags = {e.path: e.is_virtual for e in entries}
        assert flags == {"/": False, "/mnt/usb": False, "/proc": True, "/run/shm": True}

    def test_reports_filesystem_type(self) -> None:
        """Filesystem types come from psutil's fstype."""
        with patch("locatedb.index.mounts.psutil.disk_partitions", side_effect=self._partitions):
            entries = enumerate_os_mounts()

        assert entries[1] == MountEntry("/mnt/usb", "vfat", False)

    def test_discover_mounts_end_to_end(self) -> None:
        """discover_mounts keeps physical, allowed, non-nested mounts."""
        with patch("locatedb.index.mounts.psutil.disk_partitions", side_effect=self._partitions):
            mounts = discover_mounts()

        assert [m.path for m in mounts] == ["/"]

    def test_os_error_becomes_enumeration_error(self) -> None:
        """OS failures are reported as MountEnumerationError."""
        with (
            patch(
                "locatedb.index.mounts.psutil.disk_partitions",
                side_effect=PermissionError("denied"),
            ),
            pytest.raises(MountEnumerationError, match="Cannot enumerate"),
        ):
            enumerate_os_mounts()

    def test_unsupported_platform(self) -> None:
        """Missing OS support is reported as MountEnumerationError."""
        with (
            patch(
                "locatedb.index.mounts.psutil.disk_partitions",
                side_effect=NotImplementedError,
            ),
            pytest.raises(MountEnumerationError),
        ):
            enumerate_os_mounts()
