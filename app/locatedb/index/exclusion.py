"""Path roots that are never indexed.

Kernel and scratch trees (boot files, device nodes, process and kernel
information, temporary files) change constantly and carry nothing a
user searches for, so they are excluded from every index build.
"""

from collections.abc import Iterable

DEFAULT_EXCLUDED_ROOTS: tuple[str, ...] = (
    "/boot",
    "/dev",
    "/proc",
    "/sys",
    "/tmp",
)


class PathExclusionPolicy:
    """Decides whether an absolute path lies under an excluded root.

    Matching is anchored at the start of the path and works on whole
    components: ``/proc`` excludes ``/proc`` and ``/proc/1/status`` but
    not ``/home/user/proc`` or ``/procedures``.

    Args:
        roots: Absolute roots to exclude. Defaults to DEFAULT_EXCLUDED_ROOTS.
    """

    def __init__(self, roots: Iterable[str] = DEFAULT_EXCLUDED_ROOTS) -> None:
        normalized = []
        for root in roots:
            root = root.rstrip("/")
            # "/" strips to empty and is ignored
            if root:
                normalized.append(root)
        self._roots: tuple[str, ...] = tuple(normalized)
        self._prefixes: tuple[str, ...] = tuple(f"{root}/" for root in self._roots)

    @property
    def roots(self) -> tuple[str, ...]:
        """Excluded roots without trailing separators."""
        return self._roots

    def should_skip(self, path: str) -> bool:
        """Check if a path must be left out of the index.

        Args:
            path: Absolute filesystem path.

        Returns:
            True if the path is an excluded root or lies below one.
        """
        return path in self._roots or path.startswith(self._prefixes)


_default_policy = PathExclusionPolicy()


def is_excluded_path(path: str) -> bool:
    """Check a path against the default excluded roots.

    Args:
        path: Absolute filesystem path.

    Returns:
        True if the path must not be indexed.
    """
    return _default_policy.should_skip(path)
