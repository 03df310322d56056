"""Last-update bookkeeping.

The summary of the most recent successful update is kept as a small
JSON file beside the index database, so ``locatedb stats`` can report
when the index was built without touching the index schema.
"""

import json
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

from locatedb.core.paths import get_summary_path
from locatedb.index.models import UpdateSummary

logger = logging.getLogger(__name__)


def record_update(summary: UpdateSummary, database_path: Path) -> Path:
    """Write the summary of a completed update.

    The file is replaced atomically.

    Args:
        summary: Summary returned by the update.
        database_path: Database the update wrote to.

    Returns:
        Path of the summary file.

    Raises:
        OSError: If the file cannot be written.
    """
    summary_path = get_summary_path(database_path)
    summary_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=summary_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            json.dump(summary.to_dict(), f, indent=2)
        os.replace(tmp_path, summary_path)
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise

    return summary_path


def load_last_update(database_path: Path) -> UpdateSummary | None:
    """Read the summary of the most recent update.

    Args:
        database_path: Database whose summary is requested.

    Returns:
        The stored summary, or None if missing or unreadable.
    """
    summary_path = get_summary_path(database_path)
    if not summary_path.exists():
        return None

    try:
        data = json.loads(summary_path.read_text(encoding="utf-8"))
        return UpdateSummary.from_dict(data)
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.warning("Ignoring unreadable update summary %s: %s", summary_path, e)
        return None
