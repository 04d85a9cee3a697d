"""Track per-link outcomes in a CSV ledger with file locking."""
from __future__ import annotations

import csv
import fcntl
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from autoapply.config import DATA_DIR
from autoapply.log import get_logger
from autoapply.models import SessionResult, SessionState

log = get_logger(__name__)

APPLICATIONS_CSV: Path = DATA_DIR / "applications.csv"
HEADERS: list[str] = ["link", "state", "sections_completed", "detail", "processed_at"]

# Links in these states are not worth another attempt.
FINISHED_STATES: frozenset[str] = frozenset({SessionState.SUBMITTED.value, SessionState.ALREADY_APPLIED.value})


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


def ensure_tracker(path: Path | None = None) -> Path:
    path = path or APPLICATIONS_CSV
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        with open(path, "w", newline="", encoding="utf-8") as f:
            _lock(f)
            csv.writer(f).writerow(HEADERS)
            _unlock(f)
        log.info("Created application tracker → %s", path.name)
    return path


def record_result(result: SessionResult, path: Path | None = None) -> None:
    path = ensure_tracker(path)
    row = {
        "link": result.link,
        "state": result.state.value,
        "sections_completed": str(result.sections_completed),
        "detail": result.detail,
        "processed_at": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M"),
    }
    with open(path, "a", newline="", encoding="utf-8") as f:
        _lock(f)
        csv.DictWriter(f, fieldnames=HEADERS).writerow(row)
        _unlock(f)
    log.debug("Tracked: %s [%s]", result.link, result.state.value)


def get_results(path: Path | None = None) -> list[dict[str, str]]:
    path = ensure_tracker(path)
    with open(path, "r", encoding="utf-8") as f:
        _lock(f, exclusive=False)
        rows = list(csv.DictReader(f))
        _unlock(f)
    return rows


def get_processed_links(states: Iterable[str] = FINISHED_STATES, path: Path | None = None) -> set[str]:
    wanted = set(states)
    return {r["link"] for r in get_results(path) if r.get("state") in wanted}
