"""Data models for search criteria, harvested links and application sessions."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from autoapply.errors import RunBudgetExceeded

DEFAULT_COUNTRY = "United States of America"


@dataclass(frozen=True)
class SearchCriteria:
    keyword: str
    teams: tuple[str, ...] = ()
    subteams: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    patterns: tuple[str, ...] = ()
    country: str | None = DEFAULT_COUNTRY
    state: str | None = None


@dataclass(frozen=True)
class QueryTarget:
    """One page-indexed search request; rendered to a URL with ``url``."""

    base_url: str
    path: str
    page: int
    page_size: int
    params: tuple[tuple[str, str], ...]

    @property
    def url(self) -> str:
        query = "&".join(f"{key}={value}" for key, value in self.params)
        return f"{self.base_url}{self.path}?{query}#results"


class LinkSet:
    """Grow-only set of absolute result links."""

    def __init__(self) -> None:
        self._links: dict[str, None] = {}

    def add(self, link: str) -> bool:
        """Insert ``link``; returns False when it was already present."""
        if link in self._links:
            return False
        self._links[link] = None
        return True

    def snapshot(self) -> tuple[str, ...]:
        return tuple(self._links)

    def __contains__(self, link: object) -> bool:
        return link in self._links

    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())


# Interaction kind -> accessible role of the control it targets.
KIND_ROLES: dict[str, str] = {
    "click": "button",
    "fill": "textbox",
    "select": "group",
    "choose": "button",
    "check": "checkbox",
    "drilldown": "textbox",
}


@dataclass(frozen=True)
class FieldQuery:
    label: str
    value: str | tuple[str, ...] | None = None
    target: str | None = None
    kind: str = "select"

    def __post_init__(self) -> None:
        if self.kind not in KIND_ROLES:
            raise ValueError(f"Unknown field kind {self.kind!r}")

    @property
    def role(self) -> str:
        return KIND_ROLES[self.kind]


@dataclass(frozen=True)
class Section:
    name: str
    fields: tuple[FieldQuery, ...] = ()
    proceed: str | None = "Save and Continue"
    optional: bool = False
    # its proceed control sends the application
    submits: bool = False


class ActionOutcome(str, Enum):
    DONE = "done"
    ABSENT = "absent"
    SKIPPED = "skipped"


class SessionState(str, Enum):
    NOT_OPENED = "not_opened"
    GATEKEEPER_CHECKED = "gatekeeper_checked"
    IN_PROGRESS = "in_progress"
    ALREADY_APPLIED = "already_applied"
    SUBMITTED = "submitted"
    ABANDONED = "abandoned"

    @property
    def terminal(self) -> bool:
        return self in (SessionState.ALREADY_APPLIED, SessionState.SUBMITTED, SessionState.ABANDONED)


@dataclass
class SessionResult:
    link: str
    state: SessionState
    sections_completed: int = 0
    detail: str = ""


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str = field(repr=False)


class Deadline:
    """Wall-clock budget for a whole run."""

    def __init__(self, seconds: float, clock=time.monotonic) -> None:
        self._clock = clock
        self.seconds = seconds
        self._ends_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self._ends_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def check(self) -> None:
        if self.expired:
            raise RunBudgetExceeded(f"Run budget of {self.seconds:.0f}s exhausted")


@dataclass(frozen=True)
class Timeouts:
    """Per-interaction bounds in milliseconds; none of them is retried."""

    probe_ms: int = 3000
    click_ms: int = 2000
    navigation_ms: int = 30_000
    settle_ms: int = 10_000
    section_pause_ms: int = 2000
    popup_ms: int = 15_000
