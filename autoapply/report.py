"""Render a Markdown summary of one run."""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlparse

from autoapply.config import REPORTS_DIR
from autoapply.log import get_logger
from autoapply.models import SessionResult, SessionState

log = get_logger(__name__)

_BADGES: dict[SessionState, str] = {
    SessionState.SUBMITTED: "✅",
    SessionState.ALREADY_APPLIED: "⛔",
    SessionState.ABANDONED: "⚠️",
}


def _short_link(url: str) -> str:
    path = urlparse(url).path.rstrip("/")
    return path.rsplit("/", 1)[-1] or url


def build_run_report(
    results: list[SessionResult],
    *,
    links_found: int,
    budget_exhausted: bool = False,
    harvest_truncated: bool = False,
) -> str:
    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    counts = Counter(r.state for r in results)
    lines: list[str] = [f"# Auto-apply Run — {now}", ""]

    lines.append(
        f"**{links_found}** links found | **{len(results)}** processed | "
        f"**{counts[SessionState.SUBMITTED]}** submitted | "
        f"**{counts[SessionState.ALREADY_APPLIED]}** already applied | "
        f"**{counts[SessionState.ABANDONED]}** abandoned"
    )
    lines.append("")
    if harvest_truncated:
        lines.append(f"> Harvest was cut short by the run budget; only {links_found} link(s) were collected.")
        lines.append("")
    elif budget_exhausted:
        lines.append("> Run budget ran out before every link was processed.")
        lines.append("")

    if results:
        lines.append("| # | Posting | Outcome | Sections |")
        lines.append("|--:|---------|---------|---------:|")
        for i, r in enumerate(results, 1):
            badge = _BADGES.get(r.state, "")
            lines.append(
                f"| {i} | [{_short_link(r.link)}]({r.link}) | {badge} {r.state.value} | {r.sections_completed} |"
            )
        lines.append("")

    abandoned = [r for r in results if r.state is SessionState.ABANDONED and r.detail]
    if abandoned:
        lines.append("## Abandoned")
        lines.append("")
        for r in abandoned:
            lines.append(f"- [{_short_link(r.link)}]({r.link}) — {r.detail}")
        lines.append("")

    log.info("Built run report: %d processed, %d submitted", len(results), counts[SessionState.SUBMITTED])
    return "\n".join(lines)


def write_run_report(content: str, directory: Path | None = None) -> Path:
    directory = directory or REPORTS_DIR
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M")
    path = directory / f"run_{stamp}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written → %s", path)
    return path
