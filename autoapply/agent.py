"""
Careers-site auto-apply agent.

Runs: login → harvest result links → apply to each link in turn → track → run report.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Sequence

from playwright.sync_api import Error as PlaywrightError

from autoapply.actions import ActionExecutor
from autoapply.config import (
    Settings,
    ensure_dirs,
    get_credentials,
    load_criteria,
    load_profile,
    load_settings,
    load_site,
)
from autoapply.errors import RunBudgetExceeded
from autoapply.gatekeeper import SessionGatekeeper
from autoapply.harvester import ResultHarvester
from autoapply.log import get_logger
from autoapply.models import Deadline, SessionResult, SessionState
from autoapply.orchestrator import BUDGET_EXHAUSTED, StepOrchestrator
from autoapply.resolver import DefaultResolver, PatternResolver
from autoapply.retry import retry
from autoapply.session import ApplicationSession
from autoapply.report import build_run_report, write_run_report
from autoapply.tracker import ensure_tracker, get_processed_links, record_result

log = get_logger(__name__)


def process_links(
    links: Sequence[str],
    open_session: Callable[[str], ApplicationSession],
    orchestrator: StepOrchestrator,
    *,
    deadline: Deadline | None = None,
    on_result: Callable[[SessionResult], None] | None = None,
) -> tuple[list[SessionResult], bool]:
    """Apply to each link strictly one after another.

    A Playwright error abandons only the link it happened on. The deadline
    is checked before each link and, through the orchestrator, before each
    section. Returns the results and whether the run budget cut the loop
    short.
    """
    results: list[SessionResult] = []
    for i, link in enumerate(links, 1):
        if deadline is not None and deadline.expired:
            log.warning("Run budget exhausted — %d link(s) left unprocessed", len(links) - i + 1)
            return results, True

        log.info("Opening job %d/%d: %s", i, len(links), link)
        session: ApplicationSession | None = None
        try:
            session = open_session(link)
            result = orchestrator.run(session, deadline=deadline)
        except PlaywrightError as exc:
            err = str(exc).split("\n")[0][:150]
            log.error("  ✗ abandoned: %s", err)
            if session is not None:
                session.finish(SessionState.ABANDONED)
            result = SessionResult(
                link=link,
                state=SessionState.ABANDONED,
                sections_completed=0,
                detail=err,
            )
        finally:
            if session is not None:
                session.close()

        log.info("  → %s (%d section(s))", result.state.value, result.sections_completed)
        results.append(result)
        if on_result is not None:
            on_result(result)
        if result.detail == BUDGET_EXHAUSTED:
            log.warning("Run budget exhausted mid-application — %d link(s) left unprocessed", len(links) - i)
            return results, True
    return results, False


def run(
    *,
    profile_path: Path | None = None,
    settings: Settings | None = None,
    limit: int | None = None,
    harvest_only: bool = False,
    write_report: bool = True,
) -> dict[str, Any]:
    from autoapply.browser import login, new_session_context, open_browser

    ensure_dirs()
    profile = load_profile(profile_path)
    settings = settings or load_settings(profile)
    criteria = load_criteria(profile)
    site = load_site(profile)
    credentials = get_credentials()
    timeouts = settings.timeouts
    deadline = Deadline(settings.run_budget_seconds)

    executor = ActionExecutor(DefaultResolver(PatternResolver(site.match_flags)), timeouts)
    gatekeeper = SessionGatekeeper(site, credentials, timeouts)
    orchestrator = StepOrchestrator(site.sections)

    summary: dict[str, Any] = {
        "links_found": 0,
        "links_processed": 0,
        "submitted": 0,
        "already_applied": 0,
        "abandoned": 0,
        "budget_exhausted": False,
        "harvest_truncated": False,
        "report_path": None,
    }

    results: list[SessionResult] = []
    links: tuple[str, ...] = ()
    with open_browser(settings) as (browser, context, page):
        login(page, site, credentials, settings)

        harvester = ResultHarvester(
            page,
            site,
            navigation_timeout_ms=timeouts.navigation_ms,
            max_pages=settings.max_pages,
            deadline=deadline,
        )
        harvest = retry(max_attempts=2, base_delay=5.0, retryable=(PlaywrightError,))(harvester.harvest)
        try:
            links = harvest(criteria)
        except RunBudgetExceeded as exc:
            links = exc.links
            log.error("%s during harvest, keeping %d link(s) collected so far", exc, len(links))
            summary["budget_exhausted"] = True
            summary["harvest_truncated"] = True
        summary["links_found"] = len(links)
        log.info("🚀 Total jobs found: %d", len(links))

        if settings.skip_processed:
            ensure_tracker()
            done = get_processed_links()
            todo = [link for link in links if link not in done]
            if len(todo) < len(links):
                log.info("Skipping %d link(s) already finished in earlier runs", len(links) - len(todo))
        else:
            todo = list(links)
        cap = limit if limit is not None else settings.max_links
        if cap is not None:
            todo = todo[:cap]

        if not harvest_only and todo and not summary["budget_exhausted"]:
            storage_state = context.storage_state()

            def open_session(link: str) -> ApplicationSession:
                return ApplicationSession(
                    new_session_context(browser, storage_state, settings),
                    link,
                    site,
                    gatekeeper,
                    executor,
                    timeouts,
                )

            results, exhausted = process_links(
                todo, open_session, orchestrator, deadline=deadline, on_result=record_result,
            )
            summary["budget_exhausted"] = summary["budget_exhausted"] or exhausted

    for r in results:
        summary[r.state.value] = summary.get(r.state.value, 0) + 1
    summary["links_processed"] = len(results)
    summary["links"] = list(links)

    if write_report and not harvest_only:
        content = build_run_report(
            results,
            links_found=summary["links_found"],
            budget_exhausted=summary["budget_exhausted"],
            harvest_truncated=summary["harvest_truncated"],
        )
        summary["report_path"] = str(write_run_report(content))

    log.info(
        "Run complete — found=%d, processed=%d, submitted=%d, already_applied=%d, abandoned=%d",
        summary["links_found"], summary["links_processed"], summary["submitted"],
        summary["already_applied"], summary["abandoned"],
    )
    return summary
