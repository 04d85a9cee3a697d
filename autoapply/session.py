"""One application attempt bound to one harvested link and one browser context."""
from __future__ import annotations

from playwright.sync_api import Error as PlaywrightError

from autoapply.actions import ActionExecutor, attempt
from autoapply.gatekeeper import SessionGatekeeper
from autoapply.log import get_logger
from autoapply.models import ActionOutcome, FieldQuery, SessionState, Timeouts
from autoapply.sites.base import SiteProfile

log = get_logger(__name__)


class ApplicationSession:
    """
    Owns an isolated browser context for a single link.

    Once the session reaches a terminal state the context is closed and
    every further ``attempt``/``proceed`` returns ``SKIPPED`` without
    touching the page.
    """

    def __init__(
        self,
        context,
        link: str,
        site: SiteProfile,
        gatekeeper: SessionGatekeeper,
        executor: ActionExecutor,
        timeouts: Timeouts | None = None,
    ) -> None:
        self.context = context
        self.link = link
        self.site = site
        self.gatekeeper = gatekeeper
        self.executor = executor
        self.timeouts = timeouts or Timeouts()
        self.state = SessionState.NOT_OPENED
        self.section_index: int | None = None
        self.page = None
        self._closed = False

    @property
    def terminal(self) -> bool:
        return self.state.terminal

    def open(self):
        """Navigate to the posting and follow "Apply" into the application window.

        Navigation errors are not absorbed; they end this session only.
        """
        job_page = self.context.new_page()
        self.page = job_page
        job_page.goto(self.link, wait_until="networkidle", timeout=self.timeouts.navigation_ms)
        self._dismiss_embedded_window(job_page)

        with job_page.expect_popup(timeout=self.timeouts.popup_ms) as popup_info:
            job_page.get_by_role("link", name=self.site.apply_link_name).click()
        self.page = popup_info.value
        self.settle()
        return self.page

    def _dismiss_embedded_window(self, page) -> None:
        if not self.site.embedded_window_close:
            return
        close = page.get_by_role("button", name=self.site.embedded_window_close)

        def _close() -> None:
            close.wait_for(state="visible", timeout=self.timeouts.probe_ms)
            close.click(timeout=self.timeouts.click_ms)
            close.wait_for(state="hidden", timeout=self.timeouts.probe_ms)

        if attempt(_close, description="close embedded window") is ActionOutcome.ABSENT:
            log.debug("No embedded window to close")

    def settle(self) -> None:
        """Let the page quiet down; a timeout here just means "carry on"."""
        if self.terminal or self.page is None:
            return
        try:
            self.page.wait_for_load_state("networkidle", timeout=self.timeouts.settle_ms)
        except PlaywrightError:
            log.debug("Page still busy after %dms, continuing", self.timeouts.settle_ms)

    def pause(self) -> None:
        if self.terminal or self.page is None or not self.timeouts.section_pause_ms:
            return
        self.page.wait_for_timeout(self.timeouts.section_pause_ms)

    def check_already_applied(self) -> bool:
        if self.terminal:
            return True
        if self.gatekeeper.already_applied(self.page):
            self.finish(SessionState.ALREADY_APPLIED)
            return True
        if self.state is SessionState.NOT_OPENED:
            self.state = SessionState.GATEKEEPER_CHECKED
        return False

    def reauthenticate_if_needed(self) -> bool:
        if self.terminal:
            return False
        return self.gatekeeper.reauthenticate_if_needed(self.page)

    def reuse_last_application(self) -> ActionOutcome:
        if not self.site.reuse_application_button:
            return ActionOutcome.SKIPPED
        outcome = self.attempt(FieldQuery(self.site.reuse_application_button, kind="click"))
        self.settle()
        return outcome

    def enter_section(self, index: int) -> None:
        self.state = SessionState.IN_PROGRESS
        self.section_index = index

    def attempt(self, query: FieldQuery) -> ActionOutcome:
        if self.terminal:
            return ActionOutcome.SKIPPED
        return self.executor.execute(self.page, query)

    def proceed(self, name: str) -> ActionOutcome:
        if self.terminal:
            return ActionOutcome.SKIPPED
        return self.executor.proceed(self.page, name)

    def finish(self, state: SessionState) -> None:
        if not state.terminal:
            raise ValueError(f"{state} is not a terminal state")
        if not self.terminal:
            self.state = state
        self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.context.close()
        except PlaywrightError as exc:
            log.debug("Context already gone for %s: %s", self.link, exc)
