"""Probes for page conditions that short-circuit an application."""
from __future__ import annotations

import re

from playwright.sync_api import Error as PlaywrightError

from autoapply.log import get_logger
from autoapply.models import Credentials, Timeouts
from autoapply.sites.base import SiteProfile

log = get_logger(__name__)


class SessionGatekeeper:
    def __init__(self, site: SiteProfile, credentials: Credentials, timeouts: Timeouts | None = None) -> None:
        self.site = site
        self.credentials = credentials
        self.timeouts = timeouts or Timeouts()
        self._marker = re.compile(re.escape(site.already_applied_marker), re.IGNORECASE)

    def already_applied(self, page) -> bool:
        """True when the "already applied" marker becomes visible within the probe window."""
        try:
            page.get_by_text(self._marker).first.wait_for(state="visible", timeout=self.timeouts.probe_ms)
        except PlaywrightError:
            return False
        log.info("⛔ Already applied — closing session")
        return True

    def reauthenticate_if_needed(self, page) -> bool:
        """Sign in again if the page unexpectedly asks for it.

        Returns True only when the credential sequence ran to completion.
        """
        sign_in = page.locator(self.site.sign_in_scope).get_by_role("button", name="Sign In")
        try:
            sign_in.wait_for(state="visible", timeout=self.timeouts.probe_ms)
        except PlaywrightError:
            return False

        log.info("🔐 Sign-in prompt detected — logging in again")
        try:
            sign_in.click(timeout=self.timeouts.click_ms)
            page.get_by_role("textbox", name="Email Address").fill(self.credentials.email)
            page.get_by_role("textbox", name="Password").fill(self.credentials.password)
            page.get_by_label("Sign In").click()
            page.wait_for_load_state("networkidle", timeout=self.timeouts.settle_ms)
        except PlaywrightError as exc:
            log.warning("Re-authentication did not complete: %s", str(exc).split("\n")[0][:120])
            return False
        return True
