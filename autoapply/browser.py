"""
Playwright runtime glue: launch, the upstream login, and per-session contexts.

The main context logs in once and runs the harvest. Each application session
gets its own context seeded with the main context's storage state, so it is
authenticated but shares no pages or history with other sessions.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from autoapply.config import Settings
from autoapply.log import get_logger
from autoapply.models import Credentials
from autoapply.sites.base import SiteProfile

log = get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


@contextmanager
def open_browser(settings: Settings) -> Iterator[tuple]:
    """Yield ``(browser, context, page)`` for the main, harvesting context."""
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=settings.headless)
        try:
            context = browser.new_context(viewport=settings.viewport, user_agent=USER_AGENT)
            page = context.new_page()
            page.set_default_timeout(settings.timeouts.navigation_ms)
            yield browser, context, page
        finally:
            browser.close()


def login(page, site: SiteProfile, credentials: Credentials, settings: Settings) -> bool:
    """Sign in once before harvesting.

    A failure here is not fatal: sessions re-authenticate when prompted.
    """
    log.info("Signing in at %s", site.login_url)
    try:
        page.goto(site.login_url, wait_until="networkidle", timeout=settings.timeouts.navigation_ms)
        email = page.get_by_role("textbox", name="Email Address")
        email.click()
        email.fill(credentials.email)
        email.press("Tab")
        page.get_by_role("textbox", name="Password").fill(credentials.password)
        page.get_by_role("button", name="Sign In").click()
        page.get_by_role("button", name="Home", exact=True).click()
    except PlaywrightError as exc:
        log.warning("Login did not complete (%s); relying on in-session re-auth", str(exc).split("\n")[0][:120])
        return False
    log.info("Signed in as %s", credentials.email)
    return True


def new_session_context(browser, storage_state: dict, settings: Settings):
    context = browser.new_context(
        viewport=settings.viewport,
        user_agent=USER_AGENT,
        storage_state=storage_state,
    )
    context.set_default_timeout(settings.timeouts.navigation_ms)
    return context
