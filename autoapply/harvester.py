"""
Collect result links from a paginated careers-site search.

Pages are fetched in order starting at 1. A page with zero result cards ends
the walk, so a legitimately empty page in the middle of a result set cannot
be told apart from the end of results.
"""
from __future__ import annotations

from urllib.parse import urldefrag, urljoin

from autoapply.errors import RunBudgetExceeded
from autoapply.log import get_logger
from autoapply.models import Deadline, LinkSet, SearchCriteria
from autoapply.query import build_query_url
from autoapply.sites.base import SiteProfile

log = get_logger(__name__)


def normalize_link(href: str, base_url: str) -> str:
    """Absolute form of ``href``: relative links resolve against the site origin."""
    href = href.strip()
    if not href.lower().startswith(("http://", "https://")):
        href = urljoin(base_url.rstrip("/") + "/", href)
    return urldefrag(href)[0]


class ResultHarvester:
    def __init__(
        self,
        page,
        site: SiteProfile,
        *,
        navigation_timeout_ms: int = 30_000,
        max_pages: int | None = None,
        deadline: Deadline | None = None,
    ) -> None:
        self.page = page
        self.site = site
        self.navigation_timeout_ms = navigation_timeout_ms
        self.max_pages = max_pages
        self.deadline = deadline
        self.pages_fetched = 0

    def _collect_page(self, links: LinkSet) -> int:
        """Add this page's card links to ``links``; returns the card count."""
        cards = self.page.locator(self.site.result_card_selector)
        count = cards.count()
        for i in range(count):
            href = cards.nth(i).get_attribute("href")
            if not href:
                continue
            links.add(normalize_link(href, self.site.base_url))
        return count

    def harvest(self, criteria: SearchCriteria) -> tuple[str, ...]:
        links = LinkSet()
        self.pages_fetched = 0
        page_number = 1

        while True:
            if self.deadline is not None and self.deadline.expired:
                log.warning("Run budget ran out before page %d", page_number)
                raise RunBudgetExceeded(
                    f"Run budget of {self.deadline.seconds:.0f}s exhausted", links=links.snapshot()
                )
            if self.max_pages is not None and page_number > self.max_pages:
                log.warning("Stopping at page cap (%d pages)", self.max_pages)
                break

            url = build_query_url(
                criteria,
                page_number,
                base_url=self.site.base_url,
                path=self.site.search_path,
                page_size=self.site.page_size,
            )
            log.info("Loading results page %d", page_number)
            log.debug("GET %s", url)
            self.page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout_ms)
            self.pages_fetched += 1

            count = self._collect_page(links)
            if count == 0:
                log.info("No results on page %d, search exhausted", page_number)
                break

            log.info("Page %d: %d cards, %d unique links so far", page_number, count, len(links))
            page_number += 1

        log.info("Harvest complete: %d link(s) over %d page(s)", len(links), self.pages_fetched)
        return links.snapshot()
