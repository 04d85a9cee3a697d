"""In-memory stand-ins for the parts of Playwright's sync API the agent touches."""
from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable
from urllib.parse import parse_qs, urlparse

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError


@dataclass
class Element:
    role: str | None = None
    name: str = ""
    text: str = ""
    label: str = ""
    selectors: tuple[str, ...] = ()
    attrs: dict = field(default_factory=dict)
    visible: bool = True
    enabled: bool = True
    children: list["Element"] = field(default_factory=list)
    on_click: Callable | None = None

    @property
    def content(self) -> str:
        return self.text or self.name


def _walk(elements):
    for el in elements:
        yield el
        yield from _walk(el.children)


def _matches(value: str, wanted, exact: bool = False) -> bool:
    if wanted is None:
        return True
    if isinstance(wanted, re.Pattern):
        return bool(wanted.search(value))
    if exact:
        return value == wanted
    return wanted.lower() in value.lower()


class FakeLocator:
    def __init__(self, page: "FakePage", finder: Callable[[], list[Element]], index: int | None = None) -> None:
        self._page = page
        self._finder = finder
        self._index = index

    def _all(self) -> list[Element]:
        found = list(self._finder())
        if self._index is None:
            return found
        if 0 <= self._index < len(found):
            return [found[self._index]]
        return []

    def _target(self, what: str) -> Element:
        for el in self._all()[:1]:
            if el.visible:
                return el
        raise PlaywrightTimeoutError(f"Timeout exceeded waiting for {what}")

    # -- narrowing -----------------------------------------------------
    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self._page, self._finder, 0)

    def nth(self, index: int) -> "FakeLocator":
        return FakeLocator(self._page, self._finder, index)

    def _scoped(self, predicate) -> "FakeLocator":
        return FakeLocator(
            self._page,
            lambda: [c for el in self._all() for c in _walk(el.children) if predicate(c)],
        )

    def get_by_role(self, role, name=None, exact=False):
        return self._scoped(lambda e: e.role == role and _matches(e.name, name, exact))

    def get_by_label(self, text, exact=False):
        return self._scoped(lambda e: bool(e.label) and _matches(e.label, text, exact))

    def get_by_text(self, text, exact=False):
        return self._scoped(lambda e: bool(e.content) and _matches(e.content, text, exact))

    # -- queries -------------------------------------------------------
    def count(self) -> int:
        return len(self._all())

    def get_attribute(self, name: str):
        found = self._all()
        if not found:
            raise PlaywrightTimeoutError("Timeout exceeded waiting for element")
        return found[0].attrs.get(name)

    def is_enabled(self, timeout=None) -> bool:
        return self._target("enabled check").enabled

    def wait_for(self, state="visible", timeout=None) -> None:
        if state == "hidden":
            if any(el.visible for el in self._all()[:1]):
                raise PlaywrightTimeoutError("Timeout exceeded waiting for element to be hidden")
            return
        self._target("visible")

    # -- actions -------------------------------------------------------
    def click(self, timeout=None, **kwargs) -> None:
        el = self._target("click")
        if not el.enabled:
            raise PlaywrightTimeoutError("Timeout exceeded: element is not enabled")
        self._page.actions.append(("click", el.content or el.label))
        if el.on_click is not None:
            el.on_click(self._page)

    def fill(self, value: str, timeout=None) -> None:
        el = self._target("fill")
        el.attrs["value"] = value
        self._page.actions.append(("fill", el.name, value))

    def check(self, timeout=None) -> None:
        el = self._target("check")
        el.attrs["checked"] = True
        self._page.actions.append(("check", el.name))

    def press(self, key: str, timeout=None) -> None:
        el = self._target("press")
        self._page.actions.append(("press", el.name, key))


class _PopupInfo:
    value = None


class FakePage:
    def __init__(self, elements: list[Element] | None = None, *, router=None, popup=None) -> None:
        self.elements: list[Element] = list(elements or [])
        self.router = router
        self.popup = popup
        self.visited: list[str] = []
        self.actions: list[tuple] = []
        self.load_waits = 0
        self.pauses: list[int] = []
        self.navigation_error: str | None = None
        self.closed = False

    def _find(self, predicate) -> FakeLocator:
        return FakeLocator(self, lambda: [e for e in _walk(self.elements) if predicate(e)])

    def get_by_role(self, role, name=None, exact=False):
        return self._find(lambda e: e.role == role and _matches(e.name, name, exact))

    def get_by_label(self, text, exact=False):
        return self._find(lambda e: bool(e.label) and _matches(e.label, text, exact))

    def get_by_text(self, text, exact=False):
        return self._find(lambda e: bool(e.content) and _matches(e.content, text, exact))

    def locator(self, selector: str):
        return self._find(lambda e: selector in e.selectors)

    def goto(self, url: str, wait_until=None, timeout=None):
        if self.navigation_error:
            raise PlaywrightError(self.navigation_error)
        self.visited.append(url)
        if self.router is not None:
            self.router(self, url)

    def wait_for_load_state(self, state=None, timeout=None) -> None:
        self.load_waits += 1

    def wait_for_timeout(self, ms) -> None:
        self.pauses.append(ms)

    @contextmanager
    def expect_popup(self, timeout=None):
        info = _PopupInfo()
        yield info
        if self.popup is None:
            raise PlaywrightTimeoutError("Timeout exceeded waiting for popup")
        info.value = self.popup

    def close(self) -> None:
        self.closed = True

    def clicked(self) -> list[str]:
        return [a[1] for a in self.actions if a[0] == "click"]


class FakeContext:
    def __init__(self, *pages: FakePage) -> None:
        self._pages = list(pages)
        self.closed = False
        self.close_calls = 0

    def new_page(self) -> FakePage:
        return self._pages.pop(0)

    def close(self) -> None:
        self.closed = True
        self.close_calls += 1


def results_router(pages: dict[int, list[str]], selector: str):
    """Router serving ``pages[n]`` hrefs as result cards for ``?page=n``."""

    def route(page: FakePage, url: str) -> None:
        number = int(parse_qs(urlparse(url).query)["page"][0])
        page.elements = [
            Element(role="link", selectors=(selector,), attrs={"href": href})
            for href in pages.get(number, [])
        ]

    return route
