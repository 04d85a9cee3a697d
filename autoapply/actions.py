"""
Best-effort UI interactions.

Every interaction here is allowed to fail: the element may not exist on this
variant of the page, may not become visible in time, or may be disabled.
Failures are reported as ``ActionOutcome.ABSENT`` instead of raised, so a
workflow can attempt optional fields without knowing the page layout ahead
of time. A single attempt is not atomic (a dropdown can open and then fail
to find the option).
"""
from __future__ import annotations

import re
from typing import Callable

from autoapply.log import get_logger
from autoapply.models import ActionOutcome, FieldQuery, Timeouts
from autoapply.resolver import DefaultResolver, FieldResolver

log = get_logger(__name__)

_SELECT_ONE = re.compile(r"select one", re.IGNORECASE)


class ControlUnavailable(Exception):
    """Control exists but cannot be used (e.g. disabled)."""


def attempt(procedure: Callable[[], object], *, description: str = "") -> ActionOutcome:
    """Run ``procedure``; any failure becomes ``ABSENT``."""
    try:
        procedure()
    except Exception as exc:
        first_line = str(exc).strip().split("\n")[0][:120]
        log.debug("  · skipped %s (%s: %s)", description or "action", type(exc).__name__, first_line)
        return ActionOutcome.ABSENT
    log.debug("  ✓ %s", description or "action")
    return ActionOutcome.DONE


class ActionExecutor:
    def __init__(self, resolver: FieldResolver | None = None, timeouts: Timeouts | None = None) -> None:
        self.resolver = resolver or DefaultResolver()
        self.timeouts = timeouts or Timeouts()
        self._procedures: dict[str, Callable] = {
            "click": self._click,
            "fill": self._fill,
            "select": self._select,
            "choose": self._choose,
            "check": self._check,
            "drilldown": self._drilldown,
        }

    def execute(self, page, query: FieldQuery) -> ActionOutcome:
        procedure = self._procedures[query.kind]
        label = query.label or f"first {query.role}"
        return attempt(lambda: procedure(page, query), description=f"{query.kind} {label!r}")

    def proceed(self, page, name: str) -> ActionOutcome:
        """Attempt the section's generic advance control."""
        return self.execute(page, FieldQuery(name, kind="click"))

    def _option_pattern(self, text: str) -> re.Pattern:
        return re.compile(re.escape(text), re.IGNORECASE)

    def _click(self, page, query: FieldQuery) -> None:
        button = self.resolver.resolve(page, query)
        button.wait_for(state="visible", timeout=self.timeouts.probe_ms)
        if not button.is_enabled():
            raise ControlUnavailable(f"{query.label!r} is disabled")
        button.click(timeout=self.timeouts.click_ms)

    def _fill(self, page, query: FieldQuery) -> None:
        textbox = self.resolver.resolve(page, query)
        textbox.wait_for(state="visible", timeout=self.timeouts.probe_ms)
        textbox.fill(str(query.value or ""), timeout=self.timeouts.click_ms)

    def _select(self, page, query: FieldQuery) -> None:
        group = self.resolver.resolve(page, query)
        group.wait_for(state="visible", timeout=self.timeouts.probe_ms)
        group.get_by_label(_SELECT_ONE).first.click(timeout=self.timeouts.click_ms)
        option = page.get_by_role("option", name=self._option_pattern(str(query.value))).first
        option.click(timeout=self.timeouts.click_ms)

    def _choose(self, page, query: FieldQuery) -> None:
        button = self.resolver.resolve(page, query)
        button.click(timeout=self.timeouts.click_ms)
        page.get_by_text(str(query.value), exact=True).first.click(timeout=self.timeouts.click_ms)

    def _check(self, page, query: FieldQuery) -> None:
        self.resolver.resolve(page, query).check(timeout=self.timeouts.click_ms)

    def _drilldown(self, page, query: FieldQuery) -> None:
        field = self.resolver.resolve(page, query)
        field.wait_for(state="visible", timeout=self.timeouts.probe_ms)
        field.click(timeout=self.timeouts.click_ms)
        path = query.value if isinstance(query.value, tuple) else (query.value,)
        for step in path:
            page.get_by_text(str(step), exact=False).first.click(timeout=self.timeouts.click_ms)
