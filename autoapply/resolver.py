"""
Locate the control a FieldQuery refers to.

Two strategies exist. Pattern matching finds the first control of the right
role whose accessible name matches the label. The override strategy uses an
explicit selector. When a query carries an override it is authoritative and
pattern matching is not tried at all, since overrides exist for pages where
the label is ambiguous or duplicated.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod

from autoapply.models import FieldQuery


class FieldResolver(ABC):
    @abstractmethod
    def resolve(self, page, query: FieldQuery, role: str | None = None):
        """Return a locator for at most one control (the first match)."""


class PatternResolver(FieldResolver):
    def __init__(self, flags: int = re.IGNORECASE) -> None:
        self.flags = flags

    def pattern(self, label: str) -> re.Pattern:
        return re.compile(label, self.flags)

    def resolve(self, page, query: FieldQuery, role: str | None = None):
        role = role or query.role
        if not query.label:
            return page.get_by_role(role).first
        return page.get_by_role(role, name=self.pattern(query.label)).first


class OverrideResolver(FieldResolver):
    def resolve(self, page, query: FieldQuery, role: str | None = None):
        if not query.target:
            raise ValueError(f"No override selector on field {query.label!r}")
        return page.locator(query.target).first


class DefaultResolver(FieldResolver):
    """Picks the override strategy when a target is given, pattern matching otherwise."""

    def __init__(self, pattern: PatternResolver | None = None, override: OverrideResolver | None = None) -> None:
        self.pattern = pattern or PatternResolver()
        self.override = override or OverrideResolver()

    def strategy_for(self, query: FieldQuery) -> FieldResolver:
        return self.override if query.target else self.pattern

    def resolve(self, page, query: FieldQuery, role: str | None = None):
        return self.strategy_for(query).resolve(page, query, role)
