"""Build and filter the section table that drives an application form.

A table can come from a site profile or from the ``sections`` key of the
YAML profile, e.g.::

    sections:
      - name: visa
        fields:
          - {label: "Are you legally authorized", value: "Yes"}
          - {label: "base salary expectation", value: "150000", kind: fill}
          - {label: "Veteran", value: "No", target: "#veteran-status"}
      - name: review_submit
        fields:
          - {label: "Save and Continue", kind: click}
        proceed: Submit
        submits: true

Only a section marked ``submits`` can end a session as submitted.
"""
from __future__ import annotations

from typing import Any, Iterable, Sequence

from autoapply.errors import ConfigError
from autoapply.log import get_logger
from autoapply.models import KIND_ROLES, FieldQuery, Section

log = get_logger(__name__)

_DEFAULT_PROCEED = "Save and Continue"


def field_from_config(data: dict[str, Any]) -> FieldQuery:
    if not isinstance(data, dict) or "label" not in data:
        raise ConfigError(f"Field entry needs a 'label': {data!r}")
    kind = data.get("kind", "select")
    if kind not in KIND_ROLES:
        raise ConfigError(f"Unknown field kind {kind!r} (expected one of {', '.join(KIND_ROLES)})")
    value = data.get("value")
    if isinstance(value, list):
        value = tuple(str(v) for v in value)
    elif value is not None:
        value = str(value)
    return FieldQuery(
        label=str(data["label"] or ""),
        value=value,
        target=data.get("target") or None,
        kind=kind,
    )


def section_from_config(data: dict[str, Any]) -> Section:
    if not isinstance(data, dict) or not data.get("name"):
        raise ConfigError(f"Section entry needs a 'name': {data!r}")
    return Section(
        name=str(data["name"]),
        fields=tuple(field_from_config(f) for f in data.get("fields") or []),
        proceed=data.get("proceed", _DEFAULT_PROCEED) or None,
        optional=bool(data.get("optional", False)),
        submits=bool(data.get("submits", False)),
    )


def sections_from_config(entries: Iterable[dict[str, Any]]) -> tuple[Section, ...]:
    sections = tuple(section_from_config(entry) for entry in entries)
    log.debug("Loaded %d section(s) from profile: %s", len(sections), ", ".join(s.name for s in sections))
    return sections


def select_sections(sections: Sequence[Section], include: Iterable[str] | None = None) -> tuple[Section, ...]:
    """Keep table order; drop sections whose name is not in ``include``."""
    if include is None:
        return tuple(sections)
    wanted = set(include)
    unknown = wanted - {s.name for s in sections}
    if unknown:
        log.warning("Ignoring unknown section name(s): %s", ", ".join(sorted(unknown)))
    return tuple(s for s in sections if s.name in wanted)
