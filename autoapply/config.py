"""Load the search profile (YAML) and credentials (.env)."""
from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from autoapply.errors import ConfigError
from autoapply.log import get_logger
from autoapply.models import DEFAULT_COUNTRY, Credentials, SearchCriteria, Timeouts
from autoapply.sites import SiteProfile, get_site
from autoapply.steps import sections_from_config, select_sections

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
PROFILE_PATH: Path = CONFIG_DIR / "profile.yaml"
REPORTS_DIR: Path = ROOT_DIR / "reports"
DATA_DIR: Path = ROOT_DIR / "data"

DEFAULT_SITE = "careers_jnj"


@dataclass(frozen=True)
class Settings:
    headless: bool = True
    viewport: dict[str, int] = field(default_factory=lambda: {"width": 800, "height": 800})
    timeouts: Timeouts = field(default_factory=Timeouts)
    run_budget_seconds: float = 1800.0
    max_pages: int | None = None
    max_links: int | None = None
    skip_processed: bool = True


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _truthy(value: str) -> bool:
    return value.lower() in ("1", "true", "yes", "on")


def ensure_dirs() -> None:
    for d in (REPORTS_DIR, DATA_DIR):
        d.mkdir(parents=True, exist_ok=True)


def load_profile(path: Path | None = None) -> dict[str, Any]:
    path = path or PROFILE_PATH
    if not path.exists():
        raise ConfigError(f"Profile not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the top level")
    return data


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def load_criteria(profile: dict[str, Any]) -> SearchCriteria:
    search = profile.get("search") or {}
    keyword = str(search.get("keyword") or "").strip()
    if not keyword:
        raise ConfigError("search.keyword is required in the profile")
    return SearchCriteria(
        keyword=keyword,
        teams=_as_tuple(search.get("teams")),
        subteams=_as_tuple(search.get("subteams")),
        types=_as_tuple(search.get("types")),
        patterns=_as_tuple(search.get("patterns")),
        country=search.get("country", DEFAULT_COUNTRY) or None,
        state=search.get("state") or None,
    )


def load_settings(profile: dict[str, Any]) -> Settings:
    browser = profile.get("browser") or {}
    run = profile.get("run") or {}
    known = {f.name for f in dataclasses.fields(Timeouts)}
    raw_timeouts = profile.get("timeouts") or {}
    unknown = set(raw_timeouts) - known
    if unknown:
        raise ConfigError(f"Unknown timeout key(s): {', '.join(sorted(unknown))}")

    settings = Settings(
        headless=bool(browser.get("headless", True)),
        viewport=dict(browser.get("viewport") or {"width": 800, "height": 800}),
        timeouts=Timeouts(**{k: int(v) for k, v in raw_timeouts.items()}),
        run_budget_seconds=float(run.get("budget_seconds", 1800)),
        max_pages=run.get("max_pages"),
        max_links=run.get("max_links"),
        skip_processed=bool(run.get("skip_processed", True)),
    )

    # Environment wins over the profile so cron/CI can flip these.
    if get_env("RUN_HEADLESS"):
        settings = replace(settings, headless=_truthy(get_env("RUN_HEADLESS")))
    if get_env("RUN_BUDGET_SECONDS"):
        try:
            settings = replace(settings, run_budget_seconds=float(get_env("RUN_BUDGET_SECONDS")))
        except ValueError:
            raise ConfigError("RUN_BUDGET_SECONDS must be a number") from None
    return settings


def load_site(profile: dict[str, Any]) -> SiteProfile:
    """Site profile with any section override and inclusion list applied."""
    site = get_site(profile.get("site") or DEFAULT_SITE)
    sections = site.sections
    if profile.get("sections"):
        sections = sections_from_config(profile["sections"])
    include = profile.get("include_sections")
    if include is not None:
        sections = select_sections(sections, include)
    return replace(site, sections=tuple(sections))


def get_credentials() -> Credentials:
    email = get_env("CAREERS_EMAIL")
    password = get_env("CAREERS_PASSWORD")
    if not email or not password:
        raise ConfigError("CAREERS_EMAIL and CAREERS_PASSWORD must be set (see .env.example)")
    return Credentials(email=email, password=password)
