from __future__ import annotations

import re
from dataclasses import dataclass, field

from autoapply.models import Section


@dataclass(frozen=True)
class SiteProfile:
    """Everything site-specific: where to search, how to log in, what the form looks like."""

    name: str
    base_url: str
    login_url: str
    search_path: str = "/en/jobs/"
    page_size: int = 30
    result_card_selector: str = "a[href]"
    already_applied_marker: str = "already applied for"
    sign_in_scope: str = "body"
    apply_link_name: str = "Apply now"
    reuse_application_button: str | None = None
    embedded_window_close: str | None = "Close"
    match_flags: int = re.IGNORECASE
    sections: tuple[Section, ...] = field(default_factory=tuple)
