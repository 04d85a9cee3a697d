from .base import SiteProfile
from .careers_jnj import SITE as CAREERS_JNJ

from autoapply.errors import ConfigError
from autoapply.log import get_logger

log = get_logger(__name__)

__all__ = ["SiteProfile", "CAREERS_JNJ", "SITES", "get_site"]

SITES: dict[str, SiteProfile] = {
    CAREERS_JNJ.name: CAREERS_JNJ,
}


def get_site(name: str) -> SiteProfile:
    try:
        site = SITES[name]
    except KeyError:
        raise ConfigError(f"Unknown site {name!r} (known: {', '.join(sorted(SITES))})") from None
    log.debug("Using site profile: %s (%s)", site.name, site.base_url)
    return site
