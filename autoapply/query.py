"""Turn search criteria into a paginated careers-site search URL."""
from __future__ import annotations

from urllib.parse import quote

from autoapply.models import QueryTarget, SearchCriteria

# Characters encodeURIComponent leaves alone besides alphanumerics.
_SAFE = "-_.!~*'()"


def encode(value: str) -> str:
    return quote(value, safe=_SAFE)


def _repeated(key: str, values: tuple[str, ...]) -> list[tuple[str, str]]:
    """One pair per distinct non-blank value, first occurrence wins."""
    pairs: list[tuple[str, str]] = []
    seen: set[str] = set()
    for value in values:
        if not value or not value.strip() or value in seen:
            continue
        seen.add(value)
        pairs.append((key, encode(value)))
    return pairs


def build_query(
    criteria: SearchCriteria,
    page: int,
    *,
    base_url: str,
    path: str = "/en/jobs/",
    page_size: int = 30,
) -> QueryTarget:
    params: list[tuple[str, str]] = [
        ("page", str(page)),
        ("search", encode(criteria.keyword)),
    ]
    params += _repeated("team", criteria.teams)
    params += _repeated("subteam", criteria.subteams)
    params += _repeated("type", criteria.types)
    params += _repeated("pattern", criteria.patterns)
    if criteria.country and criteria.country.strip():
        params.append(("country", encode(criteria.country)))
    if criteria.state and criteria.state.strip():
        params.append(("state", encode(criteria.state)))
    params.append(("pagesize", str(page_size)))

    return QueryTarget(
        base_url=base_url.rstrip("/"),
        path=path,
        page=page,
        page_size=page_size,
        params=tuple(params),
    )


def build_query_url(criteria: SearchCriteria, page: int, **kwargs) -> str:
    return build_query(criteria, page, **kwargs).url
