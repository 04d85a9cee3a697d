from __future__ import annotations

from autoapply.models import SessionResult, SessionState
from autoapply.tracker import HEADERS, get_processed_links, get_results, record_result


def test_record_and_read_back(tmp_path):
    path = tmp_path / "applications.csv"
    record_result(SessionResult("https://x/r-1", SessionState.SUBMITTED, 5), path)
    record_result(SessionResult("https://x/r-2", SessionState.ABANDONED, 2, "boom"), path)
    record_result(SessionResult("https://x/r-3", SessionState.ALREADY_APPLIED), path)

    rows = get_results(path)
    assert [r["link"] for r in rows] == ["https://x/r-1", "https://x/r-2", "https://x/r-3"]
    assert rows[1]["detail"] == "boom"
    assert rows[0]["sections_completed"] == "5"
    assert path.read_text(encoding="utf-8").splitlines()[0] == ",".join(HEADERS)


def test_abandoned_links_are_retried_next_run(tmp_path):
    path = tmp_path / "applications.csv"
    record_result(SessionResult("https://x/r-1", SessionState.SUBMITTED, 5), path)
    record_result(SessionResult("https://x/r-2", SessionState.ABANDONED), path)
    assert get_processed_links(path=path) == {"https://x/r-1"}
