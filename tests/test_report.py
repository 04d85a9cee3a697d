from __future__ import annotations

from autoapply.models import SessionResult, SessionState
from autoapply.report import build_run_report, write_run_report


def _results():
    return [
        SessionResult("https://www.careers.jnj.com/en/jobs/r-001/lead/", SessionState.SUBMITTED, 5),
        SessionResult("https://www.careers.jnj.com/en/jobs/r-002/lead/", SessionState.ALREADY_APPLIED),
        SessionResult("https://www.careers.jnj.com/en/jobs/r-003/lead/", SessionState.ABANDONED, 2, "popup never opened"),
    ]


def test_report_counts_and_table():
    report = build_run_report(_results(), links_found=7)
    assert "**7** links found" in report
    assert "**3** processed" in report
    assert "**1** submitted" in report
    assert "| 3 | [lead](https://www.careers.jnj.com/en/jobs/r-003/lead/) |" in report
    assert "## Abandoned" in report
    assert "popup never opened" in report
    assert "Run budget" not in report


def test_report_flags_budget():
    report = build_run_report([], links_found=0, budget_exhausted=True)
    assert "Run budget ran out" in report
    assert "| # |" not in report


def test_report_flags_truncated_harvest():
    report = build_run_report([], links_found=4, budget_exhausted=True, harvest_truncated=True)
    assert "Harvest was cut short" in report
    assert "only 4 link(s)" in report


def test_write_run_report(tmp_path):
    path = write_run_report("# hi\n", tmp_path / "reports")
    assert path.parent == tmp_path / "reports"
    assert path.name.startswith("run_")
    assert path.read_text(encoding="utf-8") == "# hi\n"
