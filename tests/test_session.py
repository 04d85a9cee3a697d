from __future__ import annotations

import pytest

from autoapply.models import ActionOutcome, FieldQuery, SessionState

from tests.fakes import Element, FakePage


def test_open_follows_apply_into_popup(make_session):
    app = FakePage()
    session, _, job_page = make_session(app)

    assert session.open() is app
    assert session.page is app
    assert job_page.clicked() == ["Apply now"]
    assert job_page.visited == [session.link]


def test_open_closes_embedded_window_first(make_session):
    app = FakePage()
    session, _, job_page = make_session(app)
    close = Element(role="button", name="Close")
    close.on_click = lambda page: setattr(close, "visible", False)
    job_page.elements.insert(0, close)

    session.open()

    assert job_page.clicked() == ["Close", "Apply now"]


def test_terminal_session_makes_no_further_attempts(make_session):
    app = FakePage([Element(role="button", name="Save and Continue")])
    session, context, _ = make_session(app)
    session.open()

    session.finish(SessionState.ALREADY_APPLIED)

    assert session.attempt(FieldQuery("Save and Continue", kind="click")) is ActionOutcome.SKIPPED
    assert session.proceed("Save and Continue") is ActionOutcome.SKIPPED
    assert session.check_already_applied() is True
    assert app.actions == []
    assert context.closed


def test_first_terminal_state_wins_and_close_is_idempotent(make_session):
    session, context, _ = make_session(FakePage())
    session.finish(SessionState.SUBMITTED)
    session.finish(SessionState.ABANDONED)
    session.close()
    assert session.state is SessionState.SUBMITTED
    assert context.close_calls == 1


def test_finish_rejects_non_terminal_state(make_session):
    session, _, _ = make_session(FakePage())
    with pytest.raises(ValueError):
        session.finish(SessionState.IN_PROGRESS)


def test_gatekeeper_check_moves_state_forward(make_session):
    session, _, _ = make_session(FakePage())
    session.open()
    assert session.state is SessionState.NOT_OPENED
    assert session.check_already_applied() is False
    assert session.state is SessionState.GATEKEEPER_CHECKED
    session.enter_section(2)
    assert session.state is SessionState.IN_PROGRESS
    assert session.section_index == 2
