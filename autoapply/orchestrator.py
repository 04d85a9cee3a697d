"""
Walk an application form section by section.

The section table is data (see ``autoapply.sites``); the orchestrator only
knows the protocol:

    open → already-applied? → reuse last application → re-auth → already-applied?
         → for each section: budget?, settle, already-applied?, fields, proceed

Every field and proceed control is attempted best-effort. The already-applied
marker ends the session immediately; so does running out of run budget.
A session counts as submitted only once a section marked ``submits`` has
clicked its proceed control.
"""
from __future__ import annotations

from typing import Iterable, Sequence

from autoapply.log import get_logger
from autoapply.models import ActionOutcome, Deadline, Section, SessionResult, SessionState
from autoapply.session import ApplicationSession
from autoapply.steps import select_sections

log = get_logger(__name__)

BUDGET_EXHAUSTED = "run budget exhausted"
NOT_SUBMITTED = "final proceed control not reached"


class StepOrchestrator:
    def __init__(self, sections: Sequence[Section], *, include: Iterable[str] | None = None) -> None:
        self.sections = select_sections(sections, include)
        if not any(s.submits for s in self.sections):
            log.warning("No section in the table submits the form; sessions will end abandoned")

    def run(self, session: ApplicationSession, *, deadline: Deadline | None = None) -> SessionResult:
        """Drive one session to a terminal state and report where it ended."""
        session.open()
        completed = 0

        if session.check_already_applied():
            return self._result(session, completed)

        session.reuse_last_application()
        session.reauthenticate_if_needed()
        if session.check_already_applied():
            return self._result(session, completed)

        submitted = False
        for index, section in enumerate(self.sections):
            if deadline is not None and deadline.expired:
                log.warning("  Run budget ran out before section %s", section.name)
                session.finish(SessionState.ABANDONED)
                return self._result(session, completed, BUDGET_EXHAUSTED)

            session.settle()
            # the preamble has just probed before the first section
            if index and session.check_already_applied():
                return self._result(session, completed)

            session.enter_section(index)
            outcome = self._run_section(session, section)
            if section.submits and outcome is ActionOutcome.DONE:
                submitted = True
            completed += 1
            log.info("  ✓ section %d/%d: %s", index + 1, len(self.sections), section.name)
            session.pause()

        if submitted:
            session.finish(SessionState.SUBMITTED)
            return self._result(session, completed)
        session.finish(SessionState.ABANDONED)
        return self._result(session, completed, NOT_SUBMITTED)

    def _run_section(self, session: ApplicationSession, section: Section) -> ActionOutcome:
        outcomes = [session.attempt(query) for query in section.fields]
        done = sum(1 for o in outcomes if o is ActionOutcome.DONE)
        if section.fields:
            log.debug("  %s: %d/%d field(s) filled", section.name, done, len(section.fields))

        if section.optional and section.fields and not done:
            log.debug("  %s not present on this form, not advancing", section.name)
            return ActionOutcome.ABSENT
        if not section.proceed:
            return ActionOutcome.ABSENT
        return session.proceed(section.proceed)

    @staticmethod
    def _result(session: ApplicationSession, completed: int, detail: str = "") -> SessionResult:
        return SessionResult(
            link=session.link,
            state=session.state,
            sections_completed=completed,
            detail=detail,
        )
