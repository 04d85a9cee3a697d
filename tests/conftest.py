from __future__ import annotations

import pytest

from autoapply.actions import ActionExecutor
from autoapply.gatekeeper import SessionGatekeeper
from autoapply.models import Credentials, SearchCriteria, Timeouts
from autoapply.sites import CAREERS_JNJ
from autoapply.session import ApplicationSession

from tests.fakes import Element, FakeContext, FakePage


@pytest.fixture
def site():
    return CAREERS_JNJ


@pytest.fixture
def timeouts():
    return Timeouts(probe_ms=10, click_ms=10, navigation_ms=100, settle_ms=10, section_pause_ms=0, popup_ms=10)


@pytest.fixture
def credentials():
    return Credentials(email="candidate@example.com", password="s3cret")


@pytest.fixture
def criteria():
    return SearchCriteria(keyword="associate director", teams=("Marketing",))


@pytest.fixture
def executor(timeouts):
    return ActionExecutor(timeouts=timeouts)


@pytest.fixture
def gatekeeper(site, credentials, timeouts):
    return SessionGatekeeper(site, credentials, timeouts)


@pytest.fixture
def make_session(site, gatekeeper, executor, timeouts):
    """Build a session whose job page opens ``app_page`` as the apply popup."""

    def _make(app_page: FakePage, link: str = "https://www.careers.jnj.com/en/jobs/r-000001/role/"):
        job_page = FakePage(
            [Element(role="link", name=site.apply_link_name)],
            popup=app_page,
        )
        context = FakeContext(job_page)
        session = ApplicationSession(context, link, site, gatekeeper, executor, timeouts)
        return session, context, job_page

    return _make
