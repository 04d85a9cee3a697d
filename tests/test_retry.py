from __future__ import annotations

import pytest
from playwright.sync_api import Error as PlaywrightError

from autoapply.retry import retry


def test_reruns_until_success():
    calls, slept = [], []

    @retry(max_attempts=3, base_delay=1.0, jitter=False, retryable=(PlaywrightError,), sleep=slept.append)
    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise PlaywrightError("net::ERR_CONNECTION_RESET")
        return "ok"

    assert flaky() == "ok"
    assert len(calls) == 3
    assert slept == [1.0, 2.0]


def test_gives_up_after_max_attempts():
    slept = []

    @retry(max_attempts=2, jitter=False, retryable=(PlaywrightError,), sleep=slept.append)
    def broken():
        raise PlaywrightError("down")

    with pytest.raises(PlaywrightError):
        broken()
    assert len(slept) == 1


def test_other_errors_pass_straight_through():
    slept = []

    @retry(retryable=(PlaywrightError,), sleep=slept.append)
    def bad():
        raise KeyError("x")

    with pytest.raises(KeyError):
        bad()
    assert slept == []


def test_needs_at_least_one_attempt():
    with pytest.raises(ValueError):
        retry(max_attempts=0)
