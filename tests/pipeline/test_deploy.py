"""Tests for lure_catalog/pipeline/deploy.py"""

from unittest.mock import MagicMock

import requests

from lure_catalog.pipeline.deploy import DeployHook


def make_hook(responses):
    session = MagicMock()
    session.post.side_effect = responses
    sleeps = []
    hook = DeployHook("https://api.vercel.com/v1/integrations/deploy/x", session=session, sleep=sleeps.append)
    return hook, session, sleeps


class TestTrigger:
    def test_no_url_does_nothing(self):
        session = MagicMock()
        assert DeployHook("", session=session).trigger() is False
        session.post.assert_not_called()

    def test_success_first_attempt(self):
        hook, session, sleeps = make_hook([MagicMock(ok=True, status_code=201)])

        assert hook.trigger() is True
        assert session.post.call_count == 1
        assert sleeps == []

    def test_rate_limit_backs_off_linearly(self):
        hook, session, sleeps = make_hook([
            MagicMock(ok=False, status_code=429),
            MagicMock(ok=False, status_code=429),
            MagicMock(ok=True, status_code=201),
        ])

        assert hook.trigger() is True
        assert sleeps == [10, 20]

    def test_gives_up_after_three_attempts(self):
        hook, session, sleeps = make_hook([
            MagicMock(ok=False, status_code=500),
            requests.ConnectionError("reset"),
            MagicMock(ok=False, status_code=500),
        ])

        assert hook.trigger() is False
        assert session.post.call_count == 3
        assert sleeps == [5, 5]
