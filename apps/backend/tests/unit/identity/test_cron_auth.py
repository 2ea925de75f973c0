"""
Name: Cron Authorization Tests

Responsibilities:
  - Test shared-secret bearer validation
  - Test fail-closed behavior with an empty secret
  - Test the platform scheduler marker
"""

import pytest

from worknest.identity.cron_auth import has_valid_cron_secret, is_authorized_cron_call

pytestmark = pytest.mark.unit


class TestCronSecret:
    def test_matching_bearer(self):
        assert has_valid_cron_secret("Bearer s3cr3t", secret="s3cr3t") is True

    def test_wrong_or_missing_bearer(self):
        assert has_valid_cron_secret("Bearer other", secret="s3cr3t") is False
        assert has_valid_cron_secret("s3cr3t", secret="s3cr3t") is False
        assert has_valid_cron_secret(None, secret="s3cr3t") is False

    def test_empty_secret_rejects_everything(self):
        assert has_valid_cron_secret("Bearer ", secret="") is False
        assert has_valid_cron_secret("Bearer anything", secret="") is False

    def test_uses_configured_secret_by_default(self, cron_headers):
        assert has_valid_cron_secret(cron_headers["Authorization"]) is True


class TestCronCall:
    def test_scheduler_marker_accepted_when_allowed(self):
        assert is_authorized_cron_call(None, "1", allow_scheduler_marker=True) is True

    def test_scheduler_marker_ignored_when_not_allowed(self):
        assert is_authorized_cron_call(None, "1", allow_scheduler_marker=False) is False

    def test_marker_value_must_match(self):
        assert is_authorized_cron_call(None, "true", allow_scheduler_marker=True) is False
