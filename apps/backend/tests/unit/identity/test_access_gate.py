"""
Name: Access Gate Policy Tests

Responsibilities:
  - Test bypass of auth/static paths
  - Test login redirect for protected prefixes
  - Test role dashboard redirect for entry points

Notes:
  - decide_access is pure: no request, no DB
"""

import pytest

from worknest.identity.access_gate import (
    RedirectReason,
    decide_access,
    is_bypassed,
    is_protected,
)
from worknest.identity.session import SessionToken

pytestmark = pytest.mark.unit


def _session(role: str) -> SessionToken:
    return SessionToken(
        user_id="9a1c7a8e-1111-4c1e-9c2b-4f1a1c7a8e11",
        email=f"{role}@example.com",
        role=role,
        is_approved=True,
        profile_completed=True,
    )


class TestBypass:
    @pytest.mark.parametrize(
        "path",
        [
            "/api/auth/login",
            "/_next/static/chunk.js",
            "/static/app.css",
            "/favicon.ico",
            "/admin/logo.svg",
            "/images/photo.JPG",
        ],
    )
    def test_bypassed_paths(self, path):
        assert is_bypassed(path) is True
        assert decide_access(path, None).allow is True

    def test_regular_path_is_not_bypassed(self):
        assert is_bypassed("/admin/dashboard") is False


class TestUnauthenticated:
    @pytest.mark.parametrize(
        "path",
        ["/admin", "/admin/users", "/employee/tasks", "/client/x", "/hackathon/teams"],
    )
    def test_protected_prefix_redirects_to_login(self, path):
        decision = decide_access(path, None)

        assert decision.allow is False
        assert decision.location == "/login"
        assert decision.reason is RedirectReason.LOGIN_REQUIRED

    def test_dashboard_alias_requires_login(self):
        assert decide_access("/dashboard", None).location == "/login"

    def test_hackathon_self_registration_is_public(self):
        assert decide_access("/hackathon/signup", None).allow is True
        assert decide_access("/hackathon/login", None).allow is True

    def test_prefix_matches_plain_text(self):
        assert is_protected("/administrator") is True
        assert is_protected("/clients") is True

        decision = decide_access("/administrator", None)
        assert decision.allow is False
        assert decision.location == "/login"
        assert decide_access("/clients", None).location == "/login"

    def test_shorter_path_is_not_protected(self):
        assert decide_access("/adm", None).allow is True

    def test_public_pages_pass(self):
        assert decide_access("/", None).allow is True
        assert decide_access("/login", None).allow is True


class TestAuthenticated:
    @pytest.mark.parametrize(
        "role,expected",
        [
            ("admin", "/admin/dashboard"),
            ("employee", "/employee/dashboard"),
            ("client", "/client/dashboard"),
            ("hackathon", "/hackathon/dashboard"),
        ],
    )
    def test_entry_points_redirect_to_role_dashboard(self, role, expected):
        for path in ("/login", "/signup", "/dashboard"):
            decision = decide_access(path, _session(role))

            assert decision.allow is False
            assert decision.location == expected
            assert decision.reason is RedirectReason.ROLE_DASHBOARD

    def test_unknown_role_passes_unredirected(self):
        assert decide_access("/login", _session("auditor")).allow is True

    def test_session_reaches_protected_pages(self):
        assert decide_access("/employee/tasks", _session("employee")).allow is True

    def test_nested_dashboard_path_is_not_an_entry_point(self):
        assert decide_access("/dashboard/settings", _session("admin")).allow is True
