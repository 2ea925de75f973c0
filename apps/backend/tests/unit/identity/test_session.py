"""
Name: Session Token and Password Tests

Responsibilities:
  - Test Argon2 hashing and verification
  - Test JWT session issue/decode (claims, expiry, typ)
  - Test bearer extraction and credential checks
  - Test the admin-or-permission dependency

Notes:
  - Uses in-memory user repository (APP_ENV=test)
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from worknest import container
from worknest.crosscutting.config import get_settings
from worknest.crosscutting.error_responses import AppHTTPException
from worknest.domain.entities import EmployeePermission
from worknest.identity.permissions import Permission
from worknest.identity.session import (
    JWT_ALGORITHM,
    authenticate_user,
    create_session_token,
    decode_session_token,
    extract_bearer_token,
    hash_password,
    require_admin_or_permission,
    verify_password,
)
from worknest.identity.users import UserRole

pytestmark = pytest.mark.unit


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret!")

        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_missing_or_malformed_hash_is_rejected(self):
        assert verify_password("anything", None) is False
        assert verify_password("anything", "not-an-argon2-hash") is False


class TestSessionTokens:
    def test_round_trip_claims(self, user_factory):
        user = user_factory.create(UserRole.EMPLOYEE, is_approved=False)

        token, expires_in = create_session_token(user)
        session = decode_session_token(token)

        assert expires_in == get_settings().jwt_session_ttl_minutes * 60
        assert session.user_id == str(user.id)
        assert session.email == user.email
        assert session.role == "employee"
        assert session.is_approved is False
        assert session.is_admin is False

    def test_admin_flag(self, user_factory):
        token, _ = create_session_token(user_factory.create(UserRole.ADMIN))

        assert decode_session_token(token).is_admin is True

    def test_expired_token_is_rejected(self, user_factory):
        issued = datetime.now(timezone.utc) - timedelta(days=365)
        token, _ = create_session_token(user_factory.create(), now=issued)

        with pytest.raises(AppHTTPException) as exc_info:
            decode_session_token(token)

        assert exc_info.value.status_code == 401

    def test_wrong_signature_is_rejected(self, user_factory):
        token, _ = create_session_token(user_factory.create())

        tampered = jwt.encode(
            jwt.decode(token, options={"verify_signature": False}),
            "another-secret-0123456789-0123456789-xyz",
            algorithm=JWT_ALGORITHM,
        )

        with pytest.raises(AppHTTPException):
            decode_session_token(tampered)

    def test_wrong_token_type_is_rejected(self):
        token = jwt.encode(
            {
                "sub": "abc",
                "role": "admin",
                "exp": int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp()),
                "typ": "refresh",
            },
            get_settings().jwt_secret,
            algorithm=JWT_ALGORITHM,
        )

        with pytest.raises(AppHTTPException, match="401"):
            decode_session_token(token)


class TestBearerExtraction:
    @pytest.mark.parametrize(
        "header,expected",
        [
            ("Bearer abc.def", "abc.def"),
            ("bearer   token  ", "token"),
            ("Basic abc", None),
            ("Bearer", None),
            ("", None),
            (None, None),
        ],
    )
    def test_extract_bearer_token(self, header, expected):
        assert extract_bearer_token(header) == expected


class TestAuthenticateUser:
    def test_valid_credentials(self, create_user):
        user = create_user(
            UserRole.ADMIN,
            email="root@example.com",
            password_hash=hash_password("pw-123"),
        )

        assert authenticate_user("  ROOT@example.com ", "pw-123") == user

    def test_wrong_password(self, create_user):
        create_user(email="x@example.com", password_hash=hash_password("pw"))

        assert authenticate_user("x@example.com", "nope") is None

    def test_unknown_user(self):
        assert authenticate_user("ghost@example.com", "pw") is None


class TestRequireAdminOrPermission:
    @pytest.fixture
    def guarded_client(self):
        app = FastAPI()

        @app.get("/guarded")
        def guarded(
            session=Depends(require_admin_or_permission(Permission.ASSIGN_TASKS)),
        ):
            return {"user_id": session.user_id}

        return TestClient(app)

    def _bearer(self, user):
        token, _ = create_session_token(user)
        return {"Authorization": f"Bearer {token}"}

    def test_admin_bypasses_grants(self, guarded_client, admin_user):
        response = guarded_client.get("/guarded", headers=self._bearer(admin_user))

        assert response.status_code == 200

    def test_employee_without_grant_is_forbidden(self, guarded_client, employee_user):
        response = guarded_client.get("/guarded", headers=self._bearer(employee_user))

        assert response.status_code == 403

    def test_employee_with_grant(self, guarded_client, admin_user, employee_user):
        container.get_employee_permission_repository().upsert(
            EmployeePermission(
                employee_id=employee_user.id,
                permissions=("assign_tasks",),
                granted_by=admin_user.id,
            )
        )

        response = guarded_client.get("/guarded", headers=self._bearer(employee_user))

        assert response.status_code == 200
        assert response.json() == {"user_id": str(employee_user.id)}

    def test_missing_session(self, guarded_client):
        assert guarded_client.get("/guarded").status_code == 401
