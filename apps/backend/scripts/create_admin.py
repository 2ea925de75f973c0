"""
Name: Admin Bootstrap Script

Responsibilities:
  - Create the first admin user (idempotent)
  - Hash passwords with Argon2
  - Store user in PostgreSQL through the user repository
"""

from __future__ import annotations

import argparse
import getpass
import os
import sys
from uuid import uuid4

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from worknest.container import get_user_repository  # noqa: E402
from worknest.crosscutting.config import get_settings  # noqa: E402
from worknest.identity.session import hash_password  # noqa: E402
from worknest.identity.users import User, UserRole  # noqa: E402
from worknest.infrastructure.db.pool import close_pool, init_pool  # noqa: E402


def _prompt_email() -> str:
    email = input("Email: ").strip().lower()
    if not email:
        raise SystemExit("Email is required.")
    return email


def _prompt_password() -> str:
    password = getpass.getpass("Password: ")
    if not password:
        raise SystemExit("Password is required.")
    confirm = getpass.getpass("Confirm password: ")
    if password != confirm:
        raise SystemExit("Passwords do not match.")
    return password


def _parse_args() -> argparse.Namespace:
    argv = sys.argv[1:]
    if argv and argv[0] == "--":
        argv = argv[1:]
    parser = argparse.ArgumentParser(
        description="Create the first admin user (idempotent)."
    )
    parser.add_argument("--email", help="User email (will be normalized)")
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument(
        "--password",
        help="User password (omit to be prompted securely)",
    )
    parser.add_argument(
        "--role",
        default=UserRole.ADMIN.value,
        choices=[role.value for role in UserRole],
        help="User role (default: admin)",
    )
    parser.add_argument(
        "--unapproved",
        action="store_true",
        help="Create user pending approval",
    )
    return parser.parse_args(argv)


def _normalize_email(email: str) -> str:
    normalized = email.strip().lower()
    if not normalized:
        raise SystemExit("Email is required.")
    return normalized


def _maybe_create_user(
    email: str, name: str | None, password: str, role: UserRole, approved: bool
) -> None:
    repo = get_user_repository()
    existing = repo.get_user_by_email(email)
    if existing:
        print(
            "User already exists: "
            f"id={existing.id} email={email} role={existing.role.value} "
            f"approved={existing.is_approved}"
        )
        return

    created = repo.create_user(
        User(
            id=uuid4(),
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=role,
            is_approved=approved,
            # R: Un admin creado por script no pasa por onboarding.
            profile_completed=True,
        )
    )
    print(f"Created user: id={created.id} email={email} role={role.value}")


def main() -> None:
    args = _parse_args()
    settings = get_settings()
    if not settings.database_url:
        raise SystemExit("DATABASE_URL is required to create a user.")

    email = _normalize_email(args.email) if args.email else _prompt_email()
    password = args.password or _prompt_password()

    init_pool(settings.database_url, min_size=1, max_size=2)
    try:
        _maybe_create_user(
            email=email,
            name=args.name,
            password=password,
            role=UserRole(args.role),
            approved=not args.unapproved,
        )
    finally:
        close_pool()


if __name__ == "__main__":
    main()
