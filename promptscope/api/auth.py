"""
Authentication helpers and identity resolution.

Identity is asserted by an oauth2-proxy in front of the service; this module
parses its headers, normalizes emails and upserts the matching user row.
"""
from typing import Dict, Optional, Tuple

from fastapi import Request
from sqlalchemy.orm import Session

from promptscope.db import models
from promptscope.db.repositories import users as user_repo

IDENTITY_HEADERS = (
    "x-auth-request-user",
    "x-auth-request-email",
    "x-forwarded-user",
    "x-forwarded-email",
)

DEV_USER_EMAIL = "dev@localhost"
DEV_USER_NAME = "Development User"


def _normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    email = email.strip().lower()
    return email or None


def resolve_identity_from_headers(
    x_auth_request_user: Optional[str],
    x_auth_request_email: Optional[str],
    x_forwarded_user: Optional[str],
    x_forwarded_email: Optional[str],
) -> Tuple[Optional[str], Optional[str]]:
    user = x_auth_request_user or x_forwarded_user
    email = _normalize_email(x_auth_request_email or x_forwarded_email)
    return user, email


def has_identity_headers(request: Request) -> bool:
    return any(request.headers.get(name) for name in IDENTITY_HEADERS)


def get_or_create_user(db: Session, email: str, display_name: Optional[str] = None) -> models.User:
    user = user_repo.get_user_by_email(db, email)
    if user is None:
        user = user_repo.create_user(db, email=email, display_name=display_name or email.split("@")[0])
    return user


def build_user_context(user: models.User, memberships: Dict[int, str]) -> Dict:
    """Plain-dict view of the caller handed to route handlers."""
    return {
        "id": user.id,
        "email": user.email,
        "display_name": user.display_name,
        "memberships": [
            {"team_id": team_id, "role": role} for team_id, role in sorted(memberships.items())
        ],
        "memberships_by_team": dict(memberships),
    }
