"""
API dependency helpers.

Resolves the calling user from proxy headers (or DEV_MODE) and builds the
per-request services. The membership oracle is created once per request and
shared by the services so memberships are loaded at most once.
"""
from typing import Any, Dict, Optional, Tuple

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from promptscope.api.auth import (
    DEV_USER_EMAIL,
    DEV_USER_NAME,
    build_user_context,
    get_or_create_user,
    resolve_identity_from_headers,
)
from promptscope.db.database import get_db
from promptscope.errors import ValidationError
from promptscope.services import CategoryAggregator, CategoryService, MembershipOracle
from promptscope.utils.settings import dev_mode_active


def _resolve_user(
    db: Session,
    x_auth_request_user: Optional[str],
    x_auth_request_email: Optional[str],
    x_forwarded_user: Optional[str],
    x_forwarded_email: Optional[str],
):
    if dev_mode_active():
        name, email = DEV_USER_NAME, DEV_USER_EMAIL
    else:
        name, email = resolve_identity_from_headers(
            x_auth_request_user=x_auth_request_user,
            x_auth_request_email=x_auth_request_email,
            x_forwarded_user=x_forwarded_user,
            x_forwarded_email=x_forwarded_email,
        )
        if not email:
            return None
    return get_or_create_user(db, email=email, display_name=name)


def get_membership_oracle(db: Session = Depends(get_db)) -> MembershipOracle:
    return MembershipOracle(db)


# Contract:
# Returns (sqlalchemy User model, current_user_context_dict)
# Raises 401 if identity cannot be resolved.
def get_current_user_context(
    db: Session = Depends(get_db),
    oracle: MembershipOracle = Depends(get_membership_oracle),
    x_auth_request_user: Optional[str] = Header(default=None),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_user: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> Tuple[Any, Dict[str, Any]]:
    user = _resolve_user(db, x_auth_request_user, x_auth_request_email, x_forwarded_user, x_forwarded_email)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    memberships = dict(oracle.active_memberships(user.id))
    return user, build_user_context(user, memberships)


def get_optional_user_context(
    db: Session = Depends(get_db),
    oracle: MembershipOracle = Depends(get_membership_oracle),
    x_auth_request_user: Optional[str] = Header(default=None),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_user: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> Optional[Tuple[Any, Dict[str, Any]]]:
    """Like ``get_current_user_context`` but returns None for guests."""
    user = _resolve_user(db, x_auth_request_user, x_auth_request_email, x_forwarded_user, x_forwarded_email)
    if user is None:
        return None
    memberships = dict(oracle.active_memberships(user.id))
    return user, build_user_context(user, memberships)


def get_category_service(
    db: Session = Depends(get_db),
    oracle: MembershipOracle = Depends(get_membership_oracle),
) -> CategoryService:
    return CategoryService(db, oracle=oracle)


def get_category_aggregator(
    db: Session = Depends(get_db),
    oracle: MembershipOracle = Depends(get_membership_oracle),
) -> CategoryAggregator:
    return CategoryAggregator(db, oracle=oracle)


def parse_id(raw: str, label: str = "id") -> int:
    """Parse a positive integer path parameter; malformed values are a 400."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}", details=[f"{label} must be a positive integer"])
    if value <= 0:
        raise ValidationError(f"Invalid {label}", details=[f"{label} must be a positive integer"])
    return value
