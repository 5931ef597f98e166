"""
Audit logging helpers and enums.

Persists normalized audit records for category and team lifecycle actions.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from promptscope.db import models, schemas
from promptscope.db.repositories import audits as audit_repo
from promptscope.utils.scopes import SCOPE_TEAM


class AuditAction(str, Enum):
    # Category
    CATEGORY_CREATE = "category_create"
    CATEGORY_UPDATE = "category_update"
    CATEGORY_DELETE = "category_delete"
    # Team
    TEAM_CREATE = "team_create"
    # Membership
    MEMBER_ADD = "member_add"
    MEMBER_REMOVE = "member_remove"
    MEMBER_ROLE_CHANGE = "member_role_change"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


def log(
    db: Session,
    *,
    action: AuditAction | str,
    status: AuditStatus | str = AuditStatus.SUCCESS,
    target_type: str,
    target_id: Optional[int] = None,
    actor_user_id: int,
    team_id: Optional[int] = None,
    reason: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> models.AuditLog:
    """Central audit logging helper."""
    # Persist plain string values, not Enum reprs
    action_value = action.value if isinstance(action, AuditAction) else str(action)
    status_value = status.value if isinstance(status, AuditStatus) else str(status)
    audit_log = schemas.AuditLogCreate(
        action_type=action_value,
        status=status_value,
        target_type=target_type,
        target_id=target_id,
        reason=reason,
        metadata=metadata or {},
    )
    return audit_repo.create_audit_log(
        db,
        audit_log=audit_log,
        actor_user_id=actor_user_id,
        team_id=team_id,
    )


def log_category(
    db: Session,
    *,
    actor_user_id: int,
    category: models.Category,
    action: AuditAction,
    status: AuditStatus | str = AuditStatus.SUCCESS,
    metadata: Optional[Dict[str, Any]] = None,
):
    payload = {
        "name": category.name,
        "scope_type": category.scope_type,
        "scope_key": category.scope_key,
    }
    payload.update(metadata or {})
    return log(
        db,
        action=action,
        status=status,
        target_type="category",
        target_id=category.id,
        actor_user_id=actor_user_id,
        team_id=category.scope_key if category.scope_type == SCOPE_TEAM else None,
        metadata=payload,
    )


def log_member(
    db: Session,
    *,
    actor_user_id: int,
    team_id: int,
    member_user_id: int,
    action: AuditAction,
    role: Optional[str] = None,
):
    metadata: Dict[str, Any] = {"user_id": member_user_id}
    if role:
        metadata["role"] = role
    return log(
        db,
        action=action,
        target_type="team_member",
        target_id=member_user_id,
        actor_user_id=actor_user_id,
        team_id=team_id,
        metadata=metadata,
    )


__all__ = ["AuditAction", "AuditStatus", "log", "log_category", "log_member"]
