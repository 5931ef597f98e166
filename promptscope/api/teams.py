"""
Teams API endpoints.

Minimal team and membership management backing the membership oracle.
Owners and admins manage members; the creator of a team becomes its owner.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from promptscope.api.deps import get_current_user_context, parse_id
from promptscope.audit import AuditAction, log, log_member
from promptscope.db import schemas
from promptscope.db.database import get_db
from promptscope.db.repositories import teams as team_repo
from promptscope.db.repositories import users as user_repo
from promptscope.utils.role_permissions import ROLE_OWNER, role_allows_manage_team

router = APIRouter(prefix="/teams", tags=["teams"])


def _require_team(db: Session, raw_team_id: str):
    team = team_repo.get_team(db, parse_id(raw_team_id, "team_id"))
    if team is None:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


def _require_manager(current_user: dict, team_id: int) -> str:
    role = current_user["memberships_by_team"].get(team_id)
    if not role_allows_manage_team(role):
        raise HTTPException(status_code=403, detail="Forbidden")
    return role


@router.post("/", response_model=schemas.Team, status_code=status.HTTP_201_CREATED)
def create_team(
    payload: schemas.TeamCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ = user_context
    team = team_repo.create_team(db, payload, user.id)
    log(
        db,
        action=AuditAction.TEAM_CREATE,
        target_type="team",
        target_id=team.id,
        actor_user_id=user.id,
        team_id=team.id,
        metadata={"name": team.name},
    )
    return team


@router.get("/", response_model=List[schemas.Team])
def list_teams(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    """Teams where the caller is an active member."""
    user, _ = user_context
    return team_repo.get_teams_for_user(db, user.id)


@router.get("/{team_id}/members", response_model=List[schemas.TeamMember])
def list_members(
    team_id: str,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _, current_user = user_context
    team = _require_team(db, team_id)
    if team.id not in current_user["memberships_by_team"]:
        raise HTTPException(status_code=403, detail="Forbidden")
    return team_repo.get_team_members(db, team.id)


@router.post("/{team_id}/members", response_model=schemas.TeamMember, status_code=status.HTTP_201_CREATED)
def add_member(
    team_id: str,
    payload: schemas.TeamMemberCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, current_user = user_context
    team = _require_team(db, team_id)
    actor_role = _require_manager(current_user, team.id)
    if payload.role.value == ROLE_OWNER and actor_role != ROLE_OWNER:
        raise HTTPException(status_code=403, detail="Only owners can add owners")
    if user_repo.get_user(db, payload.user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    existing = team_repo.get_team_member(db, team.id, payload.user_id)
    if existing is not None and existing.is_active:
        raise HTTPException(status_code=409, detail="User is already a member")
    member = team_repo.add_team_member(db, team.id, payload)
    log_member(
        db,
        actor_user_id=user.id,
        team_id=team.id,
        member_user_id=payload.user_id,
        action=AuditAction.MEMBER_ADD,
        role=member.role,
    )
    return member


@router.put("/{team_id}/members/{member_user_id}", response_model=schemas.TeamMember)
def update_member_role(
    team_id: str,
    member_user_id: str,
    payload: schemas.TeamMemberUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, current_user = user_context
    team = _require_team(db, team_id)
    actor_role = _require_manager(current_user, team.id)
    member = team_repo.get_team_member(db, team.id, parse_id(member_user_id, "user_id"))
    if member is None or not member.is_active:
        raise HTTPException(status_code=404, detail="Member not found")
    if ROLE_OWNER in (member.role, payload.role.value) and actor_role != ROLE_OWNER:
        raise HTTPException(status_code=403, detail="Only owners can change owner roles")
    member = team_repo.update_team_member_role(db, member, payload.role.value)
    log_member(
        db,
        actor_user_id=user.id,
        team_id=team.id,
        member_user_id=member.user_id,
        action=AuditAction.MEMBER_ROLE_CHANGE,
        role=member.role,
    )
    return member


@router.delete("/{team_id}/members/{member_user_id}")
def remove_member(
    team_id: str,
    member_user_id: str,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, current_user = user_context
    team = _require_team(db, team_id)
    actor_role = _require_manager(current_user, team.id)
    member = team_repo.get_team_member(db, team.id, parse_id(member_user_id, "user_id"))
    if member is None or not member.is_active:
        raise HTTPException(status_code=404, detail="Member not found")
    if member.role == ROLE_OWNER and actor_role != ROLE_OWNER:
        raise HTTPException(status_code=403, detail="Only owners can remove owners")
    team_repo.deactivate_team_member(db, member)
    log_member(
        db,
        actor_user_id=user.id,
        team_id=team.id,
        member_user_id=member.user_id,
        action=AuditAction.MEMBER_REMOVE,
    )
    return {"message": "Member removed"}
