"""
Team repository functions.

Implements CRUD for teams and team memberships. Memberships are deactivated
rather than deleted so that the unique (team_id, user_id) row can be revived.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from promptscope.db import models, schemas
from promptscope.utils.role_permissions import ROLE_OWNER


def create_team(db: Session, team: schemas.TeamCreate, user_id: int) -> models.Team:
    db_team = models.Team(
        name=team.name,
        description=team.description,
        owner_id=user_id,
    )
    db.add(db_team)
    db.commit()
    db.refresh(db_team)
    # Add creator as owner
    db_member = models.TeamMember(
        team_id=db_team.id,
        user_id=user_id,
        role=ROLE_OWNER,
    )
    db.add(db_member)
    db.commit()
    return db_team


def get_team(db: Session, team_id: int) -> Optional[models.Team]:
    return (
        db.query(models.Team)
        .filter(models.Team.id == team_id, models.Team.is_active.is_(True))
        .first()
    )


def get_teams_for_user(db: Session, user_id: int, skip: int = 0, limit: int = 100) -> List[models.Team]:
    return (
        db.query(models.Team)
        .join(models.TeamMember, models.TeamMember.team_id == models.Team.id)
        .filter(
            models.TeamMember.user_id == user_id,
            models.TeamMember.is_active.is_(True),
            models.Team.is_active.is_(True),
        )
        .order_by(models.Team.name)
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_team_member(db: Session, team_id: int, user_id: int) -> Optional[models.TeamMember]:
    """Membership row regardless of its active flag."""
    return (
        db.query(models.TeamMember)
        .filter(models.TeamMember.team_id == team_id, models.TeamMember.user_id == user_id)
        .first()
    )


def get_team_members(db: Session, team_id: int, skip: int = 0, limit: int = 100) -> List[models.TeamMember]:
    return (
        db.query(models.TeamMember)
        .filter(models.TeamMember.team_id == team_id, models.TeamMember.is_active.is_(True))
        .order_by(models.TeamMember.joined_at)
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_active_memberships(db: Session, user_id: int) -> List[Tuple[int, str]]:
    """(team_id, role) pairs for the user's active memberships in active teams."""
    rows = (
        db.query(models.TeamMember.team_id, models.TeamMember.role)
        .join(models.Team, models.Team.id == models.TeamMember.team_id)
        .filter(
            models.TeamMember.user_id == user_id,
            models.TeamMember.is_active.is_(True),
            models.Team.is_active.is_(True),
        )
        .all()
    )
    return [(int(team_id), role) for team_id, role in rows]


def add_team_member(db: Session, team_id: int, member: schemas.TeamMemberCreate) -> models.TeamMember:
    role = member.role.value if hasattr(member.role, "value") else str(member.role)
    db_member = get_team_member(db, team_id, member.user_id)
    if db_member is not None:
        db_member.role = role
        db_member.is_active = True
    else:
        db_member = models.TeamMember(team_id=team_id, user_id=member.user_id, role=role)
        db.add(db_member)
    db.commit()
    db.refresh(db_member)
    return db_member


def update_team_member_role(db: Session, db_member: models.TeamMember, role: str) -> models.TeamMember:
    db_member.role = role
    db.commit()
    db.refresh(db_member)
    return db_member


def deactivate_team_member(db: Session, db_member: models.TeamMember) -> models.TeamMember:
    db_member.is_active = False
    db.commit()
    db.refresh(db_member)
    return db_member
