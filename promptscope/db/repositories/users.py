"""
User repository functions.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from promptscope.db import models


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def create_user(db: Session, email: str, display_name: Optional[str] = None) -> models.User:
    db_user = models.User(email=email.strip().lower(), display_name=display_name)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def get_all_user_ids(db: Session) -> List[int]:
    return [int(user_id) for (user_id,) in db.query(models.User.id).order_by(models.User.id).all()]
