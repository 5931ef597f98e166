import os
import uuid

os.environ.setdefault("PYTEST_RUNNING", "1")

import pytest
from fastapi.testclient import TestClient

from promptscope.db import database, models
from promptscope.db.repositories import prompts as prompt_repo
from promptscope.utils.settings import refresh_settings_cache

_ENV_VARS = (
    "LOG_LEVEL",
    "DEV_MODE",
    "APP_BASE_URL",
    "UNCATEGORIZED_CATEGORY_NAME",
    "UNCATEGORIZED_CATEGORY_DESCRIPTION",
)


@pytest.fixture(autouse=True)
def _clean_settings_env(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    refresh_settings_cache()
    yield
    refresh_settings_cache()


# Per-test session on the shared in-memory engine; every table is emptied afterwards.
@pytest.fixture
def db_session():
    models.Base.metadata.create_all(bind=database.engine)
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        for table in reversed(models.Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
        session.close()


# Backwards compatibility: some tests expect a 'db' fixture name
@pytest.fixture
def db(db_session):
    return db_session


@pytest.fixture
def client(db_session):
    from promptscope.api.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[database.get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(database.get_db, None)


@pytest.fixture
def auth_headers():
    def _headers(user_or_email):
        email = user_or_email if isinstance(user_or_email, str) else user_or_email.email
        return {"x-auth-request-email": email}
    return _headers


@pytest.fixture
def make_user(db_session):
    def _make(name=None):
        name = name or f"user_{uuid.uuid4().hex[:8]}"
        user = models.User(email=f"{name}@example.com", display_name=name)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make


@pytest.fixture
def make_team(db_session):
    def _make(owner, members=None, name=None):
        """Create a team owned by ``owner``; ``members`` maps users to roles."""
        team = models.Team(name=name or f"team_{uuid.uuid4().hex[:6]}", owner_id=owner.id)
        db_session.add(team)
        db_session.commit()
        db_session.refresh(team)
        db_session.add(models.TeamMember(team_id=team.id, user_id=owner.id, role="owner"))
        for user, role in (members or {}).items():
            db_session.add(models.TeamMember(team_id=team.id, user_id=user.id, role=role))
        db_session.commit()
        return team
    return _make


@pytest.fixture
def make_category(db_session):
    def _make(name, scope_type, scope_key, created_by, is_active=True):
        category = models.Category(
            name=name,
            scope_type=scope_type,
            scope_key=scope_key,
            created_by=created_by.id,
            is_active=is_active,
        )
        db_session.add(category)
        db_session.commit()
        db_session.refresh(category)
        return category
    return _make


@pytest.fixture
def make_prompt(db_session):
    def _make(owner, category=None, is_public=False, title=None):
        return prompt_repo.create_prompt(
            db_session,
            title=title or f"prompt_{uuid.uuid4().hex[:6]}",
            content="body",
            owner_id=owner.id,
            category_id=category.id if category is not None else None,
            is_public=is_public,
        )
    return _make
