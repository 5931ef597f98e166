from types import SimpleNamespace

import pytest
from sqlalchemy.dialects import sqlite

from promptscope.db import models
from promptscope.utils.visibility import is_visible, visible_clause


def _record(owner_id, is_public):
    return SimpleNamespace(owner_id=owner_id, is_public=is_public)


@pytest.mark.parametrize("is_public", [True, False])
def test_owner_always_sees_own_record(is_public):
    assert is_visible(_record(1, is_public), 1) is True


@pytest.mark.parametrize("is_public", [True, False])
def test_other_user_sees_only_public(is_public):
    assert is_visible(_record(1, is_public), 2) is is_public


def test_guest_sees_only_public():
    assert is_visible(_record(1, True), None) is True
    assert is_visible(_record(1, False), None) is False


def test_visible_clause_renders_public_or_owner():
    sql = str(visible_clause(models.Prompt, 5).compile(dialect=sqlite.dialect()))
    assert "prompts.is_public" in sql
    assert "prompts.owner_id" in sql


def test_visible_clause_for_guest_has_no_owner_branch():
    sql = str(visible_clause(models.Prompt, None).compile(dialect=sqlite.dialect()))
    assert "owner_id" not in sql
