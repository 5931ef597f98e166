import pytest
from types import SimpleNamespace

from promptscope.errors import ValidationError
from promptscope.utils.scopes import (
    PersonalScope,
    PublicScope,
    ScopeTypeEnum,
    TeamScope,
    build_scope,
    scope_of,
    sort_key,
)


class TestBuildScope:

    def test_personal_scope_is_forced_to_actor(self):
        scope = build_scope("personal", None, acting_user_id=7)
        assert scope == PersonalScope(owner_id=7)
        assert scope.scope_key == 7

    def test_personal_scope_accepts_own_id(self):
        assert build_scope(ScopeTypeEnum.personal, "7", acting_user_id=7) == PersonalScope(owner_id=7)

    def test_personal_scope_for_someone_else_rejected(self):
        with pytest.raises(ValidationError):
            build_scope("personal", 8, acting_user_id=7)

    def test_team_scope_requires_team_id(self):
        with pytest.raises(ValidationError, match="Team ID is required"):
            build_scope("team", None, acting_user_id=7)

    @pytest.mark.parametrize("raw", [0, -3, "abc"])
    def test_team_scope_rejects_bad_ids(self, raw):
        with pytest.raises(ValidationError):
            build_scope("team", raw, acting_user_id=7)

    def test_team_scope(self):
        scope = build_scope("team", 12, acting_user_id=7)
        assert isinstance(scope, TeamScope)
        assert scope.scope_type == "team"
        assert scope.scope_key == 12

    def test_public_scope_has_no_key(self):
        scope = build_scope("public", None, acting_user_id=7)
        assert scope == PublicScope()
        assert scope.scope_key is None

    def test_public_scope_with_key_rejected(self):
        with pytest.raises(ValidationError):
            build_scope("public", 3, acting_user_id=7)

    def test_unknown_scope_rejected(self):
        with pytest.raises(ValidationError) as exc:
            build_scope("organization", None, acting_user_id=7)
        assert exc.value.details


def test_scope_of_round_trips_stored_columns():
    assert scope_of(SimpleNamespace(scope_type="personal", scope_key=3)) == PersonalScope(3)
    assert scope_of(SimpleNamespace(scope_type="team", scope_key=4)) == TeamScope(4)
    assert scope_of(SimpleNamespace(scope_type="public", scope_key=None)) == PublicScope()


def test_scope_of_malformed_row():
    with pytest.raises(ValueError):
        scope_of(SimpleNamespace(scope_type="team", scope_key=None))


def test_sort_order_reserved_then_rank_then_name():
    rows = [
        ("b", "public"),
        ("Zeta", "team"),
        ("alpha", "personal"),
        ("未分类", "personal"),
        ("Alpha", "personal"),
    ]
    ordered = sorted(rows, key=lambda r: sort_key(r[0], r[1], "未分类"))
    assert ordered == [
        ("未分类", "personal"),
        ("Alpha", "personal"),
        ("alpha", "personal"),
        ("Zeta", "team"),
        ("b", "public"),
    ]
