import pytest

from promptscope.utils.role_permissions import (
    CATEGORY_MANAGE_ROLES,
    get_allowed_roles,
    role_allows_manage_categories,
    role_allows_manage_team,
    role_at_least,
    validate_role,
)


class TestRolePermissions:
    """Unit tests for the ordered team role helpers."""

    def test_role_order(self):
        assert role_at_least("owner", "admin")
        assert role_at_least("admin", "editor")
        assert role_at_least("editor", "viewer")
        assert not role_at_least("viewer", "editor")

    def test_unknown_or_missing_role_ranks_nowhere(self):
        assert not role_at_least(None, "viewer")
        assert not role_at_least("superuser", "viewer")

    @pytest.mark.parametrize("role,expected", [
        ("owner", True),
        ("admin", True),
        ("editor", True),
        ("viewer", False),
        (None, False),
    ])
    def test_manage_categories_gate(self, role, expected):
        assert role_allows_manage_categories(role) is expected

    def test_manage_roles_set(self):
        assert CATEGORY_MANAGE_ROLES == {"owner", "admin", "editor"}

    def test_manage_team_is_owner_or_admin(self):
        assert role_allows_manage_team("owner")
        assert role_allows_manage_team("admin")
        assert not role_allows_manage_team("editor")

    def test_validate_role(self):
        for role in ["owner", "admin", "editor", "viewer"]:
            validate_role(role)
        with pytest.raises(ValueError, match="Invalid role 'invalid'"):
            validate_role("invalid")

    def test_get_allowed_roles_returns_copy(self):
        roles = get_allowed_roles()
        roles.add("hacker")
        assert "hacker" not in get_allowed_roles()
