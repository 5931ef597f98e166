from promptscope.db import models
from promptscope.services import MembershipOracle


def test_active_memberships_and_roles(db, make_user, make_team):
    owner, editor, viewer = make_user(), make_user(), make_user()
    team_a = make_team(owner, {editor: "editor", viewer: "viewer"})
    team_b = make_team(editor)

    oracle = MembershipOracle(db)

    assert oracle.active_memberships(editor.id) == {(team_a.id, "editor"), (team_b.id, "owner")}
    assert oracle.team_ids(editor.id) == sorted([team_a.id, team_b.id])
    assert oracle.role_of(viewer.id, team_a.id) == "viewer"
    assert oracle.role_of(viewer.id, team_b.id) is None
    assert oracle.is_member(viewer.id, team_a.id)
    assert not oracle.can_manage_team_categories(viewer.id, team_a.id)
    assert oracle.can_manage_team_categories(editor.id, team_a.id)


def test_inactive_rows_and_teams_are_ignored(db, make_user, make_team):
    owner, member = make_user(), make_user()
    live = make_team(owner, {member: "editor"})
    archived = make_team(owner, {member: "admin"})
    archived.is_active = False
    row = (
        db.query(models.TeamMember)
        .filter(models.TeamMember.team_id == live.id, models.TeamMember.user_id == member.id)
        .one()
    )
    row.is_active = False
    db.commit()

    oracle = MembershipOracle(db)
    assert oracle.active_memberships(member.id) == set()
    assert oracle.team_ids(owner.id) == [live.id]


def test_guest_has_no_memberships(db):
    oracle = MembershipOracle(db)
    assert oracle.team_ids(None) == []
    assert not oracle.is_member(None, 1)


def test_cache_invalidation(db, make_user, make_team):
    owner, late = make_user(), make_user()
    team = make_team(owner)
    oracle = MembershipOracle(db)
    assert not oracle.is_member(late.id, team.id)

    db.add(models.TeamMember(team_id=team.id, user_id=late.id, role="viewer"))
    db.commit()
    assert not oracle.is_member(late.id, team.id)

    oracle.invalidate(late.id)
    assert oracle.is_member(late.id, team.id)
