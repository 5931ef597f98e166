from promptscope.db import models


def test_create_team_makes_creator_owner(client, auth_headers, make_user, db):
    alice = make_user()
    resp = client.post("/teams/", json={"name": "Writers"}, headers=auth_headers(alice))
    assert resp.status_code == 201
    team_id = resp.json()["id"]
    member = db.query(models.TeamMember).filter(models.TeamMember.team_id == team_id).one()
    assert member.user_id == alice.id
    assert member.role == "owner"

    resp = client.get("/teams/", headers=auth_headers(alice))
    assert [t["name"] for t in resp.json()] == ["Writers"]


def test_membership_changes_drive_category_access(client, auth_headers, make_user, make_team):
    owner, bob = make_user(), make_user()
    team = make_team(owner)

    resp = client.post(
        f"/teams/{team.id}/members",
        json={"user_id": bob.id, "role": "viewer"},
        headers=auth_headers(owner),
    )
    assert resp.status_code == 201

    body = {"name": "Ops", "scopeType": "team", "scopeKey": team.id}
    assert client.post("/categories/", json=body, headers=auth_headers(bob)).status_code == 403

    resp = client.put(
        f"/teams/{team.id}/members/{bob.id}",
        json={"role": "editor"},
        headers=auth_headers(owner),
    )
    assert resp.status_code == 200
    assert client.post("/categories/", json=body, headers=auth_headers(bob)).status_code == 201

    resp = client.delete(f"/teams/{team.id}/members/{bob.id}", headers=auth_headers(owner))
    assert resp.status_code == 200
    assert client.get(f"/categories/team/{team.id}", headers=auth_headers(bob)).status_code == 403


def test_only_managers_add_members(client, auth_headers, make_user, make_team):
    owner, editor, carol = make_user(), make_user(), make_user()
    team = make_team(owner, {editor: "editor"})
    resp = client.post(
        f"/teams/{team.id}/members",
        json={"user_id": carol.id, "role": "viewer"},
        headers=auth_headers(editor),
    )
    assert resp.status_code == 403


def test_add_unknown_user_is_404(client, auth_headers, make_user, make_team):
    owner = make_user()
    team = make_team(owner)
    resp = client.post(
        f"/teams/{team.id}/members",
        json={"user_id": 99999, "role": "viewer"},
        headers=auth_headers(owner),
    )
    assert resp.status_code == 404


def test_member_listing_requires_membership(client, auth_headers, make_user, make_team):
    owner, stranger = make_user(), make_user()
    team = make_team(owner)
    assert client.get(f"/teams/{team.id}/members", headers=auth_headers(stranger)).status_code == 403
    resp = client.get(f"/teams/{team.id}/members", headers=auth_headers(owner))
    assert [m["user_id"] for m in resp.json()] == [owner.id]


def test_membership_changes_are_audited(client, auth_headers, make_user, make_team, db):
    owner, bob = make_user(), make_user()
    team = make_team(owner)
    client.post(
        f"/teams/{team.id}/members",
        json={"user_id": bob.id, "role": "editor"},
        headers=auth_headers(owner),
    )
    entry = (
        db.query(models.AuditLog)
        .filter(models.AuditLog.action_type == "member_add")
        .one()
    )
    assert entry.team_id == team.id
    assert entry.metadata_json == {"user_id": bob.id, "role": "editor"}
