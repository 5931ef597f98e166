import logging
from contextlib import contextmanager

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError

from promptscope.db import database
from promptscope.db.repositories import prompts as prompt_repo
from promptscope.errors import PermissionDeniedError
from promptscope.services import CategoryAggregator, ensure_uncategorized


@contextmanager
def count_queries():
    statements = []

    def _before(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(database.engine, "before_cursor_execute", _before)
    try:
        yield statements
    finally:
        event.remove(database.engine, "before_cursor_execute", _before)


def _counts(items):
    return {item.name: item.prompt_count for item in items}


def test_own_categories_with_counts(db, make_user, make_category, make_prompt):
    """U1 owns the fallback (one public, one private prompt) and an empty "Web"."""
    u1 = make_user()
    fallback = ensure_uncategorized(db, u1.id)
    make_category("Web", "personal", u1.id, u1)
    make_prompt(u1, category=fallback, is_public=True)
    make_prompt(u1, category=fallback, is_public=False)

    items = CategoryAggregator(db).visible_categories(u1.id)

    assert [item.name for item in items] == ["未分类", "Web"]
    assert _counts(items) == {"未分类": 2, "Web": 0}


def test_private_record_of_another_owner_is_not_counted(db, make_user, make_prompt):
    """A private prompt owned by U2 sitting in U1's fallback only counts for U2."""
    u1, u2 = make_user(), make_user()
    fallback = ensure_uncategorized(db, u1.id)
    make_prompt(u1, category=fallback, is_public=False)
    make_prompt(u2, category=fallback, is_public=False)

    aggregator = CategoryAggregator(db)
    assert aggregator.attach_counts([fallback], u1.id)[0].prompt_count == 1
    assert aggregator.attach_counts([fallback], u2.id)[0].prompt_count == 1
    assert aggregator.attach_counts([fallback], None)[0].prompt_count == 0


def test_count_matches_visibility_rule_for_every_viewer(db, make_user, make_team, make_category, make_prompt):
    owner, member = make_user(), make_user()
    team = make_team(owner, {member: "viewer"})
    shared = make_category("Ops", "team", team.id, owner)
    make_prompt(owner, category=shared, is_public=False)
    make_prompt(owner, category=shared, is_public=True)
    make_prompt(member, category=shared, is_public=False)
    make_prompt(member, category=shared, is_public=False)

    aggregator = CategoryAggregator(db)
    assert aggregator.attach_counts([shared], owner.id)[0].prompt_count == 2
    assert aggregator.attach_counts([shared], member.id)[0].prompt_count == 3


def test_visible_set_excludes_foreign_scopes(db, make_user, make_team, make_category):
    alice, bob, carol = make_user(), make_user(), make_user()
    team = make_team(bob, {alice: "viewer"})
    other_team = make_team(carol)
    make_category("Mine", "personal", alice.id, alice)
    make_category("Bobs", "personal", bob.id, bob)
    make_category("TeamCat", "team", team.id, bob)
    make_category("Elsewhere", "team", other_team.id, carol)
    make_category("Gone", "personal", alice.id, alice, is_active=False)
    make_category("Shared", "public", None, carol)

    names = [item.name for item in CategoryAggregator(db).visible_categories(alice.id)]

    assert names == ["未分类", "Mine", "TeamCat", "Shared"]


def test_visible_categories_provisions_fallback(db, make_user):
    user = make_user()
    items = CategoryAggregator(db).visible_categories(user.id)
    assert len(items) == 1
    assert items[0].is_uncategorized is True
    assert items[0].prompt_count == 0


def test_my_categories_includes_team_categories_of_any_creator(db, make_user, make_team, make_category):
    alice, bob, carol = make_user(), make_user(), make_user()
    team = make_team(bob, {alice: "editor"})
    make_category("ByBob", "team", team.id, bob)
    make_category("ByAlice", "team", team.id, alice)
    make_category("AlicePublic", "public", None, alice)
    make_category("CarolPublic", "public", None, carol)
    make_category("CarolPersonal", "personal", carol.id, carol)

    aggregator = CategoryAggregator(db)
    names = [item.name for item in aggregator.my_categories(alice.id)]

    assert names == ["未分类", "ByAlice", "ByBob", "AlicePublic", "CarolPublic"]
    visible = {item.name for item in aggregator.visible_categories(alice.id)}
    assert visible <= set(names)
    assert "CarolPersonal" not in names


def test_team_categories_requires_membership(db, make_user, make_team, make_category):
    owner, viewer, stranger = make_user(), make_user(), make_user()
    team = make_team(owner, {viewer: "viewer"})
    make_category("B", "team", team.id, owner)
    make_category("A", "team", team.id, owner)
    make_category("Personal", "personal", owner.id, owner)

    aggregator = CategoryAggregator(db)
    assert [item.name for item in aggregator.team_categories(team.id, viewer.id)] == ["A", "B"]
    with pytest.raises(PermissionDeniedError):
        aggregator.team_categories(team.id, stranger.id)


def test_grouped_for_guest_has_only_public(db, make_user, make_category, make_prompt):
    alice = make_user()
    make_category("Mine", "personal", alice.id, alice)
    shared = make_category("Shared", "public", None, alice)
    make_prompt(alice, category=shared, is_public=True)
    make_prompt(alice, category=shared, is_public=False)

    groups = CategoryAggregator(db).grouped(None)

    assert groups["personal"] == []
    assert groups["team"] == []
    assert [(c.name, c.prompt_count) for c in groups["public"]] == [("Shared", 1)]


def test_grouped_for_member(db, make_user, make_team, make_category):
    alice, bob = make_user(), make_user()
    team = make_team(bob, {alice: "viewer"})
    make_category("TeamCat", "team", team.id, bob)

    groups = CategoryAggregator(db).grouped(alice.id)

    assert list(groups) == ["personal", "team", "public"]
    assert [c.name for c in groups["personal"]] == ["未分类"]
    assert [c.name for c in groups["team"]] == ["TeamCat"]


def test_empty_input_needs_no_queries(db):
    with count_queries() as statements:
        assert CategoryAggregator(db).attach_counts([], 1) == []
    assert statements == []


def test_query_count_is_bounded_by_scope_classes(db, make_user, make_team, make_category, make_prompt):
    user = make_user()
    team = make_team(user)

    def _seed(prefix, n):
        cats = []
        for i in range(n):
            cats.append(make_category(f"{prefix}p{i}", "personal", user.id, user))
            cats.append(make_category(f"{prefix}t{i}", "team", team.id, user))
            cats.append(make_category(f"{prefix}s{i}", "public", None, user))
        for cat in cats:
            make_prompt(user, category=cat)
        return cats

    small, large = _seed("a", 2), _seed("b", 20)
    aggregator = CategoryAggregator(db)
    # Load attributes up front so lazy refreshes are not counted.
    for cat in small + large:
        db.refresh(cat)

    with count_queries() as few:
        small_result = aggregator.attach_counts(small, user.id)
    with count_queries() as many:
        large_result = aggregator.attach_counts(large, user.id)

    assert len(few) == len(many) == 3
    assert all(item.prompt_count == 1 for item in small_result + large_result)


def test_counts_degrade_to_zero_on_data_access_failure(db, make_user, make_category, make_prompt, monkeypatch, caplog):
    user = make_user()
    web = make_category("Web", "personal", user.id, user)
    make_prompt(user, category=web)

    def _broken(*args, **kwargs):
        raise OperationalError("SELECT ...", {}, Exception("connection reset"))

    monkeypatch.setattr(prompt_repo, "count_visible_by_category", _broken)

    with caplog.at_level(logging.WARNING, logger="promptscope.services.aggregator"):
        items = CategoryAggregator(db).visible_categories(user.id)

    assert [(item.name, item.prompt_count) for item in items] == [("未分类", 0), ("Web", 0)]
    assert "zero counts" in caplog.text
