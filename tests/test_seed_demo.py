"""
Tests for the development seed script.
"""
from sandwich_slots.models import Ingredient, INGREDIENT_CATEGORIES, User
from sandwich_slots.seed_demo import DEMO_INGREDIENTS, DEMO_USERS, seed_demo

from tests.helpers import CATALOG


def test_adds_only_missing_rows(db_session):
    already_there = {name for name, _, _, _ in CATALOG}
    expected = len([i for i in DEMO_INGREDIENTS if i[0] not in already_there])

    counts = seed_demo(db_session)

    assert counts == {"ingredients": expected, "users": len(DEMO_USERS)}
    names = [n for (n,) in db_session.query(Ingredient.name).all()]
    assert len(names) == len(set(names))


def test_running_twice_adds_nothing(db_session):
    seed_demo(db_session)
    ingredients = db_session.query(Ingredient).count()
    users = db_session.query(User).count()

    assert seed_demo(db_session) == {"ingredients": 0, "users": 0}
    assert db_session.query(Ingredient).count() == ingredients
    assert db_session.query(User).count() == users


def test_demo_catalog_uses_known_categories():
    assert {category for _, _, category in DEMO_INGREDIENTS} <= set(INGREDIENT_CATEGORIES)
    assert any(category == "bread" for _, _, category in DEMO_INGREDIENTS)
