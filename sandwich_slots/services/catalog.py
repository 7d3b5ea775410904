"""
Ingredient Catalog Lookup
=========================

Read-only access to the ingredient catalog, used when an order is admitted or
its ingredients are replaced. The catalog itself (CRUD, availability toggles)
belongs to another part of the system; this module only answers "which
ingredients are these, what category are they, are they available?".

Selection Rules:
----------------
A sandwich selection is valid when:
1. It is not empty.
2. Every id exists in the catalog.
3. It contains exactly one ingredient of category "bread".
4. No ingredient appears twice.
5. Every ingredient is currently available.

The rules are checked in this order and the first violation raises
ValidationFailed with a specific message.

Snapshots:
----------
A valid selection is turned into (name, category) pairs in the order the
caller sent them. Those pairs are what an order stores, so later catalog
changes never alter an existing order.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from sqlalchemy.orm import Session

from ..errors import ValidationFailed
from ..models import Ingredient


logger = logging.getLogger(__name__)

BREAD_CATEGORY = "bread"


@dataclass(frozen=True)
class IngredientSnapshot:
    name: str
    category: str


def lookup_ingredients(db: Session, ingredient_ids: Iterable[int]) -> Dict[int, Ingredient]:
    """Return catalog rows for the given ids, keyed by id. Unknown ids are absent."""
    ids = set(ingredient_ids)
    if not ids:
        return {}
    rows = db.query(Ingredient).filter(Ingredient.id.in_(ids)).all()
    return {row.id: row for row in rows}


def validate_ingredient_selection(db: Session, ingredient_ids: Sequence[int]) -> List[IngredientSnapshot]:
    """
    Validate a sandwich selection and return its snapshots.

    Raises:
        ValidationFailed: on the first broken rule (see module docstring)
    """
    if not ingredient_ids:
        raise ValidationFailed("Select at least one ingredient.")

    catalog = lookup_ingredients(db, ingredient_ids)

    missing = sorted({i for i in ingredient_ids if i not in catalog})
    if missing:
        raise ValidationFailed(
            "Some selected ingredients do not exist.",
            details={"missing_ids": missing},
        )

    bread_count = sum(1 for i in ingredient_ids if catalog[i].category == BREAD_CATEGORY)
    if bread_count != 1:
        raise ValidationFailed(
            "Select exactly one bread.",
            details={"bread_count": bread_count},
        )

    if len(set(ingredient_ids)) != len(ingredient_ids):
        raise ValidationFailed("The same ingredient cannot be selected more than once.")

    unavailable = [catalog[i].name for i in ingredient_ids if not catalog[i].is_available]
    if unavailable:
        raise ValidationFailed(
            "Some selected ingredients are currently unavailable.",
            details={"unavailable": unavailable},
        )

    return [IngredientSnapshot(name=catalog[i].name, category=catalog[i].category) for i in ingredient_ids]
