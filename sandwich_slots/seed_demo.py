"""
Seed a development database with a small ingredient catalog and a few users.

The catalog and the user directory belong to outside systems in production;
this script only exists so a fresh local database can take orders. It never
touches working days, slots or orders.

Usage:
    python -m sandwich_slots.seed_demo
"""

import logging

from dotenv import load_dotenv
from sqlalchemy.orm import Session

load_dotenv()

from .db import init_db, session_scope
from .logging_config import setup_logging
from .models import Ingredient, User


logger = logging.getLogger(__name__)


DEMO_INGREDIENTS = [
    # name, code, category
    ("Ciabatta", "CIA", "bread"),
    ("Focaccia", "FOC", "bread"),
    ("Rosetta", "ROS", "bread"),
    ("Wholegrain", "WHG", "bread"),
    ("Prosciutto Crudo", "PRC", "meat"),
    ("Prosciutto Cotto", "PCT", "meat"),
    ("Salame Milano", "SAL", "meat"),
    ("Mortadella", "MOR", "meat"),
    ("Bresaola", "BRE", "meat"),
    ("Mozzarella", "MOZ", "cheese"),
    ("Provolone", "PRV", "cheese"),
    ("Gorgonzola", "GOR", "cheese"),
    ("Lettuce", "LET", "vegetable"),
    ("Tomato", "TOM", "vegetable"),
    ("Grilled Zucchini", "ZUC", "vegetable"),
    ("Rocket", "ROC", "vegetable"),
    ("Pesto", "PES", "sauce"),
    ("Mayonnaise", "MAY", "sauce"),
    ("Olive Oil", "OIL", "sauce"),
]

DEMO_USERS = [
    # name, email, is_admin
    ("Operator", "operator@example.com", True),
    ("Giulia Conti", "giulia.conti@example.com", False),
    ("Marco Ferri", "marco.ferri@example.com", False),
]


def seed_ingredients(db: Session) -> int:
    """Add demo ingredients missing from the catalog. Returns how many were added."""
    existing = {name for (name,) in db.query(Ingredient.name).all()}
    added = [
        Ingredient(name=name, code=code, category=category, is_available=True)
        for name, code, category in DEMO_INGREDIENTS
        if name not in existing
    ]
    db.add_all(added)
    return len(added)


def seed_users(db: Session) -> int:
    """Add demo users missing from the directory. Returns how many were added."""
    existing = {email for (email,) in db.query(User.email).all()}
    added = [
        User(name=name, email=email, is_admin=is_admin)
        for name, email, is_admin in DEMO_USERS
        if email not in existing
    ]
    db.add_all(added)
    return len(added)


def seed_demo(db: Session) -> dict:
    """Seed both tables in one transaction."""
    try:
        counts = {"ingredients": seed_ingredients(db), "users": seed_users(db)}
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Seeded %d ingredients and %d users", counts["ingredients"], counts["users"])
    return counts


def main() -> None:
    setup_logging()
    init_db()
    with session_scope() as db:
        seed_demo(db)


if __name__ == "__main__":
    main()
