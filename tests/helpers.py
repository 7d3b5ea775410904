"""
Shared constants and helpers for the test suite.
"""
from datetime import date, datetime

# A Monday; every scenario serves on this day unless it says otherwise
SERVICE_DAY = date(2026, 3, 2)

CATALOG = [
    # name, code, category, is_available
    ("Ciabatta", "CIA", "bread", True),
    ("Focaccia", "FOC", "bread", True),
    ("Prosciutto Crudo", "PRC", "meat", True),
    ("Salame", "SAL", "meat", True),
    ("Mozzarella", "MOZ", "cheese", True),
    ("Lettuce", "LET", "vegetable", True),
    ("Pesto", "PES", "sauce", True),
    ("Truffle Mayo", "TRM", "sauce", False),
]


class FrozenClock:
    """Callable clock whose time tests move by assigning ``now``."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now
