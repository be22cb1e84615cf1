"""Domain models and types for the balance dump.

This package contains in-memory (Pydantic) models describing accounts read
from a state snapshot and their ranked form. They are independent from
persistence models so that ranking and formatting can be tested without a
state database.
"""

__all__ = [
    "accounts",
]
