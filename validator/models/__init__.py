"""ORM Models - SQLAlchemy declarative models owned by the validator.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every row scoped by validator_hotkey

Design Decisions:
    - Models imported here so Base.metadata knows every table before create_all runs
"""

from validator.models.rental import Rental  # noqa: F401
