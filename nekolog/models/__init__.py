"""ORM Models: SQLAlchemy declarative models for cats and toilet events.

Invariants:
    - All models inherit from Base (db/base.py)
    - Cat is the aggregate root; toilet events are scoped through cat_id

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata is complete before create_all
      or Alembic autogenerate runs
"""

from nekolog.models.cat import CatModel  # noqa: F401
from nekolog.models.toilet_event import ToiletEventModel  # noqa: F401
