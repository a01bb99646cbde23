"""Domain Types: identifiers and closed vocabularies used across the codebase.

Invariants:
    - OwnerId is opaque: issued by the identity provider, never parsed
    - CatId and EventId are server-generated UUID strings, immutable after creation
    - EventType has exactly two members; Granularity exactly three

Design Decisions:
    - NewType over wrapper classes: zero runtime cost, type-checker support
    - str Enums: serialize to JSON and compare equal to their stored column values
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

OwnerId = NewType("OwnerId", str)
CatId = NewType("CatId", str)
EventId = NewType("EventId", str)


# ─── Enums ───────────────────────────────────────────────────────

class EventType(str, Enum):
    """Litter-box event subtype."""
    URINE = "urine"
    FECES = "feces"


class Granularity(str, Enum):
    """Chart bucket size."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Period(str, Enum):
    """Public period vocabulary accepted by the chart query."""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
