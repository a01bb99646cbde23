"""Pydantic Schemas: inbound command validation and outbound response shapes.

Invariants:
    - Commands validate at system boundary (request bodies and query strings)
    - Domain enums from core/ used for enum fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
