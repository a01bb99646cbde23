"""Core Layer: Result type, domain errors, records, bucket keys and repository contracts.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO: everything here is a value, a pure function, or a Protocol

Design Decisions:
    - Functional core separated from the storage and HTTP shell
"""
