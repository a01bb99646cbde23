"""Services Layer: use-case workflows for cats, toilet events and statistics.

Invariants:
    - Workflows receive repositories as arguments (no concrete imports)
    - Every workflow returns a ResultAsync; expected failures are never raised

Design Decisions:
    - One module per resource, plain functions over service classes
"""
