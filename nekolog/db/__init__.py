"""Database Package: declarative Base and timestamp defaults.

Invariants:
    - Runtime engine lives in infrastructure/database.py; this package holds
      only schema-level building blocks
"""
