"""Infrastructure Layer: database engine, SQL repositories and logging setup.

Invariants:
    - Repositories implement the Protocols in core/repository_protocols.py
    - Storage exceptions never escape a repository; they become DatabaseError results

Design Decisions:
    - Dialect-specific SQL isolated in period_sql.py
"""
