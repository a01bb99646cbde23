"""API Layer: FastAPI routes, request dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured camelCase JSON
    - Every workflow failure is rendered by error_handlers.domain_error_response

Design Decisions:
    - Thin routes delegate to services/ workflows
"""
