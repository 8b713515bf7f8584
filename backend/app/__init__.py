"""
Grievance Portal Backend — Application Package
===============================================

What: Marks the `app` directory as a Python package.
Who:  Imported by uvicorn, Alembic, pytest and the CLI.

Layering:

    ┌─────────────────────────────────────┐
    │   Routes (API + share page)         │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Auth adapter (session tokens)     │  ← who is calling
    ├─────────────────────────────────────┤
    │   Services (ownership, validation)  │  ← person / message rules
    ├─────────────────────────────────────┤
    │   Models & Schemas                  │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (async sessions)         │
    └─────────────────────────────────────┘

The `dashboard` subpackage is the owner-facing client: a reducer-style store
plus a controller that drives the API over HTTP.
"""

__version__ = "1.0.0"
