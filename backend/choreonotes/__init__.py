"""
ChoreoNotes Backend — Application Package Initializer
======================================================

What: Marks the `choreonotes` directory as a Python package.
Who:  Imported by uvicorn (`choreonotes.main:app`), Alembic and pytest.

Architecture Note:
    The backend follows the same layered shape throughout:

    ┌─────────────────────────────────────┐
    │     Routes + Dependencies (HTTP)    │  ← auth header, status codes
    ├─────────────────────────────────────┤
    │   Access Control (ownership check)  │  ← NotFound vs Forbidden
    ├─────────────────────────────────────┤
    │  Services (credentials, catalogs,   │  ← business rules
    │  routine composition)               │
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database handle (AsyncSession)    │  ← owned by create_app()
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
