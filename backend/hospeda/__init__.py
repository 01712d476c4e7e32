"""
Hospeda Backend — Application Package Initializer
==================================================

What: Marks the `hospeda` directory as a Python package.
Why:  Enables module imports like `from hospeda.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is a permission-checked CRUD core for the tourism platform:

    ┌─────────────────────────────────────┐
    │        Routes (Transport Layer)     │  ← envelope, status mapping, actor extraction
    ├─────────────────────────────────────┤
    │   Services (validate → authorize)   │  ← BaseCrudService + per-entity hooks
    ├─────────────────────────────────────┤
    │  Schemas · Permissions · Repository │  ← Pydantic, can_perform, BaseRepository
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Every service call returns a ServiceOutput holding either data or an error,
    and the transport layer is the only place where that result becomes HTTP.
"""

__version__ = "1.0.0"
