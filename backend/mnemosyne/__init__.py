"""
Mnemosyne Backend — Application Package Initializer
====================================================

What: Marks the `mnemosyne` directory as a Python package.
Why:  Enables module imports like `from mnemosyne.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The quote-sharing backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP, auth dependencies, envelope
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← quotes, likes, collections, follows, feed
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the ORM directly; services never see a Request object.
"""

__version__ = "1.0.0"
