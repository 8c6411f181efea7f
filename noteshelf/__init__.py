"""
Noteshelf — Owner-scoped note-taking API
==========================================

Layered architecture:

    ┌─────────────────────────────────────┐
    │        Routes (API Layer)           │  ← HTTP concerns, session check
    ├─────────────────────────────────────┤
    │   NoteRepository (Business Logic)   │  ← validation, ownership, queries
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │       Database (Persistence)        │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
