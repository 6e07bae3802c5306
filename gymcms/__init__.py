"""
GymCMS Backend — Application Package
======================================

Content management backend for a gym marketing website.

    ┌─────────────────────────────────────┐
    │  routes/      functions/            │  ← two boundary adapters
    ├─────────────────────────────────────┤
    │  services/    (repositories, auth,  │  ← business rules, visibility,
    │               journal, storage)     │    journaling
    ├─────────────────────────────────────┤
    │  models/      schemas/              │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  database.py                        │  ← explicit store handle
    └─────────────────────────────────────┘

The router (gymcms.main) and the per-route function handlers
(gymcms.functions) call the same services, so validation and visibility
rules exist exactly once.
"""

__version__ = "1.0.0"
