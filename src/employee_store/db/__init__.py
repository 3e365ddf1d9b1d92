"""
employee_store.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, transaction demarcation and repositories.
"""

# Package marker.
