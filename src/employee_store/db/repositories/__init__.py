"""
employee_store.db.repositories

Repository package.

Responsibilities:
- Group session-bound data-access repositories for the persistence layer.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories never begin or end transactions; the gateway layer owns that.
