"""
todo_api.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for accounts and tasks.
- Report absence as `None`/`False`; raise `Conflict`/`StorageFailure` for failures.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories never decide access; services authorize before and after fetching.
