"""
todo_api.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories for accounts and tasks.
"""

# Package marker.
