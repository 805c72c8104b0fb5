"""
todo_api.db.errors

Translation of SQLAlchemy exceptions into the domain taxonomy.

Responsibilities:
- Constraint violations (unique email, missing owner) -> `Conflict`.
- Every other driver/ORM failure -> `StorageFailure`.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from todo_api.errors import Conflict, StorageFailure


@contextmanager
def storage_errors(entity: str) -> Iterator[None]:
    try:
        yield
    except IntegrityError as e:
        raise Conflict(f"{entity} conflicts with existing data") from e
    except SQLAlchemyError as e:
        raise StorageFailure(f"{entity} storage operation failed") from e
