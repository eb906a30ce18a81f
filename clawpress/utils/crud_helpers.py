"""
Generic CRUD helpers shared by the host stores.

Each write commits on its own so every create, update or delete is atomic.
SQLAlchemy failures are rolled back and surfaced as HostStorageError, except
unique-constraint violations which surface as a DUPLICATE RepositoryError so
callers can report them as a named condition. Other integrity failures, such
as a foreign key pointing at a missing user, stay HostStorageError.
"""

from typing import Any, Dict, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import HostStorageError, duplicate
from ..utils.logger import get_logger

T = TypeVar("T")

# SQLSTATE class 23 subcode for unique_violation; SQLite has no SQLSTATE
UNIQUE_VIOLATION = "23505"


def _apply_filters(query, model_class, filters: Optional[Dict[str, Any]]):
    if filters:
        for key, value in filters.items():
            if hasattr(model_class, key) and value is not None:
                query = query.filter(getattr(model_class, key) == value)
    return query


def is_unique_violation(error: IntegrityError) -> bool:
    """Whether an IntegrityError came from a unique or primary key constraint."""
    if getattr(error.orig, "sqlstate", None) == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(error.orig)


def create_record(session: Session, model_class: Type[T], data: Dict[str, Any]) -> T:
    """
    Generic create operation for any model.

    Args:
        session: Database session
        model_class: SQLAlchemy model class
        data: Column values

    Returns:
        Created record instance

    Raises:
        RepositoryError: DUPLICATE when a unique constraint rejects the row
        HostStorageError: If creation fails for any other reason
    """
    logger = get_logger()

    try:
        record = model_class(**data)
        session.add(record)
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if is_unique_violation(e):
            raise duplicate(model_class.__name__, cause=e)
        raise HostStorageError(
            f"Failed to create {model_class.__name__}: {str(e.orig)}",
            cause=e,
            model=model_class.__name__,
        )
    except SQLAlchemyError as e:
        session.rollback()
        raise HostStorageError(
            f"Failed to create {model_class.__name__}: {str(e)}",
            cause=e,
            model=model_class.__name__,
        )

    logger.debug(
        f"Created {model_class.__name__}",
        extra={"model": model_class.__name__, "record_id": getattr(record, "id", None)},
    )
    return record


def get_record(
    session: Session, model_class: Type[T], filters: Dict[str, Any]
) -> Optional[T]:
    """
    Generic get operation for any model.

    Returns:
        First matching record or None
    """
    try:
        return _apply_filters(session.query(model_class), model_class, filters).first()
    except SQLAlchemyError as e:
        raise HostStorageError(
            f"Failed to read {model_class.__name__}: {str(e)}",
            cause=e,
            model=model_class.__name__,
        )


def list_records(
    session: Session,
    model_class: Type[T],
    filters: Optional[Dict[str, Any]] = None,
    order_by: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[T]:
    """
    Generic list operation for any model.

    Args:
        session: Database session
        model_class: SQLAlchemy model class
        filters: Optional equality filters
        order_by: Optional column to order by, ascending
        limit: Optional limit

    Returns:
        List of record instances
    """
    query = _apply_filters(session.query(model_class), model_class, filters)

    if order_by and hasattr(model_class, order_by):
        query = query.order_by(getattr(model_class, order_by))

    if limit:
        query = query.limit(limit)

    try:
        return query.all()
    except SQLAlchemyError as e:
        raise HostStorageError(
            f"Failed to list {model_class.__name__}: {str(e)}",
            cause=e,
            model=model_class.__name__,
        )


def update_record(session: Session, record: T, data: Dict[str, Any]) -> T:
    """
    Assign column values on a loaded record and commit them together.

    On failure the session is rolled back, so the record keeps its stored values.

    Raises:
        HostStorageError: If the update fails
    """
    model_name = type(record).__name__
    try:
        for key, value in data.items():
            setattr(record, key, value)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise HostStorageError(f"Failed to update {model_name}: {str(e)}", cause=e, model=model_name)

    get_logger().debug(f"Updated {model_name}", extra={"model": model_name, "fields": list(data)})
    return record


def delete_record(session: Session, record: Any) -> None:
    """
    Delete a loaded record.

    Raises:
        HostStorageError: If delete fails
    """
    model_name = type(record).__name__
    try:
        session.delete(record)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise HostStorageError(f"Failed to delete {model_name}: {str(e)}", cause=e, model=model_name)

    get_logger().debug(f"Deleted {model_name}", extra={"model": model_name})


def delete_where(session: Session, model_class: Type[T], *criteria) -> int:
    """
    Bulk delete every row matching the given SQLAlchemy criteria.

    Returns:
        Number of rows removed
    """
    try:
        deleted = (
            session.query(model_class).filter(*criteria).delete(synchronize_session=False)
        )
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise HostStorageError(
            f"Failed to bulk delete {model_class.__name__}: {str(e)}",
            cause=e,
            model=model_class.__name__,
        )

    get_logger().debug(
        f"Bulk deleted {model_class.__name__}",
        extra={"model": model_class.__name__, "deleted": deleted},
    )
    return deleted
