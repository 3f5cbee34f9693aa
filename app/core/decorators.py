"""
Database error handling decorators
"""
import functools
import time
from typing import Callable

from pymongo.errors import (
    ConnectionFailure,
    DuplicateKeyError,
    OperationFailure,
    PyMongoError,
)

from app.core.errors import ConflictError, DatabaseError
from app.core.logging import logger


def handle_db_errors(func: Callable) -> Callable:
    """
    Decorator translating pymongo failures into API errors
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DuplicateKeyError as e:
            key = (e.details or {}).get("keyValue") or {}
            logger.info(f"Duplicate key in {func.__qualname__}: {key}")
            raise ConflictError(
                message="A record with the same unique value already exists",
                details={"key": key}
            )
        except ConnectionFailure as e:
            logger.error(f"Database connection error: {str(e)}")
            raise DatabaseError(
                message="Could not connect to database",
                details={"original_error": str(e)}
            )
        except OperationFailure as e:
            logger.error(f"Database operation error: {str(e)}")
            raise DatabaseError(
                message="Database operation failed",
                details={"original_error": str(e)}
            )
        except PyMongoError as e:
            logger.exception("Unexpected database error")
            raise DatabaseError(
                message="An unexpected database error occurred",
                details={"original_error": str(e)}
            )
    return wrapper


def retry_on_error(retries: int = 3, delay: float = 0.1,
                   exceptions: tuple = (ConnectionFailure,)) -> Callable:
    """
    Decorator to retry database operations on transient failures
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            last_error = None
            for attempt in range(retries):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_error = e
                    if attempt < retries - 1:
                        logger.warning(
                            f"Retrying operation after error: {str(e)}",
                            extra={"attempt": attempt + 1}
                        )
                        time.sleep(delay * (attempt + 1))

            logger.error(
                f"Operation failed after {retries} retries",
                extra={"last_error": str(last_error)}
            )
            raise last_error
        return wrapper
    return decorator
