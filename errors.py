import sqlite3
from contextlib import contextmanager


class InventoryError(Exception):
    """Base class for every failure raised by the inventory core."""


class DatabaseConnectionError(InventoryError):
    """The database could not be opened or used."""


class ConstraintError(InventoryError):
    """A write would break a uniqueness or not-null rule."""


class NotFoundError(InventoryError):
    """An update or delete referenced an id that does not exist."""


class ValidationError(InventoryError, ValueError):
    """Input rejected before anything was written."""


class ProtectedEntityError(InventoryError):
    """Attempt to delete or rename a system category."""


@contextmanager
def sqlite_errors(action: str):
    """
    Translate sqlite3 exceptions raised inside the block.

    Args:
        action: Short description used as the message prefix

    Raises:
        ConstraintError: For integrity violations
        DatabaseConnectionError: For every other sqlite3 error
    """
    try:
        yield
    except sqlite3.IntegrityError as e:
        raise ConstraintError(f"Failed to {action}: {e}") from e
    except sqlite3.Error as e:
        raise DatabaseConnectionError(f"Failed to {action}: {e}") from e
