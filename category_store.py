import logging
import sqlite3
from typing import List, Optional, Union

from errors import (ConstraintError, NotFoundError, ProtectedEntityError,
                    ValidationError, sqlite_errors)
from models import FALLBACK_CATEGORY, Category, is_reserved_name, validate_category

logger = logging.getLogger(__name__)


def _row_to_category(row: sqlite3.Row) -> Category:
    return Category(
        id=row["id"],
        name=row["name"],
        is_passive=bool(row["is_passive"]),
        is_active=bool(row["is_active"]),
        default_unit=row["default_unit"] or "",
        is_system=bool(row["is_system"]),
    )


class CategoryStore:
    """
    CRUD over the categories table.

    System categories can be edited (flags, default unit) but never renamed
    or deleted. Deleting a user category moves its components to "Other".
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def list_all(self) -> List[Category]:
        with sqlite_errors("fetch categories"):
            rows = self.conn.execute("SELECT * FROM categories ORDER BY id").fetchall()
        return [_row_to_category(row) for row in rows]

    def get_by_id(self, category_id: int) -> Optional[Category]:
        with sqlite_errors("fetch category"):
            row = self.conn.execute(
                "SELECT * FROM categories WHERE id = ?", (category_id,)
            ).fetchone()
        return _row_to_category(row) if row else None

    def get_by_name(self, name: str) -> Optional[Category]:
        """Exact, case-sensitive lookup."""
        with sqlite_errors("fetch category"):
            row = self.conn.execute(
                "SELECT * FROM categories WHERE name = ?", (name,)
            ).fetchone()
        return _row_to_category(row) if row else None

    def find_name_conflict(self, name: str, exclude_id: int = None) -> Optional[int]:
        """Return the id of another category whose name matches ignoring case."""
        with sqlite_errors("check category name"):
            row = self.conn.execute(
                "SELECT id FROM categories WHERE name = ? COLLATE NOCASE AND id IS NOT ?",
                (name, exclude_id)
            ).fetchone()
        return row["id"] if row else None

    def add(self, category: Category) -> int:
        """
        Insert a user category.

        Args:
            category: Category to insert; id and is_system are ignored/forced

        Returns:
            ID of the new category

        Raises:
            ValidationError: Empty or reserved name, or is_system requested
            ConstraintError: A category with that name already exists
        """
        validate_category(category)
        name = category.name.strip()
        if category.is_system:
            raise ValidationError("System categories cannot be created.")
        if is_reserved_name(name):
            raise ValidationError(f"'{name}' is a reserved category name.")
        if self.find_name_conflict(name) is not None:
            raise ConstraintError(f"Category '{name}' already exists.")

        with sqlite_errors("add category"):
            cursor = self.conn.execute(
                """INSERT INTO categories (name, is_passive, is_active, default_unit, is_system)
                VALUES (?, ?, ?, ?, 0)""",
                (name, int(category.is_passive), int(category.is_active), category.default_unit)
            )
            self.conn.commit()
        return cursor.lastrowid

    def update(self, category: Category) -> int:
        """
        Update name, flags and default unit of an existing category.

        A rename carries the components of the category along with it.

        Returns:
            Number of components whose category name was rewritten

        Raises:
            NotFoundError: Unknown id
            ValidationError: Empty name or is_system changed
            ProtectedEntityError: Rename of a system category
            ConstraintError: Name taken by another category
        """
        validate_category(category)
        stored = self.get_by_id(category.id)
        if stored is None:
            raise NotFoundError(f"Category {category.id} not found.")
        if bool(category.is_system) != stored.is_system:
            raise ValidationError("The system flag of a category cannot be changed.")

        name = category.name.strip()
        renamed = name != stored.name
        if renamed and stored.is_system:
            raise ProtectedEntityError(f"System category '{stored.name}' cannot be renamed.")
        if renamed and self.find_name_conflict(name, exclude_id=stored.id) is not None:
            raise ConstraintError(f"Category '{name}' already exists.")

        try:
            with sqlite_errors("update category"):
                self.conn.execute(
                    """UPDATE categories
                    SET name = ?, is_passive = ?, is_active = ?, default_unit = ?
                    WHERE id = ?""",
                    (name, int(category.is_passive), int(category.is_active),
                     category.default_unit, stored.id)
                )
                moved = 0
                if renamed:
                    moved = self.conn.execute(
                        "UPDATE inventory SET type = ? WHERE type = ?", (name, stored.name)
                    ).rowcount
                self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return moved

    def delete(self, category_id: int) -> int:
        """
        Delete a user category, moving its components to the fallback category.

        The reassignment and the delete commit together or not at all.

        Returns:
            Number of components moved to "Other"

        Raises:
            NotFoundError: Unknown id
            ProtectedEntityError: The category is a system category
        """
        category = self.get_by_id(category_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found.")
        if category.is_system:
            raise ProtectedEntityError("Cannot delete system categories.")

        try:
            with sqlite_errors("delete category"):
                moved = self.conn.execute(
                    "UPDATE inventory SET type = ? WHERE type = ?",
                    (FALLBACK_CATEGORY, category.name)
                ).rowcount
                self.conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
                self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

        if moved:
            logger.debug("Moved %d components from %s to %s", moved, category.name, FALLBACK_CATEGORY)
        return moved

    def can_delete(self, category_id: int) -> bool:
        category = self.get_by_id(category_id)
        return category is not None and not category.is_system

    def component_count(self, category: Union[str, int]) -> int:
        """Count components tagged with a category, given its name or id."""
        if isinstance(category, int):
            found = self.get_by_id(category)
            if found is None:
                return 0
            category = found.name
        with sqlite_errors("count components"):
            return self.conn.execute(
                "SELECT COUNT(*) FROM inventory WHERE type = ?", (category,)
            ).fetchone()[0]
