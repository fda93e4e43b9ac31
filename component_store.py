import logging
import sqlite3
from functools import lru_cache
from typing import Callable, List, Optional

from category_store import CategoryStore
from errors import NotFoundError, sqlite_errors
from models import VARIANTS, Category, Component, ComponentKind

logger = logging.getLogger(__name__)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ComponentStore:
    """
    CRUD and queries over the inventory table.

    Rows are flat: (name, manufacturer, type, quantity, param_1, param_2,
    extra_data). The variant a row hydrates into is decided by the flags of
    the category named in its type column.
    """

    def __init__(self, conn: sqlite3.Connection, categories: CategoryStore):
        self.conn = conn
        self.categories = categories

    def _hydrate(self, row: sqlite3.Row, resolve: Callable[[str], Optional[Category]]) -> Component:
        """
        Build a component from a row and the metadata of its category.

        Passive wins over active when both flags are set. A category with
        neither flag, or a missing category, falls back to passive so every
        row yields a component.
        """
        category = resolve(row["type"])
        kind = category.kind if category else None
        if kind is None:
            if category is None:
                logger.warning("Component %s has unknown category %r, reading it as passive",
                               row["id"], row["type"])
            else:
                logger.debug("Category %r has no passive/active flag, reading component %s as passive",
                             row["type"], row["id"])
            kind = ComponentKind.PASSIVE

        params = VARIANTS[kind].from_columns(row["param_1"], row["param_2"], row["extra_data"])
        return Component(
            id=row["id"],
            name=row["name"],
            manufacturer=row["manufacturer"] or "",
            quantity=row["quantity"] or 0,
            category=row["type"],
            params=params,
        )

    def _fetch(self, query: str, params=()) -> List[Component]:
        with sqlite_errors("fetch components"):
            rows = self.conn.execute(query, params).fetchall()
        # Category lookups are shared within one call only
        resolve = lru_cache(maxsize=None)(self.categories.get_by_name)
        return [self._hydrate(row, resolve) for row in rows]

    def _row_values(self, component: Component) -> tuple:
        category = self.categories.get_by_name(component.category)
        expected = (category.kind if category else None) or ComponentKind.PASSIVE
        if component.kind != expected:
            logger.warning("Component %r is stored with %s parameters but will read back as %s",
                           component.name, component.kind.value, expected.value)
        return (component.name, component.manufacturer, component.category,
                component.quantity, *component.params.to_columns())

    def add(self, component: Component) -> int:
        """
        Insert a component.

        Returns:
            ID assigned to the new row
        """
        values = self._row_values(component)
        with sqlite_errors("add component"):
            cursor = self.conn.execute(
                """INSERT INTO inventory (
                    name, manufacturer, type, quantity, param_1, param_2, extra_data
                ) VALUES (?, ?, ?, ?, ?, ?, ?)""",
                values
            )
            self.conn.commit()
        return cursor.lastrowid

    def update(self, component: Component) -> None:
        """
        Replace every field of an existing component.

        Raises:
            NotFoundError: No row with the component's id
        """
        values = self._row_values(component)
        with sqlite_errors("update component"):
            cursor = self.conn.execute(
                """UPDATE inventory SET
                    name = ?, manufacturer = ?, type = ?, quantity = ?,
                    param_1 = ?, param_2 = ?, extra_data = ?
                WHERE id = ?""",
                (*values, component.id)
            )
            self.conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError(f"Component {component.id} not found.")

    def delete(self, component_id: int) -> None:
        with sqlite_errors("delete component"):
            cursor = self.conn.execute("DELETE FROM inventory WHERE id = ?", (component_id,))
            self.conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError(f"Component {component_id} not found.")

    def get_by_id(self, component_id: int) -> Optional[Component]:
        components = self._fetch("SELECT * FROM inventory WHERE id = ?", (component_id,))
        return components[0] if components else None

    def get_all(self) -> List[Component]:
        return self._fetch("SELECT * FROM inventory ORDER BY name")

    def get_by_category(self, category_name: str) -> List[Component]:
        return self._fetch("SELECT * FROM inventory WHERE type = ? ORDER BY name", (category_name,))

    def get_low_stock(self, threshold: int) -> List[Component]:
        """Components with quantity below the threshold, lowest stock first."""
        return self._fetch(
            "SELECT * FROM inventory WHERE quantity < ? ORDER BY quantity ASC, name",
            (threshold,)
        )

    def search_by_name(self, term: str) -> List[Component]:
        """Case-insensitive substring match on the component name."""
        return self._fetch(
            "SELECT * FROM inventory WHERE name LIKE ? ESCAPE '\\' ORDER BY name",
            (f"%{_escape_like(term)}%",)
        )

    def count(self) -> int:
        with sqlite_errors("count components"):
            return self.conn.execute("SELECT COUNT(*) FROM inventory").fetchone()[0]
