import logging
import threading
from contextlib import contextmanager
from typing import Callable, List, Optional, Union

from category_store import CategoryStore
from component_store import ComponentStore
from config import AppConfig
from errors import DatabaseConnectionError, InventoryError
from events import ChangeNotifier, Event, Subscription
from models import Category, Component, validate_component
from sample_data import populate_sample_data
from schema import initialize_schema, open_connection

logger = logging.getLogger(__name__)


class InventoryDB:
    """
    SQLite-backed inventory of categorized electronic components.

    Owns the single connection and exposes category and component operations.
    Successful writes publish COMPONENTS_CHANGED / CATEGORIES_CHANGED through
    the notifier; any InventoryError is published as ERROR_OCCURRED and then
    re-raised. Every operation holds one re-entrant lock, so the object can
    be shared between threads.
    """

    def __init__(self, db_path: str = "inventory.db", notifier: ChangeNotifier = None,
                 timeout: float = 5.0):
        """
        Open the database and create tables if they don't exist.

        Args:
            db_path: Path to SQLite database file (':memory:' for a scratch one)
            notifier: Change notifier to publish to; a private one by default
            timeout: Seconds to wait on a locked database file
        """
        self.db_path = db_path
        self.notifier = notifier or ChangeNotifier()
        self._lock = threading.RLock()
        self.conn = open_connection(db_path, timeout)
        try:
            initialize_schema(self.conn)
        except InventoryError:
            self.conn.close()
            self.conn = None
            raise
        self.categories = CategoryStore(self.conn)
        self.components = ComponentStore(self.conn, self.categories)

    @property
    def is_connected(self) -> bool:
        return self.conn is not None

    @contextmanager
    def _operation(self):
        with self._lock:
            try:
                if self.conn is None:
                    raise DatabaseConnectionError("Database connection is not open.")
                yield
            except InventoryError as e:
                self.notifier.publish(Event.ERROR_OCCURRED, str(e))
                raise

    def subscribe(self, event: Event, callback: Callable) -> Subscription:
        return self.notifier.subscribe(event, callback)

    # ===== CATEGORY OPERATIONS =====
    def list_categories(self) -> List[Category]:
        with self._operation():
            return self.categories.list_all()

    def get_category(self, category_id: int) -> Optional[Category]:
        with self._operation():
            return self.categories.get_by_id(category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        with self._operation():
            return self.categories.get_by_name(name)

    def add_category(self, category: Category) -> int:
        """
        Add a user category.

        Returns:
            ID of the new category
        """
        with self._operation():
            category_id = self.categories.add(category)
            self.notifier.publish(Event.CATEGORIES_CHANGED)
            return category_id

    def update_category(self, category: Category) -> None:
        with self._operation():
            moved = self.categories.update(category)
            self.notifier.publish(Event.CATEGORIES_CHANGED)
            if moved:
                self.notifier.publish(Event.COMPONENTS_CHANGED)

    def delete_category(self, category_id: int) -> int:
        """
        Delete a user category; its components move to "Other".

        Returns:
            Number of components reassigned
        """
        with self._operation():
            moved = self.categories.delete(category_id)
            self.notifier.publish(Event.CATEGORIES_CHANGED)
            if moved:
                self.notifier.publish(Event.COMPONENTS_CHANGED)
            return moved

    def can_delete_category(self, category_id: int) -> bool:
        with self._operation():
            return self.categories.can_delete(category_id)

    def component_count_for_category(self, category: Union[str, int]) -> int:
        with self._operation():
            return self.categories.component_count(category)

    # ===== COMPONENT OPERATIONS =====
    def add_component(self, component: Component) -> int:
        """
        Validate and insert a component. The passed object is not modified.

        Returns:
            ID assigned to the component
        """
        with self._operation():
            validate_component(component, self.categories.get_by_name(component.category))
            component_id = self.components.add(component)
            self.notifier.publish(Event.COMPONENTS_CHANGED)
            return component_id

    def update_component(self, component: Component) -> None:
        with self._operation():
            validate_component(component, self.categories.get_by_name(component.category))
            self.components.update(component)
            self.notifier.publish(Event.COMPONENTS_CHANGED)

    def delete_component(self, component_id: int) -> None:
        with self._operation():
            self.components.delete(component_id)
            self.notifier.publish(Event.COMPONENTS_CHANGED)

    def get_component(self, component_id: int) -> Optional[Component]:
        with self._operation():
            return self.components.get_by_id(component_id)

    def list_components(self) -> List[Component]:
        with self._operation():
            return self.components.get_all()

    def list_by_category(self, category_name: str) -> List[Component]:
        with self._operation():
            return self.components.get_by_category(category_name)

    def list_low_stock(self, threshold: int) -> List[Component]:
        with self._operation():
            return self.components.get_low_stock(threshold)

    def search_by_name(self, term: str) -> List[Component]:
        with self._operation():
            return self.components.search_by_name(term)

    def populate_sample_data(self, enabled: bool) -> int:
        """Seed demonstration components if enabled and the inventory is empty."""
        with self._operation():
            inserted = populate_sample_data(self.components, enabled)
            if inserted:
                self.notifier.publish(Event.COMPONENTS_CHANGED)
            return inserted

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None

    def __enter__(self):
        """Support context manager protocol."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Ensure connection is closed when exiting context."""
        self.close()


def open_inventory(config: AppConfig, notifier: ChangeNotifier = None) -> InventoryDB:
    """Open the configured database and seed sample data if the feature is on."""
    db = InventoryDB(config.database.path, notifier, config.database.timeout)
    db.populate_sample_data(config.features.enable_sample_data)
    return db
