import pytest

from database import InventoryDB
from errors import DatabaseConnectionError
from models import RESERVED_CATEGORY_NAMES, Category
from schema import initialize_schema, open_connection


@pytest.fixture
def conn():
    connection = open_connection(":memory:")
    yield connection
    connection.close()


def test_seeds_system_categories_once(conn):
    assert initialize_schema(conn) is True
    assert initialize_schema(conn) is False
    rows = conn.execute("SELECT name, is_system FROM categories ORDER BY id").fetchall()
    assert [row["name"] for row in rows] == list(RESERVED_CATEGORY_NAMES)
    assert all(row["is_system"] == 1 for row in rows)


def test_reinitializing_keeps_edits_to_system_rows(conn):
    initialize_schema(conn)
    conn.execute("UPDATE categories SET default_unit = 'kΩ' WHERE name = 'Resistor'")
    conn.commit()

    initialize_schema(conn)

    unit = conn.execute("SELECT default_unit FROM categories WHERE name = 'Resistor'").fetchone()[0]
    assert unit == "kΩ"


def test_creates_inventory_indexes(conn):
    initialize_schema(conn)
    names = {row["name"] for row in conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'index' AND tbl_name = 'inventory'")}
    assert {"idx_name", "idx_type", "idx_quantity"} <= names


def test_open_connection_failure(tmp_path):
    # a directory cannot be opened as a database file
    with pytest.raises(DatabaseConnectionError):
        open_connection(str(tmp_path))


def test_data_survives_reopen(tmp_path):
    path = str(tmp_path / "inventory.db")
    with InventoryDB(path) as db:
        db.add_category(Category(name="Crystal", is_passive=True, default_unit="Hz"))

    with InventoryDB(path) as db:
        names = [c.name for c in db.list_categories()]
    assert names == list(RESERVED_CATEGORY_NAMES) + ["Crystal"]
