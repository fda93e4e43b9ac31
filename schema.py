import logging
import sqlite3

from errors import DatabaseConnectionError, sqlite_errors
from models import SYSTEM_CATEGORIES

logger = logging.getLogger(__name__)


def open_connection(db_path: str, timeout: float = 5.0) -> sqlite3.Connection:
    """
    Open the SQLite database file with named-column rows.

    Raises:
        DatabaseConnectionError: If the file cannot be opened
    """
    try:
        conn = sqlite3.connect(db_path, timeout=timeout, check_same_thread=False)
    except sqlite3.Error as e:
        raise DatabaseConnectionError(f"Failed to open database {db_path}: {e}") from e
    conn.row_factory = sqlite3.Row
    logger.debug("Database opened: %s", db_path)
    return conn


def initialize_schema(conn: sqlite3.Connection) -> bool:
    """
    Create tables and indexes if missing and seed the system categories.

    System categories are inserted only when the categories table is empty,
    so edits made to them later are never overwritten.

    Returns:
        True if the system categories were seeded by this call
    """
    with sqlite_errors("create tables"):
        conn.execute("""
        CREATE TABLE IF NOT EXISTS categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            is_passive INTEGER DEFAULT 0,
            is_active INTEGER DEFAULT 0,
            default_unit TEXT,
            is_system INTEGER DEFAULT 0
        )
        """)

        conn.execute("""
        CREATE TABLE IF NOT EXISTS inventory (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            manufacturer TEXT,
            type TEXT NOT NULL,
            quantity INTEGER DEFAULT 0,
            param_1 REAL,
            param_2 TEXT,
            extra_data TEXT
        )
        """)

        conn.execute("CREATE INDEX IF NOT EXISTS idx_name ON inventory(name)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_type ON inventory(type)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_quantity ON inventory(quantity)")
        conn.commit()

        seeded = False
        if conn.execute("SELECT COUNT(*) FROM categories").fetchone()[0] == 0:
            conn.executemany(
                """INSERT INTO categories (name, is_passive, is_active, default_unit, is_system)
                VALUES (?, ?, ?, ?, 1)""",
                [(c.name, int(c.is_passive), int(c.is_active), c.default_unit)
                 for c in SYSTEM_CATEGORIES]
            )
            conn.commit()
            seeded = True
            logger.info("Seeded %d system categories", len(SYSTEM_CATEGORIES))

    logger.debug("Database tables created/verified")
    return seeded
