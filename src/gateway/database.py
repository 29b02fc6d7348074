# manages connection to db, provides helper methods internal to gateway package
import asyncio
import hashlib
import os
from contextlib import asynccontextmanager
from pathlib import Path
from sqlite3 import Row
from typing import Dict, Optional, Tuple

import aiosqlite

from utils.logger import get_logger

_logger = get_logger(__name__)

SQL_DIR = Path(__file__).parent / "sql"
DB_INIT_SCRIPTS = [
    SQL_DIR / "tables.sql",
    SQL_DIR / "dummy-data.sql",
]

# login credentials for the seeded profiles in dummy-data.sql
SEED_CREDENTIALS: Dict[str, Tuple[str, str]] = {
    "00000000-0000-4000-8000-000000000001": ("admin@example.com", "admin123"),
    "00000000-0000-4000-8000-000000000002": ("alice@example.com", "alice123"),
    "00000000-0000-4000-8000-000000000003": ("bob@example.com", "bob123"),
}

_initialized: set = set()
_init_lock = asyncio.Lock()


def hash_password(password: str, salt: Optional[str] = None) -> Tuple[str, str]:
    """Return (hash, salt) using salted PBKDF2-SHA256."""
    if not salt:
        salt = os.urandom(16).hex()
    hashed = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), bytes.fromhex(salt), 100_000
    ).hex()
    return hashed, salt


async def _init_db(conn: aiosqlite.Connection, seed: bool) -> None:
    for script in DB_INIT_SCRIPTS:
        if not seed and script.name != "tables.sql":
            continue
        if not os.path.exists(script) or os.path.getsize(script) == 0:
            continue
        _logger.info(f"Initializing database with script {script.name}...")
        with open(script, "r") as f:
            await conn.executescript(f.read())

    if seed:
        for uid, (email, pwd) in SEED_CREDENTIALS.items():
            pwd_hash, salt = hash_password(pwd)
            await conn.execute(
                "INSERT INTO auth_users(id, email, password_hash, password_salt) VALUES (?, ?, ?, ?);",
                (uid, email, pwd_hash, salt),
            )
    await conn.commit()


async def _table_exists(conn: aiosqlite.Connection, table_name: str) -> bool:
    cur = await conn.execute(
        """
        SELECT name
        FROM sqlite_master
        WHERE type = 'table'
          AND name = ?;
        """,
        (table_name,),
    )
    row = await cur.fetchone()
    await cur.close()
    return row is not None


@asynccontextmanager
async def connect(db_path: str, seed: bool = True) -> aiosqlite.Connection:
    """Async context manager yielding an aiosqlite connection with FK enabled.

    Ensures the database at ``db_path`` is initialized (tables and, when
    ``seed`` is set, demo data) on first use.
    """
    parent = os.path.dirname(db_path)
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = Row
    await conn.execute("PRAGMA foreign_keys = ON;")

    if db_path not in _initialized:
        async with _init_lock:
            if db_path not in _initialized:
                exists = await _table_exists(conn, "profiles")
                if not exists:
                    _logger.info("Initializing database...")
                    await _init_db(conn, seed)
                _initialized.add(db_path)
    try:
        yield conn
    finally:
        await conn.close()
