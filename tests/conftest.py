"""
Pytest configuration and shared fixtures
"""
import sqlite3
import tempfile
from pathlib import Path

import pytest

from sqlite_erd.core.extractor import build_layout
from sqlite_erd.executors.fixture import FixtureExecutor
from sqlite_erd.models.catalog import Query, ResultSet

TABLE_INFO_COLUMNS = ['cid', 'name', 'type', 'notnull', 'dflt_value', 'pk']
FOREIGN_KEY_COLUMNS = ['id', 'seq', 'table', 'from', 'to', 'on_update', 'on_delete', 'match']
INDEX_LIST_COLUMNS = ['seq', 'name', 'unique', 'origin', 'partial']
INDEX_INFO_COLUMNS = ['seqno', 'cid', 'name']


def table_info(*rows) -> ResultSet:
    """Build a PRAGMA table_info result from (name, type, notnull, default, pk) tuples"""
    return ResultSet(
        columns=TABLE_INFO_COLUMNS,
        rows=[[cid, *row] for cid, row in enumerate(rows)]
    )


def foreign_key_list(*rows) -> ResultSet:
    """Build a PRAGMA foreign_key_list result from (id, seq, table, from, to, on_update, on_delete) tuples"""
    return ResultSet(columns=FOREIGN_KEY_COLUMNS, rows=[[*row, 'NONE'] for row in rows])


def index_list(*rows) -> ResultSet:
    """Build a PRAGMA index_list result from (name, unique, origin) tuples"""
    return ResultSet(
        columns=INDEX_LIST_COLUMNS,
        rows=[[seq, name, unique, origin, 0] for seq, (name, unique, origin) in enumerate(rows)]
    )


def index_info(*names) -> ResultSet:
    return ResultSet(
        columns=INDEX_INFO_COLUMNS,
        rows=[[seqno, seqno, name] for seqno, name in enumerate(names)]
    )


def list_tables(*names) -> ResultSet:
    return ResultSet(columns=['name'], rows=[[name] for name in names])


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def users_posts_executor():
    """users(id PK, email UNIQUE) and posts(id PK, author_id -> users.id)"""
    executor = FixtureExecutor()
    executor.record(Query.list_tables(), list_tables('users', 'posts'))
    executor.record(Query.table_info('users'), table_info(
        ('id', 'INTEGER', 1, None, 1),
        ('email', 'TEXT', 0, None, 0),
    ))
    executor.record(Query.index_list('users'), index_list(
        ('sqlite_autoindex_users_1', 1, 'u'),
    ))
    executor.record(Query.index_info('sqlite_autoindex_users_1'), index_info('email'))
    executor.record(Query.table_info('posts'), table_info(
        ('id', 'INTEGER', 1, None, 1),
        ('author_id', 'INTEGER', 1, None, 0),
    ))
    executor.record(Query.foreign_key_list('posts'), foreign_key_list(
        (0, 0, 'users', 'author_id', 'id', 'NO ACTION', 'NO ACTION'),
    ))
    return executor


@pytest.fixture
def users_posts_layout(users_posts_executor):
    return build_layout(users_posts_executor)


@pytest.fixture
def composite_executor():
    """parent(a, b, c) with UNIQUE(a, b); child(x, y) referencing parent(a, b)"""
    executor = FixtureExecutor()
    executor.record(Query.list_tables(), list_tables('parent', 'child'))
    executor.record(Query.table_info('parent'), table_info(
        ('a', 'INTEGER', 1, None, 0),
        ('b', 'INTEGER', 1, None, 0),
        ('c', 'TEXT', 0, None, 0),
    ))
    executor.record(Query.index_list('parent'), index_list(
        ('sqlite_autoindex_parent_1', 1, 'u'),
    ))
    executor.record(Query.index_info('sqlite_autoindex_parent_1'), index_info('a', 'b'))
    executor.record(Query.table_info('child'), table_info(
        ('x', 'INTEGER', 0, None, 0),
        ('y', 'INTEGER', 0, None, 0),
    ))
    executor.record(Query.foreign_key_list('child'), foreign_key_list(
        (0, 0, 'parent', 'x', 'a', 'CASCADE', 'SET NULL'),
        (0, 1, 'parent', 'y', 'b', 'CASCADE', 'SET NULL'),
    ))
    return executor


@pytest.fixture
def composite_layout(composite_executor):
    return build_layout(composite_executor)


SHOP_SCHEMA = """
CREATE TABLE customers (
    id INTEGER PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    "prénom" TEXT DEFAULT 'anon'
);
CREATE TABLE profiles (
    customer_id INTEGER PRIMARY KEY REFERENCES customers(id) ON DELETE CASCADE,
    bio TEXT
);
CREATE TABLE orders (
    id INTEGER PRIMARY KEY,
    customer_id INTEGER NOT NULL REFERENCES customers(id) ON DELETE CASCADE,
    total REAL DEFAULT 0
);
CREATE TABLE products (
    sku TEXT NOT NULL,
    variant INTEGER NOT NULL,
    name TEXT,
    PRIMARY KEY (sku, variant)
);
CREATE TABLE order_lines (
    order_id INTEGER NOT NULL REFERENCES orders(id),
    sku TEXT NOT NULL,
    variant INTEGER NOT NULL,
    quantity INTEGER DEFAULT 1,
    FOREIGN KEY (sku, variant) REFERENCES products(sku, variant) ON UPDATE CASCADE
);
CREATE INDEX order_lines_product ON order_lines (sku, variant);
CREATE TABLE audit (
    id INTEGER PRIMARY KEY,
    ref INTEGER REFERENCES missing_table(id)
);
"""


@pytest.fixture
def shop_db(temp_dir):
    """SQLite database file with a small shop schema"""
    db_file = temp_dir / "shop.db"
    connection = sqlite3.connect(str(db_file))
    try:
        connection.executescript(SHOP_SCHEMA)
        connection.commit()
    finally:
        connection.close()
    return db_file
