from __future__ import annotations

# catalog/db.py
import sqlite3
from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator
import os

from .config import read_config, _PROJECT_ROOT

# DB 路径解析顺序：
# 1) 环境变量 CATALOG_DB_PATH（最高优先级）
# 2) config.yaml 的 test_db_path（当检测到测试环境时）
# 3) config.yaml 的 db_path（生产默认）
# 4) 兜底：项目根 catalog.db
_ROOT_DB = os.path.join(_PROJECT_ROOT, "catalog.db")

# 服务层只依赖这个形状：调用后得到一个产出连接的上下文管理器
ConnFactory = Callable[[], ContextManager[sqlite3.Connection]]


def get_db_path(config_file: str | None = None) -> str:
    env_path = os.environ.get("CATALOG_DB_PATH")
    cfg = read_config(config_file)
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and cfg["test_db_path"]:
        path = cfg["test_db_path"]
    elif cfg["db_path"]:
        path = cfg["db_path"]
    else:
        path = _ROOT_DB

    # 确保目录存在
    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


@contextmanager
def get_conn(db_path: str | None = None, readonly: bool = True) -> Iterator[sqlite3.Connection]:
    """
    每次调用打开一个新的 SQLite 连接，退出即关闭，不做连接复用。
    目录侧默认只读（PRAGMA query_only），建表/测试造数时传 readonly=False。
    自动提交模式，多条语句需要同一快照时用 snapshot()。
    """
    conn = sqlite3.connect(db_path or get_db_path(), isolation_level=None)
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        if readonly:
            conn.execute("PRAGMA query_only = ON;")
        yield conn
    finally:
        conn.close()


@contextmanager
def snapshot(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """在一个读事务内执行多条查询，保证看到同一份数据。"""
    conn.execute("BEGIN")
    try:
        yield conn
    finally:
        if conn.in_transaction:
            conn.execute("COMMIT")


def apply_schema(conn: sqlite3.Connection, schema_file: str | None = None):
    """执行 schema.sql（全部为 CREATE ... IF NOT EXISTS，可重复执行）。"""
    path = schema_file or os.path.join(_PROJECT_ROOT, "schema.sql")
    with open(path, "r", encoding="utf-8") as f:
        conn.executescript(f.read())
