import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "catalog_test.db"
    # Point catalog to this temp DB
    os.environ["CATALOG_DB_PATH"] = str(path)
    # Initialize schema
    schema = Path(_PROJECT_ROOT / "schema.sql").read_text(encoding="utf-8")
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(schema)
        conn.commit()
    finally:
        conn.close()
    return str(path)


@pytest.fixture()
def client(tmp_db_path):
    from catalog.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Clean tables before each test for isolation
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("CATALOG_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    tables = ["products_sizes", "sizes", "products"]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    yield


def _insert(skus, name_fmt="Shirt {sku}"):
    from catalog.db import get_conn
    with get_conn(readonly=False) as conn:
        for sku in skus:
            conn.execute(
                "INSERT INTO products(sku, name, price, img, paypal) VALUES(?,?,?,?,?)",
                (sku, name_fmt.format(sku=sku), 18.0 + sku, f"img/shirts/shirt-{sku}.jpg", f"PP{sku:04d}"),
            )


@pytest.fixture()
def insert_products(tmp_db_path):
    """按给定顺序插入商品（插入顺序不一定等于 sku 顺序）。"""
    return _insert


@pytest.fixture()
def ten_products(tmp_db_path):
    # 故意乱序插入
    _insert([5, 2, 9, 1, 10, 3, 7, 4, 8, 6])
    return list(range(1, 11))
