from __future__ import annotations

from sqlite3 import Connection, Row
from typing import Optional

PRODUCT_COLUMNS = "name, price, img, sku, paypal"

# SQLite INTEGER 为 64 位有符号整数，超出范围的值无法绑定
SQLITE_INT_MIN = -(2 ** 63)
SQLITE_INT_MAX = 2 ** 63 - 1


def fits_sqlite_int(n: int) -> bool:
    return SQLITE_INT_MIN <= n <= SQLITE_INT_MAX


def escape_like(term: str) -> str:
    """转义 LIKE 通配符，使搜索词按字面子串匹配。"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def list_latest_desc(conn: Connection, limit: int) -> list[Row]:
    sql = f"SELECT {PRODUCT_COLUMNS} FROM products ORDER BY sku DESC LIMIT ?"
    return conn.execute(sql, (int(limit),)).fetchall()


def search_by_name(conn: Connection, term: str) -> list[Row]:
    sql = (
        f"SELECT {PRODUCT_COLUMNS} FROM products "
        "WHERE name LIKE ? ESCAPE '\\' "
        "ORDER BY sku"
    )
    return conn.execute(sql, (f"%{escape_like(term)}%",)).fetchall()


def count_all(conn: Connection) -> int:
    row = conn.execute("SELECT COUNT(sku) AS cnt FROM products").fetchone()
    return int(row["cnt"]) if row else 0


def list_window(conn: Connection, offset: int, limit: int) -> list[Row]:
    sql = f"SELECT {PRODUCT_COLUMNS} FROM products ORDER BY sku LIMIT ? OFFSET ?"
    return conn.execute(sql, (int(limit), int(offset))).fetchall()


def list_all(conn: Connection) -> list[Row]:
    return conn.execute(f"SELECT {PRODUCT_COLUMNS} FROM products ORDER BY sku ASC").fetchall()


def get_one(conn: Connection, sku: int) -> Optional[Row]:
    sql = f"SELECT {PRODUCT_COLUMNS} FROM products WHERE sku = ?"
    return conn.execute(sql, (int(sku),)).fetchone()


def list_sizes(conn: Connection, sku: int) -> list[str]:
    sql = (
        "SELECT s.size FROM products_sizes ps "
        "INNER JOIN sizes s ON ps.size_id = s.id "
        "WHERE ps.product_sku = ? "
        'ORDER BY s."order", s.id'
    )
    return [r["size"] for r in conn.execute(sql, (int(sku),)).fetchall()]


def sizes_map_for(conn: Connection, skus: list[int]) -> dict[int, list[str]]:
    skus = list(skus)
    if not skus:
        return {}
    q = (
        "SELECT ps.product_sku AS sku, s.size FROM products_sizes ps "
        "INNER JOIN sizes s ON ps.size_id = s.id "
        "WHERE ps.product_sku IN ({}) "
        'ORDER BY ps.product_sku, s."order", s.id'
    ).format(",".join(["?"] * len(skus)))
    out: dict[int, list[str]] = {}
    for r in conn.execute(q, [int(s) for s in skus]).fetchall():
        out.setdefault(r["sku"], []).append(r["size"])
    return out
