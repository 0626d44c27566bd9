from __future__ import annotations

# catalog/services/catalog_svc.py
import math
import logging
import sqlite3
from contextlib import contextmanager
from typing import Any, Iterator, Optional, TypedDict

from ..db import ConnFactory, get_conn, snapshot
from ..errors import DataAccessError
from ..logs import QueryLogContext
from ..repository import product_repo

logger = logging.getLogger(__name__)


class Product(TypedDict, total=False):
    name: str
    price: float
    img: str
    sku: int
    paypal: str
    sizes: list[str]


def _to_product(row) -> Product:
    return Product(**dict(row))


class CatalogService:
    """
    目录只读查询服务。每个操作独立获取一个连接，执行固定 SQL，映射为 Product 字典后返回。
    驱动层异常统一转为 DataAccessError；查无此 sku 返回 None，不视为错误。
    """

    RECENT_LIMIT = 4

    def __init__(self, conn_factory: ConnFactory = get_conn):
        self._conn_factory = conn_factory

    @contextmanager
    def _reading(self, log: QueryLogContext) -> Iterator[sqlite3.Connection]:
        try:
            with self._conn_factory() as conn:
                yield conn
        except sqlite3.Error as e:
            log.write("ERROR", str(e))
            raise DataAccessError(log.action, str(e)) from e

    def list_recent(self) -> list[Product]:
        """最新的 4 个商品，按 sku 升序（最新的在最后）。"""
        log = QueryLogContext("LIST_RECENT", {"limit": self.RECENT_LIMIT})
        with self._reading(log) as conn:
            rows = product_repo.list_latest_desc(conn, self.RECENT_LIMIT)
        recent = [_to_product(r) for r in reversed(rows)]
        log.set_rows(len(recent))
        log.write()
        return recent

    def search(self, term: str) -> list[Product]:
        log = QueryLogContext("SEARCH", {"term": term})
        with self._reading(log) as conn:
            rows = product_repo.search_by_name(conn, term)
        matches = [_to_product(r) for r in rows]
        log.set_rows(len(matches))
        log.write()
        return matches

    def count(self) -> int:
        log = QueryLogContext("COUNT")
        with self._reading(log) as conn:
            total = product_repo.count_all(conn)
        log.write()
        return total

    def subset(self, start: int, end: int) -> list[Product]:
        """
        按目录位置取一段商品，start/end 为 1 起始的闭区间。
        start < 1 或 end < start 直接抛 ValueError；超出表尾只返回实际存在的部分。
        """
        start, end = int(start), int(end)
        if start < 1 or end < start:
            raise ValueError("invalid_window")
        offset = start - 1
        rows_wanted = min(end - start + 1, product_repo.SQLITE_INT_MAX)

        log = QueryLogContext("SUBSET", {"start": start, "end": end})
        if not product_repo.fits_sqlite_int(offset):
            # 起点超出 SQLite 整数范围，必然在表尾之后
            log.set_rows(0)
            log.write()
            return []
        with self._reading(log) as conn:
            rows = product_repo.list_window(conn, offset, rows_wanted)
        items = [_to_product(r) for r in rows]
        log.set_rows(len(items))
        log.write()
        return items

    def list_all(self) -> list[Product]:
        log = QueryLogContext("LIST_ALL")
        with self._reading(log) as conn:
            rows = product_repo.list_all(conn)
        products = [_to_product(r) for r in rows]
        log.set_rows(len(products))
        log.write()
        return products

    def get_by_sku(self, sku: int) -> Optional[Product]:
        """商品及其尺码（按 sizes.order 排序）；不存在时返回 None。"""
        sku = int(sku)
        log = QueryLogContext("GET_BY_SKU", {"sku": sku})
        if not product_repo.fits_sqlite_int(sku):
            log.set_rows(0)
            log.write()
            return None
        with self._reading(log) as conn, snapshot(conn):
            row = product_repo.get_one(conn, sku)
            if row is None:
                product = None
            else:
                product = _to_product(row)
                product["sizes"] = product_repo.list_sizes(conn, sku)
        log.set_rows(0 if product is None else 1)
        log.write()
        return product

    # ===== 分页（列表页在 count + subset 之上的窗口计算） =====
    def page(self, page: int, page_size: int) -> dict[str, Any]:
        page_size = int(page_size)
        if page_size < 1:
            raise ValueError("invalid_page_size")

        total = self.count()
        total_pages = max(1, math.ceil(total / page_size))
        requested = int(page)
        page = min(max(requested, 1), total_pages)
        if page != requested:
            logger.debug("page %s clamped to %s (total_pages=%s)", requested, page, total_pages)

        items: list[Product] = []
        if total:
            start = (page - 1) * page_size + 1
            end = min(page * page_size, total)
            items = self.subset(start, end)
        return {
            "page": page,
            "page_size": page_size,
            "total": total,
            "total_pages": total_pages,
            "items": items,
        }
