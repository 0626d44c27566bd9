from __future__ import annotations

import sqlite3

from fastapi import APIRouter

from ..config import APP_NAME, APP_VERSION
from ..db import get_conn

router = APIRouter()


@router.get("/health")
def health():
    """进程存活即 ok；db 字段反映目录库能否打开并读取 products 表。"""
    try:
        with get_conn() as conn:
            conn.execute("SELECT 1 FROM products LIMIT 1").fetchall()
        db = "ok"
    except sqlite3.Error:
        db = "unavailable"
    return {"status": "ok", "db": db}


@router.get("/version")
def version():
    return {"app": APP_NAME, "version": APP_VERSION}
