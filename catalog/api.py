"""
FastAPI app entry point for the read-only catalog API.
Keep as `uvicorn catalog.api:app`.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI

from .config import APP_NAME, APP_VERSION, read_config


logging.getLogger("catalog").setLevel(read_config()["log_level"])

app = FastAPI(title=APP_NAME, version=APP_VERSION)


from .routes import base as base_routes
from .routes import products as products_routes

app.include_router(base_routes.router)
app.include_router(products_routes.router)
