"""tsgraph API application.

FastAPI application serving graph queries.
"""

from fastapi import FastAPI

from .router import router

app = FastAPI(
    title="tsgraph API",
    description="Cached, downsampled OpenTSDB series for graph dashboards",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/docs/redoc",
)

app.include_router(router)
