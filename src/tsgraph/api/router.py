"""tsgraph API router.

Exposes graph queries over HTTP using FastAPI APIRouter.
"""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException

from tsgraph.datasource import OpenTSDBDatasource
from tsgraph.exceptions import ConfigurationError, ValidationError
from tsgraph.models import QueryError, QueryRequest, QueryResult

from .models import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def get_datasource() -> OpenTSDBDatasource:
    """Create a datasource for one request.

    Raises:
        HTTPException: 503 if no OpenTSDB host is configured
    """
    try:
        return OpenTSDBDatasource()
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=str(e)) from None


@router.get("/api/v1/health", response_model=HealthResponse, tags=["System"])
async def health_check() -> HealthResponse:
    """Health check endpoint

    Returns:
        HealthResponse: Always returns {"status": "ok"}
    """
    return HealthResponse()


@router.post("/api/v1/query", response_model=QueryResult | QueryError, tags=["Query"])
def query(
    request: QueryRequest,
    datasource: OpenTSDBDatasource = Depends(get_datasource),
    x_remote_user: str | None = Header(None),
) -> QueryResult | QueryError:
    """Run a graph query.

    OpenTSDB failures come back as a QueryError body with status 200 so the
    graph can show the message instead of breaking.

    Args:
        request: Graph query
        datasource: Datasource for the configured OpenTSDB host
        x_remote_user: Requesting user, used to separate cached results

    Raises:
        HTTPException: 400 if the query is invalid
    """
    try:
        return datasource.get_raw_data(request, identity=x_remote_user or "")
    except ValidationError as e:
        logger.info(f"Rejected query: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from None
