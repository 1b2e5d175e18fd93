import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from chain_indexer.api.api import router as api_router
from chain_indexer.api.endpoints.events import json_response
from chain_indexer.errors import IndexerException, StorageUnavailable, ValidationError

logger = logging.getLogger(__name__)

# Paths match exactly; a trailing slash is an unknown path, not a redirect
app = FastAPI(title="Chain Event Indexer API", version="1.0.0", redirect_slashes=False)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown methods on known paths are reported like unknown paths
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return json_response(None, status.HTTP_404_NOT_FOUND)
    return json_response(None, exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return json_response(None, status.HTTP_400_BAD_REQUEST)


@app.exception_handler(IndexerException)
async def indexer_exception_handler(request: Request, exc: IndexerException):
    if isinstance(exc, ValidationError):
        logger.info("Rejected %s: %s", request.url.path, exc.message)
        return json_response(None, status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, StorageUnavailable):
        logger.error("Storage failure on %s: %s", request.url.path, exc.to_dict())
    else:
        logger.error("Unexpected indexer failure on %s", request.url.path, exc_info=exc)
    return json_response(None, status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled failure on %s", request.url.path, exc_info=exc)
    return json_response(None, status.HTTP_500_INTERNAL_SERVER_ERROR)


# Health check route
@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(api_router)
