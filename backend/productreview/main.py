"""FastAPI application for the product catalog and review service.

Mounts the product/review routers, JSON request logging, CORS, and the error
handlers that turn CatalogError subclasses into JSON responses.
"""
import logging
import os
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import product_models, review_models  # noqa: F401  (register tables on Base)
from .database import Base, engine
from .exceptions import CatalogError
from .logging_config import RequestLoggingMiddleware, setup_logging
from .product_routes import router as product_router
from .review_routes import router as review_router

setup_logging(os.getenv('LOG_LEVEL', 'INFO'))
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Product Review API",
    description="Product catalog with reviews and aggregated rating statistics",
    version="0.1.0",
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    if exc.status_code >= 500:
        logger.error(
            exc.message,
            extra={"path": str(request.url.path), "error_type": type(exc).__name__, "details": exc.details},
        )
    else:
        logger.info(
            exc.message,
            extra={"path": str(request.url.path), "error_type": type(exc).__name__},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": type(exc).__name__, "message": exc.message, "details": jsonable_encoder(exc.details)},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies and query params are client errors like any other ValidationError
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "message": "Invalid request",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


app.include_router(product_router)
app.include_router(review_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "productreview.main:app",
        host=os.getenv('HOST', '0.0.0.0'),
        port=int(os.getenv('PORT', '8000')),
    )
