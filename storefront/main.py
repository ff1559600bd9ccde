"""
FastAPI Application - Storefront
"""

# Load environment variables from .env before anything reads configuration
from dotenv import load_dotenv
load_dotenv()

from storefront.validators.config_validator import validate_config
validate_config()

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.controllers import operational_controller
from storefront.core.config import config
from storefront.core.errors import ErrorResponse, error_response_handler, http_exception_handler
from storefront.core.logger import logger
from storefront.db.mongodb import close_mongo_connection
from storefront.middlewares import CorrelationIdMiddleware
from storefront.routers import cart_router, catalog_router, checkout_router, media_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(
        "Storefront started",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port,
        },
    )
    yield
    logger.info("Shutting down Storefront...")
    await close_mongo_connection()


app = FastAPI(
    title="Storefront",
    description="Catalog, selection cascade, cart and checkout for the store",
    version=config.service_version,
    lifespan=lifespan,
)

app.add_middleware(CorrelationIdMiddleware)

app.add_exception_handler(ErrorResponse, error_response_handler)
app.add_exception_handler(HTTPException, http_exception_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        "Request validation failed",
        metadata={"event": "validation_error", "errors": jsonable_encoder(exc.errors())},
    )
    return JSONResponse(
        status_code=422,
        content={"error": "Validation error", "details": jsonable_encoder(exc.errors())},
    )


app.include_router(catalog_router, prefix="/api/catalog", tags=["catalog"])
app.include_router(media_router, prefix="/api", tags=["media"])
app.include_router(cart_router, prefix="/api/cart", tags=["cart"])
app.include_router(checkout_router, prefix="/api/checkout", tags=["checkout"])

app.get("/health")(operational_controller.health)
app.get("/health/ready")(operational_controller.readiness)
app.get("/health/live")(operational_controller.liveness)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development",
    )
