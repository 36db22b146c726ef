"""FastAPI application for the POS Service."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from libs.common.logging import configure_logging, get_logger
from services.pos_service.errors import PosError
from services.pos_service.routers import inventory_router, orders_router, tax_router

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the POS Service FastAPI app."""
    configure_logging()

    app = FastAPI(
        title="EazyQue POS Service",
        version="0.1.0",
        description="Point-of-sale service for EazyQue - GST pricing, orders, inventory.",
    )

    @app.exception_handler(PosError)
    async def pos_error_handler(request: Request, exc: PosError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Invalid request",
                "code": "validation_error",
                "errors": jsonable_errors(exc),
            },
        )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "pos"}

    app.include_router(orders_router, prefix="/pos")
    app.include_router(inventory_router, prefix="/pos")
    app.include_router(tax_router, prefix="/pos")

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


app = create_app()
