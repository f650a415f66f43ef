import logging
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from wheelapi.config import settings
from wheelapi.core.exception_handlers import (
    handle_base_api_exception,
    handle_http_exception,
    handle_unexpected_error,
    handle_validation_error,
)
from wheelapi.core.exceptions import BaseAPIException
from wheelapi.logging_config import setup_logging
from wheelapi.routers import (
    account_router,
    admin_router,
    health_router,
    ticket_router,
    wheel_router,
)

load_dotenv("wheelapi/.env")
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"Request: {request.method} {request.url}")
        response = await call_next(request)
        logger.info(f"Response: {response.status_code}")
        return response

    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health_router.router)
    app.include_router(wheel_router.router, prefix=settings.API_V1_STR)
    app.include_router(account_router.router, prefix=settings.API_V1_STR)
    app.include_router(ticket_router.router, prefix=settings.API_V1_STR)
    app.include_router(admin_router.router, prefix=settings.API_V1_STR)

    return app


app = create_app()

handler = Mangum(app)
