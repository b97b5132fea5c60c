import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

LOG_LEVEL_STR = os.getenv("LOG_LEVEL")
if not LOG_LEVEL_STR:
    raise ValueError("LOG_LEVEL is required")

LOG_LEVEL = getattr(logging, LOG_LEVEL_STR.upper(), None)
if not isinstance(LOG_LEVEL, int):
    raise ValueError(f"Invalid LOG_LEVEL: {LOG_LEVEL_STR}")

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)

from asset_proxy.api.downloads import router as downloads_router
from asset_proxy.api.frontend import router as frontend_router
from asset_proxy.api.search import router as search_router
from asset_proxy.core.config import Settings, build_download_counter, mask_secret
from asset_proxy.core.exceptions import ConfigurationError
from asset_proxy.services.providers.factory import create_provider

logger = logging.getLogger(__name__)


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error(f"Search rejected, provider not configured: {exc.message}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "data": [],
            "pagination": {},
            "error": "Asset provider is not configured",
            "message": exc.message,
        },
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if not request.url.path.startswith("/api/"):
        return await request_validation_exception_handler(request, exc)

    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'request'}: {error['msg']}"
        for error in exc.errors()
    )
    logger.info(f"Rejected {request.url.path}: {problems}")
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "data": [],
            "pagination": {},
            "error": "Invalid search parameters",
            "message": problems,
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    app.state.asset_provider.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Asset Proxy API",
        description="Icon, 3D, illustration and animation search proxied to a design-asset marketplace",
        version="1.0.0",
        lifespan=lifespan,
    )

    provider = create_provider(settings.asset_provider)
    logger.info(
        f"{provider.name} API key ({provider.ENV_KEY}): "
        f"{mask_secret(provider.api_key or '')}"
    )

    app.state.settings = settings
    app.state.asset_provider = provider
    app.state.download_counter = build_download_counter(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(search_router)
    app.include_router(downloads_router)
    app.include_router(frontend_router)

    return app


app = create_app()


if __name__ == "__main__":
    port = int(os.getenv("PORT", "3000"))
    logger.info(f"Asset proxy running on http://localhost:{port}")
    uvicorn.run(app, host="0.0.0.0", port=port, log_level=LOG_LEVEL)
