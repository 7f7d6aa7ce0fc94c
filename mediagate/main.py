import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mediagate.api.v1.generate import CORS_HEADERS
from mediagate.api.v1.router import api_v1_router
from mediagate.core.config import settings, validate_settings_for_production
from mediagate.core.credentials import CredentialResolver, EnvCredentialResolver
from mediagate.core.logging import setup_logging
from mediagate.core.metrics import PrometheusMiddleware, metrics_response
from mediagate.core.sentry import init_sentry
from mediagate.gateway.gateway import GenerationGateway
from mediagate.gateway.media_store import MediaStore
from mediagate.gateway.registry import build_registries

# Configure logging before anything else
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_settings_for_production()
    init_sentry()
    status = app.state.gateway.provider_status()
    logger.info(
        "Starting media gateway (%s)",
        ", ".join(f"{kind}: {len(providers)} providers" for kind, providers in status.items()),
    )
    yield
    logger.info("Media gateway shut down")


def create_app(
    credentials: CredentialResolver | None = None,
    media_store: MediaStore | None = None,
) -> FastAPI:
    """Build the gateway app.

    Registries are built once here and never mutated. Tests pass a fake
    ``credentials`` resolver instead of touching the environment.
    """
    store = media_store or MediaStore(
        base_url=settings.public_base_url,
        ttl_seconds=settings.media_ttl_seconds,
        max_items=settings.media_max_items,
    )

    app = FastAPI(
        title="Media Gateway",
        description="Provider-agnostic text, image, voice and video generation gateway",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/api/docs" if settings.app_debug else None,
        redoc_url="/api/redoc" if settings.app_debug else None,
    )
    app.state.media_store = store
    app.state.gateway = GenerationGateway(
        build_registries(settings, store),
        credentials or EnvCredentialResolver(),
    )

    # Log unhandled exceptions; the body keeps the gateway's {"error": ...} contract
    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
        logger.error("Unhandled %s on %s %s:\n%s", type(exc).__name__, request.method, request.url.path, "".join(tb))
        return JSONResponse(status_code=500, content={"error": f"{type(exc).__name__}: {exc}"}, headers=CORS_HEADERS)

    app.add_middleware(PrometheusMiddleware)

    app.include_router(api_v1_router)

    @app.get("/api/v1/health")
    async def health():
        return JSONResponse(content={"status": "ok"}, headers=CORS_HEADERS)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        return metrics_response()

    return app


app = create_app()
