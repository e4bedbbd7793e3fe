from __future__ import annotations
import uuid
from contextlib import asynccontextmanager
import httpx
import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from modgate.config import Settings, settings as default_settings
from modgate.db import build_engine
from modgate.errors import GatewayError
from modgate.logging_setup import configure_logging
from modgate.routes.photos import router as photos_router
from modgate.routes.submissions import router as submissions_router
from modgate.routes.system import router as system_router
from modgate.security import StaticBearerAuthenticator
from modgate.services.gateway import ModerationGateway
from modgate.services.photos import PhotoResolver
from modgate.services.publisher import BroadcastPublisher
from modgate.services.store import SubmissionStore
from modgate.services.telegram import TelegramClient, build_http_client

configure_logging(default_settings.log_level)
log = structlog.get_logger()


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("request_failed", path=request.url.path, error=exc.code, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.code, "detail": exc.detail})


def create_app(settings: Settings | None = None, *, http_client: httpx.AsyncClient | None = None) -> FastAPI:
    settings = settings or default_settings
    # fail fast: a half-configured gateway would accept submissions it cannot publish
    settings.ensure_complete()

    engine = build_engine(settings)
    http = http_client or build_http_client(settings.telegram_api_base, settings.telegram_timeout_seconds)
    telegram = TelegramClient(settings.telegram_bot_token, http)
    store = SubmissionStore(engine)
    gateway = ModerationGateway(
        store=store,
        resolver=PhotoResolver(telegram),
        publisher=BroadcastPublisher(telegram, settings.channel_chat_id, settings.caption_template),
        authenticator=StaticBearerAuthenticator(settings.web_api_key),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        log.info("startup", env=settings.environment, version=settings.app_version, git_sha=settings.git_sha)
        if settings.auto_create_schema:
            await store.create_schema()
        yield
        # Shutdown
        await http.aclose()
        await engine.dispose()
        log.info("shutdown")

    app = FastAPI(
        title="Moderation Gateway API",
        version=settings.app_version,
        lifespan=lifespan,
        description="Review queue for bot-submitted listings, with a Telegram photo proxy",
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.environment == "dev" else settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(GatewayError, gateway_error_handler)

    app.include_router(system_router)
    app.include_router(submissions_router, prefix=settings.api_prefix)
    app.include_router(photos_router, prefix=settings.api_prefix)

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = rid
        structlog.contextvars.bind_contextvars(request_id=rid)
        try:
            response: Response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()
        response.headers["X-Request-ID"] = rid
        return response

    return app


def run() -> None:
    import uvicorn

    uvicorn.run(create_app(), host=default_settings.api_host, port=default_settings.api_port)


if __name__ == "__main__":
    run()
