"""FastAPI MCP Server for the Fireflies.ai GraphQL API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, settings
from .logging_setup import setup_logging
from .mcp import (
    TOOL_CATEGORIES,
    TOOL_DEFINITIONS,
    DeliveryChannel,
    MessageDispatcher,
    SessionRegistry,
    StreamLifecycleManager,
    ToolInvoker,
)
from .mcp_transport import router as mcp_router
from .middleware import RequestContextMiddleware
from .models import HealthResponse
from .services import FirefliesClient

logger = logging.getLogger(__name__)

# ============ SENTRY INITIALIZATION ============


def _filter_sentry_event(event: dict) -> dict:
    """Remove credentials from Sentry events."""
    if "request" in event and "headers" in event["request"]:
        headers = event["request"]["headers"]
        for key in ["authorization", "Authorization"]:
            if key in headers:
                headers[key] = "[REDACTED]"
    return event


def init_sentry(config: Settings) -> bool:
    """Initialize Sentry error tracking if a DSN is configured."""
    if not config.sentry_dsn:
        logger.debug("Sentry DSN not configured - error tracking disabled")
        return False

    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.starlette import StarletteIntegration

    sentry_sdk.init(
        dsn=config.sentry_dsn,
        environment=config.environment,
        traces_sample_rate=0.1 if config.environment == "production" else 1.0,
        integrations=[
            FastApiIntegration(),
            StarletteIntegration(),
        ],
        before_send=lambda event, hint: _filter_sentry_event(event),
    )
    logger.info("Sentry error tracking initialized")
    return True


# ============ APPLICATION FACTORY ============


def create_app(config: Settings | None = None, tool_invoker: ToolInvoker | None = None) -> FastAPI:
    """Build the application and its transport components.

    Args:
        config: Settings to use (defaults to the environment-derived settings)
        tool_invoker: Tool collaborator; a FirefliesClient is created at
            startup when omitted

    Returns:
        Configured FastAPI application
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        dispatcher: MessageDispatcher = app.state.dispatcher
        client = None
        if dispatcher.tool_invoker is None:
            client = FirefliesClient(
                api_key=config.fireflies_api_key,
                endpoint=config.fireflies_graphql_endpoint,
                timeout=config.upstream_timeout_seconds,
            )
            dispatcher.tool_invoker = client

        logger.info(
            f"Starting Fireflies.ai MCP Server v{__version__} - {len(TOOL_DEFINITIONS)} tools"
        )
        logger.info(f"  Upstream: {config.fireflies_graphql_endpoint}")
        if not config.fireflies_api_key:
            logger.warning("  FIREFLIES_API_KEY is not set - tool calls will be rejected upstream")

        if not config.debug and config.cors_allowed_origins == "*":
            logger.warning(
                "CORS is configured to allow all origins ('*'). "
                "Set CORS_ALLOWED_ORIGINS to specific domains in production."
            )

        yield
        # Shutdown
        closed = app.state.stream_manager.close_all()
        logger.info(f"Shutting down, closed {closed} open sessions")
        if client is not None:
            dispatcher.tool_invoker = None
            await client.aclose()

    app = FastAPI(
        title="Fireflies.ai MCP Server",
        description="MCP over Server-Sent Events for the Fireflies.ai GraphQL API",
        version=__version__,
        lifespan=lifespan,
    )

    # Transport components, shared by all connections of this app
    registry = SessionRegistry()
    app.state.settings = config
    app.state.registry = registry
    app.state.stream_manager = StreamLifecycleManager(
        registry, keepalive_interval=config.keepalive_interval_seconds
    )
    app.state.dispatcher = MessageDispatcher(tool_invoker, DeliveryChannel(registry))

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(mcp_router)
    _register_exception_handlers(app)
    _register_info_routes(app)
    return app


# ============ EXCEPTION HANDLERS ============


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render transport-level rejections as ``{"error": detail}``."""
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with a sanitized error message."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "An internal server error occurred."},
        )


# ============ HEALTH / INFO ENDPOINTS ============


def _register_info_routes(app: FastAPI) -> None:
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request) -> HealthResponse:
        """Liveness check with the number of open sessions."""
        return HealthResponse(
            status="ok",
            sessions=len(request.app.state.registry),
            version=__version__,
            tools=len(TOOL_DEFINITIONS),
        )

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint with server info and the tool catalog."""
        return {
            "name": "Fireflies.ai MCP Server",
            "version": __version__,
            "description": f"Complete Fireflies.ai API - {len(TOOL_DEFINITIONS)} tools",
            "endpoints": {"sse": "/sse", "messages": "/messages", "health": "/health"},
            "toolCount": len(TOOL_DEFINITIONS),
            "categories": TOOL_CATEGORIES,
            "tools": [
                {"name": t["name"], "description": t["description"]} for t in TOOL_DEFINITIONS
            ],
        }


setup_logging(settings.log_level)
init_sentry(settings)
app = create_app()


# ============ MAIN ============


def main():
    """Run the server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "fireflies_mcp.server:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        # Open event streams never finish on their own; cancel them after the grace period
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
    )


if __name__ == "__main__":
    main()
