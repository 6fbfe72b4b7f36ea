"""
ServiceDesk Plus Tool Bridge - FastAPI entry point
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from sdp_bridge import __version__
from sdp_bridge.config import Settings, get_settings
from sdp_bridge.middleware.logging_middleware import LoggingMiddleware
from sdp_bridge.routes import health, tools
from sdp_bridge.services.sdp_client import SdpClient
from sdp_bridge.tools.bridge import ToolBridge
from sdp_bridge.utils.logger import get_logger, install_redaction

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, client: Optional[SdpClient] = None) -> FastAPI:
    """
    Build the application

    Args:
        settings: Explicit settings (read from the environment when omitted)
        client: Pre-built SdpClient, mainly for tests
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings or get_settings()
        install_redaction(resolved.sdp_api_key.get_secret_value())

        sdp = client or SdpClient(resolved)
        app.state.bridge = ToolBridge(sdp)

        logger.info(f"Connecting to ServiceDesk Plus at {sdp.web_base_url}")
        if await sdp.test_connection():
            logger.info("ServiceDesk Plus connection verified")
        else:
            logger.warning("Could not verify ServiceDesk Plus connection; tools may fail")

        try:
            yield
        finally:
            await sdp.aclose()

    app = FastAPI(
        title="ServiceDesk Plus Tool Bridge",
        description="Ticketing operations against ServiceDesk Plus, rendered as text for agents",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(LoggingMiddleware)
    app.include_router(health.router)
    app.include_router(tools.router)

    @app.get("/")
    async def root():
        return {"message": "ServiceDesk Plus Tool Bridge", "version": __version__}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
