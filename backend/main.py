"""
Editor Backend - FastAPI Application Entry Point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from routers import config, files, modify
from routers.deps import install_services
from services.config_manager import ConfigManager
from services.errors import EditorBackendError, RepositoryOpenError
from services.git_repository import RepositoryHandle

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


async def handle_backend_error(request: Request, exc: EditorBackendError) -> JSONResponse:
    """Report a failed operation on its own request; the server keeps running"""
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def create_app(config_manager: ConfigManager | None = None, rewriter=None) -> FastAPI:
    """Build the application.

    Services are constructed at startup from ``config_manager`` (the
    process-wide instance by default). ``rewriter`` replaces the LLM-backed
    code rewriter.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager - startup and shutdown logic"""
        manager = config_manager or ConfigManager.get_instance()
        settings = manager.get_config()
        logger.info("Starting Editor Backend (config: %s)", manager.config_file)

        app.state.config_manager = manager
        install_services(app.state, settings, rewriter)
        logger.info("Repository root: %s, provider: %s", app.state.repository_root, settings.get("provider"))

        try:
            RepositoryHandle.open(app.state.repository_root).close()
        except RepositoryOpenError as e:
            logger.warning("Repository is not usable yet: %s", e)

        yield
        logger.info("Shutting down Editor Backend...")

    app = FastAPI(
        title="Editor Backend",
        description="Git-aware file access and AI code modification for editor clients",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware for the editor client, which runs locally
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(EditorBackendError, handle_backend_error)

    app.include_router(files.router, prefix="/api/files", tags=["files"])
    app.include_router(modify.router, prefix="/api/modify", tags=["modify"])
    app.include_router(config.router, prefix="/api/config", tags=["config"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "editor-backend"}

    return app


app = create_app()


def run():
    """Console entry point: serve ``app`` with uvicorn"""
    import uvicorn

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    server = ConfigManager.get_instance().get("server", {})
    uvicorn.run(app, host=server.get("host", "127.0.0.1"), port=server.get("port", 8080))


if __name__ == "__main__":
    run()
