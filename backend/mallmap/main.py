import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from .config import Settings, get_settings
from .errors import install_exception_handlers
from .routers import admin, auth, mall, map, upload

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    # Route dependencies resolve the same settings object the app was built with.
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)
    install_exception_handlers(app, settings)

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")
    if Path(settings.public_dir).is_dir():
        app.mount("/public", StaticFiles(directory=settings.public_dir), name="public")

    @app.get("/api/health")
    def health_check():
        return {"success": True, "data": {"status": "ok", "env": settings.node_env}}

    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(admin.router, prefix=settings.api_prefix)
    app.include_router(mall.router, prefix=settings.api_prefix)
    app.include_router(map.router, prefix=settings.api_prefix)
    app.include_router(upload.router, prefix=settings.api_prefix)

    logger.info(f"{settings.app_name} configured for {settings.node_env} at {settings.host}")
    return app


app = create_app()
