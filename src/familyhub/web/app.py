"""FastAPI application for the familyhub web interface."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from ..config import settings
from ..db.engine import init_db
from ..db.store import TableStore
from ..logging_config import get_logger
from ..storage import LocalObjectStorage
from .routers import activities, admin, auth, catalog, forum, profile, wallet

logger = get_logger(__name__)

# Template path
TEMPLATES_DIR = Path(__file__).parent / "templates"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    # Startup: create the schema
    await init_db(app.state.store.db_path)
    logger.info(f"Database ready at {app.state.store.db_path}")
    yield


def create_app(db_path: Path | None = None, uploads_dir: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="familyhub",
        description="Family activities marketplace",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.store = TableStore(db_path)
    app.state.storage = LocalObjectStorage(root=uploads_dir)
    app.state.storage.root.mkdir(parents=True, exist_ok=True)

    # Uploaded avatars and activity images
    app.mount(
        settings.PUBLIC_STORAGE_URL,
        StaticFiles(directory=app.state.storage.root),
        name="uploads",
    )

    # Store templates in app state for use in routers
    app.state.templates = Jinja2Templates(directory=TEMPLATES_DIR)

    # /activities/new must be matched before /activities/{activity_id}
    app.include_router(activities.router)
    app.include_router(catalog.router)
    app.include_router(auth.router)
    app.include_router(profile.router)
    app.include_router(wallet.router)
    app.include_router(forum.router)
    app.include_router(admin.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": "0.1.0"}

    return app
