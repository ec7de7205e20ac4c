"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from taskflow.config import settings
from taskflow.database import Database
from taskflow.error_handlers import register_error_handlers
from taskflow.routers import auth, groups, tasks

# Import all models so Base.metadata knows about them
from taskflow.models.user import User               # noqa: F401
from taskflow.models.group import Group, GroupMember  # noqa: F401
from taskflow.models.task import Task               # noqa: F401

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database handle before serving and dispose it on shutdown."""
    db = Database(settings.DATABASE_URL)
    if db.url.startswith("sqlite"):
        # No migrations in SQLite dev mode
        db.create_all()
    app.state.db = db
    logger.info("TaskFlow API started")
    try:
        yield
    finally:
        db.dispose()
        app.state.db = None
        logger.info("TaskFlow API shut down")


app = FastAPI(
    title="TaskFlow",
    description="Task and group management: personal and shared tasks with invitation-code groups",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(groups.router, prefix="/api/groups", tags=["Groups"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])


@app.get("/")
def root():
    return {"success": True, "message": "TaskFlow API is running..."}


@app.get("/api/health")
def health_check(request: Request):
    db = getattr(request.app.state, "db", None)
    return {"status": "ok", "database": bool(db and db.health_check())}
