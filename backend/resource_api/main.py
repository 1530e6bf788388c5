import logging
import os
import subprocess
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session

from resource_api.database import engine, get_session, init_db
from resource_api.errors import register_error_handlers
from resource_api.exchange.apps import mutable_rate_router
from resource_api.exchange.rates import SharedRate
from resource_api.routes import todos, users
from resource_api.services.todo_queries import select_sum
from resource_api.services.todo_repo import InMemoryTodoRepo, SqlTodoRepo, TodoRepo
from resource_api.services.users_state import UsersState

logger = logging.getLogger(__name__)

APP_NAME = "Resource API"

TODO_BACKEND = os.getenv("TODO_BACKEND", "sql").lower()
GBP_TO_USD_RATE = float(os.getenv("GBP_TO_USD_RATE", "1.3"))


# Get build info
def get_build_info():
    """Get git commit hash or build timestamp"""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=os.path.dirname(os.path.dirname(__file__)),
            capture_output=True,
            text=True,
            timeout=2,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (OSError, subprocess.SubprocessError):
        pass

    # Fallback to build timestamp
    return datetime.now().strftime("%Y%m%d-%H%M%S")


BUILD_HASH = get_build_info()

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())


def build_todo_repo(backend: str = TODO_BACKEND) -> TodoRepo:
    if backend == "memory":
        return InMemoryTodoRepo()
    if backend == "sql":
        return SqlTodoRepo(engine)
    raise ValueError(f"Unknown TODO_BACKEND {backend!r} (expected 'sql' or 'memory')")


def log_routes(app: FastAPI) -> None:
    logger.info("Registered routes:")
    for r in app.routes:
        path = getattr(r, "path", None)
        if path:
            methods = getattr(r, "methods", None)
            methods_str = ", ".join(sorted(methods)) if methods else "N/A"
            logger.info("  %-20s %s", methods_str, path)
    logger.info("Build hash: %s", BUILD_HASH)


def create_app(
    todo_repo: Optional[TodoRepo] = None,
    users_state: Optional[UsersState] = None,
    exchange_rate: Optional[SharedRate] = None,
) -> FastAPI:
    """Compose the application; every shared store is created here, once."""
    app = FastAPI(title=APP_NAME)
    register_error_handlers(app)

    app.state.users = users_state if users_state is not None else UsersState()
    app.state.todo_repo = todo_repo if todo_repo is not None else build_todo_repo()
    app.state.exchange_rate = exchange_rate if exchange_rate is not None else SharedRate(GBP_TO_USD_RATE)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(users.router, tags=["users"])
    app.include_router(todos.router, tags=["todos"])
    # Mutable shared exchange rate (GET conversions, PUT /set_exchange_rate)
    app.include_router(mutable_rate_router, prefix="/api/exchange", tags=["exchange"])

    @app.on_event("startup")
    def on_startup():
        if isinstance(app.state.todo_repo, SqlTodoRepo):
            init_db(app.state.todo_repo.engine)
        log_routes(app)

    @app.get("/api/health")
    def health_check():
        """Diagnostic endpoint to verify which code is running"""
        return {
            "app_name": APP_NAME,
            "build_hash": BUILD_HASH,
            "todo_backend": type(app.state.todo_repo).__name__,
            "status": "healthy",
        }

    @app.get("/api/health/db")
    def database_health(session: Session = Depends(get_session)):
        """Round-trip SELECT 1 + 1 against the configured database"""
        return {"sum": select_sum(session), "status": "healthy"}

    return app


app = create_app()
