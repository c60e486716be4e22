"""
Todo API Server

FastAPI-based server providing the remote todo API consumed by
``ApiStorageService``:
- GET /todos     -> JSON array of todos
- POST /todos    -> replace the stored collection with the JSON array body
- DELETE /todos  -> clear the stored collection
- GET /, GET /health for status checks

The collection is kept by a ``StorageService``: a ``LocalStorageService``
under the server data directory, or an in-memory store.
"""

import secrets
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_manager import __version__
from todo_manager.config import EnvConfig, ServerConfig
from todo_manager.models import Priority, Todo, TodoStatus
from todo_manager.storage import LocalStorageService, StorageService
from todo_manager.utils.exceptions import StorageError, StorageErrorCode
from todo_manager.utils.logger import get_logger
from todo_manager.utils.serialization import format_timestamp, utc_now

logger = get_logger(__name__)

STORAGE_ERROR_STATUS = {
    StorageErrorCode.SERVICE_UNAVAILABLE: 503,
    StorageErrorCode.NETWORK_ERROR: 503,
    StorageErrorCode.QUOTA_EXCEEDED: 507,
    StorageErrorCode.INVALID_DATA: 422,
}


# ============================================================================
# IN-MEMORY STORAGE
# ============================================================================

class InMemoryStorageService(StorageService):
    """Keeps the collection in process memory (lost on restart)."""

    name = "memory"

    def __init__(self, todos: Optional[List[Todo]] = None):
        self._todos: List[Todo] = list(todos or [])

    def is_available(self) -> bool:
        return True

    async def get_todos(self) -> List[Todo]:
        return list(self._todos)

    async def save_todos(self, todos: List[Todo]) -> None:
        self._todos = list(todos)

    async def clear_todos(self) -> None:
        self._todos = []


# ============================================================================
# PYDANTIC MODELS
# ============================================================================

class TodoPayload(BaseModel):
    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    priority: Priority = Priority.MEDIUM
    status: TodoStatus = TodoStatus.PENDING
    createdAt: str
    updatedAt: str

    def to_todo(self) -> Todo:
        return Todo.from_dict(self.model_dump(mode="json"))


class SaveResult(BaseModel):
    count: int


# ============================================================================
# DEPENDENCIES
# ============================================================================

bearer_scheme = HTTPBearer(auto_error=False)


def get_storage(request: Request) -> StorageService:
    return request.app.state.storage


def require_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> None:
    """Reject the request unless it carries the configured bearer token."""
    expected = request.app.state.config.api_token
    if not expected:
        return

    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not secrets.compare_digest(credentials.credentials, expected):
        raise HTTPException(
            status_code=401,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )


# ============================================================================
# ROUTES
# ============================================================================

router = APIRouter()


@router.get("/")
async def index():
    return {
        "message": "Todo API",
        "version": __version__,
        "status": "running",
    }


@router.get("/health")
async def health():
    return {
        "status": "healthy",
        "timestamp": format_timestamp(utc_now()),
    }


@router.get("/todos", dependencies=[Depends(require_token)])
async def list_todos(storage: StorageService = Depends(get_storage)) -> List[Dict[str, Any]]:
    todos = await storage.get_todos()
    logger.debug(f"[SERVER] Returning {len(todos)} todos")
    return [todo.to_dict() for todo in todos]


@router.post("/todos", response_model=SaveResult, dependencies=[Depends(require_token)])
async def replace_todos(payload: List[TodoPayload], storage: StorageService = Depends(get_storage)):
    todos = [item.to_todo() for item in payload]
    await storage.save_todos(todos)
    logger.info(f"[SERVER] Stored {len(todos)} todos")
    return {"count": len(todos)}


@router.delete("/todos", response_model=SaveResult, dependencies=[Depends(require_token)])
async def clear_todos(storage: StorageService = Depends(get_storage)):
    await storage.clear_todos()
    logger.info("[SERVER] Cleared todos")
    return {"count": 0}


# ============================================================================
# ERROR HANDLERS
# ============================================================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        body = {"error": "Not Found", "message": f"Route {request.url.path} not found"}
    else:
        body = {"error": _reason(exc.status_code), "message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    status_code = STORAGE_ERROR_STATUS.get(exc.code, 500)
    logger.error(f"[SERVER] {request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code.value, "message": exc.message},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"[SERVER] Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    debug = EnvConfig.get_bool("TODO_SERVER_DEBUG", False)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": str(exc) if debug else "Something went wrong",
        },
    )


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


# ============================================================================
# APP FACTORY
# ============================================================================

def create_app(
    config: Optional[ServerConfig] = None,
    storage: Optional[StorageService] = None
) -> FastAPI:
    """
    Build the todo API application.

    Args:
        config: Server settings (default: from TODO_SERVER_* environment variables)
        storage: Collection backend (default: file under ``config.data_dir``,
            or in memory when ``config.persist`` is off)
    """
    if config is None:
        EnvConfig.load_env_file()
        config = ServerConfig.from_env()

    if storage is None:
        if config.persist:
            storage = LocalStorageService(directory=config.data_dir)
        else:
            storage = InMemoryStorageService()

    app = FastAPI(
        title="Todo API",
        description="Remote storage for the todo manager",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.storage = storage

    app.include_router(router)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    logger.info(
        f"[SERVER] App created: storage={storage.name}, "
        f"token_required={bool(config.api_token)}"
    )
    return app


app = create_app()
