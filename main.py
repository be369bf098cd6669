# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
TaskHub Service
===============
Role-based task management: accounts, teams run by managers, tasks moving
through todo ─► in-progress ─► done, and an admin console with aggregate
statistics. Users receive push notifications over Socket.IO.

Serve `main:asgi_app`: the Socket.IO server on /socket.io, the REST API under /api.

Port: 5000
"""
from contextlib import asynccontextmanager

import anyio.from_thread
import socketio
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskhub.controllers import (
    admin_controller, auth_controller, manager_controller, notification_controller,
    system_controller, task_controller, team_controller,
)
from taskhub.core.config import settings
from taskhub.core.database import client, ensure_indexes, get_database
from taskhub.core.dependencies import get_user_service, init_dependencies
from taskhub.core.logging import get_logger
from taskhub.core.responses import failure
from taskhub.middleware import CorrelationIDMiddleware, MetricsMiddleware, RequestLoggingMiddleware
from taskhub.sockets.namespace import MainNamespace
from taskhub.sockets.server import SocketPublisher, sio

logger = get_logger(settings.SERVICE_NAME)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Wire services against MongoDB and make sure indexes exist; close the client on shutdown."""
    db = get_database()
    async with anyio.from_thread.BlockingPortal() as portal:
        init_dependencies(db, SocketPublisher(sio, portal))
        try:
            ensure_indexes(db)
            logger.info("Database connection verified")
        except PyMongoError as exc:
            logger.error("Database connection FAILED — service will start but DB calls will fail: %s", exc)
        yield
    client.close()
    logger.info("MongoDB client closed — shutting down")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="TaskHub",
    description="Role-based task management API with team workspaces and push notifications.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIDMiddleware)


# ── Error envelope ────────────────────────────────────────────────────────
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content=failure(str(exc.detail)),
                        headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())[1:])
        messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return JSONResponse(status_code=400, content=failure("Validation failed", messages))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(status_code=500, content=failure("Something went wrong!"))


# ── Routers ───────────────────────────────────────────────────────────────
app.include_router(system_controller.router)
app.include_router(auth_controller.router)
app.include_router(admin_controller.router)
app.include_router(manager_controller.router)
app.include_router(team_controller.router)
app.include_router(task_controller.router)
app.include_router(notification_controller.router)


# ── Socket.IO ─────────────────────────────────────────────────────────────
sio.register_namespace(MainNamespace("/", lambda token: get_user_service().user_from_token(token)))

asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:asgi_app", host="0.0.0.0", port=settings.PORT)
