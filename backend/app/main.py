from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import conflicts, health, sessions, templates
from app.core.config import get_settings
from app.core.exceptions import AppError
from app.core.logging import configure_logging
from app.core.middleware import RequestLoggingMiddleware, RequestSizeLimitMiddleware
from app.db.bootstrap import ensure_runtime_schema_compatibility

settings = get_settings()
configure_logging(settings)

# (router, path below api_prefix, tag)
ROUTERS = (
    (health.router, "", "health"),
    (conflicts.router, "/conflicts", "conflicts"),
    (sessions.router, "/sessions", "sessions"),
    (templates.router, "/templates", "templates"),
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_runtime_schema_compatibility()
    yield


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message, "details": exc.details})


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, handle_app_error)

app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router, path, tag in ROUTERS:
    app.include_router(router, prefix=f"{settings.api_prefix}{path}", tags=[tag])
