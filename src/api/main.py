import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.deps import get_rules, get_settings, init_ledger, shutdown_ledger
from src.domain.errors import LedgerError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    settings = get_settings()

    # Fail fast on invalid rules or an unreadable snapshot
    rules = get_rules(settings)
    init_ledger(settings, rules)
    logger.info("Faniko API started (data dir: %s)", settings.data_dir)

    yield

    shutdown_ledger()


app = FastAPI(
    title="Faniko API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


# --- Routers ---
from src.api.routes import auth, creators, monetization, posts, uploads  # noqa: E402

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(creators.router, prefix="/api/creators", tags=["Creators"])
app.include_router(posts.router, prefix="/api/creators", tags=["Posts"])
app.include_router(monetization.router, prefix="/api/creators", tags=["Monetization"])
app.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])


# CORS (Allow Frontend)
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.get("/")
def root() -> str:
    return (
        "Faniko API is running. Try GET /api/creators, POST /api/creators, "
        "or GET /api/creators/:username/posts"
    )


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "4000")))
