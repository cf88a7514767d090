from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import cards, dictionary, ledger
from core.config import settings
from core.database import get_store
from core.logging import configure_logging, get_logger
from core.middleware import RequestLoggingMiddleware, SlowRequestMiddleware
from core.errors.handlers import register_error_handlers

# Initialize logging before anything else
configure_logging(
    level=settings.LOG_LEVEL,
    json_logs=settings.LOG_JSON,
    log_sql=settings.LOG_SQL,
)

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", message="Slovo API starting up")

    store = get_store()
    await store.init()
    log.info("database_connected", url=store.url)

    yield

    log.info("shutdown", message="Slovo API shutting down")
    await store.dispose()


app = FastAPI(
    title="Slovo API",
    description="Russian vocabulary acquisition: dictionary import, reading ledger, study queue and FSRS reviews",
    version="0.1.0",
    lifespan=lifespan,
)

# Register structured error handlers
register_error_handlers(app)

# Middleware (order matters: last added = first executed)
app.add_middleware(SlowRequestMiddleware, slow_threshold_ms=5000)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dictionary.router, prefix="/api/dictionary", tags=["dictionary"])
app.include_router(ledger.router, prefix="/api/ledger", tags=["ledger"])
app.include_router(cards.router, prefix="/api/cards", tags=["cards"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": "0.1.0"}


if __name__ == "__main__":
    import uvicorn

    log.info("server_config", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT, debug=settings.APP_DEBUG)
    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.APP_DEBUG,
        log_config=None,  # Disable uvicorn's default logging, we handle it
    )
