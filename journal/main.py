"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from journal.config import settings
from journal.database import create_db_and_tables
from journal.services.errors import NotFoundError, ValidationError
from journal.utils.logging import setup_logging
from journal.api import auth, accounts, strategies, trades, analytics, system


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()
    from journal.engine.scheduler import start_scheduler, stop_scheduler
    start_scheduler()

    yield

    stop_scheduler()


app = FastAPI(
    title="Trade Journal",
    description="Trading journal with account balance ledger and performance analytics",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    # Same answer whether the row is missing or owned by someone else
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# Mount routers
app.include_router(auth.router)
app.include_router(accounts.router)
app.include_router(strategies.router)
app.include_router(trades.router)
app.include_router(analytics.router)
app.include_router(system.router)
