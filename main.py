"""
Unified backend entry point.

Architecture:
- One Python process, one asyncio event loop
- Two peer services running concurrently:
  1. FastAPI (HTTP server for admin listing and archive downloads)
  2. APScheduler interval job running the batch course export

We use FastAPI's lifespan to manage startup/shutdown of the scheduler and
the database engine.

Run with: python main.py [--no-scheduler] [--port PORT]
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).parent

# Load .env.local first (if exists), then .env as fallback
load_dotenv(project_root / ".env.local")
load_dotenv()

import sentry_sdk
from fastapi import FastAPI

from course_export.config import check_required_env_vars
from course_export.database import check_database, close_engine
from course_export.jobs import init_scheduler, shutdown_scheduler
from web_api.routes.exports import router as exports_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

if os.getenv("SENTRY_DSN"):
    sentry_sdk.init(
        dsn=os.environ["SENTRY_DSN"],
        environment=os.getenv("SENTRY_ENVIRONMENT", "development"),
        traces_sample_rate=0.0,
    )


def scheduler_enabled() -> bool:
    return os.getenv("DISABLE_EXPORT_SCHEDULER", "").lower() not in ("true", "1", "yes")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    Starts the export scheduler alongside FastAPI in the same event loop.
    """
    ok, warnings = check_required_env_vars()
    for warning in warnings:
        print(warning)
    if not ok:
        raise RuntimeError("Missing required environment variables")

    if scheduler_enabled():
        init_scheduler()
    else:
        print("Export scheduler disabled (--no-scheduler or DISABLE_EXPORT_SCHEDULER=true)")

    yield

    print("Shutting down peer services...")
    shutdown_scheduler()
    await close_engine()


app = FastAPI(
    title="Course Archive Export API",
    lifespan=lifespan,
)

app.include_router(exports_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    database_ok = await check_database()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": database_ok,
        "scheduler_enabled": scheduler_enabled(),
    }


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Course Archive Export Server")
    parser.add_argument(
        "--no-scheduler",
        action="store_true",
        help="Disable the export job (useful when running several servers)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000)",
    )
    args = parser.parse_args()

    # Set env var so it persists across uvicorn reloads
    if args.no_scheduler:
        os.environ["DISABLE_EXPORT_SCHEDULER"] = "true"

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=args.port,
    )
