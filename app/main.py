# app/main.py

import logging
import os
import subprocess
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from app.core import logging_config  # noqa: F401  configures logging on import
from app.core.config import get_settings
from app.database import engine
from app.routes import health, inventory, sync, websockets as websocket_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run migrations on startup
    if os.getenv('RUN_MIGRATIONS', 'false').lower() == 'true':
        logger.info("Running database migrations...")
        result = subprocess.run(['alembic', 'upgrade', 'head'], capture_output=True, text=True)
        if result.returncode == 0:
            logger.info(f"Migrations completed successfully\n{result.stdout}")
        else:
            logger.error(f"Migration failed: {result.stderr}")

    settings = get_settings()
    if not (settings.WHOLECELL_APP_KEY and settings.WHOLECELL_APP_SECRET):
        logger.warning("WholeCell credentials are not set; sync requests will report a configuration error")

    try:
        yield  # This is where the app runs
    finally:
        if sync.sync_in_progress():
            logger.warning("Shutting down while a WholeCell sync is running; its checkpoint will not advance")
        await engine.dispose()

app = FastAPI(
    title="WholeCell Inventory Sync",
    lifespan=lifespan
)

# Add middleware to handle HTTPS behind proxy
@app.middleware("http")
async def proxy_headers_middleware(request: Request, call_next):
    forwarded_proto = request.headers.get("x-forwarded-proto")
    if forwarded_proto == "https":
        request.scope["scheme"] = "https"
    response = await call_next(request)
    return response

app.include_router(inventory.router)
app.include_router(sync.router)
app.include_router(websocket_router.router)
app.include_router(health.router)
