"""FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pickban.api.routes.auto_select import router as auto_select_router
from pickban.config import settings
from pickban.lcu.client import LcuClient
from pickban.lcu.sync import LcuStateSync
from pickban.models.auto_select import HighIdChampionPolicy
from pickban.services.auto_select_actuator import AutoSelectActuator
from pickban.services.auto_select_state import AutoSelectState
from pickban.state.session_context import SessionContext

logger = logging.getLogger(__name__)


def build_auto_select_state(context: SessionContext) -> AutoSelectState:
    """Create the process-wide auto select state from settings."""
    policy = HighIdChampionPolicy(
        enabled=settings.allow_high_id_champions,
        threshold=settings.high_id_champion_threshold,
    )
    return AutoSelectState(context, policy=policy)


def connect_lcu() -> Optional[LcuClient]:
    """Create an LCU client if a lockfile is configured."""
    lockfile = Path(settings.lcu_lockfile) if settings.lcu_lockfile else None
    if lockfile is None or not lockfile.exists():
        logger.info("No LCU lockfile configured, running without a client connection")
        return None

    return LcuClient.from_lockfile(
        lockfile,
        timeout=settings.lcu_timeout_seconds,
        max_retries=settings.lcu_max_retries,
    )


def wire_lcu(app: FastAPI, client: LcuClient) -> tuple[LcuStateSync, AutoSelectActuator]:
    """Connect ingestion and the actuator to the shared state."""
    sync = LcuStateSync(client, app.state.session_context)
    actuator = AutoSelectActuator(app.state.auto_select, client)
    sync.on_change(actuator.on_session_change)

    app.state.lcu_sync = sync
    app.state.actuator = actuator
    return sync, actuator


async def run_lcu_loop(
    sync: LcuStateSync, actuator: AutoSelectActuator, interval: float
) -> None:
    """Poll the session and tick the actuator until cancelled.

    Client calls block, so each step runs in a worker thread.
    """
    while True:
        try:
            if not sync.context.puuid:
                await asyncio.to_thread(sync.load_identity)
                await asyncio.to_thread(sync.load_chat_me)
            await asyncio.to_thread(sync.poll_session)
            # Due grabs fire even when the session did not change
            await asyncio.to_thread(actuator.tick)
        except Exception:
            logger.exception("LCU loop iteration failed")
        await asyncio.sleep(interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    if not hasattr(app.state, "session_context"):
        app.state.session_context = SessionContext()
    if not hasattr(app.state, "auto_select"):
        app.state.auto_select = build_auto_select_state(app.state.session_context)

    client = getattr(app.state, "lcu_client", None)
    if client is None:
        client = connect_lcu()
        app.state.lcu_client = client

    lcu_task = None
    if client is not None:
        sync, actuator = wire_lcu(app, client)
        lcu_task = asyncio.create_task(
            run_lcu_loop(sync, actuator, settings.lcu_poll_interval_seconds)
        )
    app.state.lcu_task = lcu_task

    yield

    if lcu_task is not None:
        lcu_task.cancel()
        try:
            await lcu_task
        except asyncio.CancelledError:
            pass
    if client is not None:
        client.close()


app = FastAPI(
    title="Pickban",
    description="Champion select automation - upcoming pick, ban and grab decisions",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "pickban"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Pickban API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(auto_select_router)
