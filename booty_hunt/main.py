import logging
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from booty_hunt.db import store
from booty_hunt.error_handlers import register_error_handlers
from booty_hunt.load_settings import cors_allow_origins, log_level, server_host, server_port
from booty_hunt.routers import ghost_fleet, signal_fire, tide_calendar
from booty_hunt.services.week_rollover import prepare_week

logging.basicConfig(level=log_level)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

try:
    __version__ = version("booty-hunt-server")
except PackageNotFoundError:
    __version__ = "0.0.0"

scheduler = AsyncIOScheduler(timezone="UTC")


@asynccontextmanager
async def lifespan(app):
    """Create tables and schedule the weekly rollover.
    This function is called to start the server.
    """
    await store.create_tables()

    # Materialize regatta and omen as soon as a new ISO week starts
    scheduler.add_job(
        prepare_week,
        "cron",
        args=[store],
        day_of_week="mon",
        hour=0,
        minute=0,
        misfire_grace_time=3600,
        coalesce=True,
    )
    scheduler.start()
    logging.info("Start Server")
    try:
        yield
    finally:
        scheduler.shutdown()
        await store.dispose()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    max_age=3600,
)
register_error_handlers(app)
app.include_router(ghost_fleet.ghost_fleet_router)
app.include_router(signal_fire.signal_fire_router)
app.include_router(tide_calendar.tide_router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=server_host, port=server_port)
