from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from api.routes_http import router as http_router
from api.routes_ws import router as ws_router
from orbits.catalog import ORBIT_OPTIONS

logger = logging.getLogger("cislunar")
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: report the catalog. Shutdown: cleanup."""
    logger.info(
        "Orbit catalog ready: %d families, %d orbits",
        len(ORBIT_OPTIONS), sum(len(opts) for opts in ORBIT_OPTIONS.values()),
    )
    app.state.settings = settings
    yield
    logger.info("Shutting down cislunar orbit engine")


app = FastAPI(
    title="Cislunar: Earth-Moon Orbit Trajectory Engine",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(http_router)
app.include_router(ws_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.reload)
