"""Analysis Viewer FastAPI Backend — main application entry point."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from analysis_viewer import config
from analysis_viewer.observability import initialize as initialize_observability, shutdown as shutdown_observability
from analysis_viewer.parsers.artifacts import path_exists
from analysis_viewer.project_manager import project_manager
from analysis_viewer.routers.analysis import analysis_router, render_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("analysis_viewer")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    logger.info("Analysis viewer backend starting up")
    initialize_observability(app)

    analysis_dir = project_manager.get_analysis_dir()
    if not await path_exists(analysis_dir):
        logger.info(f"No analysis directory yet at {analysis_dir}; listing will be empty")

    yield

    logger.info("Analysis viewer backend shutting down")
    shutdown_observability(app)


app = FastAPI(
    title="Analysis Viewer API",
    description="Read-only API for browsing analysis sessions",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS — allow the Vite dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        config.FRONTEND_ORIGIN,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(analysis_router)
app.include_router(render_router)


@app.get("/api/health")
def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "projectPath": project_manager.default_project_path,
    }
