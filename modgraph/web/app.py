"""FastAPI application factory and server runner."""

from __future__ import annotations

import logging
import threading
import webbrowser
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from modgraph import __version__
from modgraph.analysis.graph_models import GraphResult
from modgraph.web.api import router

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def create_app(result: GraphResult) -> FastAPI:
    app = FastAPI(title="modgraph", version=__version__)
    app.state.graph = result
    app.state.static_dir = STATIC_DIR

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    # static mount goes last: it catches every unmatched route
    app.mount("/", StaticFiles(directory=str(STATIC_DIR), html=True), name="static")
    return app


def serve(
    result: GraphResult,
    host: str = "127.0.0.1",
    port: int = 3000,
    open_browser: bool = False,
) -> None:
    """Serve *result* until interrupted."""
    import uvicorn

    url = f"http://{host}:{port}/graph"
    if open_browser:
        threading.Timer(1.0, lambda: webbrowser.open(url)).start()

    logger.info("Serving %d nodes at %s", len(result.nodes), url)
    # uvicorn handles SIGINT and shuts down gracefully
    uvicorn.run(create_app(result), host=host, port=port, log_level="warning")
