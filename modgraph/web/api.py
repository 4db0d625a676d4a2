"""FastAPI routes exposing the analysis result."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse
from pydantic import BaseModel

from modgraph.analysis.graph_models import GraphResult
from modgraph.pipeline import summarize

router = APIRouter()


class Summary(BaseModel):
    nodes: int
    edges: int
    multiple_versions: list[str]
    circular_count: int
    circular_edges: list[list[str]]


def _result(request: Request) -> GraphResult:
    return request.app.state.graph


@router.get("/analyze")
async def get_analysis(request: Request):
    return _result(request).to_dict()


@router.get("/api/summary", response_model=Summary)
async def get_summary(request: Request):
    return Summary(**summarize(_result(request)))


@router.get("/graph")
async def get_viewer(request: Request):
    return FileResponse(request.app.state.static_dir / "index.html")
