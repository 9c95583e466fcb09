from __future__ import annotations

import io
import logging
import os
import random
import sys
import threading
import uuid
from collections import OrderedDict
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

# Allow running `python backend/app.py` from repo root.
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from untangle.constants import COLORS, TYPE_COLORS
from untangle.graph import Level
from untangle.logging_config import configure_logging
from untangle.session import PuzzleSession
from untangle.store import LevelStore

logger = logging.getLogger(__name__)

MAX_VIEWPORT = 10_000
MAX_SESSIONS = int(os.environ.get("UNTANGLE_MAX_SESSIONS", "256"))

# Least recently used first; the oldest session is dropped past MAX_SESSIONS.
_sessions: "OrderedDict[str, PuzzleSession]" = OrderedDict()
_sessions_lock = threading.Lock()


def _repo_root() -> Path:
    return _ROOT


def _level_store() -> LevelStore:
    path = os.environ.get("UNTANGLE_LEVEL_FILE")
    return LevelStore(Path(path) if path else _repo_root() / "out" / "level.json")


class StartSessionRequest(BaseModel):
    level: Optional[int] = Field(default=None, ge=1)
    width: int = Field(default=1280, ge=1, le=MAX_VIEWPORT)
    height: int = Field(default=800, ge=1, le=MAX_VIEWPORT)
    seed: Optional[int] = None
    lock_when_solved: bool = True


class MoveRequest(BaseModel):
    node_id: str
    x: float
    y: float


class ResizeRequest(BaseModel):
    width: int = Field(ge=1, le=MAX_VIEWPORT)
    height: int = Field(ge=1, le=MAX_VIEWPORT)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging()
    logger.info("Level progress file: %s", _level_store().path)
    yield
    _sessions.clear()


app = FastAPI(title="Untangle API", version="0.1.0", lifespan=lifespan)

cors_raw = os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
cors_list = [c.strip() for c in cors_raw.split(",") if c.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_list or ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _register_session(session: PuzzleSession) -> str:
    session_id = uuid.uuid4().hex
    with _sessions_lock:
        _sessions[session_id] = session
        while len(_sessions) > MAX_SESSIONS:
            evicted, _ = _sessions.popitem(last=False)
            logger.info("Evicted idle session %s", evicted)
    return session_id


def _get_session(session_id: str) -> PuzzleSession:
    with _sessions_lock:
        try:
            session = _sessions[session_id]
        except KeyError as e:
            raise HTTPException(status_code=404, detail="Session not found") from e
        _sessions.move_to_end(session_id)
    return session


def _state_payload(session_id: str, session: PuzzleSession, *, just_solved: bool = False) -> Dict[str, Any]:
    return {"id": session_id, "state": session.snapshot(), "just_solved": just_solved}


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/sessions")
def start_session(req: StartSessionRequest) -> Dict[str, Any]:
    level = req.level if req.level is not None else _level_store().load()
    rng = random.Random(req.seed) if req.seed is not None else None
    session = PuzzleSession(level, req.width, req.height, rng=rng, lock_when_solved=req.lock_when_solved)
    session_id = _register_session(session)
    logger.info("Started session %s at level %d (%dx%d)", session_id, level, req.width, req.height)
    return _state_payload(session_id, session, just_solved=session.last_result.just_solved)


@app.get("/sessions/{session_id}")
def get_session(session_id: str) -> Dict[str, Any]:
    return _state_payload(session_id, _get_session(session_id))


@app.post("/sessions/{session_id}/move")
def move_node(session_id: str, req: MoveRequest) -> Dict[str, Any]:
    session = _get_session(session_id)
    try:
        result = session.move_node(req.node_id, req.x, req.y)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Unknown node: {req.node_id}") from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _state_payload(session_id, session, just_solved=result.just_solved)


@app.post("/sessions/{session_id}/reset")
def reset_session(session_id: str) -> Dict[str, Any]:
    session = _get_session(session_id)
    result = session.reset()
    return _state_payload(session_id, session, just_solved=result.just_solved)


@app.post("/sessions/{session_id}/next")
def next_level(session_id: str) -> Dict[str, Any]:
    session = _get_session(session_id)
    result = session.next_level()
    try:
        _level_store().save(session.number)
    except OSError as e:
        logger.warning("Could not save progress: %s", e)
    return _state_payload(session_id, session, just_solved=result.just_solved)


@app.post("/sessions/{session_id}/resize")
def resize_session(session_id: str, req: ResizeRequest) -> Dict[str, Any]:
    session = _get_session(session_id)
    session.resize(req.width, req.height)
    return _state_payload(session_id, session)


@app.delete("/sessions/{session_id}")
def delete_session(session_id: str) -> Dict[str, Any]:
    with _sessions_lock:
        if _sessions.pop(session_id, None) is None:
            raise HTTPException(status_code=404, detail="Session not found")
    return {"deleted": True}


def _render_thumbnail(level: Level, *, solved: bool, size: Tuple[int, int] = (240, 150)) -> bytes:
    from PIL import Image, ImageDraw

    def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
        hex_color = hex_color.lstrip("#")
        return tuple(int(hex_color[i : i + 2], 16) for i in (0, 2, 4))

    width, height = size
    img = Image.new("RGB", (width, height), hex_to_rgb(COLORS["bg"]))
    draw = ImageDraw.Draw(img)

    sx = width / float(level.width or 1)
    sy = height / float(level.height or 1)
    nodes = level.node_map()

    # edges
    for edge in level.edges:
        pu = nodes[edge.source_id].center()
        pv = nodes[edge.target_id].center()
        if solved:
            color = COLORS["line_solved"]
        elif edge.is_intersecting:
            color = COLORS["line_intersect"]
        else:
            color = COLORS["line_normal"]
        draw.line((pu.x * sx, pu.y * sy, pv.x * sx, pv.y * sy), fill=hex_to_rgb(color), width=1)

    # nodes
    for node in level.nodes:
        x0, y0 = node.x * sx, node.y * sy
        x1, y1 = (node.x + node.width) * sx, (node.y + node.height) * sy
        draw.rectangle((x0, y0, x1, y1), fill=hex_to_rgb(COLORS["node_bg"]))
        draw.rectangle((x0, y0, x0 + 2, y1), fill=hex_to_rgb(TYPE_COLORS.get(node.type, COLORS["node_border"])))

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@app.get("/sessions/{session_id}/thumbnail")
def get_session_thumbnail(session_id: str):
    session = _get_session(session_id)
    png = _render_thumbnail(session.level, solved=session.solved)
    return Response(png, media_type="image/png")
