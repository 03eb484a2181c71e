"""
Localhost API for the word chains game.
Run: uvicorn word_chains.app:app --reload
Word list comes from WORD_LIST (or the system dict); state is saved to WORD_CHAINS_DB.
"""
from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import BaseModel

from .cache import PuzzleCache
from .config import Settings
from .db import SessionStore
from .engine import make_engine_factory
from .session import ChainState, SessionController

logger = logging.getLogger(__name__)


class LengthRequest(BaseModel):
    length: int = 4


class WordRequest(BaseModel):
    word: str = ""


def build_controller(settings: Settings | None = None) -> SessionController:
    """Controller wired from settings: file-backed engines, a puzzle cache and the DuckDB store."""
    settings = settings or Settings.load()
    factory = make_engine_factory(
        path=str(settings.word_list) if settings.word_list else None,
        minimum_length=settings.minimum_length,
        distance_cache_size=settings.distance_cache_size,
    )
    cache = PuzzleCache(factory, capacity=settings.queue_size, max_workers=settings.workers)
    controller = SessionController(cache, store=SessionStore(path=settings.db_path), lengths=settings.lengths)
    controller.restore()
    cache.prime(settings.lengths)
    return controller


def _state_payload(controller: SessionController, state: ChainState) -> dict:
    return {
        "ok": True,
        "length": controller.current_length,
        "chain": state.chain,
        "start": state.start,
        "target": state.target,
        "user_word": state.user_word,
        "is_completed": state.is_completed,
        "changes_made": state.changes_made,
        "minimum_changes": controller.minimum_changes_needed,
        "can_undo": bool(state.undo_stack),
        "hint_distance": state.hint_distance if state.hint_active else None,
    }


def create_app(controller: SessionController | None = None) -> FastAPI:
    holder: dict[str, SessionController] = {}
    lock = threading.Lock()
    if controller is not None:
        holder["controller"] = controller

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        current = holder.get("controller")
        if current is None:
            return
        try:
            current.save()
        finally:
            current.cache.shutdown(wait=False)

    app = FastAPI(title="Word Chains", lifespan=lifespan)

    def get_controller() -> SessionController:
        with lock:
            if "controller" not in holder:
                holder["controller"] = build_controller()
            return holder["controller"]

    @app.get("/api/puzzle")
    def api_puzzle(length: int = 4):
        """Next puzzle for a word length (cached when available)."""
        ctrl = get_controller()
        if length not in ctrl.lengths:
            return {"ok": False, "error": f"Unsupported word length: {length}"}
        puzzle = ctrl.cache.get_puzzle(length)
        if puzzle is None:
            puzzle = ctrl.engine(length).generate_puzzle()
        if puzzle is None:
            return {"ok": False, "error": "Could not generate a puzzle. Try again."}
        return {"ok": True, "length": length, **puzzle.to_dict(), "steps": puzzle.steps}

    @app.get("/api/chain")
    def api_chain(start: str = "", end: str = ""):
        """Shortest chain between two words (empty when there is none)."""
        start, end = start.strip(), end.strip()
        if not start or len(start) != len(end):
            return {"ok": False, "error": "Words must be non-empty and the same length."}
        ctrl = get_controller()
        if len(start) not in ctrl.lengths:
            return {"ok": False, "error": f"Unsupported word length: {len(start)}"}
        chain = ctrl.engine(len(start)).find_shortest_chain(start, end)
        return {"ok": True, "chain": chain, "steps": len(chain) - 1 if chain else None}

    @app.get("/api/distance")
    def api_distance(target: str = "", word: str = ""):
        """Steps from word to target, -1 when unreachable."""
        target, word = target.strip(), word.strip()
        ctrl = get_controller()
        if len(target) not in ctrl.lengths:
            return {"ok": False, "error": f"Unsupported word length: {len(target)}"}
        engine = ctrl.engine(len(target))
        distance_map = engine.precompute_distances(target)
        if distance_map is None:
            return {"ok": False, "error": "Unknown target word."}
        return {"ok": True, "target": distance_map.target, "distance": engine.distance_to(word, distance_map)}

    @app.get("/api/valid")
    def api_valid(word: str = ""):
        word = word.strip()
        ctrl = get_controller()
        if len(word) not in ctrl.lengths:
            return {"ok": True, "word": word.upper(), "valid": False}
        return {"ok": True, "word": word.upper(), "valid": ctrl.engine(len(word)).is_valid_word(word)}

    @app.get("/api/cache/status")
    def api_cache_status():
        ctrl = get_controller()
        queues = {str(length): ctrl.cache.size(length) for length in ctrl.lengths}
        refilling = [length for length in ctrl.lengths if ctrl.cache.is_refilling(length)]
        return {"ok": True, "capacity": ctrl.cache.capacity, "queues": queues, "refilling": refilling}

    @app.get("/api/session")
    def api_session():
        ctrl = get_controller()
        return _state_payload(ctrl, ctrl.current_state)

    @app.post("/api/session/length")
    def api_session_length(body: LengthRequest):
        ctrl = get_controller()
        try:
            state = ctrl.set_word_length(body.length)
        except ValueError as e:
            return {"ok": False, "error": str(e)}
        return _state_payload(ctrl, state)

    @app.post("/api/session/word")
    def api_session_word(body: WordRequest):
        ctrl = get_controller()
        word = body.word.strip()
        if len(word) != ctrl.current_length:
            return {"ok": False, "error": f"Word must have {ctrl.current_length} letters."}
        return _state_payload(ctrl, ctrl.update_user_word(word))

    @app.post("/api/session/undo")
    def api_session_undo():
        ctrl = get_controller()
        undone = ctrl.undo()
        return {**_state_payload(ctrl, ctrl.current_state), "undone": undone}

    @app.post("/api/session/hint")
    def api_session_hint():
        ctrl = get_controller()
        ctrl.hint()
        return _state_payload(ctrl, ctrl.current_state)

    @app.post("/api/session/new")
    def api_session_new():
        ctrl = get_controller()
        if ctrl.new_puzzle() is None:
            return {"ok": False, "error": "Could not generate a puzzle. Try again."}
        return _state_payload(ctrl, ctrl.current_state)

    @app.post("/api/session/reset")
    def api_session_reset():
        ctrl = get_controller()
        return _state_payload(ctrl, ctrl.reset_puzzle())

    return app


app = create_app()
