"""FastAPI application: level loading, catalog browsing and the quiz session."""
from __future__ import annotations

import logging

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse

from kanji_quiz.catalog import ALL, SEARCH_READING, TAG_OPTIONS, Catalog
from kanji_quiz.config import Settings, load_settings, save_settings
from kanji_quiz.errors import DataUnavailable, InvalidTransition, LevelNotReady
from kanji_quiz.loader import fetch_catalog
from kanji_quiz.models import QUIZ_FORMATS, Entry, QuizSession, Score
from kanji_quiz.quiz import QuizEngine
from kanji_quiz.reading import render

app = FastAPI(title="Kanji Quiz")

log = logging.getLogger("kanji_quiz.app")

# Global state (initialized in startup)
_settings: Settings | None = None
_engine: QuizEngine | None = None
_catalog: Catalog | None = None
_level: int | None = None
_level_status = "idle"  # idle | loading | ready | not_ready | error
_load_seq = 0  # bumped by every level selection
_study_mode = False
_revealed: set[str] = set()  # Entry.key values


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def get_engine() -> QuizEngine:
    assert _engine is not None
    return _engine


def get_catalog() -> Catalog:
    if _catalog is None:
        raise HTTPException(409, "No level data loaded")
    return _catalog


@app.on_event("startup")
async def startup():
    global _settings, _engine
    if _settings is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _engine = QuizEngine(quiz_format=_settings.quiz_format)


# ── Serialization ─────────────────────────────────────────────────────────

def _segments(reading: str) -> list[dict]:
    return [{"text": s.text, "emphasized": s.emphasized} for s in render(reading)]


def _entry_json(entry: Entry) -> dict:
    hidden = _study_mode and entry.key not in _revealed
    d = {
        "key": entry.key,
        "id": entry.id,
        "image": entry.image_reference,
        "hidden": hidden,
    }
    if not hidden:
        d.update({
            "reading": entry.reading,
            "segments": _segments(entry.reading),
            "meaning": entry.meaning,
            "tags": entry.tags,
            "components": list(entry.components),
        })
    return d


def _summary(score: Score) -> dict:
    return {
        "correct": score.correct,
        "incorrect": score.incorrect,
        "total": score.total,
        "accuracy": round(score.correct / max(score.total, 1) * 100, 1),
    }


def _question_json(session: QuizSession) -> dict:
    entry = session.current
    q = {
        "active": True,
        "format": session.format,
        "image": entry.image_reference,
        "progress": {
            "current": session.position + 1,
            "total": len(session.working_set),
        },
        "score": {"correct": session.score.correct, "incorrect": session.score.incorrect},
        "answered": session.answered,
        "pending_input": session.pending_input,
    }
    if session.choice_set is not None:
        q["choices"] = list(session.choice_set.choices)
    if session.answered:
        q["result"] = {
            "correct": session.last_correct,
            "reading": entry.reading,
            "segments": _segments(entry.reading),
            "meaning": entry.meaning,
            "selected_index": session.selected_index,
            "correct_index": session.choice_set.correct_index if session.choice_set else None,
            "is_last": session.is_last,
        }
    return q


# ── Data files ────────────────────────────────────────────────────────────

@app.get("/kanji/{file_path:path}")
async def data_file(file_path: str):
    root = get_settings().data_full_path.resolve()
    target = (root / file_path).resolve()
    if not target.is_relative_to(root) or not target.is_file():
        raise HTTPException(404, "File not found")
    return FileResponse(target)


# ── API: Levels ───────────────────────────────────────────────────────────

@app.get("/api/levels")
async def api_levels():
    s = get_settings()
    return {
        "levels": [{"level": lv, "ready": s.is_ready(lv)} for lv in s.levels],
        "selected": _level,
        "status": _level_status,
        "count": len(_catalog) if _catalog is not None else 0,
    }


async def _load_level(level: int, origin: str) -> dict:
    """Switch to `level` and fetch its catalog.

    Only the most recent selection is applied; an older fetch that finishes
    later is reported as superseded and leaves the state alone.
    """
    global _catalog, _level, _level_status, _load_seq
    # Switching level drops the catalog and any live session
    get_engine().finish()
    _catalog = None
    _level = level
    _level_status = "loading"
    _revealed.clear()
    _load_seq += 1
    seq = _load_seq

    try:
        catalog = await fetch_catalog(level, get_settings(), origin=origin)
    except LevelNotReady as e:
        catalog, status, detail = None, "not_ready", {"message": str(e)}
    except DataUnavailable as e:
        log.error("Level %d unavailable: %s", level, e.reason)
        catalog, status, detail = None, "error", {"message": str(e)}
    else:
        status, detail = "ready", {"count": len(catalog)}

    if seq != _load_seq:
        log.info("Level %d load superseded by level %s", level, _level)
        return {"level": level, "status": "superseded"}

    _catalog = catalog
    _level_status = status
    return {"level": level, "status": status, **detail}


async def _browse_catalog(request: Request) -> Catalog:
    """Current catalog, loading the configured default level on first use."""
    if _level is None:
        await _load_level(get_settings().default_level, str(request.base_url))
    return get_catalog()


@app.post("/api/level")
async def api_select_level(request: Request):
    body = await request.json()
    level = body.get("level")
    if level not in get_settings().levels:
        raise HTTPException(400, f"Unknown level: {level}")
    return await _load_level(level, str(request.base_url))


# ── API: Browsing ─────────────────────────────────────────────────────────

@app.get("/api/genres")
async def api_genres(request: Request):
    counts = (await _browse_catalog(request)).genre_counts()
    return {"genres": [{"tag": t, "count": counts[t]} for t in TAG_OPTIONS]}


@app.get("/api/entries")
async def api_entries(request: Request, tag: str = ALL, mode: str = SEARCH_READING, q: str = ""):
    catalog = await _browse_catalog(request)
    try:
        entries = catalog.browse(tag, mode, q)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {
        "level": catalog.level,
        "tag": tag,
        "count": len(entries),
        "study_mode": _study_mode,
        "entries": [_entry_json(e) for e in entries],
    }


@app.post("/api/study")
async def api_study(request: Request):
    global _study_mode
    body = await request.json()
    _study_mode = bool(body.get("enabled", not _study_mode))
    _revealed.clear()
    return {"study_mode": _study_mode}


@app.post("/api/reveal")
async def api_reveal(request: Request):
    """Toggle a card's reading while in study mode."""
    body = await request.json()
    key = body.get("key", "")
    entry = get_catalog().get(key)
    if entry is None:
        raise HTTPException(404, "Entry not found")
    if not _study_mode:
        raise HTTPException(409, "Study mode is off")
    if key in _revealed:
        _revealed.discard(key)
    else:
        _revealed.add(key)
    return _entry_json(entry)


# ── API: Quiz session ─────────────────────────────────────────────────────

@app.post("/api/session/start")
async def api_session_start(request: Request):
    body = await request.json() if await request.body() else {}
    catalog = await _browse_catalog(request)
    engine = get_engine()

    quiz_format = body.get("format")
    if quiz_format is not None:
        if quiz_format not in QUIZ_FORMATS:
            raise HTTPException(400, f"Unknown quiz format: {quiz_format}")
        engine.format = quiz_format

    try:
        pool = catalog.browse(body.get("tag", ALL), body.get("mode", SEARCH_READING), body.get("q", ""))
    except ValueError as e:
        raise HTTPException(400, str(e))

    session = engine.start(pool)
    if session is None:
        return {"active": False, "error": "No entries match the current filter."}
    return _question_json(session)


@app.get("/api/session")
async def api_session():
    session = get_engine().session
    if session is None:
        return {"active": False}
    return _question_json(session)


def _transition(action, *args) -> dict:
    if get_engine().session is None:
        raise HTTPException(404, "No active session")
    try:
        session = action(*args)
    except InvalidTransition as e:
        raise HTTPException(409, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))
    return _question_json(session)


@app.post("/api/session/input")
async def api_session_input(request: Request):
    body = await request.json()
    return _transition(get_engine().set_input, body.get("text", ""))


@app.post("/api/session/answer")
async def api_session_answer(request: Request):
    body = await request.json() if await request.body() else {}
    return _transition(get_engine().submit_answer, body.get("answer"))


@app.post("/api/session/choice")
async def api_session_choice(request: Request):
    body = await request.json()
    index = body.get("index")
    if not isinstance(index, int):
        raise HTTPException(400, "index must be an integer")
    return _transition(get_engine().submit_choice, index)


@app.post("/api/session/give-up")
async def api_session_give_up():
    return _transition(get_engine().give_up)


@app.post("/api/session/format")
async def api_session_format(request: Request):
    body = await request.json()
    return _transition(get_engine().change_format, body.get("format", ""))


@app.post("/api/session/next")
async def api_session_next():
    engine = get_engine()
    if engine.session is None:
        raise HTTPException(404, "No active session")
    try:
        session = engine.advance()
    except InvalidTransition as e:
        raise HTTPException(409, str(e))
    if session is None:
        return {"active": False, "session_complete": True, "summary": _summary(engine.last_score)}
    return _question_json(session)


@app.post("/api/session/finish")
async def api_session_finish():
    """Abandon the session and return to the catalog."""
    engine = get_engine()
    if engine.session is None:
        raise HTTPException(404, "No active session")
    score = engine.finish()
    return {"active": False, "session_complete": True, "summary": _summary(score)}


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await request.json()
    s = get_settings()
    known = {f.name for f in Settings.__dataclass_fields__.values()}
    for k, v in body.items():
        if k in known:
            setattr(s, k, v)
    if s.quiz_format in QUIZ_FORMATS:
        get_engine().format = s.quiz_format
    save_settings(s)
    return s.to_dict()
