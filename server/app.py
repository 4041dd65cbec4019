"""FastAPI server for sentence scramble."""

import logging
import os
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

logger = logging.getLogger(__name__)

from scramble.chunking import chunk_sentence
from scramble.config import DEFAULT_ATTEMPTS_PER_ITEM
from scramble.encoding import encode_assignment, parse_assignment_link
from scramble.interfaces import Storage
from scramble.models import Assignment, StudentProgress
from scramble.session import PlaySession, progress_storage_key
from scramble.teacher import (
    create_assignment, build_share_link, build_share_entry, build_qr_url,
    sanitize_draft, sanitize_history
)
from scramble.utils import parse_teacher_input

from server.file_storage import FileStorage


# Pydantic models for API
class SplitRequest(BaseModel):
    text: str


class ChunkRequest(BaseModel):
    sentence: str


class CreateAssignmentRequest(BaseModel):
    title: str
    sentences: str
    attempts_per_item: str = DEFAULT_ATTEMPTS_PER_ITEM
    reveal_after_max: bool = True
    base_url: str = ""
    instructions_template: Optional[str] = None


class CreateAssignmentResponse(BaseModel):
    assignment: dict
    prefix: str
    hash: str
    link: str
    instructions: str
    qr_url: str
    qr_file_name: str


class UnitsResponse(BaseModel):
    index: int
    total: int
    units: list[dict]
    chunk_mode: bool
    attempts_used: int
    recorded: bool


class CheckRequest(BaseModel):
    fragment: str
    index: int
    answer: list[str]
    student: str = ""


class RevealRequest(BaseModel):
    fragment: str
    index: int
    student: str = ""


class PlayResponse(BaseModel):
    ok: bool
    attempts: int
    finished: bool
    answer: Optional[str]
    message: Optional[str]
    summary: dict
    next_index: Optional[int]
    complete: bool


class DraftRequest(BaseModel):
    title: str = ""
    sentences: str = ""
    attempts_per_item: str = DEFAULT_ATTEMPTS_PER_ITEM
    reveal_after_max_attempts: bool = True
    instructions_template: str = ""
    updated_at: str = ""


# Global state (in production, use proper DI)
storage: Storage = None
play_sessions: dict[str, PlaySession] = {}  # storage key -> session


app = FastAPI(title="Sentence Scramble API", description="Unscramble-the-sentence homework API")


@app.on_event("startup")
async def startup():
    """Initialize storage on startup."""
    global storage

    # File storage by default, set SCRAMBLE_STORAGE=postgres to use PostgreSQL
    storage_type = os.environ.get('SCRAMBLE_STORAGE', 'file')
    if storage_type == 'postgres':
        from server.postgres_storage import PostgresStorage
        storage = PostgresStorage()
        logger.info("Using PostgreSQL storage")
    else:
        storage = FileStorage()
        logger.info(f"Using file storage in {storage.state_dir}")


def load_assignment(fragment: str) -> Assignment:
    """Decode a link fragment or fail with 404."""
    assignment = parse_assignment_link(fragment)
    if assignment is None:
        raise HTTPException(status_code=404, detail="Invalid or corrupt assignment link")
    return assignment


def get_session(assignment: Assignment, student: str) -> PlaySession:
    """Get or create the play session for a student, resuming saved progress."""
    key = progress_storage_key(assignment.id, student)
    session = play_sessions.get(key)
    if session is None or session.assignment != assignment:
        progress = None
        saved = storage.load_progress(key)
        if saved:
            try:
                progress = StudentProgress.from_dict(saved)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Discarding unreadable progress for {key}: {e}")
        if progress is not None and progress.version != assignment.version:
            logger.info(f"Progress for {key} is from version {progress.version}, starting over")
            progress = None
        session = PlaySession(assignment, student, progress)
        play_sessions[key] = session
    return session


def save_session(session: PlaySession) -> None:
    storage.save_progress(session.storage_key, session.to_progress().to_dict())


def play_response(session: PlaySession, outcome) -> PlayResponse:
    return PlayResponse(
        **outcome.to_dict(),
        summary=session.summary.to_dict(),
        next_index=session.next_index,
        complete=session.is_complete,
    )


@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "service": "sentence-scramble"}


@app.post("/api/sentences/split")
async def split_sentences(request: SplitRequest):
    """Preview how the teacher's text will be split into sentences."""
    return {"items": [s.to_dict() for s in parse_teacher_input(request.text)]}


@app.post("/api/sentences/chunk")
async def chunk(request: ChunkRequest):
    """Preview the automatic chunks for a sentence."""
    return {"chunks": chunk_sentence(request.sentence)}


@app.post("/api/assignments", response_model=CreateAssignmentResponse)
async def create(request: CreateAssignmentRequest):
    """Create an assignment and its share link."""
    try:
        assignment = create_assignment(
            request.title, request.sentences,
            request.attempts_per_item, request.reveal_after_max
        )
        link = build_share_link(request.base_url, assignment)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    prefix, token = encode_assignment(assignment)
    entry = build_share_entry(
        assignment, link, request.attempts_per_item,
        request.reveal_after_max, request.instructions_template
    )

    try:
        history = [entry.to_dict()] + [e.to_dict() for e in sanitize_history(storage.load_share_history())]
        storage.save_share_history(history)
    except Exception as e:
        logger.error(f"Failed to record share history: {type(e).__name__}: {e}")

    logger.info(f"Created assignment {assignment.id} with {len(assignment.sentences)} sentences")
    return CreateAssignmentResponse(
        assignment=assignment.to_dict(),
        prefix=prefix,
        hash=token,
        link=link,
        instructions=entry.instructions,
        qr_url=build_qr_url(link),
        qr_file_name=entry.qr_file_name,
    )


@app.get("/api/assignments/parse")
async def parse(fragment: str):
    """Decode a shared link fragment."""
    return load_assignment(fragment).to_dict()


@app.get("/api/assignments/{assignment_id}/students")
async def list_students(assignment_id: str):
    """Summaries of every student with saved progress on an assignment."""
    students = []
    for key in storage.list_progress_keys(assignment_id):
        saved = storage.load_progress(key)
        if not saved:
            continue
        try:
            progress = StudentProgress.from_dict(saved)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Skipping unreadable progress for {key}: {e}")
            continue
        students.append({
            "student": progress.student_name,
            "summary": progress.summary.to_dict(),
            "completed": len(progress.results),
        })
    return {"students": students}


@app.get("/api/play/units", response_model=UnitsResponse)
async def get_units(fragment: str, index: int = 0, student: str = ""):
    """Scrambled units for one sentence."""
    assignment = load_assignment(fragment)
    session = get_session(assignment, student)
    try:
        units = session.units(index)
        chunk_mode = session.is_chunk_mode(index)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return UnitsResponse(
        index=index,
        total=len(assignment.sentences),
        units=[u.to_dict() for u in units],
        chunk_mode=chunk_mode,
        attempts_used=session.attempts_used(index),
        recorded=session.is_recorded(index),
    )


@app.post("/api/play/check", response_model=PlayResponse)
async def check(request: CheckRequest):
    """Check the student's ordering of a sentence."""
    assignment = load_assignment(request.fragment)
    session = get_session(assignment, request.student)
    try:
        outcome = session.check(request.index, request.answer)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    save_session(session)
    logger.info(f"{session.storage_key} sentence {request.index}: ok={outcome.ok} attempts={outcome.attempts}")
    return play_response(session, outcome)


@app.post("/api/play/reveal", response_model=PlayResponse)
async def reveal(request: RevealRequest):
    """Give up on a sentence and show the answer."""
    assignment = load_assignment(request.fragment)
    session = get_session(assignment, request.student)
    try:
        outcome = session.reveal(request.index)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    save_session(session)
    return play_response(session, outcome)


@app.get("/api/progress")
async def get_progress(fragment: str, student: str = ""):
    """Saved progress for a student on an assignment."""
    assignment = load_assignment(fragment)
    saved = storage.load_progress(progress_storage_key(assignment.id, student))
    if not saved:
        raise HTTPException(status_code=404, detail="No saved progress")
    return saved


@app.delete("/api/progress")
async def delete_progress(fragment: str, student: str = ""):
    """Start an assignment over."""
    assignment = load_assignment(fragment)
    key = progress_storage_key(assignment.id, student)
    play_sessions.pop(key, None)
    return {"deleted": storage.clear_progress(key)}


@app.get("/api/share-history")
async def get_share_history():
    """Links the teacher generated previously, newest first."""
    return {"entries": [e.to_dict() for e in sanitize_history(storage.load_share_history())]}


@app.get("/api/teacher/draft")
async def get_draft():
    """The teacher's autosaved authoring form."""
    saved = storage.load_teacher_draft()
    if saved is None:
        return {"draft": None}
    return {"draft": sanitize_draft(saved).to_dict()}


@app.put("/api/teacher/draft")
async def put_draft(request: DraftRequest):
    """Autosave the teacher's authoring form."""
    draft = sanitize_draft({
        'title': request.title,
        'sentences': request.sentences,
        'attemptsPerItem': request.attempts_per_item,
        'revealAfterMaxAttempts': request.reveal_after_max_attempts,
        'instructionsTemplate': request.instructions_template,
        'updatedAt': request.updated_at,
    })
    storage.save_teacher_draft(draft.to_dict())
    return {"draft": draft.to_dict()}


def create_app():
    """Factory function for creating the app (useful for testing)."""
    return app
