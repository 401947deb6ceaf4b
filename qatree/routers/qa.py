import json
from typing import Any, Dict, Optional
from fastapi import APIRouter, Request, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from qatree.models.answer import UnifiedAnswerRequest
from qatree.models.question import Question
from qatree.services.tree_serializer import iter_records

router = APIRouter()

class CreateSessionRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    context: Optional[Dict[str, Any]] = None

class AddQuestionRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    question: Question
    parent_id: Optional[str] = None
    branch: Optional[str] = None

def get_service(request: Request):
    return request.app.state.qa_tree_service

def _session_or_404(request: Request, session_id: str):
    session = get_service(request).get_session(session_id)
    if not session:
        raise HTTPException(404, "Session not found")
    return session

@router.post("/sessions")
async def create_session(request: Request, body: CreateSessionRequest):
    session_id = get_service(request).create_session(body.user_id, context=body.context)
    return {"success": True, "session_id": session_id}

@router.get("/sessions/{session_id}")
async def get_session(request: Request, session_id: str):
    session = _session_or_404(request, session_id)
    return {"session": session.model_dump(mode="json")}

@router.post("/sessions/{session_id}/questions")
async def add_question(request: Request, session_id: str, body: AddQuestionRequest):
    _session_or_404(request, session_id)
    try:
        node_id = get_service(request).add_question(
            session_id, body.question, parent_id=body.parent_id, branch=body.branch
        )
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"success": True, "node_id": node_id}

@router.post("/answer")
async def submit_answer(request: Request, body: UnifiedAnswerRequest):
    _session_or_404(request, body.session_id)
    try:
        stored = get_service(request).submit_answer(body)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"success": True, "answer": stored.answer_string(), "readable": stored.to_readable_text()}

@router.get("/sessions/{session_id}/tree")
async def get_tree(request: Request, session_id: str):
    session = _session_or_404(request, session_id)
    return [record.to_wire() for record in iter_records(session.tree)]

@router.get("/sessions/{session_id}/tree/stream")
async def stream_tree(request: Request, session_id: str):
    session = _session_or_404(request, session_id)
    # Snapshot so a concurrent answer can't reshape the tree mid-stream
    tree = session.tree.snapshot()

    async def event_generator():
        for record in iter_records(tree):
            yield f"data: {json.dumps(record.to_wire(), ensure_ascii=False)}\n\n"
        yield "data: [DONE]\n\n"

    return StreamingResponse(event_generator(), media_type="text/event-stream")
