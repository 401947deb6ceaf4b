import uuid
import logging
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from qatree.models.answer import FormAnswerItem, UnifiedAnswerRequest
from qatree.models.qa_tree import QaTree
from qatree.models.question import (
    FormQuestion,
    InputQuestion,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
    require_all_types,
    SingleChoiceQuestion,
)
from qatree.services.answer_codec import normalize_choice_token
from qatree.services.tree_serializer import FlatRecord, serialize

logger = logging.getLogger(__name__)

class QaSession(BaseModel):
    id: str
    user_id: str
    tree: QaTree = Field(default_factory=QaTree)
    current_node_id: Optional[str] = None
    context: Optional[Dict[str, Any]] = None

class QaTreeService:
    def __init__(self):
        # In-memory storage, one tree per session
        self.sessions: Dict[str, QaSession] = {}

    def create_session(self, user_id: str, context: Optional[Dict[str, Any]] = None) -> str:
        session_id = str(uuid.uuid4())
        self.sessions[session_id] = QaSession(id=session_id, user_id=user_id, context=context)
        logger.info(f"Created session {session_id} for user {user_id}")
        return session_id

    def get_session(self, session_id: str) -> Optional[QaSession]:
        return self.sessions.get(session_id)

    def _require_session(self, session_id: str) -> QaSession:
        session = self.get_session(session_id)
        if not session:
            raise ValueError("Session not found")
        return session

    def add_question(self, session_id: str, question: Question, parent_id: Optional[str] = None,
                     branch: Optional[str] = None) -> str:
        """Attaches a question under parent_id (default: current node). The first question becomes the root."""
        session = self._require_session(session_id)
        tree = session.tree

        if tree.is_empty():
            node = tree.set_root(question)
        else:
            node = tree.append(parent_id or session.current_node_id, question, branch=branch)

        session.current_node_id = node.id
        return node.id

    def submit_answer(self, request: UnifiedAnswerRequest) -> UnifiedAnswerRequest:
        """
        Stores the canonical form of an incoming answer on its node.
        Returns a copy of the request carrying the stored answer, so its
        renderings reflect what was actually recorded.
        """
        session = self._require_session(request.session_id)
        node_id = request.node_id or session.current_node_id
        node = session.tree.get(node_id) if node_id else None
        if node is None:
            raise ValueError("Node not found")

        qa = node.question
        kind = request.kind
        if qa is None or kind is None or QuestionType.from_string(qa.type) != kind:
            logger.warning(f"Rejected answer for node {node.id}: type '{request.question_type}' "
                           f"does not match question '{getattr(qa, 'type', None)}'")
            raise ValueError("Question type mismatch")

        stored = _APPLIERS[kind](qa, request)
        session.current_node_id = node.id
        return request.model_copy(update={"node_id": node.id, "answer": stored})

    def serialize_session(self, session_id: str) -> List[FlatRecord]:
        session = self._require_session(session_id)
        return serialize(session.tree)

# Each applier stores the canonical answer on the question and returns it in
# its wire shape.

def _apply_input(qa: InputQuestion, request: UnifiedAnswerRequest):
    value = request.input_answer()
    if value is None:
        raise ValueError("Input answer must be a string")
    qa.answer = value
    return value

def _apply_single(qa: SingleChoiceQuestion, request: UnifiedAnswerRequest):
    tokens = request.choice_tokens()
    if tokens is None:
        raise ValueError("Choice answer must be a string or a list of strings")
    if len(tokens) > 1:
        logger.warning(f"Rejected {len(tokens)} choices for single choice question {qa.id}")
        raise ValueError("Single choice answer holds more than one option")
    qa.answer = [normalize_choice_token(qa.options, t) for t in tokens]
    return list(qa.answer)

def _apply_multi(qa: MultipleChoiceQuestion, request: UnifiedAnswerRequest):
    tokens = request.choice_answer()
    if tokens is None:
        raise ValueError("Choice answer must be a list of strings")
    qa.answer = [normalize_choice_token(qa.options, t) for t in tokens]
    return list(qa.answer)

def _apply_form(qa: FormQuestion, request: UnifiedAnswerRequest):
    items = request.form_answer()
    if items is None:
        raise ValueError("Form answer must be a list of {id, value} entries")
    qa.answer = {item.id: list(item.value) for item in items}
    return [FormAnswerItem(id=field_id, value=list(values)) for field_id, values in qa.answer.items()]

_APPLIERS = require_all_types({
    QuestionType.INPUT: _apply_input,
    QuestionType.SINGLE: _apply_single,
    QuestionType.MULTI: _apply_multi,
    QuestionType.FORM: _apply_form,
}, "answer applier")
