from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from qatree.core import config
from qatree.models.question import QuestionType, require_all_types
from qatree.services.answer_codec import decode_all

class FormAnswerItem(BaseModel):
    id: str
    value: List[str] = []

# Wire shapes accepted for the answer field:
#   input          -> "text"
#   single / multi -> ["id:label", ...]  (single may also arrive as a bare "id:label")
#   form           -> [{"id": ..., "value": [...]}, ...]
# Generic maps are kept as a fallback for payloads that don't fit FormAnswerItem.
AnswerPayload = Union[str, List[str], List[FormAnswerItem], List[Dict[str, Any]]]

class UnifiedAnswerRequest(BaseModel):
    """
    Answer submitted by the client for any question kind.
    The accessors never raise: a payload that doesn't fit the requested
    shape yields None (or an empty result).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str = Field(..., min_length=1)
    node_id: Optional[str] = None
    question_type: str = Field(..., min_length=1)
    answer: AnswerPayload
    context: Optional[Dict[str, Any]] = None
    user_id: str = Field(..., min_length=1)

    @property
    def kind(self) -> Optional[QuestionType]:
        return QuestionType.from_string(self.question_type)

    def choice_answer(self) -> Optional[List[str]]:
        if isinstance(self.answer, list) and all(isinstance(a, str) for a in self.answer):
            return self.answer
        return None

    def input_answer(self) -> Optional[str]:
        if isinstance(self.answer, str):
            return self.answer
        return None

    def form_answer(self) -> Optional[List[FormAnswerItem]]:
        if not isinstance(self.answer, list):
            return None
        items = []
        for entry in self.answer:
            if isinstance(entry, FormAnswerItem):
                items.append(entry)
            elif isinstance(entry, dict):
                value = entry.get("value")
                if value is None:
                    value = []
                elif not isinstance(value, list):
                    value = [value]
                items.append(FormAnswerItem(id=str(entry.get("id", "")), value=[str(v) for v in value]))
            else:
                return None
        return items

    def choice_tokens(self) -> Optional[List[str]]:
        """Choice tokens regardless of whether a single choice came as a bare string or a list."""
        single = self.input_answer()
        if single is not None:
            return [single]
        return self.choice_answer()

    def answer_string(self) -> str:
        kind = self.kind
        if kind is None:
            return ""
        return _ANSWER_STRINGS[kind](self)

    def to_readable_text(self) -> str:
        kind = self.kind
        if kind is None:
            return ""
        return _READABLE_TEXTS[kind](self)

    def choice_ids(self) -> List[str]:
        return [parsed.id for parsed in self._parsed_choices()]

    def choice_contents(self) -> List[str]:
        return [parsed.content for parsed in self._parsed_choices()]

    def _parsed_choices(self):
        kind = self.kind
        if kind is None:
            return []
        return decode_all(_CHOICE_TOKENS[kind](self))

def _no_choices(request: UnifiedAnswerRequest) -> Optional[List[str]]:
    return None

def _form_segments(request: UnifiedAnswerRequest) -> List[str]:
    return [f"{item.id}: {', '.join(item.value)}" for item in request.form_answer() or []]

def _prefixed(tokens: Optional[List[str]]) -> str:
    if not tokens:
        return ""
    return config.READABLE_CHOICE_PREFIX + ", ".join(tokens)

# Single choices are already "id:content", a one-token list renders as that token
_ANSWER_STRINGS = require_all_types({
    QuestionType.SINGLE: lambda r: ", ".join(r.choice_tokens() or []),
    QuestionType.MULTI: lambda r: ", ".join(r.choice_answer() or []),
    QuestionType.INPUT: lambda r: r.input_answer() or "",
    QuestionType.FORM: lambda r: "; ".join(
        f"{item.id}: {', '.join(item.value)}" for item in r.form_answer() or [] if item.value
    ),
}, "answer string rendering")

_READABLE_TEXTS = require_all_types({
    QuestionType.SINGLE: lambda r: _prefixed(r.choice_tokens()),
    QuestionType.MULTI: lambda r: _prefixed(r.choice_answer()),
    QuestionType.INPUT: lambda r: r.input_answer() or "",
    QuestionType.FORM: lambda r: "".join(f"{segment}; " for segment in _form_segments(r)),
}, "readable text rendering")

_CHOICE_TOKENS = require_all_types({
    QuestionType.SINGLE: UnifiedAnswerRequest.choice_tokens,
    QuestionType.MULTI: UnifiedAnswerRequest.choice_answer,
    QuestionType.INPUT: _no_choices,
    QuestionType.FORM: _no_choices,
}, "choice token accessor")
