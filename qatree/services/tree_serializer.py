import json
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from qatree.models.qa_tree import QaTree, QaTreeNode
from qatree.models.question import (
    BaseQuestion,
    FormQuestion,
    InputQuestion,
    MultipleChoiceQuestion,
    QuestionType,
    require_all_types,
    SingleChoiceQuestion,
)
from qatree.services.answer_codec import find_option_label, parse_option_string

logger = logging.getLogger(__name__)

class FlatRecord(BaseModel):
    """One node of the tree, flattened for incremental delivery."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    node_id: str
    parent_id: Optional[str] = None
    question_data: Dict[str, Any]
    answer: str = ""

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

def _base_data(qa: BaseQuestion, type_tag: str) -> Dict[str, Any]:
    return {
        "type": type_tag,
        "question": qa.question or "",
        "desc": qa.desc or "",
    }

def _text_data(question: Optional[str]) -> Dict[str, Any]:
    return {"type": "text", "question": question or "", "desc": ""}

def _format_choice_answer(qa) -> str:
    if not qa.answer:
        return ""
    labels = []
    for token in qa.answer:
        parsed = parse_option_string(token)
        option_id = parsed.id if parsed is not None else token
        # Re-resolve against the current options so renamed labels show up
        label = find_option_label(qa.options, option_id)
        labels.append(label if label is not None else token)
    return ",".join(labels)

def _project_input(qa: InputQuestion) -> Tuple[Dict[str, Any], str]:
    return _base_data(qa, QuestionType.INPUT.value), qa.answer or ""

def _project_choice(qa, type_tag: str) -> Tuple[Dict[str, Any], str]:
    data = _base_data(qa, type_tag)
    data["options"] = [option.model_dump() for option in qa.options or []]
    return data, _format_choice_answer(qa)

def _project_single(qa: SingleChoiceQuestion) -> Tuple[Dict[str, Any], str]:
    return _project_choice(qa, QuestionType.SINGLE.value)

def _project_multi(qa: MultipleChoiceQuestion) -> Tuple[Dict[str, Any], str]:
    return _project_choice(qa, QuestionType.MULTI.value)

def _project_form(qa: FormQuestion) -> Tuple[Dict[str, Any], str]:
    data = _base_data(qa, QuestionType.FORM.value)
    data["fields"] = [field.model_dump() for field in qa.fields or []]
    if qa.answer is None:
        return data, ""
    return data, json.dumps(qa.answer, ensure_ascii=False, separators=(",", ":"))

_PROJECTORS: Dict[QuestionType, Callable[[Any], Tuple[Dict[str, Any], str]]] = require_all_types({
    QuestionType.INPUT: _project_input,
    QuestionType.SINGLE: _project_single,
    QuestionType.MULTI: _project_multi,
    QuestionType.FORM: _project_form,
}, "serializer projection")

def build_record(node: QaTreeNode, parent_id: Optional[str]) -> FlatRecord:
    qa = node.question
    if qa is None:
        return FlatRecord(node_id=node.id, parent_id=parent_id, question_data=_text_data(None))

    kind = QuestionType.from_string(getattr(qa, "type", None))
    if kind is None:
        logger.debug(f"Node {node.id} has unrecognized question type, using text projection")
        return FlatRecord(node_id=node.id, parent_id=parent_id,
                          question_data=_text_data(getattr(qa, "question", None)))

    question_data, answer = _PROJECTORS[kind](qa)
    return FlatRecord(node_id=node.id, parent_id=parent_id, question_data=question_data, answer=answer)

def iter_records(tree: Optional[QaTree]) -> Iterator[FlatRecord]:
    """Yields records lazily, every parent before its descendants."""
    if tree is None:
        return
    for node, parent_id in tree.walk():
        yield build_record(node, parent_id)

def serialize(tree: Optional[QaTree]) -> List[FlatRecord]:
    return list(iter_records(tree))

def serialize_json(tree: Optional[QaTree]) -> str:
    return json.dumps([record.to_wire() for record in iter_records(tree)], ensure_ascii=False)
