import pytest
from pydantic import TypeAdapter, ValidationError
from qatree.models.question import (
    Question,
    QuestionType,
    Option,
    FormField,
    InputQuestion,
    SingleChoiceQuestion,
    MultipleChoiceQuestion,
    FormQuestion,
)

adapter = TypeAdapter(Question)

def test_defaults():
    q = SingleChoiceQuestion(id="q1", question="Pick one")
    assert q.type == "single"
    assert q.options == []
    assert q.answer == []
    assert q.desc is None

def test_discriminated_union_dispatch():
    assert isinstance(adapter.validate_python({"id": "1", "type": "input"}), InputQuestion)
    assert isinstance(adapter.validate_python({"id": "2", "type": "single"}), SingleChoiceQuestion)
    assert isinstance(adapter.validate_python({"id": "3", "type": "multi"}), MultipleChoiceQuestion)
    form = adapter.validate_python({"id": "4", "type": "form", "fields": [{"id": "name", "label": "Name"}]})
    assert isinstance(form, FormQuestion)
    assert form.fields[0].id == "name"

def test_unknown_type_rejected():
    with pytest.raises(ValidationError):
        adapter.validate_python({"id": "1", "type": "slider"})

def test_type_tag_is_frozen():
    q = InputQuestion(id="1")
    with pytest.raises(ValidationError):
        q.type = "single"

def test_type_tag_must_match_variant():
    with pytest.raises(ValidationError):
        InputQuestion(id="1", type="single")

def test_option_is_immutable():
    option = Option(id="a", label="Red")
    with pytest.raises(ValidationError):
        option.label = "Green"

def test_form_field_keeps_extra_keys():
    field = FormField(id="age", label="Age", type="number")
    assert field.model_dump() == {"id": "age", "label": "Age", "type": "number"}

def test_question_type_from_string():
    assert QuestionType.from_string("MULTI") == QuestionType.MULTI
    assert QuestionType.from_string(" form ") == QuestionType.FORM
    assert QuestionType.from_string("text") is None
    assert QuestionType.from_string(None) is None
