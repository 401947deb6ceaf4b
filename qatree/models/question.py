from enum import Enum
from typing import List, Optional, Dict, Union, Literal, Annotated
from pydantic import BaseModel, ConfigDict, Field

class QuestionType(str, Enum):
    INPUT = "input"
    SINGLE = "single"
    MULTI = "multi"
    FORM = "form"

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["QuestionType"]:
        """Case-insensitive lookup. Returns None for unknown or missing tags."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

class Option(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str

class FormField(BaseModel):
    # Field kinds are left to the caller, extra keys are kept as-is
    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    label: str = ""

class BaseQuestion(BaseModel):
    id: str
    question: str = ""
    desc: Optional[str] = None

class InputQuestion(BaseQuestion):
    type: Literal["input"] = Field("input", frozen=True)
    answer: Optional[str] = None

class SingleChoiceQuestion(BaseQuestion):
    type: Literal["single"] = Field("single", frozen=True)
    options: List[Option] = []
    # Zero or one "id:label" token
    answer: List[str] = []

class MultipleChoiceQuestion(BaseQuestion):
    type: Literal["multi"] = Field("multi", frozen=True)
    options: List[Option] = []
    answer: List[str] = []

class FormQuestion(BaseQuestion):
    type: Literal["form"] = Field("form", frozen=True)
    fields: List[FormField] = []
    # field id -> entered values
    answer: Optional[Dict[str, List[str]]] = None

Question = Annotated[
    Union[InputQuestion, SingleChoiceQuestion, MultipleChoiceQuestion, FormQuestion],
    Field(discriminator="type"),
]

ChoiceQuestion = Union[SingleChoiceQuestion, MultipleChoiceQuestion]

def require_all_types(table, what: str):
    """Raises at import time when a dispatch table misses a question type."""
    missing = set(QuestionType) - set(table)
    if missing:
        raise RuntimeError(f"No {what} for question types: {sorted(t.value for t in missing)}")
    return table
