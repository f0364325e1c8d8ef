"""Question model for scoring questionnaires.

A question carries the prompt text shown to the user, the scoring parameter
its answer is stored under, and an ordered mapping of answer label to point
value.  The order of ``answers`` is the order in which options are numbered
for the user, so it is preserved exactly as authored in the YAML file.

``answers`` is stored as a read-only mapping: questions are shared by every
session running the test, so nothing may edit them in place.  Labels are
coerced to strings, so an unquoted YAML label such as ``15`` is accepted.

Both the snake_case keys used in ``v1/tests.yaml`` and the camelCase keys
of the legacy JSON configuration (``questionText``, ``parameterName``) are
accepted when loading.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


def string_keys(v: Any) -> Any:
    """None -> {}; mapping keys -> str.  Shared by the model validators."""
    if v is None:
        return {}
    if isinstance(v, Mapping):
        return {str(k): item for k, item in v.items()}
    return v


class Question(BaseModel):
    """One prompt of a scoring test; immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(validation_alias=AliasChoices("text", "questionText"))
    parameter_name: str = Field(
        validation_alias=AliasChoices("parameter_name", "parameterName"),
    )
    # label -> points, in presentation order
    answers: Mapping[str, int] = Field(default_factory=dict, validate_default=True)

    @field_validator("answers", mode="before")
    @classmethod
    def _coerce_answers(cls, v: Any) -> Any:
        return string_keys(v)

    @field_validator("answers")
    @classmethod
    def _freeze_answers(cls, v: Mapping[str, int]) -> Mapping[str, int]:
        return MappingProxyType(dict(v))

    @field_serializer("answers")
    def _dump_answers(self, v: Mapping[str, int]) -> dict[str, int]:
        return dict(v)

    def answer_values(self) -> dict[str, int]:
        """Copy of the label -> points mapping, in authored order."""
        return dict(self.answers)

    def possible_answers(self) -> List[str]:
        """Answer labels in the order they are numbered for the user."""
        return list(self.answers)

    def value_for_answer(self, label: str) -> Optional[int]:
        """Points for *label*, or None if the label is not an option."""
        return self.answers.get(label)
