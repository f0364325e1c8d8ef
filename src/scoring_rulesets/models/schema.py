"""Pydantic model for a scoring test definition.

Mirrors one entry of ``v1/tests.yaml``:

    - name: APACHE II (...)
      command: /apacheii        # optional
      questions: [...]
      rules:
        "0-4": Minimal severity
        ">=35": Extreme severity

The legacy JSON keys (``testName``, ``diagnosisRules``) are accepted too.
Rule keys are coerced to strings (an unquoted ``15:`` loads as ``"15"``) and
``rules`` is stored as a read-only mapping shared by all sessions.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

from .question import Question, string_keys


class ScoringTest(BaseModel):
    """Ordered questions plus score-range rules; shared read-only by sessions."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(validation_alias=AliasChoices("name", "testName"))
    questions: Tuple[Question, ...] = ()
    # rule-key ("N-M", ">=N", "≥N" or "N") -> diagnosis label
    rules: Mapping[str, str] = Field(
        default_factory=dict,
        validate_default=True,
        validation_alias=AliasChoices("rules", "diagnosisRules"),
    )
    command: Optional[str] = None

    @field_validator("questions", mode="before")
    @classmethod
    def _none_to_empty_questions(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("rules", mode="before")
    @classmethod
    def _coerce_rules(cls, v: Any) -> Any:
        return string_keys(v)

    @field_validator("rules")
    @classmethod
    def _freeze_rules(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    @field_serializer("rules")
    def _dump_rules(self, v: Mapping[str, str]) -> dict[str, str]:
        return dict(v)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def chat_command(self) -> str:
        """The command that starts this test in a chat, e.g. ``/apacheii``.

        Uses the explicit ``command`` when set; otherwise derives it from
        the part of the name before the first parenthesis.
        """
        if self.command:
            return self.command if self.command.startswith("/") else f"/{self.command}"
        short = self.name.split("(", 1)[0].lower()
        return "/" + re.sub(r"[^0-9a-z]", "", short)

    def diagnosis_rules(self) -> dict[str, str]:
        """Copy of the rule-key -> label mapping, in authored order."""
        return dict(self.rules)
