"""Step and reply models — the contract between the driver and its callers.

These models describe what the conversational driver returns for each
inbound message.  They carry both the rendered chat text and a structured
view of the step so that non-chat callers (the HTTP API, the simulator)
do not have to parse message text.

Step types:
  - QuestionStep: a question is waiting for the user's answer
  - ResultStep: the test is complete and has been scored

``ChatReply.step`` is None for plain notices (welcome, cancel, input errors).
"""

from typing import Literal

from pydantic import BaseModel


class QuestionPayload(BaseModel):
    """Flattened question for callers.

    ``number`` is the 1-based position of the question in the test,
    counting questions that were skipped automatically.
    """

    number: int
    total: int
    text: str
    parameter_name: str
    # answer labels in numbering order (option 1 is options[0])
    options: list[str]
    hint: str | None = None


class QuestionStep(BaseModel):
    """Driver step: present a question and wait for the answer."""

    type: Literal["question"] = "question"
    test_name: str
    question: QuestionPayload
    # True while the reply is expected to be the yes/no ventilation answer
    awaiting_ventilation: bool = False


class ResultStep(BaseModel):
    """Driver step: all questions consumed and the total scored."""

    type: Literal["result"] = "result"
    test_name: str
    total_score: int
    diagnosis: str
    mortality_risk: str


# Callers can match on step.type to dispatch rendering logic.
StepResult = QuestionStep | ResultStep


class ChatReply(BaseModel):
    """Reply to one inbound chat message."""

    user_id: str
    text: str
    step: StepResult | None = None


class SessionInfo(BaseModel):
    """Public snapshot of an active diagnosis session."""

    user_id: str
    test_name: str
    question_number: int
    total_questions: int
    answers: dict[str, int]
    total_score: int
    complete: bool
