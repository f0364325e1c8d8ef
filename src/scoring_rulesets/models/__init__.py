"""Public model re-exports for scoring_rulesets.

Consumers should import from ``scoring_rulesets.models`` rather than
reaching into sub-modules directly.
"""

# --- Questions / tests ---
from scoring_rulesets.models.question import Question
from scoring_rulesets.models.schema import ScoringTest

# --- Steps / replies ---
from scoring_rulesets.models.session import (
    ChatReply,
    QuestionPayload,
    QuestionStep,
    ResultStep,
    SessionInfo,
    StepResult,
)

__all__ = [
    # Questions / tests
    "Question",
    "ScoringTest",
    # Steps / replies
    "ChatReply",
    "QuestionPayload",
    "QuestionStep",
    "ResultStep",
    "SessionInfo",
    "StepResult",
]
