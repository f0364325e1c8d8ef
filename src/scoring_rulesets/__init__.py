"""scoring_rulesets — conversational severity-scoring SDK (APACHE II/III).

Public API:
    ScoringEngine     — conversational driver: one chat message in, one reply out
    TestStore         — loads YAML/JSON test definitions into typed models
    DiagnosisSession  — cursor + answer accumulator for one user and one test
    start_session     — create a fresh DiagnosisSession
    SessionStore      — per-user session registry with per-user locking
    RuleEvaluator     — maps a total score to a diagnosis label
    SkipPolicy        — table-driven conditional question skipping
    MessageRenderer   — Jinja2 renderer for chat messages
    estimate_mortality_risk — coarse mortality band by score and test name

Models:
    Question, ScoringTest                 — test definitions
    ChatReply, QuestionStep, ResultStep   — driver output
    QuestionPayload, SessionInfo, StepResult
"""

from scoring_rulesets.engine import ScoringEngine
from scoring_rulesets.evaluator import ParsedRule, RuleEvaluator, parse_rule_key
from scoring_rulesets.models.question import Question
from scoring_rulesets.models.schema import ScoringTest
from scoring_rulesets.models.session import (
    ChatReply,
    QuestionPayload,
    QuestionStep,
    ResultStep,
    SessionInfo,
    StepResult,
)
from scoring_rulesets.mortality import estimate_mortality_risk
from scoring_rulesets.prompt import MessageRenderer
from scoring_rulesets.ruleset import TestStore
from scoring_rulesets.session import DiagnosisSession, start_session
from scoring_rulesets.skip_policy import SkipPolicy
from scoring_rulesets.store import SessionStore

__all__ = [
    # Driver & stores
    "ScoringEngine",
    "SessionStore",
    "TestStore",
    # Session
    "DiagnosisSession",
    "start_session",
    # Scoring
    "ParsedRule",
    "RuleEvaluator",
    "SkipPolicy",
    "estimate_mortality_risk",
    "parse_rule_key",
    # Rendering
    "MessageRenderer",
    # Models
    "ChatReply",
    "Question",
    "QuestionPayload",
    "QuestionStep",
    "ResultStep",
    "ScoringTest",
    "SessionInfo",
    "StepResult",
]
