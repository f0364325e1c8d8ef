"""DiagnosisSession — one user's progress through one scoring test.

The session is a cursor over the test's immutable question tuple plus an
accumulator of ``{parameter_name: points}``.  It does no skipping and no
validation: conditional skips are decided by :class:`SkipPolicy` and
applied by the driver, and unknown parameters are simply recorded.

State machine::

    NotStarted (cursor == 0) -> InProgress -> Complete (cursor >= N)

``next_question()`` advances the cursor every time it returns a question,
including questions the caller will auto-skip.  ``current_question()`` is
the question most recently served.
"""

from __future__ import annotations

from scoring_rulesets.evaluator import RuleEvaluator
from scoring_rulesets.models.question import Question
from scoring_rulesets.models.schema import ScoringTest


class DiagnosisSession:
    """Mutable per-user state for a :class:`ScoringTest`.

    Args:
        test: the shared, read-only test definition.
        evaluator: rule evaluator used by :meth:`diagnosis_result`.
    """

    def __init__(self, test: ScoringTest, evaluator: RuleEvaluator | None = None) -> None:
        self._test = test
        self._evaluator = evaluator or RuleEvaluator()
        self._answers: dict[str, int] = {}
        self._cursor = 0

    @property
    def test(self) -> ScoringTest:
        return self._test

    @property
    def cursor(self) -> int:
        """0-based index of the next question to serve."""
        return self._cursor

    @property
    def current_question_number(self) -> int:
        """1-based number of the most recently served question (0 before the first)."""
        return self._cursor

    @property
    def total_questions(self) -> int:
        return len(self._test.questions)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def next_question(self) -> Question | None:
        """Serve the question at the cursor and advance; None once exhausted."""
        if self._cursor >= self.total_questions:
            return None
        question = self._test.questions[self._cursor]
        self._cursor += 1
        return question

    def current_question(self) -> Question | None:
        """The most recently served question, or None before the first."""
        if self._cursor == 0 or self._cursor > self.total_questions:
            return None
        return self._test.questions[self._cursor - 1]

    def is_complete(self) -> bool:
        return self._cursor >= self.total_questions

    # ------------------------------------------------------------------
    # Answers
    # ------------------------------------------------------------------

    def record_answer(self, parameter_name: str, value: int) -> None:
        """Store *value* under *parameter_name*; a later call overwrites it."""
        self._answers[parameter_name] = value

    def has_answer_for(self, parameter_name: str) -> bool:
        return parameter_name in self._answers

    def answer_for(self, parameter_name: str) -> int | None:
        return self._answers.get(parameter_name)

    def collected_answers(self) -> dict[str, int]:
        """Copy of the recorded answers."""
        return dict(self._answers)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def total_score(self) -> int:
        """Sum of every recorded value, auto-skip zeros included."""
        return sum(self._answers.values())

    def diagnosis_result(self) -> str:
        """Diagnosis label for the current total under the test's rules."""
        return self._evaluator.evaluate(self.total_score(), self._test.rules)


def start_session(test: ScoringTest, evaluator: RuleEvaluator | None = None) -> DiagnosisSession:
    """Create a fresh session positioned before the first question."""
    return DiagnosisSession(test, evaluator)
