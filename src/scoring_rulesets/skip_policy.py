"""SkipPolicy — decides whether a question is bypassed given prior answers.

The policy is a table of ``{parameter_name: predicate}``.  A predicate
receives the answers recorded so far and returns True when the question
bound to that parameter should be skipped.  Parameters without an entry are
never skipped.

The default table encodes the oxygenation branch of the APACHE scores:

  - ``aado2`` (A-a gradient) is only asked for ventilated patients
  - ``pao2`` is only asked for non-ventilated patients

Skipping is a caller contract: the driver records 0 for the skipped
parameter and moves on.  The session itself never skips.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping

from scoring_rulesets.constants import VENTILATION_PARAMETER
from scoring_rulesets.models.question import Question

logger = logging.getLogger(__name__)

SkipPredicate = Callable[[Mapping[str, int]], bool]


def _is_ventilated(answers: Mapping[str, int]) -> bool:
    return answers.get(VENTILATION_PARAMETER) == 1


def skip_unless_ventilated(answers: Mapping[str, int]) -> bool:
    """True unless ventilation has been recorded as 1."""
    return not _is_ventilated(answers)


def skip_when_ventilated(answers: Mapping[str, int]) -> bool:
    """True when ventilation has been recorded as 1."""
    return _is_ventilated(answers)


DEFAULT_SKIP_RULES: dict[str, SkipPredicate] = {
    "aado2": skip_unless_ventilated,
    "pao2": skip_when_ventilated,
}


class SkipPolicy:
    """Table-driven skip decision.

    Args:
        rules: optional ``{parameter_name: predicate}`` table; defaults to
            :data:`DEFAULT_SKIP_RULES`.
    """

    def __init__(self, rules: Mapping[str, SkipPredicate] | None = None) -> None:
        self._rules = dict(DEFAULT_SKIP_RULES if rules is None else rules)

    def should_skip(self, question: Question, answers: Mapping[str, int]) -> bool:
        predicate = self._rules.get(question.parameter_name)
        if predicate is None:
            return False
        skip = predicate(answers)
        if skip:
            logger.debug("Skipping question for parameter %s", question.parameter_name)
        return skip
