"""RuleEvaluator — maps a total score to a diagnosis label.

Rule keys come in three mutually exclusive forms:

  - ``"N-M"``  inclusive range        → matches N <= score <= M
  - ``">=N"``  or ``"≥N"`` threshold  → matches score >= N
  - ``"N"``    exact value            → matches score == N

Both threshold dialects appear in the bundled test definitions, sometimes
within the same file, so one evaluator handles both.

Rules are ordered ascending by their upper bound (M for ranges, N for
thresholds and exact values) and the first rule containing the score wins.
Rules with equal bounds keep their authored order.  A rule key that cannot
be parsed is logged and left out; it never aborts evaluation of the rest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Mapping

from scoring_rulesets.constants import UNDETERMINED_LABEL

logger = logging.getLogger(__name__)

_THRESHOLD_PREFIXES = (">=", "≥")


@dataclass(frozen=True)
class ParsedRule:
    """A rule key parsed into numeric bounds, paired with its label.

    ``high`` is the bound the rule is ordered by: M for ``"N-M"``, and N for
    thresholds and exact values, where it equals ``low``.  A threshold is
    still open-ended; ``high`` only places it in the ordering.
    """

    key: str
    label: str
    kind: Literal["range", "threshold", "exact"]
    low: int
    high: int

    @property
    def sort_key(self) -> int:
        return self.high

    def matches(self, score: int) -> bool:
        if self.kind == "range":
            return self.low <= score <= self.high
        if self.kind == "threshold":
            return score >= self.low
        return score == self.low


def parse_rule_key(key: str, label: str = "") -> ParsedRule:
    """Parse a rule key into a :class:`ParsedRule`.

    Raises:
        ValueError: if a numeric component is not an integer.
    """
    raw = key.strip()

    for prefix in _THRESHOLD_PREFIXES:
        if raw.startswith(prefix):
            bound = int(raw[len(prefix):].strip())
            return ParsedRule(key, label, "threshold", bound, bound)

    if "-" in raw:
        low, _, high = raw.partition("-")
        return ParsedRule(key, label, "range", int(low.strip()), int(high.strip()))

    value = int(raw)
    return ParsedRule(key, label, "exact", value, value)


class RuleEvaluator:
    """Evaluates score-range rules with first-match-wins semantics.

    Args:
        undetermined_label: label returned when no rule matches.
    """

    def __init__(self, undetermined_label: str = UNDETERMINED_LABEL) -> None:
        self.undetermined_label = undetermined_label

    def ordered_rules(self, rules: Mapping[str, str]) -> list[ParsedRule]:
        """Parse *rules* and sort them ascending by upper bound.

        Malformed keys are logged at WARNING and dropped.  ``sorted`` is
        stable, so rules sharing a bound stay in authored order.
        """
        parsed: list[ParsedRule] = []
        for key, label in rules.items():
            try:
                parsed.append(parse_rule_key(key, label))
            except ValueError as exc:
                logger.warning("Skipping malformed rule key %r: %s", key, exc)
        return sorted(parsed, key=lambda rule: rule.sort_key)

    def evaluate(self, score: int, rules: Mapping[str, str]) -> str:
        """Return the label of the first matching rule, or the undetermined label."""
        for rule in self.ordered_rules(rules):
            if rule.matches(score):
                return rule.label
        return self.undetermined_label
