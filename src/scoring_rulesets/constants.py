"""Scoring constants shared across the SDK.

These values are referenced by the session, rule evaluator, skip policy,
mortality lookup and conversational driver.

Several constants can be overridden via environment variables so that
deployments can adjust user-facing labels without code changes.
"""

import os

# Label returned when no diagnosis rule matches the total score.
# Overridable via SCORING_UNDETERMINED_LABEL env var.
UNDETERMINED_LABEL = os.getenv("SCORING_UNDETERMINED_LABEL", "Undetermined")

# Label returned by the mortality lookup for an unrecognised test name.
# Overridable via SCORING_UNKNOWN_RISK_LABEL env var.
UNKNOWN_RISK_LABEL = os.getenv("SCORING_UNKNOWN_RISK_LABEL", "Unknown")

# Test names as they appear in v1/tests.yaml; also the mortality-table keys.
APACHE_II_NAME = "APACHE II (Acute Physiology And Chronic Health Evaluation II)"
APACHE_III_NAME = "APACHE III (Acute Physiology And Chronic Health Evaluation III)"

# Parameter that records whether the patient is mechanically ventilated
# (1 = yes, 0 = no), and the question parameter that elicits it.
VENTILATION_PARAMETER = "is_ventilated"
VENTILATION_CARRIER_PARAMETER = "respiratory_rate"

# Free-form replies accepted for the ventilation yes/no prompt (lower-case).
YES_REPLIES: frozenset[str] = frozenset({"yes", "y", "да"})
NO_REPLIES: frozenset[str] = frozenset({"no", "n", "нет"})

# Chat commands that are not bound to a test.
START_COMMAND = "/start"
CANCEL_COMMAND = "/cancel"

# Hint text appended to the question message, keyed by parameter name.
PARAMETER_HINTS: dict[str, str] = {
    "map": "Formula: (systolic BP + 2 × diastolic BP) / 3",
    "respiratory_rate": "Reply 'yes' if the patient is on mechanical ventilation, otherwise 'no'",
    "pao2": "Not used for ventilated patients with FiO₂ ≥ 0.5",
    "aado2": "Only for ventilated patients with FiO₂ ≥ 0.5",
}

# Short user-facing notices.  Placeholders are filled with str.format().
MESSAGES: dict[str, str] = {
    "no_active_test": "There is no active test. Start one with {commands}",
    "question_not_found": "Error: the current question was not found",
    "no_questions": "Error: this test has no questions",
    "test_unavailable": "Test {name} is not available",
    "enter_number": "Please enter the answer number (1, 2, 3 and so on)",
    "choose_listed": "Please choose one of the listed answer numbers",
    "ventilation_prompt": "Is the patient on mechanical ventilation? (reply 'yes' or 'no')",
    "cancelled": "Test cancelled. To start a new test use {commands}",
}
