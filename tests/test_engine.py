"""ScoringEngine tests — the conversational flow end to end.

Uses small in-memory tests from conftest (``simple_test``, ``ventilation_test``)
for the flow rules and the bundled v1/tests.yaml for a full APACHE II run.

Flow reference:
    /start → welcome, /<command> → first question, digits → answer,
    yes/no at respiratory_rate → ventilation, /cancel → discard.
"""

import pytest

from helpers.factories import make_question, make_test, memory_store
from scoring_rulesets.constants import (
    APACHE_II_NAME,
    MESSAGES,
    UNDETERMINED_LABEL,
    UNKNOWN_RISK_LABEL,
)
from scoring_rulesets.engine import ScoringEngine
from scoring_rulesets.evaluator import RuleEvaluator
from scoring_rulesets.models.session import QuestionStep, ResultStep
from scoring_rulesets.mortality import estimate_mortality_risk

USER = "user1"


# =====================================================================
# Commands
# =====================================================================


class TestCommands:
    """/start, test commands and /cancel."""

    def test_start_lists_commands(self, engine):
        reply = engine.handle_message(USER, "/start")
        assert reply.step is None
        assert "/simple - Simple" in reply.text
        assert "/vent - Ventilation" in reply.text
        assert "/cancel" in reply.text

    def test_test_command_starts_session(self, engine):
        reply = engine.handle_message(USER, "/simple")
        assert isinstance(reply.step, QuestionStep)
        assert reply.step.question.number == 1
        assert reply.step.question.total == 1
        assert reply.step.question.options == ["A", "B"]
        assert reply.text.splitlines()[0] == "Question 1 of 1:"
        assert "1. A" in reply.text and "2. B" in reply.text
        assert USER in engine.sessions

    def test_command_with_trailing_text(self, engine):
        reply = engine.handle_message(USER, "/SIMPLE please")
        assert isinstance(reply.step, QuestionStep)

    def test_cancel_discards_session(self, engine):
        engine.handle_message(USER, "/simple")
        reply = engine.handle_message(USER, "/cancel")
        assert USER not in engine.sessions
        assert reply.text.startswith("Test cancelled")

    def test_cancel_without_session(self, engine):
        reply = engine.handle_message(USER, "/cancel")
        assert reply.text.startswith("Test cancelled")

    def test_new_test_replaces_previous(self, engine):
        engine.handle_message(USER, "/vent")
        engine.handle_message(USER, "/simple")
        assert engine.session_info(USER).test_name == "Simple"

    def test_unknown_test_name(self, engine):
        reply = engine.start_test(USER, "Nope")
        assert reply.text == MESSAGES["test_unavailable"].format(name="Nope")
        assert USER not in engine.sessions

    def test_unknown_command_is_an_answer(self, engine):
        reply = engine.handle_message(USER, "/nope")
        assert reply.text.startswith("There is no active test")


# =====================================================================
# Answering
# =====================================================================


class TestAnswers:
    """Numbered answers, invalid input and completion."""

    def test_single_question_end_to_end(self, engine):
        engine.handle_message(USER, "/simple")
        reply = engine.handle_message(USER, "2")
        assert isinstance(reply.step, ResultStep)
        assert reply.step.total_score == 2
        assert reply.step.diagnosis == "Severe"
        assert reply.step.mortality_risk == UNKNOWN_RISK_LABEL
        assert "Total score: 2" in reply.text
        assert "Severity: Severe" in reply.text
        assert USER not in engine.sessions, "completed session is discarded"

    def test_no_active_test(self, engine):
        reply = engine.handle_message(USER, "1")
        assert reply.step is None
        assert reply.text.startswith("There is no active test")
        assert "/simple" in reply.text

    @pytest.mark.parametrize("text", ["abc", "", "1.5", "two"])
    def test_non_numeric_answer(self, engine, text):
        engine.handle_message(USER, "/simple")
        reply = engine.handle_message(USER, text)
        assert reply.text == MESSAGES["enter_number"]
        assert engine.session_info(USER).answers == {}

    @pytest.mark.parametrize("text", ["0", "3", "-1", "99"])
    def test_out_of_range_answer(self, engine, text):
        engine.handle_message(USER, "/simple")
        reply = engine.handle_message(USER, text)
        assert reply.text == MESSAGES["choose_listed"]
        assert engine.session_info(USER).question_number == 1

    def test_whitespace_around_answer(self, engine):
        engine.handle_message(USER, "/simple")
        reply = engine.handle_message(USER, "  1 ")
        assert reply.step.total_score == 1
        assert reply.step.diagnosis == "Mild"

    def test_session_info_snapshot(self, engine):
        engine.handle_message(USER, "/vent")
        engine.handle_message(USER, "no")
        info = engine.session_info(USER)
        assert info.test_name == "Ventilation"
        assert info.question_number == 1
        assert info.total_questions == 4
        assert info.answers == {"is_ventilated": 0}
        assert info.complete is False

    def test_session_info_without_session(self, engine):
        assert engine.session_info(USER) is None

    def test_users_are_independent(self, engine):
        engine.handle_message("alice", "/simple")
        engine.handle_message("bob", "/vent")
        reply = engine.handle_message("alice", "1")
        assert isinstance(reply.step, ResultStep)
        assert engine.session_info("bob").test_name == "Ventilation"


# =====================================================================
# Ventilation branch and skipping
# =====================================================================


class TestVentilation:
    """respiratory_rate carries the yes/no ventilation question."""

    def test_first_question_awaits_ventilation(self, engine):
        reply = engine.handle_message(USER, "/vent")
        assert reply.step.awaiting_ventilation is True
        assert reply.step.question.parameter_name == "respiratory_rate"
        assert "ventilation" in reply.step.question.hint

    def test_non_yes_no_repeats_prompt(self, engine):
        engine.handle_message(USER, "/vent")
        reply = engine.handle_message(USER, "1")
        assert reply.text == MESSAGES["ventilation_prompt"]
        assert engine.session_info(USER).answers == {}

    def test_yes_reasks_same_question_then_aado2(self, engine):
        engine.handle_message(USER, "/vent")
        reply = engine.handle_message(USER, "Yes")
        assert reply.step.question.parameter_name == "respiratory_rate"
        assert reply.step.question.number == 1
        assert reply.step.awaiting_ventilation is False
        assert reply.step.question.hint is None

        reply = engine.handle_message(USER, "2")
        assert reply.step.question.parameter_name == "aado2"
        assert reply.step.question.number == 2

        reply = engine.handle_message(USER, "1")
        # pao2 skipped for a ventilated patient
        assert reply.step.question.parameter_name == "age"
        assert reply.step.question.number == 4
        assert engine.session_info(USER).answers == {
            "is_ventilated": 1, "respiratory_rate": 4, "aado2": 0, "pao2": 0,
        }

    def test_no_skips_aado2(self, engine):
        engine.handle_message(USER, "/vent")
        engine.handle_message(USER, "нет")
        reply = engine.handle_message(USER, "1")
        assert reply.step.question.parameter_name == "pao2"
        assert reply.step.question.number == 3
        assert engine.session_info(USER).answers["aado2"] == 0

    def test_ventilation_flag_counts_toward_total(self, engine):
        engine.handle_message(USER, "/vent")
        engine.handle_message(USER, "y")
        engine.handle_message(USER, "1")
        engine.handle_message(USER, "1")
        reply = engine.handle_message(USER, "2")
        # is_ventilated=1 + respiratory 0 + aado2 0 + pao2 0 (skipped) + age 6
        assert reply.step.total_score == 7
        assert reply.step.diagnosis == "High"

    def test_trailing_skips_finish_the_test(self):
        test = make_test(
            "Tail",
            [make_question("respiratory_rate", {"ok": 1}), make_question("aado2")],
            rules={"1": "One"},
            command="/tail",
        )
        engine = ScoringEngine(memory_store(test))
        engine.handle_message(USER, "/tail")
        engine.handle_message(USER, "no")
        reply = engine.handle_message(USER, "1")
        assert isinstance(reply.step, ResultStep)
        assert reply.step.total_score == 1
        assert reply.step.diagnosis == "One"
        assert USER not in engine.sessions


def test_empty_test_reports_no_questions():
    engine = ScoringEngine(memory_store(make_test("Empty", [], command="/empty")))
    reply = engine.handle_message(USER, "/empty")
    assert reply.text == MESSAGES["no_questions"]
    assert reply.step is None
    assert USER not in engine.sessions


def test_no_rule_match_is_undetermined():
    test = make_test("Gap", [make_question("p", {"A": 5})], rules={"0-1": "Low"}, command="/gap")
    engine = ScoringEngine(memory_store(test))
    engine.handle_message(USER, "/gap")
    assert engine.handle_message(USER, "1").step.diagnosis == UNDETERMINED_LABEL


# =====================================================================
# Full run over the bundled APACHE II definition
# =====================================================================


def test_full_apache_ii_run(store):
    """Answer option 1 everywhere and 'no' to ventilation; check the result."""
    engine = ScoringEngine(store)
    test = store.get_test(APACHE_II_NAME)
    expected = 0

    reply = engine.handle_message(USER, "/apacheii")
    while isinstance(reply.step, QuestionStep):
        step = reply.step
        if step.awaiting_ventilation:
            reply = engine.handle_message(USER, "no")
            continue
        question = test.questions[step.question.number - 1]
        assert question.parameter_name != "aado2", "aado2 must be skipped"
        expected += question.value_for_answer(step.question.options[0])
        reply = engine.handle_message(USER, "1")

    assert isinstance(reply.step, ResultStep)
    assert reply.step.total_score == expected
    assert reply.step.diagnosis == RuleEvaluator().evaluate(expected, test.rules)
    assert reply.step.mortality_risk == estimate_mortality_risk(expected, APACHE_II_NAME)
    assert USER not in engine.sessions


def test_question_without_options_is_recorded_as_zero():
    test = make_test(
        "Sparse",
        [make_question("p", {"A": 3}), make_question("placeholder", {})],
        rules={"0-5": "Low"},
        command="/sparse",
    )
    engine = ScoringEngine(memory_store(test))
    engine.handle_message(USER, "/sparse")
    reply = engine.handle_message(USER, "1")
    assert isinstance(reply.step, ResultStep)
    assert reply.step.total_score == 3
    assert reply.step.diagnosis == "Low"
    assert USER not in engine.sessions


def test_only_question_without_options_finishes_at_start():
    test = make_test("Blank", [make_question("p", {})], rules={"0": "Zero"}, command="/blank")
    engine = ScoringEngine(memory_store(test))
    reply = engine.handle_message(USER, "/blank")
    assert isinstance(reply.step, ResultStep)
    assert reply.step.total_score == 0
    assert reply.step.diagnosis == "Zero"
