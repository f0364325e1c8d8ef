"""Question / ScoringTest model tests — loading aliases, defaults, copies."""

import pytest
from pydantic import ValidationError

from scoring_rulesets.models import Question, ScoringTest


class TestQuestion:

    def test_answer_order_preserved(self):
        q = Question(text="T", parameter_name="p", answers={"z": 3, "a": 1, "m": 2})
        assert q.possible_answers() == ["z", "a", "m"]
        assert list(q.answer_values()) == ["z", "a", "m"]

    def test_value_for_answer(self):
        q = Question(text="T", parameter_name="p", answers={"Yes": 2, "No": 0})
        assert q.value_for_answer("Yes") == 2
        assert q.value_for_answer("Maybe") is None

    def test_accessors_return_copies(self):
        q = Question(text="T", parameter_name="p", answers={"Yes": 2})
        q.answer_values()["Yes"] = 99
        q.possible_answers().append("Extra")
        assert q.answer_values() == {"Yes": 2}
        assert q.possible_answers() == ["Yes"]

    def test_none_answers_default_to_empty(self):
        q = Question(text="T", parameter_name="p", answers=None)
        assert q.answer_values() == {}

    def test_legacy_camel_case_keys(self):
        q = Question.model_validate(
            {"questionText": "Heart rate", "parameterName": "heart_rate", "answers": {"50 – 99": 0}},
        )
        assert q.text == "Heart rate"
        assert q.parameter_name == "heart_rate"

    def test_frozen(self):
        q = Question(text="T", parameter_name="p")
        with pytest.raises(ValidationError):
            q.text = "changed"

    def test_answers_read_only(self):
        q = Question(text="T", parameter_name="p", answers={"Yes": 2})
        with pytest.raises(TypeError):
            q.answers["Yes"] = 99
        with pytest.raises(TypeError):
            q.answers["Extra"] = 1
        assert q.value_for_answer("Yes") == 2

    def test_integer_labels_coerced(self):
        q = Question.model_validate({"text": "GCS", "parameter_name": "gcs", "answers": {15: 0, 14: 1}})
        assert q.possible_answers() == ["15", "14"]
        assert q.value_for_answer("14") == 1

    def test_dump_round_trips_answers(self):
        q = Question(text="T", parameter_name="p", answers={"A": 1})
        assert q.model_dump()["answers"] == {"A": 1}


class TestScoringTest:

    def test_none_collections_default_to_empty(self):
        t = ScoringTest(name="T", questions=None, rules=None)
        assert t.questions == ()
        assert t.diagnosis_rules() == {}
        assert t.question_count == 0

    def test_legacy_camel_case_keys(self):
        t = ScoringTest.model_validate({
            "testName": "Legacy",
            "questions": [{"questionText": "Q", "parameterName": "p", "answers": {"A": 1}}],
            "diagnosisRules": {"0-1": "Ok"},
        })
        assert t.name == "Legacy"
        assert t.questions[0].parameter_name == "p"
        assert t.diagnosis_rules() == {"0-1": "Ok"}

    def test_rules_copy(self):
        t = ScoringTest(name="T", rules={"0-1": "Ok"})
        t.diagnosis_rules()["2-3"] = "Injected"
        assert t.diagnosis_rules() == {"0-1": "Ok"}

    def test_rules_read_only(self):
        t = ScoringTest(name="T", rules={"0-1": "Ok"})
        with pytest.raises(TypeError):
            t.rules["0-1"] = "Hijacked"
        with pytest.raises(TypeError):
            t.rules["2-3"] = "Injected"
        assert t.diagnosis_rules() == {"0-1": "Ok"}

    def test_default_rules_read_only(self):
        t = ScoringTest(name="T")
        with pytest.raises(TypeError):
            t.rules["0-1"] = "Injected"

    def test_source_dict_not_shared(self):
        rules = {"0-1": "Ok"}
        t = ScoringTest(name="T", rules=rules)
        rules["0-1"] = "Changed"
        assert t.rules["0-1"] == "Ok"

    def test_integer_rule_keys_coerced(self):
        t = ScoringTest.model_validate({"name": "T", "rules": {15: "Exact", "0-10": "Low"}})
        assert t.diagnosis_rules() == {"15": "Exact", "0-10": "Low"}

    @pytest.mark.parametrize(
        "name, command, expected",
        [
            ("APACHE II (Acute Physiology And Chronic Health Evaluation II)", None, "/apacheii"),
            ("APACHE III (Acute Physiology And Chronic Health Evaluation III)", None, "/apacheiii"),
            ("SOFA", None, "/sofa"),
            ("Anything", "/custom", "/custom"),
            ("Anything", "custom", "/custom"),
        ],
    )
    def test_chat_command(self, name, command, expected):
        assert ScoringTest(name=name, command=command).chat_command == expected
