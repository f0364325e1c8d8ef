import pytest

from helpers.factories import make_question, make_test, memory_store
from scoring_rulesets.engine import ScoringEngine
from scoring_rulesets.ruleset import TestStore


@pytest.fixture
def simple_test():
    """One question, two answers, two severity bands."""
    return make_test(
        "Simple",
        [make_question("p1", {"A": 1, "B": 2}, text="Q1")],
        rules={"0-1": "Mild", "2-3": "Severe"},
        command="/simple",
    )


@pytest.fixture
def ventilation_test():
    """Respiratory rate carrier followed by the two oxygenation questions."""
    return make_test(
        "Ventilation",
        [
            make_question("respiratory_rate", {"12 – 24": 0, "≥ 50": 4}),
            make_question("aado2", {"< 200": 0, "≥ 500": 4}),
            make_question("pao2", {"> 70": 0, "< 55": 4}),
            make_question("age", {"≤ 44": 0, "≥ 75": 6}),
        ],
        rules={"0-4": "Low", ">=5": "High"},
        command="/vent",
    )


@pytest.fixture
def engine(simple_test, ventilation_test):
    """Engine over the two in-memory tests."""
    return ScoringEngine(memory_store(simple_test, ventilation_test))


@pytest.fixture(scope="session")
def store():
    """Load the bundled v1/tests.yaml once for the entire test session."""
    s = TestStore()
    s.load()
    return s
