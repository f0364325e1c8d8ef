"""Reference data endpoints — loaded tests and the mortality lookup.

These are read-only endpoints over the shared test definitions.  They
don't require a user identity.
"""

from fastapi import APIRouter, Depends, Query

from scoring_rulesets.mortality import estimate_mortality_risk
from scoring_rulesets.ruleset import TestStore

from scoring_server.dependencies import get_store

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/tests")
def list_tests(
    store: TestStore = Depends(get_store),
) -> list[dict]:
    """Return every loaded test with its command, size and rules."""
    return [
        {
            "name": test.name,
            "command": test.chat_command,
            "question_count": test.question_count,
            "rules": test.diagnosis_rules(),
        }
        for test in store.tests
    ]


@router.get("/mortality")
def mortality_risk(
    score: int = Query(...),
    test_name: str = Query(...),
) -> dict:
    """Return the coarse mortality-risk band for a score under a test."""
    return {
        "score": score,
        "test_name": test_name,
        "mortality_risk": estimate_mortality_risk(score, test_name),
    }
