"""Readiness probe, mounted outside the versioned API prefix."""

from fastapi import APIRouter, Depends

from scoring_rulesets.ruleset import TestStore

from scoring_server.dependencies import get_store

router = APIRouter(tags=["health"])


@router.get("/health")
def health(store: TestStore = Depends(get_store)) -> dict:
    return {"status": "ok", "tests_loaded": len(store.tests)}
