"""Request dependencies: the shared engine and store, and the caller's identity.

Identity comes from the ``X-User-ID`` header set by whatever sits in front
of the service (a chat adapter or a gateway).  When the deployment
configures ``TRUSTED_PROXY_SECRET``, requests must also prove they came
through that proxy via ``X-Proxy-Secret``.
"""

import hmac

from fastapi import Header, HTTPException, Request

from scoring_rulesets.engine import ScoringEngine
from scoring_rulesets.ruleset import TestStore


def get_engine(request: Request) -> ScoringEngine:
    return request.app.state.engine


def get_store(request: Request) -> TestStore:
    return request.app.state.store


def _check_proxy_secret(expected: str | None, supplied: str | None) -> None:
    if not expected:
        return
    if not supplied:
        raise HTTPException(status_code=403, detail="X-Proxy-Secret header is required")
    # constant-time comparison
    if not hmac.compare_digest(supplied.encode(), expected.encode()):
        raise HTTPException(status_code=403, detail="Invalid proxy secret")


def get_user_id(
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> str:
    """Return the caller's user id; 401 without one, 403 on a bad proxy secret."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="X-User-ID header is required")
    _check_proxy_secret(request.app.state.settings.trusted_proxy_secret, x_proxy_secret)
    return x_user_id
