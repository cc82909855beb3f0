"""
Rate limit enforcement for HTTP endpoints.

Derives the client identifier, runs the sliding window check and turns
the result into X-RateLimit-* headers. A fault inside the limiter never
blocks a request: the check fails open.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, Request, Response

from app.dependencies import get_optional_user_id
from app.services.rate_limiter import (
    RATE_LIMITS,
    CheckResult,
    RateLimiter,
    RateLimitPolicy,
    current_time_ms,
)

from .error_handler import RateLimitExceededError

logger = logging.getLogger(__name__)


def get_identifier(request: Request, user_id: Optional[str] = None) -> str:
    """
    Derive the rate limit key for a request.

    Authenticated callers are keyed by user ID. Anonymous callers are keyed
    by the first x-forwarded-for address, then x-real-ip, then "unknown".

    Args:
        request: Incoming request
        user_id: Authenticated user ID, if any

    Returns:
        str: "user:<id>" or "ip:<address>"
    """
    if user_id:
        return f"user:{user_id}"

    forwarded_for = request.headers.get("x-forwarded-for")
    real_ip = request.headers.get("x-real-ip")
    ip = (forwarded_for.split(",")[0].strip() if forwarded_for else "") or real_ip or "unknown"
    return f"ip:{ip}"


def retry_after_seconds(result: CheckResult, now_ms: int) -> int:
    return max(0, math.ceil((result.reset_time - now_ms) / 1000))


def build_rate_limit_headers(result: CheckResult, now_ms: Optional[int] = None) -> dict[str, str]:
    """
    Build response headers for a check result.

    Retry-After is only present when the request was denied.
    """
    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_time),
    }
    if not result.allowed:
        now_ms = current_time_ms() if now_ms is None else now_ms
        headers["Retry-After"] = str(retry_after_seconds(result, now_ms))
    return headers


def _masked(identifier: str, user_id: Optional[str]) -> str:
    return f"user:{user_id[:8]}..." if user_id else identifier


def store_key(category: Optional[str], identifier: str) -> str:
    """Key of the request history for identifier under one policy category."""
    return f"{category}:{identifier}" if category else identifier


def enforce(
    limiter: RateLimiter,
    request: Request,
    user_id: Optional[str],
    policy: RateLimitPolicy,
    category: Optional[str] = None,
) -> CheckResult:
    """
    Check one request against policy, failing open on internal errors.

    Args:
        limiter: Limiter holding the request history
        request: Incoming request
        user_id: Authenticated user ID, if any
        policy: Policy for the endpoint category
        category: Policy name; when given, the history is kept per category

    Returns:
        CheckResult: The limiter's decision, or an allowed result with full
        quota when the limiter could not decide
    """
    try:
        identifier = get_identifier(request, user_id)
    except Exception as e:
        logger.warning(f"Rate limiter could not derive identifier, allowing request: {e}")
        return _fail_open(limiter, policy)

    outcome = limiter.try_check(store_key(category, identifier), policy)
    if not outcome.ok:
        logger.warning(f"Rate limiter error, allowing request: {outcome.error!r}")
        return _fail_open(limiter, policy)

    result = outcome.result
    if not result.allowed:
        reset_at = datetime.fromtimestamp(result.reset_time / 1000, tz=timezone.utc)
        logger.warning(
            f"Rate limit exceeded for {_masked(identifier, user_id)} on {category or 'default'}: "
            f"limit {policy.max_requests} per {policy.window_ms}ms, "
            f"resets at {reset_at.isoformat()}"
        )
    return result


def _safe_now(limiter: RateLimiter) -> int:
    try:
        return limiter.clock()
    except Exception:
        return current_time_ms()


def _fail_open(limiter: RateLimiter, policy: RateLimitPolicy) -> CheckResult:
    return CheckResult(
        allowed=True,
        limit=policy.max_requests,
        remaining=policy.max_requests,
        reset_time=_safe_now(limiter) + policy.window_ms,
    )


def rate_limit(category: str):
    """
    Create a FastAPI dependency enforcing the named policy.

    Args:
        category: Key into RATE_LIMITS (e.g. "leave_creation")

    Returns:
        Dependency that sets X-RateLimit-* headers on the response and
        raises RateLimitExceededError (429) when the caller is over quota
    """
    policy = RATE_LIMITS[category]

    async def check_rate_limit(
        request: Request,
        response: Response,
        user_id: Optional[str] = Depends(get_optional_user_id),
    ) -> CheckResult:
        if not request.app.state.settings.RATE_LIMIT_ENABLED:
            return CheckResult(
                allowed=True,
                limit=policy.max_requests,
                remaining=policy.max_requests,
                reset_time=current_time_ms() + policy.window_ms,
            )

        limiter: RateLimiter = request.app.state.rate_limiter
        result = enforce(limiter, request, user_id, policy, category)
        headers = build_rate_limit_headers(result, _safe_now(limiter))

        if not result.allowed:
            raise RateLimitExceededError(
                retry_after=int(headers["Retry-After"]),
                limit=result.limit,
                headers=headers,
            )

        response.headers.update(headers)
        return result

    return check_rate_limit
