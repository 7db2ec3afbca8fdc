"""ADLENS — Resilient Request Executor.

Runs one logical HTTP call under a hard deadline, classifies each attempt
and retries transient failures with linear backoff.
"""

import asyncio
import json
import time
from typing import Any, Awaitable, Callable, Optional

import httpx

from adlens.config import settings
from adlens.core.logging import get_logger
from adlens.models.request_models import (
    ErrorKind,
    OutcomeStatus,
    RequestOutcome,
    RetryPolicy,
)

logger = get_logger("meta.executor")

TIMEOUT_STATUS = 408  # Synthetic status for deadline exceeded

Operation = Callable[[], Awaitable[httpx.Response]]


class CallError(Exception):
    """Raised when a remote call fails terminally or exhausts its retries."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        kind: ErrorKind = ErrorKind.NETWORK,
    ):
        self.message = message
        self.status_code = status_code
        self.kind = kind
        super().__init__(message)

    def __repr__(self) -> str:
        return f"CallError({self.kind.value}, {self.status_code}, {self.message!r})"


def _decode_body(response: httpx.Response) -> Any:
    """JSON body if it parses, raw text otherwise."""
    try:
        return response.json()
    except ValueError:
        return response.text


def describe_error(status_code: int, body: Any) -> str:
    """Richest available diagnostic for a failed response.

    Uses the Graph API error envelope (message, user message, sub-code)
    when present, else ``HTTP <status>: <raw body>``.
    """
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict) and err.get("message"):
        detail = str(err["message"])
        if err.get("error_user_msg"):
            detail += f" | {err['error_user_msg']}"
        if err.get("error_subcode"):
            detail += f" (subcode: {err['error_subcode']})"
        return detail
    raw = body if isinstance(body, str) else json.dumps(body)
    return f"HTTP {status_code}: {raw}"


def classify_response(response: httpx.Response) -> RequestOutcome:
    """Map an HTTP response onto success / terminal / retryable."""
    status = response.status_code
    body = _decode_body(response)

    if 200 <= status < 400:
        return RequestOutcome(
            status=OutcomeStatus.SUCCESS, status_code=status, payload=body
        )

    message = describe_error(status, body)
    if 400 <= status < 500:
        return RequestOutcome(
            status=OutcomeStatus.TERMINAL,
            status_code=status,
            payload=body,
            error_kind=ErrorKind.CLIENT,
            error_message=message,
        )
    return RequestOutcome(
        status=OutcomeStatus.RETRYABLE,
        status_code=status,
        payload=body,
        error_kind=ErrorKind.SERVER,
        error_message=message,
    )


class RequestExecutor:
    """Applies a RetryPolicy around a zero-argument request coroutine factory."""

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.policy = policy or settings.retry_policy
        self._sleep = sleep

    async def _attempt(
        self, operation: Operation
    ) -> tuple[RequestOutcome, Optional[BaseException]]:
        """Run one attempt under the deadline. Never raises for remote failures."""
        timeout_ms = self.policy.timeout_ms
        try:
            response = await asyncio.wait_for(operation(), timeout=timeout_ms / 1000)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            return (
                RequestOutcome(
                    status=OutcomeStatus.RETRYABLE,
                    status_code=TIMEOUT_STATUS,
                    error_kind=ErrorKind.TIMEOUT,
                    error_message=f"Request timed out after {timeout_ms}ms",
                ),
                e,
            )
        except httpx.RequestError as e:
            return (
                RequestOutcome(
                    status=OutcomeStatus.RETRYABLE,
                    status_code=0,
                    error_kind=ErrorKind.NETWORK,
                    error_message=f"Network error: {e}",
                ),
                e,
            )
        return classify_response(response), None

    async def execute(
        self,
        operation: Operation,
        *,
        method: str = "GET",
        path: str = "",
    ) -> Any:
        """Run ``operation`` until it succeeds, fails terminally, or retries run out."""
        attempts = self.policy.max_retries + 1

        for attempt in range(attempts):
            started = time.monotonic()
            outcome, cause = await self._attempt(operation)
            duration_ms = round((time.monotonic() - started) * 1000, 1)

            if outcome.ok:
                return outcome.payload

            log_fields = {
                "method": method,
                "path": path,
                "attempt": attempt + 1,
                "status_code": outcome.status_code,
                "error_kind": outcome.error_kind.value if outcome.error_kind else "",
                "duration_ms": duration_ms,
            }

            if outcome.retryable and attempt < attempts - 1:
                wait = self.policy.delay_for(attempt)
                logger.warning(
                    f"Meta API {outcome.error_kind.value} failure on {method} {path}. "
                    f"Retrying in {wait}s (attempt {attempt + 1}/{attempts})",
                    extra=log_fields,
                )
                await self._sleep(wait)
                continue

            logger.error(
                f"Meta API error on {method} {path}: {outcome.error_message}",
                extra=log_fields,
            )
            raise CallError(
                outcome.error_message, outcome.status_code, outcome.error_kind
            ) from cause

        # range(attempts) is never empty since max_retries >= 0
        raise CallError("Max retries exceeded", 0, ErrorKind.NETWORK)
