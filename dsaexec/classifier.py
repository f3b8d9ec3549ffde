"""Map raw Judge0 payloads onto ExecutionResult values."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from dsaexec.models import ExecutionResult, JudgeStatus, Outcome

COMPILE_FALLBACK = "Compilation Error: No output from compiler."
INTERNAL_FALLBACK = "An internal error occurred."

RATE_LIMIT_STATUS = 429

_PENDING = (JudgeStatus.IN_QUEUE, JudgeStatus.PROCESSING)
_RUNTIME_ERRORS = range(JudgeStatus.RUNTIME_ERROR_SIGSEGV, JudgeStatus.RUNTIME_ERROR_OTHER + 1)


def decode(value: str | None) -> str:
    """Decode a base64 field; absent fields decode to an empty string."""
    if not value:
        return ""
    try:
        return base64.b64decode(value).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError):
        return value


def encode(value: str | None) -> str:
    return base64.b64encode((value or "").encode("utf-8")).decode("ascii")


def _millis(seconds: Any) -> float | None:
    if seconds in (None, ""):
        return None
    try:
        return float(seconds) * 1000.0
    except (TypeError, ValueError):
        return None


def _number(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def status_id(payload: dict) -> int:
    return int((payload.get("status") or {}).get("id") or 0)


def is_terminal(payload: dict) -> bool:
    return status_id(payload) not in _PENDING


def _outcome(code: int) -> Outcome:
    if code == JudgeStatus.ACCEPTED:
        return Outcome.ACCEPTED
    if code == JudgeStatus.WRONG_ANSWER:
        return Outcome.WRONG_ANSWER
    if code == JudgeStatus.COMPILATION_ERROR:
        return Outcome.COMPILATION_ERROR
    if code == JudgeStatus.TIME_LIMIT_EXCEEDED:
        return Outcome.TIME_LIMIT_EXCEEDED
    if code in _RUNTIME_ERRORS:
        return Outcome.RUNTIME_ERROR
    if code == JudgeStatus.EXEC_FORMAT_ERROR:
        return Outcome.EXEC_FORMAT_ERROR
    return Outcome.INTERNAL_ERROR


def classify(payload: dict) -> ExecutionResult:
    """Build the canonical result from a terminal judge payload.

    Accepted runs carry no error. A wrong answer carries stderr only when
    there is some. Compilation errors report the compiler output; runtime,
    time-limit and exec-format failures report stderr, then the judge
    message, then the status description; internal errors report the judge
    message, then stderr.
    """
    status = payload.get("status") or {}
    code = status_id(payload)
    description = status.get("description") or ""
    stdout = decode(payload.get("stdout"))
    stderr = decode(payload.get("stderr"))
    compile_output = decode(payload.get("compile_output"))
    message = decode(payload.get("message"))
    outcome = _outcome(code)

    if outcome is Outcome.ACCEPTED:
        error = None
    elif outcome is Outcome.WRONG_ANSWER:
        error = stderr or None
    elif outcome is Outcome.COMPILATION_ERROR:
        error = compile_output or COMPILE_FALLBACK
    elif outcome is Outcome.INTERNAL_ERROR:
        error = message or stderr or INTERNAL_FALLBACK
    else:
        error = stderr or message or description or outcome.value

    exit_code = payload.get("exit_code")
    return ExecutionResult(
        passed=outcome is Outcome.ACCEPTED,
        output=stdout,
        error=error,
        compilation_output=compile_output or None,
        status_description=description,
        status_code=code,
        outcome=outcome,
        execution_time_ms=_millis(payload.get("time")),
        memory_kb=_number(payload.get("memory")),
        exit_code=int(exit_code) if exit_code is not None else None,
    )


def rate_limited_result(stage: str = "submission") -> ExecutionResult:
    return ExecutionResult(
        passed=False,
        output="",
        error=f"Judge rate limit exceeded during {stage}. Please wait before trying again.",
        status_description="Rate Limit Exceeded",
        status_code=RATE_LIMIT_STATUS,
        outcome=Outcome.RATE_LIMITED,
    )


def timeout_result(error: str = "Code execution timed out after multiple retries") -> ExecutionResult:
    return ExecutionResult(
        passed=False,
        output="",
        error=error,
        status_description="Timeout",
        status_code=int(JudgeStatus.TIME_LIMIT_EXCEEDED),
        outcome=Outcome.TIMEOUT,
    )


def network_error_result(error: str) -> ExecutionResult:
    return ExecutionResult(
        passed=False,
        output="",
        error=error or "Failed to communicate with the judge",
        status_description="Error",
        status_code=int(JudgeStatus.INTERNAL_ERROR),
        outcome=Outcome.NETWORK_ERROR,
    )


def rejected_result(reason: str) -> ExecutionResult:
    """Result for a batch entry the judge refused to queue."""
    return ExecutionResult(
        passed=False,
        output="",
        error=reason or INTERNAL_FALLBACK,
        status_description="Internal Error",
        status_code=int(JudgeStatus.INTERNAL_ERROR),
        outcome=Outcome.INTERNAL_ERROR,
    )
