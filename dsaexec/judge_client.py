"""Judge0 REST API client: submit programs, poll for verdicts, classify results."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import httpx

from dsaexec.classifier import (
    classify,
    encode,
    is_terminal,
    network_error_result,
    rate_limited_result,
    rejected_result,
    timeout_result,
)
from dsaexec.config import Config
from dsaexec.errors import JudgeError, JudgeNetworkError, JudgeRateLimitedError, JudgeTimeoutError
from dsaexec.languages import language_id
from dsaexec.models import ExecutionResult, JudgeToken, SynthesizedProgram

logger = logging.getLogger(__name__)

RESULT_FIELDS = "stdout,stderr,status,time,memory,compile_output,message,exit_code"
BATCH_RESULT_FIELDS = "token," + RESULT_FIELDS

HEALTH_CHECK_SOURCE = "function solution(a, b) {\n    return a + b;\n}\n\nconsole.log(solution(5, 7));\n"
HEALTH_CHECK_EXPECTED = "12"


class Judge0Client:
    """Submits synthesized programs to a Judge0 instance.

    Holds only immutable configuration, so one client may be shared between
    concurrent callers. Every judge-side failure is returned as an
    ExecutionResult; only unsupported languages raise.
    """

    def __init__(self, config: Config | None = None, sleep: Callable[[float], None] = time.sleep) -> None:
        self._config = config or Config()
        self._sleep = sleep

    @property
    def config(self) -> Config:
        return self._config

    # -- public API ---------------------------------------------------------

    def submit_one(
        self,
        program: SynthesizedProgram,
        stdin: str = "",
        expected_output: str = "",
    ) -> ExecutionResult:
        payload = self._payload(program, stdin, expected_output)
        try:
            token = self._create(payload)
            data = self._poll(token)
        except JudgeError as e:
            return self._failure(e)
        return classify(data)

    def submit_batch(self, programs: list[SynthesizedProgram]) -> list[ExecutionResult]:
        """Submit all programs in one request; results keep the input order."""
        if not programs:
            return []
        body = {"submissions": [self._payload(p) for p in programs]}
        try:
            created = self._post("/submissions/batch", body, stage="batch submission")
            if not isinstance(created, list) or len(created) != len(programs):
                raise JudgeNetworkError(
                    "Judge returned an unexpected batch response",
                    details={"expected": len(programs)},
                )
            tokens = [item.get("token") if isinstance(item, dict) else None for item in created]
            pending = [t for t in tokens if t]
            logger.info("Submitted batch of %d program(s), %d queued", len(programs), len(pending))
            finished = self._poll_batch(pending) if pending else {}
        except JudgeError as e:
            return [self._failure(e) for _ in programs]

        results = []
        for item, token in zip(created, tokens):
            if token and isinstance(finished.get(token), dict):
                results.append(classify(finished[token]))
            elif token:
                results.append(rejected_result(f"Judge has no record of submission {token}"))
            else:
                results.append(rejected_result(_rejection_reason(item)))
        return results

    def check_health(self) -> tuple[bool, ExecutionResult]:
        """Run a canned JavaScript program and check the judge answers correctly."""
        program = SynthesizedProgram(text=HEALTH_CHECK_SOURCE, language="javascript")
        result = self.submit_one(program)
        healthy = result.passed and result.output.strip() == HEALTH_CHECK_EXPECTED
        if healthy:
            logger.info("Judge health check passed (%s)", self._config.judge_url)
        else:
            logger.warning("Judge health check failed: %s", result.error or result.status_description)
        return healthy, result

    # -- internals ------------------------------------------------------------

    def _payload(self, program: SynthesizedProgram, stdin: str = "", expected_output: str = "") -> dict:
        payload: dict[str, Any] = {
            "source_code": encode(program.text),
            "language_id": language_id(program.language, self._config.judge_flavor),
            "cpu_time_limit": self._config.cpu_time_limit,
            "wall_time_limit": self._config.wall_time_limit,
            "memory_limit": self._config.memory_limit_kb,
        }
        if stdin:
            payload["stdin"] = encode(stdin)
        if expected_output:
            payload["expected_output"] = encode(expected_output)
        return payload

    def _url(self, path: str) -> str:
        return self._config.judge_url.rstrip("/") + path

    def _post(self, path: str, body: dict, stage: str) -> Any:
        try:
            resp = httpx.post(
                self._url(path),
                params={"base64_encoded": "true"},
                json=body,
                headers=self._config.judge_headers(),
                timeout=self._config.request_timeout,
            )
        except httpx.HTTPError as e:
            raise JudgeNetworkError(f"Failed to reach the judge during {stage}: {e}", details={"stage": stage}) from e
        return self._json(resp, stage)

    def _get(self, path: str, params: dict[str, str], stage: str) -> Any:
        try:
            resp = httpx.get(
                self._url(path),
                params=params,
                headers=self._config.judge_headers(),
                timeout=self._config.request_timeout,
            )
        except httpx.HTTPError as e:
            raise JudgeNetworkError(f"Failed to reach the judge during {stage}: {e}", details={"stage": stage}) from e
        return self._json(resp, stage)

    def _json(self, resp: httpx.Response, stage: str) -> Any:
        if resp.status_code == 429:
            raise JudgeRateLimitedError(stage)
        try:
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            raise JudgeNetworkError(
                f"Judge returned HTTP {resp.status_code} during {stage}",
                details={"stage": stage, "status": resp.status_code},
            ) from e
        except ValueError as e:
            raise JudgeNetworkError(f"Judge returned malformed JSON during {stage}", details={"stage": stage}) from e

    def _create(self, payload: dict) -> JudgeToken:
        data = self._post("/submissions", payload, stage="submission")
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise JudgeNetworkError("Judge did not return a submission token", details={"response": data})
        logger.info("Submitted program, token %s", token)
        return token

    def _poll(self, token: JudgeToken) -> dict:
        attempts = self._config.max_poll_attempts
        params = {"base64_encoded": "true", "fields": RESULT_FIELDS}
        for attempt in range(1, attempts + 1):
            data = self._get(f"/submissions/{token}", params, stage="polling")
            if not isinstance(data, dict):
                raise JudgeNetworkError("Judge returned an unexpected poll response", details={"token": token})
            if is_terminal(data):
                logger.debug("Token %s finished after %d poll(s)", token, attempt)
                return data
            if attempt < attempts:
                self._sleep(self._config.poll_interval)
        raise JudgeTimeoutError(attempts)

    def _poll_batch(self, tokens: list[JudgeToken]) -> dict[JudgeToken, Any]:
        attempts = self._config.batch_max_poll_attempts
        params = {"tokens": ",".join(tokens), "base64_encoded": "true", "fields": BATCH_RESULT_FIELDS}
        for attempt in range(1, attempts + 1):
            data = self._get("/submissions/batch", params, stage="batch polling")
            submissions = (data.get("submissions") or []) if isinstance(data, dict) else []
            if len(submissions) == len(tokens) and all(_settled(s) for s in submissions):
                return dict(zip(tokens, submissions))
            if attempt < attempts:
                self._sleep(self._config.batch_poll_interval)
        raise JudgeTimeoutError(attempts)

    def _failure(self, error: JudgeError) -> ExecutionResult:
        if isinstance(error, JudgeRateLimitedError):
            logger.warning("Judge rate limit hit during %s", error.stage)
            return rate_limited_result(error.stage)
        if isinstance(error, JudgeTimeoutError):
            logger.warning("Judge did not finish after %d polls", error.attempts)
            return timeout_result()
        logger.error("Judge request failed: %s", error.message)
        return network_error_result(error.message)


def _settled(entry: Any) -> bool:
    """Unknown or expired tokens come back as null and will never finish."""
    return not isinstance(entry, dict) or is_terminal(entry)


def _rejection_reason(item: Any) -> str:
    """Flatten Judge0's per-entry validation errors into one line."""
    if not isinstance(item, dict) or not item:
        return "Judge rejected the submission"
    parts = []
    for key, value in item.items():
        text = ", ".join(str(v) for v in value) if isinstance(value, list) else str(value)
        parts.append(f"{key}: {text}")
    return "; ".join(parts)
