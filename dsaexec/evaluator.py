"""Run a problem's test cases through the judge and score the outputs."""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Callable

from dsaexec.config import Config
from dsaexec.harness.synthesizer import synthesize
from dsaexec.judge_client import Judge0Client
from dsaexec.models import EvaluationReport, ExecutionResult, Problem, Submission, TestCase, TestCaseResult
from dsaexec.runner_base import ProgramRunner

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_POINT = "solution"


class Evaluator:
    """Synthesize, submit and compare, one test case at a time."""

    def __init__(
        self,
        config: Config | None = None,
        runner: ProgramRunner | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.config = config or Config()
        if runner is None:
            runner = Judge0Client(self.config, sleep=sleep) if sleep else Judge0Client(self.config)
        self._runner = runner

    def evaluate(self, problem: Problem, limit: int | None = None) -> EvaluationReport:
        """Run every test case (or the first *limit*) and compare outputs.

        Synthesis errors propagate; judge failures come back as failed
        results inside the report.
        """
        cases = problem.test_cases if limit is None else problem.test_cases[:limit]
        logger.info(
            "Evaluating %s (%s) against %d test case(s)", problem.entry_point, problem.language, len(cases)
        )
        programs = [
            synthesize(Submission(problem.source_code, problem.language, problem.entry_point, list(tc.input)))
            for tc in cases
        ]
        if self.config.use_batch and len(programs) > 1:
            executions = self._runner.submit_batch(programs)
        else:
            executions = [self._runner.submit_one(p) for p in programs]

        results = [self._score(tc, execution) for tc, execution in zip(cases, executions)]
        report = EvaluationReport(results=results)
        logger.info("%d/%d test case(s) passed", report.passed_count, report.total)
        return report

    def run_tests(self, problem: Problem) -> EvaluationReport:
        """Quick run over the first few test cases."""
        return self.evaluate(problem, limit=self.config.quick_run_limit)

    def run_custom(
        self,
        source_code: str,
        language: str,
        entry_point: str,
        arguments: list[Any],
    ) -> ExecutionResult:
        program = synthesize(Submission(source_code, language, entry_point or DEFAULT_ENTRY_POINT, list(arguments)))
        return self._runner.submit_one(program)

    def _score(self, test_case: TestCase, execution: ExecutionResult) -> TestCaseResult:
        actual = execution.output.strip()
        matches = outputs_match(test_case.expected_output, actual)
        result = TestCaseResult(
            test_case=test_case,
            execution=execution,
            passed=execution.passed and matches,
            actual_output=actual,
        )
        if not result.passed:
            logger.info("Test case failed: %s", result.outcome.value)
        return result


# ---------------------------------------------------------------------------
# Output comparison
# ---------------------------------------------------------------------------


def _maybe_json(text: Any) -> Any:
    if not isinstance(text, str):
        return text
    stripped = text.strip()
    if stripped.startswith(("{", "[")):
        try:
            return json.loads(stripped)
        except ValueError:
            return stripped
    return stripped


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value).strip()


def _numbers_equal(expected: str, actual: str) -> bool:
    try:
        a, b = float(expected), float(actual)
    except ValueError:
        return False
    return math.isfinite(a) and math.isfinite(b) and math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-9)


def _compare(expected: Any, actual: Any) -> bool:
    if isinstance(expected, bool) or isinstance(actual, bool):
        return _text(expected) == _text(actual)
    if expected is None or actual is None:
        return expected is None and actual is None
    if isinstance(expected, list) and isinstance(actual, list):
        return len(expected) == len(actual) and all(_compare(e, a) for e, a in zip(expected, actual))
    if isinstance(expected, dict) and isinstance(actual, dict):
        return expected.keys() == actual.keys() and all(_compare(v, actual[k]) for k, v in expected.items())
    if expected == actual:
        return True
    left, right = _text(expected), _text(actual)
    return left == right or _numbers_equal(left, right)


def outputs_match(expected: Any, actual: Any) -> bool:
    """Compare expected and actual outputs.

    Trimmed text is parsed as JSON when it looks like an array or object,
    then compared element by element in order. Numbers and their string
    forms are interchangeable, and ``2`` equals ``2.0``.
    """
    return _compare(_maybe_json(expected), _maybe_json(actual))


# ---------------------------------------------------------------------------
# Problem loading
# ---------------------------------------------------------------------------


def _expected_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def load_test_case(data: dict) -> TestCase:
    raw_input = data.get("input", [])
    if not isinstance(raw_input, list):
        raw_input = [raw_input]
    expected = data.get("expected", data.get("expectedOutput", data.get("expected_output", "")))
    return TestCase(
        input=raw_input,
        expected_output=_expected_text(expected),
        description=data.get("description", ""),
    )


def load_problem(data: dict) -> Problem:
    """Build a Problem from the JSON shape used by the API and CLI."""
    source = data.get("code") or data.get("sourceCode") or data.get("source_code") or ""
    entry_point = data.get("functionName") or data.get("entryPoint") or data.get("entry_point") or ""
    raw_cases = data.get("testCases") or data.get("test_cases") or []
    if not entry_point and raw_cases and isinstance(raw_cases[0], dict):
        entry_point = raw_cases[0].get("functionName", "")
    return Problem(
        source_code=source,
        language=data.get("language", ""),
        entry_point=entry_point or DEFAULT_ENTRY_POINT,
        test_cases=[load_test_case(tc) for tc in raw_cases],
    )
