"""Data models for dsaexec."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

JudgeToken = str


class JudgeStatus(enum.IntEnum):
    """Judge0 status ids."""

    IN_QUEUE = 1
    PROCESSING = 2
    ACCEPTED = 3
    WRONG_ANSWER = 4
    TIME_LIMIT_EXCEEDED = 5
    COMPILATION_ERROR = 6
    RUNTIME_ERROR_SIGSEGV = 7
    RUNTIME_ERROR_SIGXFSZ = 8
    RUNTIME_ERROR_SIGFPE = 9
    RUNTIME_ERROR_SIGABRT = 10
    RUNTIME_ERROR_NZEC = 11
    RUNTIME_ERROR_OTHER = 12
    INTERNAL_ERROR = 13
    EXEC_FORMAT_ERROR = 14


class Outcome(enum.Enum):
    ACCEPTED = "ACCEPTED"
    WRONG_ANSWER = "WRONG_ANSWER"
    COMPILATION_ERROR = "COMPILATION_ERROR"
    RUNTIME_ERROR = "RUNTIME_ERROR"
    TIME_LIMIT_EXCEEDED = "TIME_LIMIT_EXCEEDED"
    EXEC_FORMAT_ERROR = "EXEC_FORMAT_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"


@dataclass(frozen=True)
class TestCase:
    input: list[Any]
    expected_output: str
    description: str = ""


@dataclass(frozen=True)
class Submission:
    source_code: str
    language: str
    entry_point: str
    arguments: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class SynthesizedProgram:
    text: str
    language: str


@dataclass
class Problem:
    source_code: str
    language: str
    entry_point: str
    test_cases: list[TestCase] = field(default_factory=list)


@dataclass
class ExecutionResult:
    passed: bool
    output: str
    status_description: str
    status_code: int
    outcome: Outcome
    error: str | None = None
    compilation_output: str | None = None
    execution_time_ms: float | None = None
    memory_kb: float | None = None
    exit_code: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "output": self.output,
            "error": self.error,
            "compilationOutput": self.compilation_output,
            "statusDescription": self.status_description,
            "statusId": self.status_code,
            "outcome": self.outcome.value,
            "executionTime": self.execution_time_ms,
            "memory": self.memory_kb,
            "exitCode": self.exit_code,
        }


@dataclass
class TestCaseResult:
    test_case: TestCase
    execution: ExecutionResult
    passed: bool
    actual_output: str = ""

    @property
    def outcome(self) -> Outcome:
        if self.execution.passed and not self.passed:
            return Outcome.WRONG_ANSWER
        return self.execution.outcome

    def to_dict(self) -> dict[str, Any]:
        data = self.execution.to_dict()
        data.update(
            {
                "input": self.test_case.input,
                "expected": self.test_case.expected_output,
                "output": self.actual_output,
                "passed": self.passed,
                "outcome": self.outcome.value,
            }
        )
        return data


@dataclass
class EvaluationReport:
    results: list[TestCaseResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed_count(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def all_passed(self) -> bool:
        return bool(self.results) and self.passed_count == self.total

    @property
    def total_time_ms(self) -> float:
        return sum(r.execution.execution_time_ms or 0.0 for r in self.results)

    @property
    def max_memory_kb(self) -> float:
        return max((r.execution.memory_kb or 0.0 for r in self.results), default=0.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "allPassed": self.all_passed,
            "passed": self.passed_count,
            "total": self.total,
            "executionTime": self.total_time_ms,
            "memory": self.max_memory_kb,
        }
