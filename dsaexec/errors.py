"""Exception hierarchy for harness synthesis and judge interaction."""

from __future__ import annotations

from typing import Any


class DsaExecError(Exception):
    """Base exception for all dsaexec errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Synthesis errors (local, surfaced synchronously)
class HarnessSynthesisError(DsaExecError):
    """A runnable program could not be generated for the submission."""


class UnsupportedLanguageError(HarnessSynthesisError):
    """No harness template or judge language id exists for the language."""

    def __init__(self, language: str) -> None:
        super().__init__(
            f"Unsupported language: {language}",
            details={"language": language},
        )
        self.language = language


class ConfigurationError(DsaExecError, ValueError):
    """Configuration could not be loaded or failed validation."""


# Judge errors: raised by the client internals and converted into
# ExecutionResult values before they reach callers.
class JudgeError(DsaExecError):
    """Base for failures talking to the remote judge."""


class JudgeRateLimitedError(JudgeError):
    """The judge answered HTTP 429."""

    def __init__(self, stage: str) -> None:
        super().__init__(f"Judge rate limit exceeded during {stage}", details={"stage": stage})
        self.stage = stage


class JudgeTimeoutError(JudgeError):
    """Polling exhausted its retry budget without a terminal status."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            f"Code execution timed out after {attempts} polls",
            details={"attempts": attempts},
        )
        self.attempts = attempts


class JudgeNetworkError(JudgeError):
    """Transport failure or unexpected HTTP response from the judge."""
