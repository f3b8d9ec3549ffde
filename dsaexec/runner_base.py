"""Abstract runner interface for executing synthesized programs."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from dsaexec.models import ExecutionResult, SynthesizedProgram


@runtime_checkable
class ProgramRunner(Protocol):
    def submit_one(
        self,
        program: SynthesizedProgram,
        stdin: str = "",
        expected_output: str = "",
    ) -> ExecutionResult: ...

    def submit_batch(self, programs: list[SynthesizedProgram]) -> list[ExecutionResult]: ...
