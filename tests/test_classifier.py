"""Tests for mapping judge payloads onto execution results."""

import pytest

from dsaexec.classifier import (
    COMPILE_FALLBACK,
    INTERNAL_FALLBACK,
    classify,
    decode,
    encode,
    is_terminal,
    network_error_result,
    rejected_result,
    timeout_result,
)
from dsaexec.models import Outcome


def _payload(status_id: int, description: str = "", **fields):
    data = {"status": {"id": status_id, "description": description}}
    data.update({k: encode(v) if isinstance(v, str) else v for k, v in fields.items()})
    return data


def test_decode_absent_fields():
    assert decode(None) == ""
    assert decode("") == ""
    assert decode(encode("héllo\n")) == "héllo\n"


def test_accepted():
    result = classify(_payload(3, "Accepted", stdout="[0,1]\n", time=None, memory=None))
    assert result.passed
    assert result.outcome is Outcome.ACCEPTED
    assert result.output == "[0,1]\n"
    assert result.error is None
    assert result.execution_time_ms is None


def test_time_and_memory_conversion():
    data = _payload(3, "Accepted")
    data.update({"time": "0.25", "memory": 9876, "exit_code": 0})
    result = classify(data)
    assert result.execution_time_ms == pytest.approx(250.0)
    assert result.memory_kb == 9876.0
    assert result.exit_code == 0


def test_wrong_answer_error_only_from_stderr():
    assert classify(_payload(4, "Wrong Answer", stdout="1")).error is None
    assert classify(_payload(4, "Wrong Answer", stderr="warn")).error == "warn"


def test_compilation_error():
    result = classify(_payload(6, "Compilation Error", compile_output="error: expected ';'"))
    assert result.outcome is Outcome.COMPILATION_ERROR
    assert result.error == "error: expected ';'"
    assert result.compilation_output == "error: expected ';'"
    assert classify(_payload(6, "Compilation Error")).error == COMPILE_FALLBACK


@pytest.mark.parametrize("status_id", [7, 8, 9, 10, 11, 12])
def test_runtime_errors(status_id):
    result = classify(_payload(status_id, "Runtime Error", stderr="Traceback"))
    assert result.outcome is Outcome.RUNTIME_ERROR
    assert result.error == "Traceback"
    assert not result.passed


def test_runtime_error_falls_back_to_message_then_description():
    assert classify(_payload(11, "Runtime Error (NZEC)", message="Exited with error status 1")).error == (
        "Exited with error status 1"
    )
    assert classify(_payload(11, "Runtime Error (NZEC)")).error == "Runtime Error (NZEC)"


def test_time_limit():
    result = classify(_payload(5, "Time Limit Exceeded"))
    assert result.outcome is Outcome.TIME_LIMIT_EXCEEDED
    assert result.error == "Time Limit Exceeded"


def test_internal_error_prefers_message():
    assert classify(_payload(13, "Internal Error", message="box failed", stderr="x")).error == "box failed"
    assert classify(_payload(13, "Internal Error", stderr="x")).error == "x"
    assert classify(_payload(13, "Internal Error")).error == INTERNAL_FALLBACK


def test_exec_format_error():
    assert classify(_payload(14, "Exec Format Error")).outcome is Outcome.EXEC_FORMAT_ERROR


def test_terminal_statuses():
    assert not is_terminal(_payload(1))
    assert not is_terminal(_payload(2))
    assert is_terminal(_payload(3))
    assert is_terminal({"status": None})


def test_synthetic_results():
    timeout = timeout_result()
    assert (timeout.status_code, timeout.status_description) == (5, "Timeout")
    assert timeout.error == "Code execution timed out after multiple retries"
    assert timeout.to_dict()["outcome"] == "TIMEOUT"
    assert classify(_payload(5, "Time Limit Exceeded")).to_dict()["outcome"] == "TIME_LIMIT_EXCEEDED"

    network = network_error_result("")
    assert network.status_code == 13
    assert network.outcome is Outcome.NETWORK_ERROR
    assert network.error

    rejected = rejected_result("language_id: unknown")
    assert rejected.outcome is Outcome.INTERNAL_ERROR
    assert rejected.status_description == "Internal Error"
