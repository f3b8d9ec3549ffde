"""Flask JSON API for code execution."""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from dsaexec.config import Config
from dsaexec.errors import HarnessSynthesisError
from dsaexec.evaluator import Evaluator, load_problem
from dsaexec.judge_client import Judge0Client

logger = logging.getLogger(__name__)

CONFIG = Config.from_env().validate()

app = Flask(__name__)
app.config["DSAEXEC_EVALUATOR"] = None
app.config["DSAEXEC_CLIENT"] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _evaluator() -> Evaluator:
    return app.config.get("DSAEXEC_EVALUATOR") or Evaluator(CONFIG)


def _client() -> Judge0Client:
    return app.config.get("DSAEXEC_CLIENT") or Judge0Client(CONFIG)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _missing(data: dict, *keys: str) -> list[str]:
    return [k for k in keys if not data.get(k)]


def _evaluate(quick: bool):
    data = _json_body()
    missing = _missing(data, "code", "language", "testCases")
    if missing or not isinstance(data.get("testCases"), list):
        return jsonify({"error": "Missing required parameters", "missing": missing}), 400

    problem = load_problem(data)
    evaluator = _evaluator()
    try:
        report = evaluator.run_tests(problem) if quick else evaluator.evaluate(problem)
    except HarnessSynthesisError as e:
        logger.info("Could not build a harness: %s", e.message)
        return jsonify({"error": e.message, "details": e.details}), 400
    return jsonify(report.to_dict())


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.route("/api/code/execute", methods=["POST"])
def execute_code():
    """Run every test case and report per-case results."""
    return _evaluate(quick=False)


@app.route("/api/code/run-tests", methods=["POST"])
def run_tests():
    """Quick run against the first few test cases."""
    return _evaluate(quick=True)


@app.route("/api/code/custom-test", methods=["POST"])
def custom_test():
    data = _json_body()
    missing = _missing(data, "code", "language")
    if missing:
        return jsonify({"error": "Missing required parameters", "missing": missing}), 400

    arguments = data.get("input", [])
    if not isinstance(arguments, list):
        arguments = [arguments]
    try:
        result = _evaluator().run_custom(data["code"], data["language"], data.get("functionName", ""), arguments)
    except HarnessSynthesisError as e:
        logger.info("Could not build a harness: %s", e.message)
        return jsonify({"error": e.message, "details": e.details}), 400
    return jsonify(result.to_dict())


@app.route("/api/code/health", methods=["GET"])
def health():
    healthy, result = _client().check_health()
    status = 200 if healthy else 503
    return jsonify({"healthy": healthy, "judgeUrl": CONFIG.judge_url, "result": result.to_dict()}), status


if __name__ == "__main__":
    logging.basicConfig(level=CONFIG.log_level.upper())
    app.run(debug=False, port=5000)
