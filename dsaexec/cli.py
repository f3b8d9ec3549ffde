"""CLI interface for dsaexec."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dsaexec.config import Config
from dsaexec.errors import DsaExecError
from dsaexec.evaluator import Evaluator, load_problem
from dsaexec.harness.synthesizer import synthesize
from dsaexec.judge_client import Judge0Client
from dsaexec.models import EvaluationReport, Problem, Submission


def read_problem(path: str) -> Problem:
    """Load a problem from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    return load_problem(data)


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path) as f:
        return f.read()


def _parse_arguments(text: str) -> list:
    values = json.loads(text)
    return values if isinstance(values, list) else [values]


def _print_report(report: EvaluationReport, as_json: bool) -> None:
    if as_json:
        print(json.dumps(report.to_dict(), indent=2))
        return
    for i, result in enumerate(report.results, 1):
        mark = "PASS" if result.passed else "FAIL"
        print(f"[{mark}] test {i}: {result.outcome.value}")
        if not result.passed:
            print(f"    expected: {result.test_case.expected_output}")
            print(f"    actual:   {result.actual_output}")
            if result.execution.error:
                print(f"    error:    {result.execution.error.strip()[:500]}")
    print(f"\n{report.passed_count}/{report.total} passed ({report.total_time_ms:.0f} ms, {report.max_memory_kb:.0f} KB)")


def _add_judge_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--judge-url", type=str, default=None, help="Judge0 API base URL")
    parser.add_argument("--judge-token", type=str, default=None, help="Judge0 auth token")
    parser.add_argument("--batch", action="store_true", default=False, help="Use batch submissions")


def _add_program_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("source", help="Path to the solution source file ('-' for stdin)")
    parser.add_argument("-l", "--language", required=True, help="Solution language")
    parser.add_argument("-e", "--entry-point", required=True, help="Function to call")
    parser.add_argument("-a", "--args", default="[]", help="JSON array of arguments")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="dsaexec",
        description="dsaexec: synthesize test harnesses and run them on a Judge0 server",
    )
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run a problem's test cases")
    run_parser.add_argument("problem", help="Path to problem JSON file")
    run_parser.add_argument("--quick", action="store_true", default=False, help="Only the first few test cases")
    run_parser.add_argument("--json", action="store_true", default=False, help="Print the report as JSON")
    _add_judge_options(run_parser)

    custom_parser = subparsers.add_parser("custom", help="Run a solution once with custom arguments")
    _add_program_options(custom_parser)
    _add_judge_options(custom_parser)

    synth_parser = subparsers.add_parser("synthesize", help="Print the generated harness without running it")
    _add_program_options(synth_parser)

    health_parser = subparsers.add_parser("health", help="Check that the judge is reachable and working")
    _add_judge_options(health_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    # Build config from env + CLI overrides
    overrides: dict = {}
    if getattr(args, "judge_url", None) is not None:
        overrides["judge_url"] = args.judge_url
    if getattr(args, "judge_token", None) is not None:
        overrides["judge_auth_token"] = args.judge_token
    if getattr(args, "batch", False):
        overrides["use_batch"] = True

    try:
        config = Config.from_env(**overrides).validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.command == "synthesize":
            submission = Submission(
                _read_source(args.source), args.language, args.entry_point, _parse_arguments(args.args)
            )
            print(synthesize(submission).text, end="")
            return

        if args.command == "health":
            healthy, result = Judge0Client(config).check_health()
            print(json.dumps({"healthy": healthy, "result": result.to_dict()}, indent=2))
            if not healthy:
                sys.exit(1)
            return

        evaluator = Evaluator(config)
        if args.command == "custom":
            result = evaluator.run_custom(
                _read_source(args.source), args.language, args.entry_point, _parse_arguments(args.args)
            )
            print(json.dumps(result.to_dict(), indent=2))
            if not result.passed:
                sys.exit(1)
            return

        problem = read_problem(args.problem)
        report = evaluator.run_tests(problem) if args.quick else evaluator.evaluate(problem)
        _print_report(report, args.json)
        if not report.all_passed:
            sys.exit(1)
    except (DsaExecError, OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
