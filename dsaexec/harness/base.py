"""Shared pieces of harness synthesis: the parts record and the call plan."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from dsaexec.errors import HarnessSynthesisError
from dsaexec.marshaling import LINKED_LIST, MarshaledArgument, marshal_argument, normalize_type_tag
from dsaexec.models import Submission
from dsaexec.signature import parse_signature

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")


@dataclass
class HarnessParts:
    """The sections of a synthesized program, in output order."""

    imports: list[str] = field(default_factory=list)
    definitions: str = ""
    user_code: str = ""
    helpers: str = ""
    driver: str = ""

    def assemble(self) -> str:
        sections = ["\n".join(self.imports), self.definitions, self.user_code, self.helpers, self.driver]
        return "\n\n".join(s.strip("\n") for s in sections if s.strip()) + "\n"


@dataclass(frozen=True)
class CallPlan:
    entry_point: str
    arguments: tuple[MarshaledArgument, ...]
    returns_void: bool

    @property
    def setup(self) -> list[str]:
        return [line for arg in self.arguments for line in arg.setup_statements]

    @property
    def call_arguments(self) -> str:
        return ", ".join(arg.expression for arg in self.arguments)

    @property
    def first_argument(self) -> str:
        return self.arguments[0].expression if self.arguments else ""


def _is_cycle_call(entry_point: str, arguments: list, types: list[str]) -> bool:
    """``hasCycle([3,2,0,-4], 1)``: values plus tail position for one list parameter."""
    if "cycle" not in entry_point.lower() or len(arguments) != 2:
        return False
    if [normalize_type_tag(t) for t in types] != [LINKED_LIST]:
        return False
    values, pos = arguments
    return isinstance(values, list) and isinstance(pos, int) and not isinstance(pos, bool)


def plan_call(submission: Submission) -> CallPlan:
    """Parse the entry point declaration and marshal every argument for it."""
    if not _IDENTIFIER.match(submission.entry_point or ""):
        raise HarnessSynthesisError(
            f"Invalid entry point {submission.entry_point!r}",
            details={"entry_point": submission.entry_point},
        )
    signature = parse_signature(submission.source_code, submission.language, submission.entry_point)
    types = signature.types if signature else []
    arguments = list(submission.arguments)

    if _is_cycle_call(submission.entry_point, arguments, types):
        values, pos = arguments
        marshaled = (marshal_argument(values, LINKED_LIST, submission.language, 0, cycle_pos=pos),)
        return CallPlan(submission.entry_point, marshaled, bool(signature and signature.returns_void))

    marshaled = tuple(
        marshal_argument(value, types[i] if i < len(types) else None, submission.language, i)
        for i, value in enumerate(arguments)
    )
    return CallPlan(submission.entry_point, marshaled, bool(signature and signature.returns_void))


def unique(lines: list[str]) -> list[str]:
    """Deduplicate keeping first occurrences in order."""
    seen: set[str] = set()
    result = []
    for line in lines:
        key = line.strip()
        if key and key not in seen:
            seen.add(key)
            result.append(key)
    return result


def extract_lines(source: str, pattern: re.Pattern[str]) -> tuple[list[str], str]:
    """Pull every line matching *pattern* out of *source*.

    Returns the matched lines and the remaining source.
    """
    matched = []
    kept = []
    for line in source.splitlines():
        if pattern.match(line):
            matched.append(line.strip())
        else:
            kept.append(line)
    return matched, "\n".join(kept)


def blank_comments(source: str, line_comment: str = "//") -> str:
    """Replace comment bodies with spaces, keeping every offset intact.

    String literals are skipped so that ``"http://x"`` survives.
    """
    out = list(source)
    i = 0
    n = len(source)
    block = line_comment == "//"
    while i < n:
        ch = source[i]
        if ch in "\"'`":
            quote = ch
            i += 1
            while i < n and source[i] != quote and source[i] != "\n":
                if source[i] == "\\":
                    i += 1
                i += 1
            i += 1
            continue
        if source.startswith(line_comment, i):
            end = source.find("\n", i)
            end = n if end == -1 else end
            for j in range(i, end):
                out[j] = " "
            i = end
            continue
        if block and source.startswith("/*", i):
            end = source.find("*/", i + 2)
            end = n if end == -1 else end + 2
            for j in range(i, end):
                if out[j] != "\n":
                    out[j] = " "
            i = end
            continue
        i += 1
    return "".join(out)


def defines_type(code: str, name: str, keywords: tuple[str, ...]) -> bool:
    """True when *code* (comments already blanked) declares type *name*."""
    kinds = "|".join(keywords)
    return re.search(rf"\b(?:{kinds})\s+{re.escape(name)}\b", code) is not None


def find_block(code: str, start: int) -> int:
    """Index just past the brace block whose ``{`` is at or after *start*.

    Returns -1 when the braces are unbalanced.
    """
    open_at = code.find("{", start)
    if open_at == -1:
        return -1
    depth = 0
    for i in range(open_at, len(code)):
        if code[i] == "{":
            depth += 1
        elif code[i] == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return -1


def owning_class(scan: str, declaration: re.Pattern[str], entry_point: str, skip: tuple[str, ...] = ()) -> str | None:
    """Name of the class whose body declares *entry_point*, preferring ``Solution``."""
    owners = []
    call = re.compile(rf"\b{re.escape(entry_point)}\s*\(")
    for match in declaration.finditer(scan):
        name = match.group(1)
        if name in skip:
            continue
        end = find_block(scan, match.start())
        if end != -1 and call.search(scan, match.end(), end):
            owners.append(name)
    if "Solution" in owners:
        return "Solution"
    return owners[0] if owners else None


def extract_declarations(code: str, names: tuple[str, ...], keywords: tuple[str, ...]) -> tuple[list[str], str]:
    """Cut the brace-delimited declarations of *names* out of *code*.

    A declaration runs from the start of its line through the closing brace
    and an optional ``;``. Returns the declarations and the remaining code.
    """
    scan = blank_comments(code)
    kinds = "|".join(keywords)
    spans = []
    for name in names:
        match = re.search(rf"\b(?:{kinds})\s+{re.escape(name)}\b", scan)
        if not match:
            continue
        end = find_block(scan, match.end())
        if end == -1:
            continue
        semicolon = re.match(r"[ \t]*;", scan[end:])
        if semicolon:
            end += semicolon.end()
        spans.append((code.rfind("\n", 0, match.start()) + 1, end))
    spans.sort()
    blocks = [code[start:end].strip() for start, end in spans]
    for start, end in reversed(spans):
        code = code[:start] + code[end:]
    return blocks, code


def indent(text: str, prefix: str = "    ") -> str:
    return "\n".join(prefix + line if line.strip() else line for line in text.splitlines())
