"""Best-effort extraction of entry-point parameter types from user source.

This is pattern matching over a small, known grammar of declarations, not a
parser: multi-line generics, nested template commas inside default values and
unusual formatting may not be recognized. Callers get an empty list when the
declaration cannot be located and fall back to value-based type inference.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from dsaexec.languages import normalize_language

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = "unknown"

_OPENERS = "<([{"
_CLOSERS = ">)]}"

_JAVA_MODIFIERS = re.compile(
    r"^(?:(?:public|private|protected|static|final|synchronized|abstract|native|strictfp|default)\s+)*"
)
_CPP_PREFIX = re.compile(
    r"^(?:\s*(?:public|private|protected)\s*:)*\s*(?:(?:static|inline|virtual|constexpr|explicit|friend)\s+)*"
)
_TRAILING_NAME = re.compile(r"^(.*?)\s*\b([A-Za-z_$][\w$]*)\s*((?:\[\s*\d*\s*\])*)$", re.S)
_TREE_NAME = re.compile(r"^(?:root|tree)\d*$", re.I)
_LIST_NAME = re.compile(r"^(?:head\w*|l\d|list\d)$", re.I)


@dataclass(frozen=True)
class Parameter:
    name: str
    type_tag: str


@dataclass(frozen=True)
class Signature:
    name: str
    return_type: str
    parameters: tuple[Parameter, ...]

    @property
    def types(self) -> list[str]:
        return [p.type_tag for p in self.parameters]

    @property
    def returns_void(self) -> bool:
        return self.return_type in ("void", "None")


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split on *sep* only where brackets of every kind are balanced."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    prev = ""
    for ch in text:
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS and not (ch == ">" and prev == "-"):
            depth = max(0, depth - 1)
        if ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
        prev = ch
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def _compact_type(text: str) -> str:
    text = re.sub(r"\s+", " ", text.strip())
    return re.sub(r"\s*([<>\[\],*&:])\s*", r"\1", text)


def _hint_from_name(name: str) -> str:
    if _TREE_NAME.match(name):
        return "TreeNode"
    if _LIST_NAME.match(name):
        return "ListNode"
    return UNKNOWN_TYPE


# ---------------------------------------------------------------------------
# Java
# ---------------------------------------------------------------------------


def _java_parameter(raw: str) -> Parameter:
    raw = re.sub(r"@[\w.]+(?:\([^)]*\))?\s*", "", raw)
    raw = re.sub(r"\bfinal\s+", "", raw).replace("...", "[]")
    match = _TRAILING_NAME.match(raw.strip())
    if not match or not match.group(1):
        return Parameter(name="", type_tag=_compact_type(raw) or UNKNOWN_TYPE)
    type_tag = _compact_type(match.group(1)) + re.sub(r"\s+", "", match.group(3))
    return Parameter(name=match.group(2), type_tag=type_tag)


def _parse_java(source: str, name: str) -> Signature | None:
    pattern = re.compile(
        rf"([\w<>\[\],.?\s]+?)\s+{re.escape(name)}\s*\(([^)]*)\)\s*(?:throws\s+[\w\s,.]+)?\{{"
    )
    match = pattern.search(source)
    if not match:
        return None
    return_type = _JAVA_MODIFIERS.sub("", match.group(1).strip())
    return_type = re.sub(r"^<[^>]*>\s*", "", return_type)
    params = tuple(_java_parameter(p) for p in split_top_level(match.group(2)))
    return Signature(name=name, return_type=_compact_type(return_type), parameters=params)


# ---------------------------------------------------------------------------
# C++
# ---------------------------------------------------------------------------


def _cpp_parameter(raw: str) -> Parameter:
    raw = raw.split("=", 1)[0]
    raw = re.sub(r"\bconst\b", " ", raw).replace("&", " ")
    match = _TRAILING_NAME.match(raw.strip())
    if not match or not match.group(1).strip():
        return Parameter(name="", type_tag=_compact_type(raw) or UNKNOWN_TYPE)
    type_tag = _compact_type(match.group(1))
    if match.group(3):
        type_tag += "*"
    return Parameter(name=match.group(2), type_tag=type_tag)


def _parse_cpp(source: str, name: str) -> Signature | None:
    pattern = re.compile(
        rf"([\w<>:*&,\s]+?)\s*\b{re.escape(name)}\s*\(([^)]*)\)\s*(?:const\s*)?(?:noexcept\s*)?(?:override\s*)?\{{"
    )
    match = pattern.search(source)
    if not match:
        return None
    return_type = _CPP_PREFIX.sub("", match.group(1)).strip()
    params = tuple(_cpp_parameter(p) for p in split_top_level(match.group(2)))
    return Signature(name=name, return_type=_compact_type(return_type), parameters=params)


# ---------------------------------------------------------------------------
# Python
# ---------------------------------------------------------------------------


def _python_parameter(raw: str) -> Parameter | None:
    if raw in ("self", "cls", "*", "/") or raw.startswith("*"):
        return None
    head = split_top_level(raw, "=")[0] if "=" in raw else raw
    if ":" in head:
        name, annotation = head.split(":", 1)
        name = name.strip()
        annotation = annotation.strip().strip("'\"")
        return Parameter(name=name, type_tag=_compact_type(annotation) or _hint_from_name(name))
    name = head.strip()
    return Parameter(name=name, type_tag=_hint_from_name(name))


def _parse_python(source: str, name: str) -> Signature | None:
    pattern = re.compile(
        rf"^[ \t]*(?:async\s+)?def\s+{re.escape(name)}\s*\((.*?)\)\s*(?:->\s*([^:\n]+?))?\s*:",
        re.M | re.S,
    )
    match = pattern.search(source)
    if not match:
        return None
    params = []
    for raw in split_top_level(match.group(1)):
        param = _python_parameter(raw)
        if param is not None:
            params.append(param)
    return_type = _compact_type((match.group(2) or "").strip("'\"")) or UNKNOWN_TYPE
    return Signature(name=name, return_type=return_type, parameters=tuple(params))


# ---------------------------------------------------------------------------
# JavaScript
# ---------------------------------------------------------------------------


def _js_patterns(name: str) -> list[re.Pattern[str]]:
    n = re.escape(name)
    return [
        re.compile(rf"\bfunction\s*\*?\s*{n}\s*\(([^)]*)\)"),
        re.compile(rf"(?<![\w$.]){n}\s*[:=]\s*(?:async\s+)?function\b\s*\*?\s*[\w$]*\s*\(([^)]*)\)"),
        re.compile(rf"(?<![\w$.]){n}\s*[:=]\s*(?:async\s+)?\(([^)]*)\)\s*=>"),
        re.compile(rf"(?<![\w$.]){n}\s*[:=]\s*(?:async\s+)?([\w$]+)\s*=>"),
        re.compile(rf"^[ \t]*(?:static\s+)?(?:async\s+)?{n}\s*\(([^)]*)\)\s*\{{", re.M),
    ]


def _jsdoc_before(source: str, position: int) -> str:
    start = source.rfind("/**", 0, position)
    if start == -1:
        return ""
    end = source.find("*/", start)
    if end == -1 or end > position:
        return ""
    gap = source[end + 2:position]
    if not re.fullmatch(r"[\s\w$=]*", gap) or ";" in gap or "}" in gap:
        return ""
    return source[start:end]


def _parse_javascript(source: str, name: str) -> Signature | None:
    match = None
    for pattern in _js_patterns(name):
        match = pattern.search(source)
        if match:
            break
    if not match:
        return None
    doc = _jsdoc_before(source, match.start())
    doc_types = {
        param: _compact_type(type_tag)
        for type_tag, param in re.findall(r"@param\s+\{([^}]+)\}\s+\[?([\w$]+)", doc)
    }
    returns = re.search(r"@returns?\s+\{([^}]+)\}", doc)
    params = []
    for raw in split_top_level(match.group(1)):
        param_name = raw.split("=", 1)[0].strip().lstrip(".")
        params.append(Parameter(name=param_name, type_tag=doc_types.get(param_name) or _hint_from_name(param_name)))
    return_type = _compact_type(returns.group(1)) if returns else UNKNOWN_TYPE
    return Signature(name=name, return_type=return_type, parameters=tuple(params))


_PARSERS = {
    "java": _parse_java,
    "cpp": _parse_cpp,
    "python": _parse_python,
    "javascript": _parse_javascript,
}


def parse_signature(source: str, language: str, entry_point: str) -> Signature | None:
    parser = _PARSERS.get(normalize_language(language))
    if parser is None or not entry_point:
        logger.debug("No signature parser for language %r", language)
        return None
    signature = parser(source, entry_point)
    if signature is None:
        logger.debug("Declaration of %r not found in %s source", entry_point, language)
    return signature


def parse_parameter_types(source: str, language: str, entry_point: str) -> list[str]:
    """Return one type tag per declared parameter, or [] when not found."""
    signature = parse_signature(source, language, entry_point)
    return signature.types if signature else []
