"""Conversion of JSON-like argument values into language-native source.

A marshaled argument is a tuple of setup statements (temporary variable
declarations) plus the expression passed at the call site. Conversion is a
pure function of (value, type tag, language, index): identical inputs always
produce byte-identical code.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any

from dsaexec.errors import UnsupportedLanguageError
from dsaexec.harness.pyruntime import to_canonical
from dsaexec.languages import normalize_language

TREE = "TreeNode"
LINKED_LIST = "ListNode"
STRING = "string"

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_ARRAY_TAG = re.compile(r"^(int|long|double|boolean|String|char)((?:\[\])+)$")

_SCALARS = {
    "int": "int",
    "short": "int",
    "Integer": "int",
    "number": "int",
    "long": "long",
    "longlong": "long",
    "Long": "long",
    "float": "double",
    "double": "double",
    "Double": "double",
    "Float": "double",
    "bool": "boolean",
    "boolean": "boolean",
    "Boolean": "boolean",
    "str": "string",
    "string": "string",
    "String": "string",
    "char": "char",
    "character": "char",
    "Character": "char",
}

_JAVA_BOXED = {
    "int": "Integer",
    "long": "Long",
    "double": "Double",
    "boolean": "Boolean",
    "char": "Character",
    "string": "String",
}


def canonical(value: Any) -> str:
    """Render *value* in the canonical textual form used for output comparison."""
    return to_canonical(value)


@dataclass(frozen=True)
class MarshaledArgument:
    setup_statements: tuple[str, ...]
    expression: str


# ---------------------------------------------------------------------------
# Type tags
# ---------------------------------------------------------------------------


def _element(tag: str) -> str:
    return "String" if tag == STRING else tag


def _unwrap(t: str, prefixes: tuple[str, ...]) -> str | None:
    for prefix in prefixes:
        close = "]" if prefix.endswith("[") else ">"
        if t.startswith(prefix) and t.endswith(close):
            return t[len(prefix):-1]
    return None


def _normalize(t: str) -> str:
    if t in _SCALARS:
        return _SCALARS[t]
    if t.endswith("*") and t[:-1] in (TREE, LINKED_LIST):
        return t[:-1]
    if t in (TREE, LINKED_LIST):
        return t
    if t.endswith("|None"):
        return _normalize(t[: -len("|None")])
    inner = _unwrap(t, ("Optional[",))
    if inner is not None:
        return _normalize(inner)
    if t.endswith("[]"):
        return _element(_normalize(t[:-2])) + "[]"
    inner = _unwrap(t, ("vector<", "List[", "list[", "Array<", "Sequence["))
    if inner is not None:
        return _element(_normalize(inner)) + "[]"
    inner = _unwrap(t, ("List<", "ArrayList<", "LinkedList<"))
    if inner is not None:
        element = _normalize(inner)
        return f"List<{_JAVA_BOXED.get(element, element)}>"
    return t


def normalize_type_tag(tag: str | None) -> str | None:
    """Map a raw declared type onto the canonical tag vocabulary.

    ``vector<int>``, ``List[int]``, ``number[]`` and ``int[]`` all become
    ``int[]``; ``TreeNode*`` and ``Optional[TreeNode]`` become ``TreeNode``;
    ``String``/``str``/``string`` become ``string``. Unknown types are
    returned compacted but otherwise unchanged.
    """
    if not tag:
        return None
    t = tag.strip().strip("'\"")
    t = re.sub(r"\b(?:std|typing)(?:::|\.)", "", t)
    t = re.sub(r"\b(?:const|volatile)\b", " ", t).replace("&", " ")
    t = re.sub(r"\blong\s+long\b", "longlong", t)
    t = re.sub(r"\s+", "", t)
    if not t or t == "unknown":
        return None
    return _normalize(t)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _infer_element(items: list[Any]) -> str | None:
    present = [v for v in items if v is not None]
    if not present:
        return "int"
    if all(isinstance(v, bool) for v in present):
        return "boolean"
    if all(isinstance(v, str) for v in present):
        return "String"
    if all(_is_number(v) for v in present):
        if any(isinstance(v, float) for v in present):
            return "double"
        if any(not _INT32_MIN <= v <= _INT32_MAX for v in present):
            return "long"
        return "int"
    return None


def _array_depth(value: Any) -> int | None:
    """Uniform nesting depth of a list value, or None for ragged shapes."""
    if not isinstance(value, list):
        return 0
    depths = {_array_depth(v) for v in value if v is not None}
    if not depths:
        return 1
    if len(depths) != 1 or None in depths:
        return None
    return depths.pop() + 1


def _leaves(value: Any) -> list[Any]:
    if isinstance(value, list):
        return [leaf for v in value for leaf in _leaves(v)]
    return [value]


def infer_type_tag(value: Any) -> str | None:
    """Infer a tag from the value shape alone; None when nothing fits."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "int" if _INT32_MIN <= value <= _INT32_MAX else "long"
    if isinstance(value, float):
        return "double"
    if isinstance(value, str):
        return STRING
    if isinstance(value, list):
        depth = _array_depth(value)
        if not depth:
            return None
        element = _infer_element(_leaves(value))
        if element is None:
            return None
        return element + "[]" * depth
    return None


def _array_parts(tag: str) -> tuple[str, int] | None:
    match = _ARRAY_TAG.match(tag)
    if not match:
        return None
    return match.group(1), len(match.group(2)) // 2


def _tag_fits(tag: str, value: Any) -> bool:
    if tag in (TREE, LINKED_LIST):
        return value is None or isinstance(value, list)
    parts = _array_parts(tag)
    if parts is not None:
        return isinstance(value, list) and (not value or _array_depth(value) == parts[1])
    if tag.startswith("List<"):
        return isinstance(value, list)
    if tag == STRING:
        return isinstance(value, str)
    if tag == "char":
        return isinstance(value, str) and len(value) == 1
    return tag in _SCALARS.values() and (value is None or not isinstance(value, (list, dict)))


# ---------------------------------------------------------------------------
# Per-language marshalers
# ---------------------------------------------------------------------------


class Marshaler:
    """Base dispatcher: specialized converters first, then value shape."""

    language = ""

    def marshal(
        self,
        value: Any,
        type_tag: str | None,
        index: int,
        cycle_pos: int | None = None,
    ) -> MarshaledArgument:
        var = f"arg{index}"
        tag = normalize_type_tag(type_tag)
        if tag is None or not _tag_fits(tag, value):
            tag = infer_type_tag(value)
        if tag == TREE:
            return self.tree(var, value or [])
        if tag == LINKED_LIST:
            return self.linked_list(var, value or [], -1 if cycle_pos is None else cycle_pos)
        if tag is None:
            return self.generic(var, value)
        if _array_parts(tag) is not None or tag.startswith("List<"):
            return self.array(var, value, tag)
        return self.scalar(var, value, tag)

    def tree(self, var: str, values: list[Any]) -> MarshaledArgument:
        raise NotImplementedError

    def linked_list(self, var: str, values: list[Any], pos: int) -> MarshaledArgument:
        raise NotImplementedError

    def array(self, var: str, value: list[Any], tag: str) -> MarshaledArgument:
        raise NotImplementedError

    def scalar(self, var: str, value: Any, tag: str) -> MarshaledArgument:
        raise NotImplementedError

    def generic(self, var: str, value: Any) -> MarshaledArgument:
        raise NotImplementedError


def _python_literal(value: Any) -> str:
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, float) and not math.isfinite(value):
        return f"float({str(value)!r})"
    if isinstance(value, (int, float, str)):
        return repr(value)
    if isinstance(value, dict):
        items = ", ".join(f"{_python_literal(k)}: {_python_literal(v)}" for k, v in value.items())
        return "{" + items + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_python_literal(v) for v in value) + "]"
    return repr(str(value))


class PythonMarshaler(Marshaler):
    language = "python"

    def tree(self, var, values):
        return MarshaledArgument((f"{var} = array_to_tree({_python_literal(values)})",), var)

    def linked_list(self, var, values, pos):
        args = _python_literal(values) if pos < 0 else f"{_python_literal(values)}, {pos}"
        return MarshaledArgument((f"{var} = create_linked_list({args})",), var)

    def array(self, var, value, tag):
        return MarshaledArgument((f"{var} = {_python_literal(value)}",), var)

    def scalar(self, var, value, tag):
        return MarshaledArgument((), _python_literal(value))

    def generic(self, var, value):
        if isinstance(value, (list, dict)):
            return MarshaledArgument((f"{var} = {_python_literal(value)}",), var)
        return MarshaledArgument((), _python_literal(value))


def _js_literal(value: Any) -> str:
    return json.dumps(value, separators=(", ", ": "))


class JavaScriptMarshaler(Marshaler):
    language = "javascript"

    def tree(self, var, values):
        return MarshaledArgument((f"const {var} = arrayToTree({_js_literal(values)});",), var)

    def linked_list(self, var, values, pos):
        return MarshaledArgument((f"const {var} = createLinkedList({_js_literal(values)}, {pos});",), var)

    def array(self, var, value, tag):
        return MarshaledArgument((f"const {var} = {_js_literal(value)};",), var)

    def scalar(self, var, value, tag):
        return MarshaledArgument((), _js_literal(value))

    def generic(self, var, value):
        if isinstance(value, (list, dict)):
            return self.array(var, value, "")
        return self.scalar(var, value, "")


def escape_c_string(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def _char_literal(value: str) -> str:
    ch = escape_c_string(value[:1] or " ").replace("'", "\\'")
    return f"'{ch}'"


def _number_literal(value: Any, element: str, long_suffix: str) -> str:
    if element == "double":
        number = float(value)
        if not math.isfinite(number):
            return "0.0"
        return repr(number)
    number = int(value)
    if element == "long" or not _INT32_MIN <= number <= _INT32_MAX:
        return f"{number}{long_suffix}"
    return str(number)


class JavaMarshaler(Marshaler):
    language = "java"

    def _element_literal(self, value: Any, element: str) -> str:
        if value is None:
            return "null"
        if element == "boolean":
            return "true" if value else "false"
        if element == "String":
            return f'"{escape_c_string(str(value))}"'
        if element == "char":
            return _char_literal(str(value))
        return _number_literal(value, element, "L")

    def _initializer(self, value: Any, element: str, depth: int) -> str:
        if depth == 1:
            items = value if element == "String" else [v for v in value if v is not None]
            return "{" + ", ".join(self._element_literal(v, element) for v in items) + "}"
        return "{" + ", ".join(self._initializer(v or [], element, depth - 1) for v in value) + "}"

    def tree(self, var, values):
        items = ", ".join("null" if v is None else _number_literal(v, "int", "L") for v in values)
        return MarshaledArgument((f"TreeNode {var} = HarnessSupport.arrayToTree(new Integer[]{{{items}}});",), var)

    def linked_list(self, var, values, pos):
        items = ", ".join(_number_literal(v, "int", "L") for v in values if v is not None)
        return MarshaledArgument(
            (f"ListNode {var} = HarnessSupport.createLinkedList(new int[]{{{items}}}, {pos});",), var
        )

    def _list_literal(self, value: Any, tag: str) -> str:
        inner = tag[len("List<"):-1]
        if inner.startswith("List<"):
            items = ", ".join(self._list_literal(v or [], inner) for v in value)
        else:
            element = {v: k for k, v in _JAVA_BOXED.items()}.get(inner, "int")
            items = ", ".join(self._element_literal(v, _element(element)) for v in value)
        if not value:
            return "new ArrayList<>()"
        return f"new ArrayList<>(Arrays.asList({items}))"

    def array(self, var, value, tag):
        if tag.startswith("List<"):
            if tag.startswith("List<List<"):
                lines = [f"{tag} {var} = new ArrayList<>();"]
                lines += [f"{var}.add({self._list_literal(v or [], tag[len('List<'):-1])});" for v in value]
                return MarshaledArgument(tuple(lines), var)
            return MarshaledArgument((f"{tag} {var} = {self._list_literal(value, tag)};",), var)
        element, depth = _array_parts(tag)  # type: ignore[misc]
        brackets = "[]" * depth
        init = self._initializer(value, element, depth)
        return MarshaledArgument((f"{element}{brackets} {var} = new {element}{brackets}{init};",), var)

    def scalar(self, var, value, tag):
        if value is None:
            return MarshaledArgument((), "null")
        if tag == STRING:
            return MarshaledArgument((), f'"{escape_c_string(value)}"')
        if tag == "char":
            return MarshaledArgument((), _char_literal(value))
        if tag == "boolean":
            return MarshaledArgument((), "true" if value else "false")
        if isinstance(value, str):
            return MarshaledArgument((), f'"{escape_c_string(value)}"')
        return MarshaledArgument((), _number_literal(value, tag if tag in ("long", "double") else "int", "L"))

    def generic(self, var, value):
        if value is None:
            return MarshaledArgument((), "null")
        if isinstance(value, list):
            return MarshaledArgument((f"List<Object> {var} = {self._object_literal(value)};",), var)
        return MarshaledArgument((), f'"{escape_c_string(str(value))}"')

    def _object_literal(self, value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if _is_number(value):
            return _number_literal(value, "double" if isinstance(value, float) else "int", "L")
        if isinstance(value, list):
            if not value:
                return "new ArrayList<Object>()"
            items = ", ".join(self._object_literal(v) for v in value)
            return f"new ArrayList<Object>(Arrays.<Object>asList({items}))"
        return f'"{escape_c_string(str(value))}"'


_CPP_ELEMENTS = {
    "int": "int",
    "long": "long long",
    "double": "double",
    "boolean": "bool",
    "String": "string",
    "char": "char",
}


class CppMarshaler(Marshaler):
    language = "cpp"

    def _element_literal(self, value: Any, element: str) -> str:
        if element == "boolean":
            return "true" if value else "false"
        if element == "String":
            return f'"{escape_c_string("" if value is None else str(value))}"'
        if element == "char":
            return _char_literal("" if value is None else str(value))
        return _number_literal(0 if value is None else value, element, "LL")

    def _initializer(self, value: Any, element: str, depth: int) -> str:
        if depth == 1:
            items = value if element == "String" else [v for v in value if v is not None]
            return "{" + ", ".join(self._element_literal(v, element) for v in items) + "}"
        return "{" + ", ".join(self._initializer(v or [], element, depth - 1) for v in value) + "}"

    def tree(self, var, values):
        items = ", ".join("nullopt" if v is None else _number_literal(v, "int", "LL") for v in values)
        return MarshaledArgument((f"TreeNode* {var} = arrayToTree({{{items}}});",), var)

    def linked_list(self, var, values, pos):
        items = ", ".join(_number_literal(v, "int", "LL") for v in values if v is not None)
        return MarshaledArgument((f"ListNode* {var} = createLinkedList({{{items}}}, {pos});",), var)

    def array(self, var, value, tag):
        if tag.startswith("List<"):
            return self.generic(var, value)
        element, depth = _array_parts(tag)  # type: ignore[misc]
        cpp_type = _CPP_ELEMENTS[element]
        for _ in range(depth):
            cpp_type = f"vector<{cpp_type}>"
        init = self._initializer(value, element, depth)
        return MarshaledArgument((f"{cpp_type} {var} = {init};",), var)

    def scalar(self, var, value, tag):
        if value is None:
            return MarshaledArgument((), "nullptr")
        if tag == "char":
            return MarshaledArgument((), _char_literal(value))
        if tag == "boolean":
            return MarshaledArgument((), "true" if value else "false")
        if isinstance(value, str):
            return MarshaledArgument((f'string {var} = "{escape_c_string(value)}";',), var)
        return MarshaledArgument((), _number_literal(value, tag if tag in ("long", "double") else "int", "LL"))

    def generic(self, var, value):
        # No native type fits a ragged or mixed value; hand it over as JSON text.
        if value is None:
            return MarshaledArgument((), "nullptr")
        text = escape_c_string(json.dumps(value, separators=(",", ":")))
        return MarshaledArgument((f'string {var} = "{text}";',), var)


_MARSHALERS: dict[str, Marshaler] = {
    "python": PythonMarshaler(),
    "javascript": JavaScriptMarshaler(),
    "java": JavaMarshaler(),
    "cpp": CppMarshaler(),
}


def get_marshaler(language: str) -> Marshaler:
    try:
        return _MARSHALERS[normalize_language(language)]
    except KeyError:
        raise UnsupportedLanguageError(language) from None


def marshal_argument(
    value: Any,
    type_tag: str | None,
    language: str,
    index: int,
    cycle_pos: int | None = None,
) -> MarshaledArgument:
    return get_marshaler(language).marshal(value, type_tag, index, cycle_pos)
