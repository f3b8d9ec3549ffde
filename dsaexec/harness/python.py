"""Python harness template."""

from __future__ import annotations

import inspect
import re

from dsaexec.harness import pyruntime
from dsaexec.harness.base import CallPlan, HarnessParts, blank_comments, defines_type, extract_lines, indent, unique

DEFAULT_IMPORTS = [
    "import heapq",
    "import json",
    "import math",
    "import sys",
    "import traceback",
    "from collections import Counter, defaultdict, deque",
    "from typing import Dict, List, Optional, Set, Tuple",
]

_IMPORT_LINE = re.compile(r"^(?:import\s+[\w.]|from\s+[\w.]+\s+import\s+[^(\\]*$)")

_HELPERS = (
    pyruntime.create_linked_list,
    pyruntime.linked_list_to_array,
    pyruntime.array_to_tree,
    pyruntime.tree_to_array,
    pyruntime.to_plain,
    pyruntime.to_canonical,
    pyruntime.resolve_entry_point,
)


def _source(obj) -> str:
    return inspect.getsource(obj).rstrip()


def _driver(plan: CallPlan) -> str:
    body = list(plan.setup)
    call = f"resolve_entry_point({plan.entry_point!r})({plan.call_arguments})"
    if plan.returns_void and plan.arguments:
        body.append(call)
        body.append(f"print(to_canonical({plan.first_argument}))")
    else:
        body.append(f"result = {call}")
        body.append("print(to_canonical(result))")
    return (
        "def _run():\n"
        f"{indent(chr(10).join(body))}\n"
        "\n\n"
        'if __name__ == "__main__":\n'
        "    try:\n"
        "        _run()\n"
        "    except Exception:\n"
        "        traceback.print_exc()\n"
        "        sys.exit(1)"
    )


def build(source_code: str, plan: CallPlan) -> HarnessParts:
    user_imports, user_code = extract_lines(source_code, _IMPORT_LINE)
    future = [line for line in user_imports if line.startswith("from __future__")]
    others = [line for line in user_imports if not line.startswith("from __future__")]

    scan = blank_comments(user_code, "#")
    definitions = []
    if not defines_type(scan, "ListNode", ("class",)):
        definitions.append(_source(pyruntime.ListNode))
    if not defines_type(scan, "TreeNode", ("class",)):
        definitions.append(_source(pyruntime.TreeNode))

    return HarnessParts(
        imports=unique(future + DEFAULT_IMPORTS + others),
        definitions="\n\n\n".join(definitions),
        user_code=user_code,
        helpers="\n\n\n".join(_source(helper) for helper in _HELPERS),
        driver=_driver(plan),
    )
