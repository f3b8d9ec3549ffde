"""JavaScript (Node.js) harness template."""

from __future__ import annotations

import re

from dsaexec.harness.base import CallPlan, HarnessParts, blank_comments, defines_type, extract_lines, indent, unique

_REQUIRE_LINE = re.compile(r"^(?:const|let|var)\s+[^=]+=\s*require\([^)]*\)\s*;?\s*$")

LIST_NODE = """\
function ListNode(val, next) {
    this.val = val === undefined ? 0 : val;
    this.next = next === undefined ? null : next;
}"""

TREE_NODE = """\
function TreeNode(val, left, right) {
    this.val = val === undefined ? 0 : val;
    this.left = left === undefined ? null : left;
    this.right = right === undefined ? null : right;
}"""

HELPERS = """\
function createLinkedList(values, pos) {
    if (!values || values.length === 0) return null;
    const nodes = values.map((v) => new ListNode(v));
    for (let i = 0; i < nodes.length - 1; i++) nodes[i].next = nodes[i + 1];
    if (pos !== undefined && pos >= 0 && pos < nodes.length) nodes[nodes.length - 1].next = nodes[pos];
    return nodes[0];
}

function linkedListToArray(head) {
    const values = [];
    const visited = new Set();
    let node = head;
    while (node && !visited.has(node)) {
        visited.add(node);
        values.push(node.val);
        node = node.next;
    }
    return values;
}

function arrayToTree(values) {
    if (!values || values.length === 0 || values[0] === null) return null;
    const root = new TreeNode(values[0]);
    const queue = [root];
    let head = 0;
    let i = 1;
    while (head < queue.length && i < values.length) {
        const node = queue[head++];
        if (i < values.length && values[i] !== null) {
            node.left = new TreeNode(values[i]);
            queue.push(node.left);
        }
        i++;
        if (i < values.length && values[i] !== null) {
            node.right = new TreeNode(values[i]);
            queue.push(node.right);
        }
        i++;
    }
    return root;
}

function treeToArray(root) {
    if (!root) return [];
    const values = [];
    const queue = [root];
    let head = 0;
    while (head < queue.length) {
        const node = queue[head++];
        if (!node) {
            values.push(null);
            continue;
        }
        values.push(node.val);
        queue.push(node.left || null);
        queue.push(node.right || null);
    }
    while (values.length > 0 && values[values.length - 1] === null) values.pop();
    return values;
}

function toPlain(value) {
    if (value === undefined || value === null) return null;
    if (typeof value !== "object") return value;
    if ("val" in value && "left" in value && "right" in value) return treeToArray(value);
    if ("val" in value && "next" in value) return linkedListToArray(value);
    if (value instanceof Set) return Array.from(value, (v) => toPlain(v));
    if (value instanceof Map) {
        const out = {};
        for (const [k, v] of value) out[String(k)] = toPlain(v);
        return out;
    }
    if (Array.isArray(value) || ArrayBuffer.isView(value)) return Array.from(value, (v) => toPlain(v));
    const out = {};
    for (const k of Object.keys(value)) out[k] = toPlain(value[k]);
    return out;
}

function toCanonical(value) {
    const plain = toPlain(value);
    if (typeof plain === "string") return plain;
    if (typeof plain === "bigint") return plain.toString();
    if (typeof plain === "number" && !Number.isFinite(plain)) return String(plain);
    return JSON.stringify(plain, (k, v) => (typeof v === "bigint" ? Number(v) : v));
}"""


def _resolver(name: str) -> str:
    return (
        "function resolveEntryPoint() {\n"
        f'    if (typeof {name} === "function") return {name};\n'
        '    if (typeof Solution === "function") {\n'
        "        const instance = new Solution();\n"
        f'        if (typeof instance.{name} === "function") return instance.{name}.bind(instance);\n'
        "    }\n"
        f"    throw new Error(\"Function '{name}' not found\");\n"
        "}"
    )


def _driver(plan: CallPlan) -> str:
    body = list(plan.setup)
    call = f"resolveEntryPoint()({plan.call_arguments})"
    if plan.returns_void and plan.arguments:
        body.append(f"{call};")
        body.append(f"console.log(toCanonical({plan.first_argument}));")
    else:
        body.append(f"const result = {call};")
        body.append("console.log(toCanonical(result));")
    return (
        f"{_resolver(plan.entry_point)}\n\n"
        "function runTest() {\n"
        "    try {\n"
        f"{indent(chr(10).join(body), ' ' * 8)}\n"
        "    } catch (error) {\n"
        "        console.error(error && error.stack ? error.stack : String(error));\n"
        "        process.exit(1);\n"
        "    }\n"
        "}\n\n"
        "runTest();"
    )


def build(source_code: str, plan: CallPlan) -> HarnessParts:
    requires, user_code = extract_lines(source_code, _REQUIRE_LINE)
    scan = blank_comments(user_code)
    keywords = ("function", "class", "const", "let", "var")
    definitions = []
    if not defines_type(scan, "ListNode", keywords):
        definitions.append(LIST_NODE)
    if not defines_type(scan, "TreeNode", keywords):
        definitions.append(TREE_NODE)
    return HarnessParts(
        imports=unique(requires),
        definitions="\n\n".join(definitions),
        user_code=user_code,
        helpers=HELPERS,
        driver=_driver(plan),
    )
