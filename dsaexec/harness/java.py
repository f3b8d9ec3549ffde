"""Java harness template.

The program is compiled as ``Main.java``: user classes are demoted to
package-private, bare methods are wrapped in ``class Solution`` and the
driver lives in ``public class Main``.
"""

from __future__ import annotations

import re

from dsaexec.harness.base import (
    CallPlan,
    HarnessParts,
    blank_comments,
    defines_type,
    extract_declarations,
    extract_lines,
    indent,
    owning_class,
    unique,
)

DEFAULT_IMPORTS = ["import java.util.*;", "import java.io.*;"]

_IMPORT_LINE = re.compile(r"^\s*import\s+(?:static\s+)?[\w.]+(?:\.\*)?\s*;\s*$")
_PACKAGE_LINE = re.compile(r"^\s*package\s+[\w.]+\s*;\s*$")
_TYPE_DECL = re.compile(r"\b(?:class|interface|enum|record)\s+([A-Za-z_$][\w$]*)")
_PUBLIC_TYPE = re.compile(r"\bpublic\s+(?=(?:final\s+|abstract\s+)*(?:class|interface|enum|record)\b)")
_DATA_STRUCTURES = ("ListNode", "TreeNode")

LIST_NODE = """\
class ListNode {
    int val;
    ListNode next;
    ListNode() {}
    ListNode(int val) { this.val = val; }
    ListNode(int val, ListNode next) { this.val = val; this.next = next; }
}"""

TREE_NODE = """\
class TreeNode {
    int val;
    TreeNode left;
    TreeNode right;
    TreeNode() {}
    TreeNode(int val) { this.val = val; }
    TreeNode(int val, TreeNode left, TreeNode right) {
        this.val = val;
        this.left = left;
        this.right = right;
    }
}"""

HELPERS = r"""final class HarnessSupport {
    private HarnessSupport() {}

    static TreeNode arrayToTree(Integer[] values) {
        if (values.length == 0 || values[0] == null) return null;
        TreeNode root = new TreeNode(values[0]);
        Deque<TreeNode> queue = new ArrayDeque<>();
        queue.add(root);
        int i = 1;
        while (!queue.isEmpty() && i < values.length) {
            TreeNode node = queue.poll();
            if (i < values.length && values[i] != null) {
                node.left = new TreeNode(values[i]);
                queue.add(node.left);
            }
            i++;
            if (i < values.length && values[i] != null) {
                node.right = new TreeNode(values[i]);
                queue.add(node.right);
            }
            i++;
        }
        return root;
    }

    static ListNode createLinkedList(int[] values, int pos) {
        if (values.length == 0) return null;
        ListNode[] nodes = new ListNode[values.length];
        for (int i = 0; i < values.length; i++) nodes[i] = new ListNode(values[i]);
        for (int i = 0; i < nodes.length - 1; i++) nodes[i].next = nodes[i + 1];
        if (pos >= 0 && pos < nodes.length) nodes[nodes.length - 1].next = nodes[pos];
        return nodes[0];
    }

    static List<Object> treeToList(TreeNode root) {
        List<Object> values = new ArrayList<>();
        if (root == null) return values;
        LinkedList<TreeNode> queue = new LinkedList<>();
        queue.add(root);
        while (!queue.isEmpty()) {
            TreeNode node = queue.poll();
            if (node == null) {
                values.add(null);
                continue;
            }
            values.add(node.val);
            queue.add(node.left);
            queue.add(node.right);
        }
        while (!values.isEmpty() && values.get(values.size() - 1) == null) values.remove(values.size() - 1);
        return values;
    }

    static List<Object> listToList(ListNode head) {
        List<Object> values = new ArrayList<>();
        Set<ListNode> visited = Collections.newSetFromMap(new IdentityHashMap<>());
        for (ListNode node = head; node != null && visited.add(node); node = node.next) values.add(node.val);
        return values;
    }

    static String toCanonical(Object value) {
        return toCanonical(value, true);
    }

    static String toCanonical(Object value, boolean top) {
        if (value == null) return "null";
        if (value instanceof TreeNode) return toCanonical(treeToList((TreeNode) value), false);
        if (value instanceof ListNode) return toCanonical(listToList((ListNode) value), false);
        if (value instanceof String || value instanceof Character) {
            String s = value.toString();
            return top ? s : quote(s);
        }
        if (value instanceof Double || value instanceof Float) {
            double number = ((Number) value).doubleValue();
            if (number == Math.rint(number) && Math.abs(number) < 1e15) return String.valueOf((long) number);
            return String.valueOf(value);
        }
        if (value instanceof Number || value instanceof Boolean) return String.valueOf(value);
        if (value.getClass().isArray()) {
            int n = java.lang.reflect.Array.getLength(value);
            StringBuilder sb = new StringBuilder("[");
            for (int i = 0; i < n; i++) {
                if (i > 0) sb.append(',');
                sb.append(toCanonical(java.lang.reflect.Array.get(value, i), false));
            }
            return sb.append(']').toString();
        }
        if (value instanceof Map) {
            StringBuilder sb = new StringBuilder("{");
            boolean first = true;
            for (Map.Entry<?, ?> entry : ((Map<?, ?>) value).entrySet()) {
                if (!first) sb.append(',');
                first = false;
                sb.append(quote(String.valueOf(entry.getKey()))).append(':').append(toCanonical(entry.getValue(), false));
            }
            return sb.append('}').toString();
        }
        if (value instanceof Iterable) {
            StringBuilder sb = new StringBuilder("[");
            boolean first = true;
            for (Object item : (Iterable<?>) value) {
                if (!first) sb.append(',');
                first = false;
                sb.append(toCanonical(item, false));
            }
            return sb.append(']').toString();
        }
        return top ? value.toString() : quote(value.toString());
    }

    static String quote(String s) {
        StringBuilder sb = new StringBuilder("\"");
        for (char c : s.toCharArray()) {
            switch (c) {
                case '"': sb.append("\\\""); break;
                case '\\': sb.append("\\\\"); break;
                case '\n': sb.append("\\n"); break;
                case '\r': sb.append("\\r"); break;
                case '\t': sb.append("\\t"); break;
                default: sb.append(c);
            }
        }
        return sb.append('"').toString();
    }
}"""


def _driver(plan: CallPlan, class_name: str) -> str:
    body = list(plan.setup)
    call = f"new {class_name}().{plan.entry_point}({plan.call_arguments})"
    if plan.returns_void and plan.arguments:
        body.append(f"{call};")
        body.append(f"System.out.println(HarnessSupport.toCanonical({plan.first_argument}));")
    else:
        body.append(f"Object result = {call};")
        body.append("System.out.println(HarnessSupport.toCanonical(result));")
    return (
        "public class Main {\n"
        "    public static void main(String[] args) {\n"
        "        try {\n"
        f"{indent(chr(10).join(body), ' ' * 12)}\n"
        "        } catch (Throwable error) {\n"
        "            error.printStackTrace();\n"
        "            System.exit(1);\n"
        "        }\n"
        "    }\n"
        "}"
    )


def build(source_code: str, plan: CallPlan) -> HarnessParts:
    user_imports, user_code = extract_lines(source_code, _IMPORT_LINE)
    _, user_code = extract_lines(user_code, _PACKAGE_LINE)
    user_code = _PUBLIC_TYPE.sub("", user_code)

    scan = blank_comments(user_code)
    class_name = owning_class(scan, _TYPE_DECL, plan.entry_point, skip=_DATA_STRUCTURES)
    if class_name is None and "Solution" in _TYPE_DECL.findall(scan):
        class_name = "Solution"
    if class_name is None:
        structures, methods = extract_declarations(user_code, _DATA_STRUCTURES, ("class",))
        wrapped = "class Solution {\n" + indent(methods.strip("\n")) + "\n}"
        user_code = "\n\n".join(structures + [wrapped])
        class_name = "Solution"

    definitions = []
    if not defines_type(scan, "ListNode", ("class",)):
        definitions.append(LIST_NODE)
    if not defines_type(scan, "TreeNode", ("class",)):
        definitions.append(TREE_NODE)

    return HarnessParts(
        imports=unique(DEFAULT_IMPORTS + user_imports),
        definitions="\n\n".join(definitions),
        user_code=user_code,
        helpers=HELPERS,
        driver=_driver(plan, class_name),
    )
