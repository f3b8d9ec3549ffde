"""C++ harness template (C++17)."""

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

DEFAULT_INCLUDES = [
    "#include <algorithm>",
    "#include <charconv>",
    "#include <climits>",
    "#include <cmath>",
    "#include <iomanip>",
    "#include <iostream>",
    "#include <map>",
    "#include <optional>",
    "#include <queue>",
    "#include <set>",
    "#include <sstream>",
    "#include <stack>",
    "#include <string>",
    "#include <type_traits>",
    "#include <unordered_map>",
    "#include <unordered_set>",
    "#include <vector>",
]
USING_STD = "using namespace std;"

_INCLUDE_LINE = re.compile(r'^\s*#\s*include\s*[<"][^>"]+[>"]\s*$')
_USING_LINE = re.compile(r"^\s*using\s+namespace\s+std\s*;\s*$")
_CLASS_DEF = re.compile(r"\b(?:class|struct)\s+([A-Za-z_]\w*)\s*(?:final\s*)?(?::[^{;]*)?\{")
_DATA_STRUCTURES = ("ListNode", "TreeNode")

LIST_NODE = """\
struct ListNode {
    int val;
    ListNode *next;
    ListNode() : val(0), next(nullptr) {}
    ListNode(int x) : val(x), next(nullptr) {}
    ListNode(int x, ListNode *next) : val(x), next(next) {}
};"""

TREE_NODE = """\
struct TreeNode {
    int val;
    TreeNode *left;
    TreeNode *right;
    TreeNode() : val(0), left(nullptr), right(nullptr) {}
    TreeNode(int x) : val(x), left(nullptr), right(nullptr) {}
    TreeNode(int x, TreeNode *left, TreeNode *right) : val(x), left(left), right(right) {}
};"""

HELPERS = r"""TreeNode* arrayToTree(const vector<optional<int>>& values) {
    if (values.empty() || !values[0].has_value()) return nullptr;
    TreeNode* root = new TreeNode(*values[0]);
    queue<TreeNode*> pending;
    pending.push(root);
    size_t i = 1;
    while (!pending.empty() && i < values.size()) {
        TreeNode* node = pending.front();
        pending.pop();
        if (i < values.size() && values[i].has_value()) {
            node->left = new TreeNode(*values[i]);
            pending.push(node->left);
        }
        i++;
        if (i < values.size() && values[i].has_value()) {
            node->right = new TreeNode(*values[i]);
            pending.push(node->right);
        }
        i++;
    }
    return root;
}

ListNode* createLinkedList(const vector<int>& values, int pos) {
    if (values.empty()) return nullptr;
    vector<ListNode*> nodes;
    for (int v : values) nodes.push_back(new ListNode(v));
    for (size_t i = 0; i + 1 < nodes.size(); i++) nodes[i]->next = nodes[i + 1];
    if (pos >= 0 && pos < (int)nodes.size()) nodes.back()->next = nodes[pos];
    return nodes[0];
}

string joinCanonical(const vector<string>& parts) {
    string out = "[";
    for (size_t i = 0; i < parts.size(); i++) {
        if (i > 0) out += ",";
        out += parts[i];
    }
    return out + "]";
}

string quoteCanonical(const string& s) {
    string out = "\"";
    for (char c : s) {
        switch (c) {
            case '"': out += "\\\""; break;
            case '\\': out += "\\\\"; break;
            case '\n': out += "\\n"; break;
            case '\r': out += "\\r"; break;
            case '\t': out += "\\t"; break;
            default: out += c;
        }
    }
    return out + "\"";
}

string toCanonical(const string& value, bool top = true) {
    return top ? value : quoteCanonical(value);
}

string toCanonical(char value, bool top = true) {
    return toCanonical(string(1, value), top);
}

string toCanonical(bool value, bool top = true) {
    return value ? "true" : "false";
}

template <typename T>
typename enable_if<is_arithmetic<T>::value, string>::type toCanonical(T value, bool top = true) {
    if constexpr (is_floating_point<T>::value) {
        double number = static_cast<double>(value);
        if (isfinite(number) && number == floor(number) && fabs(number) < 1e15) {
            return to_string(static_cast<long long>(number));
        }
        char buffer[64];
        auto written = to_chars(buffer, buffer + sizeof(buffer), number);
        return string(buffer, written.ptr);
    } else {
        return to_string(value);
    }
}

string toCanonical(TreeNode* root, bool top = true) {
    if (!root) return "null";
    vector<string> values;
    queue<TreeNode*> pending;
    pending.push(root);
    while (!pending.empty()) {
        TreeNode* node = pending.front();
        pending.pop();
        if (!node) {
            values.push_back("null");
            continue;
        }
        values.push_back(toCanonical(node->val, false));
        pending.push(node->left);
        pending.push(node->right);
    }
    while (!values.empty() && values.back() == "null") values.pop_back();
    return joinCanonical(values);
}

string toCanonical(ListNode* head, bool top = true) {
    if (!head) return "null";
    vector<string> values;
    unordered_set<ListNode*> visited;
    for (ListNode* node = head; node && visited.insert(node).second; node = node->next) {
        values.push_back(toCanonical(node->val, false));
    }
    return joinCanonical(values);
}

template <typename T>
string toCanonical(const vector<T>& values, bool top = true) {
    vector<string> parts;
    for (const auto& value : values) parts.push_back(toCanonical(value, false));
    return joinCanonical(parts);
}

template <typename Invoke, typename Fallback>
void printInvocation(Invoke invoke, Fallback fallback) {
    if constexpr (is_void_v<decltype(invoke())>) {
        invoke();
        cout << fallback() << endl;
    } else {
        auto result = invoke();
        cout << toCanonical(result) << endl;
    }
}"""


def _driver(plan: CallPlan, class_name: str) -> str:
    first = plan.first_argument
    if not first or first == "nullptr":
        fallback = '[&]() { return string("null"); }'
    else:
        fallback = f"[&]() {{ return toCanonical({first}); }}"
    body = [f"{class_name} sol;"] + plan.setup + [
        f"printInvocation([&]() {{ return sol.{plan.entry_point}({plan.call_arguments}); }}, {fallback});"
    ]
    return (
        "int main() {\n"
        "    try {\n"
        f"{indent(chr(10).join(body), ' ' * 8)}\n"
        "    } catch (const exception& error) {\n"
        "        cerr << error.what() << endl;\n"
        "        return 1;\n"
        "    }\n"
        "    return 0;\n"
        "}"
    )


def build(source_code: str, plan: CallPlan) -> HarnessParts:
    includes, user_code = extract_lines(source_code, _INCLUDE_LINE)
    _, user_code = extract_lines(user_code, _USING_LINE)

    scan = blank_comments(user_code)
    class_name = owning_class(scan, _CLASS_DEF, plan.entry_point, skip=_DATA_STRUCTURES)
    if class_name is None and "Solution" in _CLASS_DEF.findall(scan):
        class_name = "Solution"
    if class_name is None:
        structures, functions = extract_declarations(user_code, _DATA_STRUCTURES, ("struct", "class"))
        wrapped = "class Solution {\npublic:\n" + indent(functions.strip("\n")) + "\n};"
        user_code = "\n\n".join(structures + [wrapped])
        class_name = "Solution"

    definitions = []
    if not defines_type(scan, "ListNode", ("struct", "class")):
        definitions.append(LIST_NODE)
    if not defines_type(scan, "TreeNode", ("struct", "class")):
        definitions.append(TREE_NODE)

    return HarnessParts(
        imports=unique(DEFAULT_INCLUDES + includes) + [USING_STD],
        definitions="\n\n".join(definitions),
        user_code=user_code,
        helpers=HELPERS,
        driver=_driver(plan, class_name),
    )
