"""Tests for harness synthesis."""

from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path

import pytest

from dsaexec.errors import HarnessSynthesisError, UnsupportedLanguageError
from dsaexec.harness import cpp, java, javascript
from dsaexec.harness.synthesizer import synthesize
from dsaexec.models import Submission, SynthesizedProgram


def _run_python(program_text: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-c", program_text],
        capture_output=True,
        text=True,
        timeout=30,
    )


PY_TWO_SUM = """from typing import List


class Solution:
    def twoSum(self, nums: List[int], target: int) -> List[int]:
        seen = {}
        for i, n in enumerate(nums):
            if target - n in seen:
                return [seen[target - n], i]
            seen[n] = i
        return []
"""

JAVA_TWO_SUM = """import java.util.HashMap;

public class Solution {
    public int[] twoSum(int[] nums, int target) {
        HashMap<Integer, Integer> seen = new HashMap<>();
        for (int i = 0; i < nums.length; i++) {
            if (seen.containsKey(target - nums[i])) return new int[]{seen.get(target - nums[i]), i};
            seen.put(nums[i], i);
        }
        return new int[0];
    }
}"""

CPP_HAS_CYCLE = """#include <vector>
using namespace std;

/**
 * Definition for singly-linked list.
 * struct ListNode {
 *     int val;
 *     ListNode *next;
 *     ListNode(int x) : val(x), next(NULL) {}
 * };
 */
class Solution {
public:
    bool hasCycle(ListNode *head) {
        ListNode *slow = head, *fast = head;
        while (fast && fast->next) {
            slow = slow->next;
            fast = fast->next->next;
            if (slow == fast) return true;
        }
        return false;
    }
};"""

JS_TWO_SUM = """const util = require('util');
/**
 * @param {number[]} nums
 * @param {number} target
 * @return {number[]}
 */
var twoSum = function(nums, target) {
    const seen = new Map();
    for (let i = 0; i < nums.length; i++) {
        if (seen.has(target - nums[i])) return [seen.get(target - nums[i]), i];
        seen.set(nums[i], i);
    }
    return [];
};"""


class TestPythonHarness:
    def test_two_sum_end_to_end(self):
        program = synthesize(Submission(PY_TWO_SUM, "python", "twoSum", [[2, 7, 11, 15], 9]))
        assert program.language == "python"
        result = _run_python(program.text)
        assert result.returncode == 0, result.stderr
        assert result.stdout.strip() == "[0,1]"

    def test_tree_argument_and_result(self):
        source = (
            "class Solution:\n"
            "    def invertTree(self, root: Optional[TreeNode]) -> Optional[TreeNode]:\n"
            "        if root:\n"
            "            root.left, root.right = self.invertTree(root.right), self.invertTree(root.left)\n"
            "        return root\n"
        )
        program = synthesize(Submission(source, "python3", "invertTree", [[4, 2, 7, 1, 3, 6, 9]]))
        result = _run_python(program.text)
        assert result.stdout.strip() == "[4,7,2,9,6,3,1]"

    def test_cycle_entry_point_builds_cyclic_list(self):
        source = (
            "class Solution:\n"
            "    def hasCycle(self, head: Optional[ListNode]) -> bool:\n"
            "        slow = fast = head\n"
            "        while fast and fast.next:\n"
            "            slow, fast = slow.next, fast.next.next\n"
            "            if slow is fast:\n"
            "                return True\n"
            "        return False\n"
        )
        program = synthesize(Submission(source, "python", "hasCycle", [[3, 2, 0, -4], 1]))
        assert "create_linked_list([3, 2, 0, -4], 1)" in program.text
        assert _run_python(program.text).stdout.strip() == "true"

    def test_void_entry_point_prints_first_argument(self):
        source = (
            "class Solution:\n"
            "    def reverseString(self, s: List[str]) -> None:\n"
            "        s.reverse()\n"
        )
        program = synthesize(Submission(source, "python", "reverseString", [["h", "e", "y"]]))
        assert _run_python(program.text).stdout.strip() == '["y","e","h"]'

    def test_unparsed_signature_still_passes_every_argument(self):
        program = synthesize(Submission("solve = lambda a, b: a + b\n", "python", "solve", [1, 2]))
        assert "resolve_entry_point('solve')(1, 2)" in program.text
        assert _run_python(program.text).stdout.strip() == "3"

    def test_runtime_error_exits_nonzero(self):
        program = synthesize(Submission("def boom(x):\n    raise ValueError(x)\n", "python", "boom", ["bad"]))
        result = _run_python(program.text)
        assert result.returncode == 1
        assert "ValueError" in result.stderr

    def test_user_imports_are_rehomed_once(self):
        source = "import bisect\nimport json\n\ndef find(nums, x):\n    return bisect.bisect_left(nums, x)\n"
        program = synthesize(Submission(source, "python", "find", [[1, 3, 5], 4]))
        text = program.text
        assert text.count("import bisect") == 1
        assert text.count("import json") == 1
        assert text.index("import bisect") < text.index("def find")
        assert _run_python(text).stdout.strip() == "2"

    def test_user_defined_node_class_is_kept(self):
        source = (
            "class ListNode:\n"
            "    def __init__(self, val=0, next=None):\n"
            "        self.val = val\n"
            "        self.next = next\n"
            "\n"
            "def length(head: ListNode) -> int:\n"
            "    n = 0\n"
            "    while head:\n"
            "        n, head = n + 1, head.next\n"
            "    return n\n"
        )
        program = synthesize(Submission(source, "python", "length", [[1, 2, 3]]))
        assert program.text.count("class ListNode") == 1
        assert _run_python(program.text).stdout.strip() == "3"


class TestJavaHarness:
    def test_two_sum(self):
        text = synthesize(Submission(JAVA_TWO_SUM, "java", "twoSum", [[2, 7, 11, 15], 9])).text
        assert text.startswith("import java.util.*;\nimport java.io.*;\nimport java.util.HashMap;")
        assert "public class Solution" not in text
        assert "class Solution {" in text
        assert "int[] arg0 = new int[]{2, 7, 11, 15};" in text
        assert "Object result = new Solution().twoSum(arg0, 9);" in text
        assert "public class Main {" in text
        assert java.LIST_NODE in text and java.TREE_NODE in text

    def test_bare_method_is_wrapped(self):
        text = synthesize(Submission("public int add(int a, int b) {\n    return a + b;\n}", "java", "add", [1, 2])).text
        assert "class Solution {\n    public int add(int a, int b) {" in text
        assert "Object result = new Solution().add(1, 2);" in text

    def test_user_tree_definition_suppresses_default(self):
        source = (
            "class TreeNode {\n    int val;\n    TreeNode left, right;\n    TreeNode(int v) { val = v; }\n}\n\n"
            "class Solution {\n    public int maxDepth(TreeNode root) {\n        return 0;\n    }\n}"
        )
        text = synthesize(Submission(source, "java", "maxDepth", [[3, 9, 20]])).text
        assert text.count("class TreeNode") == 1
        assert "TreeNode arg0 = HarnessSupport.arrayToTree(new Integer[]{3, 9, 20});" in text

    def test_void_method_prints_argument(self):
        source = "class Solution {\n    public void sortColors(int[] nums) {\n        Arrays.sort(nums);\n    }\n}"
        text = synthesize(Submission(source, "java", "sortColors", [[2, 0, 1]])).text
        assert "new Solution().sortColors(arg0);" in text
        assert "System.out.println(HarnessSupport.toCanonical(arg0));" in text

    def test_entry_point_in_other_class(self):
        source = "class Helper {\n    int twice(int x) { return 2 * x; }\n}"
        text = synthesize(Submission(source, "java", "twice", [4])).text
        assert "new Helper().twice(4)" in text


class TestCppHarness:
    def test_has_cycle(self):
        text = synthesize(Submission(CPP_HAS_CYCLE, "cpp", "hasCycle", [[3, 2, 0, -4], 1])).text
        assert text.count("#include <vector>") == 1
        assert text.count("using namespace std;") == 1
        assert cpp.LIST_NODE in text
        assert "ListNode* arg0 = createLinkedList({3, 2, 0, -4}, 1);" in text
        assert "sol.hasCycle(arg0)" in text
        assert text.index("using namespace std;") < text.index("struct ListNode {")

    def test_bare_function_is_wrapped(self):
        source = "int add(int a, int b) {\n    return a + b;\n}"
        text = synthesize(Submission(source, "c++", "add", [1, 2])).text
        assert "class Solution {\npublic:\n    int add(int a, int b) {" in text
        assert "Solution sol;" in text
        assert "return sol.add(1, 2);" in text

    def test_user_struct_moves_out_of_wrapper(self):
        source = (
            "struct TreeNode {\n    int val;\n    TreeNode *left;\n    TreeNode *right;\n"
            "    TreeNode(int x) : val(x), left(nullptr), right(nullptr) {}\n};\n\n"
            "int depth(TreeNode* root) {\n    return root ? 1 + max(depth(root->left), depth(root->right)) : 0;\n}"
        )
        text = synthesize(Submission(source, "cpp", "depth", [[1, None, 2]])).text
        assert text.count("struct TreeNode") == 1
        assert text.index("struct TreeNode") < text.index("class Solution")
        assert "TreeNode* arg0 = arrayToTree({1, nullopt, 2});" in text

    def test_string_arguments_are_variables(self):
        source = "class Solution {\npublic:\n    bool isPalindrome(string s) {\n        return true;\n    }\n};"
        text = synthesize(Submission(source, "cpp", "isPalindrome", ["racecar"])).text
        assert 'string arg0 = "racecar";' in text
        assert "return sol.isPalindrome(arg0);" in text


class TestJavaScriptHarness:
    def test_two_sum(self):
        text = synthesize(Submission(JS_TWO_SUM, "javascript", "twoSum", [[2, 7, 11, 15], 9])).text
        assert text.startswith("const util = require('util');")
        assert text.count("require('util')") == 1
        assert "const arg0 = [2, 7, 11, 15];" in text
        assert "const result = resolveEntryPoint()(arg0, 9);" in text
        assert javascript.LIST_NODE in text

    def test_user_list_node_suppresses_default(self):
        source = "class ListNode {\n  constructor(val, next) { this.val = val; this.next = next || null; }\n}\nfunction len(head) { return 0; }"
        text = synthesize(Submission(source, "js", "len", [[1, 2]])).text
        assert javascript.LIST_NODE not in text
        assert "const arg0 = createLinkedList([1, 2], -1);" in text


class TestSynthesizer:
    def test_deterministic(self):
        for language, source, name in (
            ("python", PY_TWO_SUM, "twoSum"),
            ("java", JAVA_TWO_SUM, "twoSum"),
            ("javascript", JS_TWO_SUM, "twoSum"),
        ):
            first = synthesize(Submission(source, language, name, [[2, 7, 11, 15], 9]))
            second = synthesize(Submission(source, language, name, [[2, 7, 11, 15], 9]))
            assert first == second

    def test_unsupported_language(self):
        with pytest.raises(UnsupportedLanguageError) as exc:
            synthesize(Submission("puts 1", "ruby", "solve", []))
        assert exc.value.language == "ruby"
        assert isinstance(exc.value, HarnessSynthesisError)

    def test_invalid_entry_point(self):
        with pytest.raises(HarnessSynthesisError):
            synthesize(Submission("def f(): pass", "python", "two sum", []))


def _compile(command: list[str], cwd: Path) -> None:
    compiled = subprocess.run(command, cwd=cwd, capture_output=True, text=True, timeout=180)
    assert compiled.returncode == 0, compiled.stderr


def _execute(program: SynthesizedProgram, workdir: Path) -> subprocess.CompletedProcess:
    """Run a synthesized program with the local toolchain for its language."""
    if program.language == "python":
        return _run_python(program.text)
    if program.language == "javascript":
        path = workdir / "main.js"
        path.write_text(program.text)
        command = [shutil.which("node"), str(path)]
    elif program.language == "cpp":
        path = workdir / "main.cpp"
        path.write_text(program.text)
        binary = workdir / "main"
        _compile([shutil.which("g++"), "-std=c++17", "-o", str(binary), str(path)], workdir)
        command = [str(binary)]
    else:
        path = workdir / "Main.java"
        path.write_text(program.text)
        _compile([shutil.which("javac"), "-d", str(workdir), str(path)], workdir)
        command = [shutil.which("java"), "-cp", str(workdir), "Main"]
    return subprocess.run(command, cwd=workdir, capture_output=True, text=True, timeout=30)


def _available(language: str) -> bool:
    tools = {"python": [], "javascript": ["node"], "cpp": ["g++"], "java": ["javac", "java"]}[language]
    return all(shutil.which(tool) for tool in tools)


LANGUAGES = [
    pytest.param(language, marks=pytest.mark.skipif(not _available(language), reason=f"no {language} toolchain"))
    for language in ("python", "javascript", "java", "cpp")
]

IDENTITY_TREE = {
    "python": "def mirror(root):\n    return root\n",
    "javascript": "function mirror(root) {\n    return root;\n}\n",
    "java": "public TreeNode mirror(TreeNode root) {\n    return root;\n}\n",
    "cpp": "TreeNode* mirror(TreeNode* root) {\n    return root;\n}\n",
}

IDENTITY_LIST = {
    "python": "def echo(head):\n    return head\n",
    "javascript": "function echo(head) {\n    return head;\n}\n",
    "java": "public ListNode echo(ListNode head) {\n    return head;\n}\n",
    "cpp": "ListNode* echo(ListNode* head) {\n    return head;\n}\n",
}

HAS_CYCLE = {
    "python": (
        "def hasCycle(head):\n"
        "    slow = fast = head\n"
        "    while fast and fast.next:\n"
        "        slow, fast = slow.next, fast.next.next\n"
        "        if slow is fast:\n"
        "            return True\n"
        "    return False\n"
    ),
    "javascript": (
        "var hasCycle = function(head) {\n"
        "    let slow = head, fast = head;\n"
        "    while (fast && fast.next) {\n"
        "        slow = slow.next;\n"
        "        fast = fast.next.next;\n"
        "        if (slow === fast) return true;\n"
        "    }\n"
        "    return false;\n"
        "};\n"
    ),
    "java": (
        "public class Solution {\n"
        "    public boolean hasCycle(ListNode head) {\n"
        "        ListNode slow = head, fast = head;\n"
        "        while (fast != null && fast.next != null) {\n"
        "            slow = slow.next;\n"
        "            fast = fast.next.next;\n"
        "            if (slow == fast) return true;\n"
        "        }\n"
        "        return false;\n"
        "    }\n"
        "}\n"
    ),
    "cpp": CPP_HAS_CYCLE,
}

HALF = {
    "python": "def half(x):\n    return x / 2\n",
    "javascript": "function half(x) {\n    return x / 2;\n}\n",
    "java": "public double half(int x) {\n    return x / 2.0;\n}\n",
    "cpp": "double half(int x) {\n    return x / 2.0;\n}\n",
}


class TestNativeRoundTrip:
    @pytest.mark.parametrize("language", LANGUAGES)
    @pytest.mark.parametrize(
        "values, expected",
        [([1, 2, 3, None, 4], "[1,2,3,null,4]"), ([1, None], "[1]"), ([], "null")],
    )
    def test_tree(self, language, values, expected, tmp_path):
        program = synthesize(Submission(IDENTITY_TREE[language], language, "mirror", [values]))
        result = _execute(program, tmp_path)
        assert result.returncode == 0, result.stderr
        assert result.stdout.strip() == expected

    @pytest.mark.parametrize("language", LANGUAGES)
    @pytest.mark.parametrize("values, expected", [([1, 2, 3], "[1,2,3]"), ([], "null")])
    def test_linked_list(self, language, values, expected, tmp_path):
        program = synthesize(Submission(IDENTITY_LIST[language], language, "echo", [values]))
        result = _execute(program, tmp_path)
        assert result.returncode == 0, result.stderr
        assert result.stdout.strip() == expected

    @pytest.mark.parametrize("language", LANGUAGES)
    def test_cyclic_list(self, language, tmp_path):
        program = synthesize(Submission(HAS_CYCLE[language], language, "hasCycle", [[3, 2, 0, -4], 1]))
        result = _execute(program, tmp_path)
        assert result.returncode == 0, result.stderr
        assert result.stdout.strip() == "true"

    @pytest.mark.parametrize("language", LANGUAGES)
    @pytest.mark.parametrize("value, expected", [(4, "2"), (5, "2.5")])
    def test_floating_point_result(self, language, value, expected, tmp_path):
        program = synthesize(Submission(HALF[language], language, "half", [value]))
        result = _execute(program, tmp_path)
        assert result.returncode == 0, result.stderr
        assert result.stdout.strip() == expected


def test_empty_structures_print_identically_in_every_language(tmp_path):
    outputs = {}
    for language in ("python", "javascript", "java", "cpp"):
        if not _available(language):
            continue
        for name, sources, entry_point in (("tree", IDENTITY_TREE, "mirror"), ("list", IDENTITY_LIST, "echo")):
            workdir = tmp_path / f"{language}-{name}"
            workdir.mkdir()
            program = synthesize(Submission(sources[language], language, entry_point, [[]]))
            outputs[language, name] = _execute(program, workdir).stdout.strip()
    assert set(outputs.values()) == {"null"}
