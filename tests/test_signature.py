"""Tests for entry-point signature parsing."""

from dsaexec.signature import parse_parameter_types, parse_signature, split_top_level


JAVA_TWO_SUM = """class Solution {
    public int[] twoSum(int[] nums, int target) {
        return new int[]{0, 1};
    }
}"""

CPP_TWO_SUM = """class Solution {
public:
    vector<int> twoSum(vector<int>& nums, int target) {
        return {0, 1};
    }
};"""

PY_TWO_SUM = """class Solution:
    def twoSum(self, nums: List[int], target: int) -> List[int]:
        return [0, 1]
"""

JS_TWO_SUM = """/**
 * @param {number[]} nums
 * @param {number} target
 * @return {number[]}
 */
var twoSum = function(nums, target) {
    return [0, 1];
};"""


def test_split_top_level_respects_brackets():
    assert split_top_level("Map<String, Integer> m, int k") == ["Map<String, Integer> m", "int k"]
    assert split_top_level("a: Dict[str, int], b: Tuple[int, int]") == ["a: Dict[str, int]", "b: Tuple[int, int]"]
    assert split_top_level("") == []


class TestJava:
    def test_array_and_scalar(self):
        assert parse_parameter_types(JAVA_TWO_SUM, "java", "twoSum") == ["int[]", "int"]

    def test_return_type(self):
        sig = parse_signature(JAVA_TWO_SUM, "java", "twoSum")
        assert sig is not None
        assert sig.return_type == "int[]"
        assert [p.name for p in sig.parameters] == ["nums", "target"]

    def test_generic_return_and_modifiers(self):
        src = "class Solution {\n    public List<List<Integer>> threeSum(int[] nums) {\n        return null;\n    }\n}"
        sig = parse_signature(src, "java", "threeSum")
        assert sig.return_type == "List<List<Integer>>"
        assert sig.types == ["int[]"]

    def test_final_and_varargs(self):
        src = "public static int sum(final int... values) {\n    return 0;\n}"
        assert parse_parameter_types(src, "java", "sum") == ["int[]"]

    def test_c_style_array_declarator(self):
        src = "int first(int nums[]) {\n    return nums[0];\n}"
        assert parse_parameter_types(src, "java", "first") == ["int[]"]

    def test_void_method(self):
        src = "class Solution {\n    public void rotate(int[][] matrix) {\n    }\n}"
        sig = parse_signature(src, "java", "rotate")
        assert sig.returns_void
        assert sig.types == ["int[][]"]


class TestCpp:
    def test_reference_is_stripped(self):
        assert parse_parameter_types(CPP_TWO_SUM, "cpp", "twoSum") == ["vector<int>", "int"]

    def test_pointer_types(self):
        src = "class Solution {\npublic:\n    TreeNode* invertTree(TreeNode* root) {\n        return root;\n    }\n};"
        sig = parse_signature(src, "cpp", "invertTree")
        assert sig.return_type == "TreeNode*"
        assert sig.types == ["TreeNode*"]

    def test_const_string_reference(self):
        src = "bool isPalindrome(const string& s) {\n    return true;\n}"
        assert parse_parameter_types(src, "c++", "isPalindrome") == ["string"]

    def test_nested_template(self):
        src = "int islands(vector<vector<char>>& grid, int k = 0) {\n    return 0;\n}"
        assert parse_parameter_types(src, "cpp", "islands") == ["vector<vector<char>>", "int"]


class TestPython:
    def test_annotations(self):
        assert parse_parameter_types(PY_TWO_SUM, "python", "twoSum") == ["List[int]", "int"]
        assert parse_signature(PY_TWO_SUM, "python", "twoSum").return_type == "List[int]"

    def test_name_hints_without_annotations(self):
        src = "class Solution:\n    def maxDepth(self, root):\n        return 0\n"
        assert parse_parameter_types(src, "python3", "maxDepth") == ["TreeNode"]
        src = "def reverse(head, k=2):\n    return head\n"
        assert parse_parameter_types(src, "python", "reverse") == ["ListNode", "unknown"]

    def test_none_return(self):
        src = "def rotate(self, nums: List[int], k: int) -> None:\n    pass\n"
        assert parse_signature(src, "python", "rotate").returns_void


class TestJavaScript:
    def test_jsdoc_types(self):
        assert parse_parameter_types(JS_TWO_SUM, "javascript", "twoSum") == ["number[]", "number"]
        assert parse_signature(JS_TWO_SUM, "js", "twoSum").return_type == "number[]"

    def test_function_declaration_without_doc(self):
        src = "function add(a, b) {\n    return a + b;\n}"
        assert parse_parameter_types(src, "javascript", "add") == ["unknown", "unknown"]

    def test_arrow_function(self):
        src = "const maxDepth = (root) => root ? 1 : 0;"
        assert parse_parameter_types(src, "javascript", "maxDepth") == ["TreeNode"]

    def test_class_method(self):
        src = "class Solution {\n    hasCycle(head) {\n        return false;\n    }\n}"
        assert parse_parameter_types(src, "javascript", "hasCycle") == ["ListNode"]


def test_missing_declaration_returns_empty():
    assert parse_parameter_types("class Solution {}", "java", "twoSum") == []
    assert parse_parameter_types("solve = lambda a, b: a + b", "python", "solve") == []
    assert parse_signature("anything", "ruby", "solve") is None
