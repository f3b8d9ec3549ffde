"""Tests for the Judge0 language registry."""

import pytest

from dsaexec.errors import UnsupportedLanguageError
from dsaexec.languages import language_id, normalize_language


@pytest.mark.parametrize(
    "name, expected",
    [
        ("javascript", 102),
        ("JS", 102),
        ("python", 109),
        ("python3", 109),
        ("java", 91),
        ("cpp", 105),
        ("C++", 105),
    ],
)
def test_ce_ids(name, expected):
    assert language_id(name) == expected


def test_extra_flavor():
    assert language_id("python", "extra") == 28
    assert language_id("cpp", "extra") == 2


def test_normalize():
    assert normalize_language(" Python3 ") == "python"
    assert normalize_language("node") == "javascript"
    assert normalize_language("c++") == "cpp"


def test_unknown_language():
    with pytest.raises(UnsupportedLanguageError) as exc:
        language_id("brainfuck")
    assert exc.value.language == "brainfuck"
