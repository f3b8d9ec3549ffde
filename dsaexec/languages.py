"""Judge0 language id registry."""

from __future__ import annotations

from dsaexec.errors import UnsupportedLanguageError

# Judge0 CE
LANGUAGE_IDS: dict[str, int] = {
    "javascript": 102,  # JavaScript (Node.js 22.08.0)
    "js": 102,
    "python": 109,  # Python (3.13.2)
    "python3": 109,
    "java": 91,  # Java (JDK 17.0.6)
    "cpp": 105,  # C++ (GCC 14.1.0)
    "c++": 105,
    "c": 103,  # C (GCC 14.1.0)
    "go": 107,  # Go (1.23.5)
    "rust": 108,  # Rust (1.85.0)
    "ruby": 72,  # Ruby (2.7.0)
    "typescript": 101,  # TypeScript (5.6.2)
    "c#": 51,  # C# (Mono 6.6.0.161)
    "cs": 51,
}

# Judge0 Extra CE
EXTRA_LANGUAGE_IDS: dict[str, int] = {
    "python": 28,  # Python 3.10 (PyPy 7.3.12)
    "python3": 28,
    "java": 4,  # Java (OpenJDK 14.0.1)
    "cpp": 2,  # C++ (Clang 10.0.1)
    "c++": 2,
    "c": 1,  # C (Clang 10.0.1)
    "c#": 29,  # C# (.NET Core SDK 7.0.400)
    "cs": 29,
}

_REGISTRIES = {"ce": LANGUAGE_IDS, "extra": EXTRA_LANGUAGE_IDS}

_ALIASES = {
    "python3": "python",
    "py": "python",
    "js": "javascript",
    "node": "javascript",
    "c++": "cpp",
    "cs": "c#",
    "csharp": "c#",
}


def normalize_language(name: str) -> str:
    key = name.strip().lower()
    return _ALIASES.get(key, key)


def language_id(name: str, flavor: str = "ce") -> int:
    registry = _REGISTRIES.get(flavor, LANGUAGE_IDS)
    key = name.strip().lower()
    if key not in registry:
        key = normalize_language(key)
    try:
        return registry[key]
    except KeyError:
        raise UnsupportedLanguageError(name) from None
