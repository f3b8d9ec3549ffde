"""Entry point for harness synthesis: dispatch a submission to its language template."""

from __future__ import annotations

import logging

from dsaexec.errors import UnsupportedLanguageError
from dsaexec.harness import cpp, java, javascript, python
from dsaexec.harness.base import plan_call
from dsaexec.languages import normalize_language
from dsaexec.models import Submission, SynthesizedProgram

logger = logging.getLogger(__name__)

_TEMPLATES = {
    "python": python.build,
    "javascript": javascript.build,
    "java": java.build,
    "cpp": cpp.build,
}

SUPPORTED_LANGUAGES = tuple(_TEMPLATES)


def synthesize(submission: Submission) -> SynthesizedProgram:
    """Build a complete, runnable program that calls the entry point once.

    The program prints the canonical form of the return value (or of the
    first argument for void entry points) on stdout. Pure text transform.

    Raises:
        UnsupportedLanguageError: no template exists for the language.
        HarnessSynthesisError: the entry point name is not an identifier.
    """
    language = normalize_language(submission.language)
    build = _TEMPLATES.get(language)
    if build is None:
        raise UnsupportedLanguageError(submission.language)
    plan = plan_call(submission)
    parts = build(submission.source_code, plan)
    text = parts.assemble()
    logger.debug(
        "Synthesized %s harness for %s with %d argument(s)", language, submission.entry_point, len(plan.arguments)
    )
    return SynthesizedProgram(text=text, language=language)
