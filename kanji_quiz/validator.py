"""Input-mode answer checking."""
from __future__ import annotations

from kanji_quiz.models import Entry
from kanji_quiz.reading import alternatives, core


def acceptable_answers(reading: str) -> list[str]:
    """Core form of every alternative reading, empty ones dropped."""
    return [c for c in (core(alt) for alt in alternatives(reading)) if c]


def is_correct(submitted: str, entry: Entry) -> bool:
    """True when the trimmed submission equals the core of any alternative.

    Okurigana (quoted spans) need not be typed.  Comparison is exact and
    case-sensitive; an empty submission is never correct.
    """
    answer = submitted.strip()
    if not answer:
        return False
    return answer in acceptable_answers(entry.reading)
