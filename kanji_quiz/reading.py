"""Reading annotation format.

A reading is plain kana with optional okurigana wrapped in single quotes,
e.g. ``かがや'く'``.  Several acceptable readings are separated by the
full-width comma: ``'てる'、ひかる``.

Only fully paired quote spans count as emphasis.  A trailing unmatched
quote and the text after it stay plain, verbatim.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from kanji_quiz.models import Segment

EMPHASIS = "'"
ALT_SEPARATOR = "、"

_SPAN_RE = re.compile(r"'([^']*)'")


def iter_segments(reading: str) -> Iterator[Segment]:
    last = 0
    for m in _SPAN_RE.finditer(reading):
        if m.start() > last:
            yield Segment(reading[last:m.start()])
        if m.group(1):
            yield Segment(m.group(1), emphasized=True)
        last = m.end()
    if last < len(reading):
        yield Segment(reading[last:])


def render(reading: str) -> list[Segment]:
    return list(iter_segments(reading))


def core(reading: str) -> str:
    """Strip every emphasis span, delimiters included."""
    return _SPAN_RE.sub("", reading)


def emphasized_text(reading: str) -> str:
    return "".join(s.text for s in iter_segments(reading) if s.emphasized)


def alternatives(reading: str) -> list[str]:
    return [alt.strip() for alt in reading.split(ALT_SEPARATOR)]


def encode(segments: Iterable[Segment]) -> str:
    return "".join(
        f"{EMPHASIS}{s.text}{EMPHASIS}" if s.emphasized else s.text
        for s in segments
    )
