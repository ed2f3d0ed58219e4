"""Quiz sessions: item order, scoring and four-way choice generation.

A QuizSession is an immutable value; every transition function takes the
current session and returns the next one.  QuizEngine owns the single live
session and tracks the browsing -> active -> result cycle around it.

Randomness comes from an injectable ``random.Random``-like object (only
``shuffle`` and ``randrange`` are used) so tests can pin the arrangement.
"""
from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable
from dataclasses import replace

from kanji_quiz.errors import InvalidTransition
from kanji_quiz.models import (
    CHOICE,
    INPUT,
    QUIZ_FORMATS,
    ChoiceSet,
    Entry,
    QuizSession,
    Score,
)
from kanji_quiz.reading import core
from kanji_quiz.validator import is_correct

log = logging.getLogger("kanji_quiz.quiz")

CHOICE_COUNT = 4
PLACEHOLDER_CHOICE = ""

BROWSING = "browsing"
ACTIVE = "active"
RESULT = "result"


def generate_choices(entry: Entry, pool: Iterable[Entry], rng: random.Random) -> ChoiceSet:
    """Build four display strings (core readings) with one correct slot.

    Wrong answers come from pool entries whose raw reading differs from the
    current one.  Their cores are kept only if distinct from the correct core
    and from each other; missing slots are filled with PLACEHOLDER_CHOICE.
    """
    correct_core = core(entry.reading)
    others = [e.reading for e in pool if e.reading != entry.reading]
    rng.shuffle(others)

    wrong: list[str] = []
    seen = {correct_core}
    for reading in others:
        c = core(reading)
        if c in seen:
            continue
        seen.add(c)
        wrong.append(c)
        if len(wrong) == CHOICE_COUNT - 1:
            break

    if len(wrong) < CHOICE_COUNT - 1:
        log.debug("Only %d wrong choices for %s, padding", len(wrong), entry.key)
        wrong += [PLACEHOLDER_CHOICE] * (CHOICE_COUNT - 1 - len(wrong))

    correct_index = rng.randrange(CHOICE_COUNT)
    choices = wrong[:correct_index] + [correct_core] + wrong[correct_index:]
    return ChoiceSet(choices=tuple(choices), correct_index=correct_index)


def _prepare_question(session: QuizSession, rng: random.Random) -> QuizSession:
    if session.format == CHOICE:
        return replace(session, choice_set=generate_choices(session.current, session.source_pool, rng))
    return replace(session, choice_set=None)


def _require_unanswered(session: QuizSession) -> None:
    if session.answered:
        raise InvalidTransition("Current question has already been answered")


def start_session(
    pool: Iterable[Entry],
    quiz_format: str = INPUT,
    rng: random.Random | None = None,
) -> QuizSession | None:
    """Shuffle the pool into a new session; None when the pool is empty."""
    if quiz_format not in QUIZ_FORMATS:
        raise ValueError(f"Unknown quiz format: {quiz_format}")
    source = tuple(pool)
    if not source:
        return None
    rng = rng or random.Random()
    working = list(source)
    rng.shuffle(working)
    session = QuizSession(working_set=tuple(working), source_pool=source, format=quiz_format)
    return _prepare_question(session, rng)


def set_input(session: QuizSession, text: str) -> QuizSession:
    _require_unanswered(session)
    return replace(session, pending_input=text)


def submit_answer(session: QuizSession, text: str | None = None) -> QuizSession:
    """Check a typed answer (defaults to the pending input)."""
    _require_unanswered(session)
    if session.format != INPUT:
        raise InvalidTransition("Typed answers are only accepted in input format")
    answer = session.pending_input if text is None else text
    correct = is_correct(answer, session.current)
    return replace(
        session,
        score=session.score.record(correct),
        answered=True,
        last_correct=correct,
        pending_input=answer,
    )


def submit_choice(session: QuizSession, index: int) -> QuizSession:
    """Check a choice by slot index; equal display text never counts."""
    _require_unanswered(session)
    if session.format != CHOICE or session.choice_set is None:
        raise InvalidTransition("Choices are only accepted in choice format")
    if not 0 <= index < len(session.choice_set.choices):
        raise ValueError(f"Choice index out of range: {index}")
    correct = index == session.choice_set.correct_index
    return replace(
        session,
        score=session.score.record(correct),
        answered=True,
        last_correct=correct,
        selected_index=index,
    )


def give_up(session: QuizSession) -> QuizSession:
    _require_unanswered(session)
    return replace(
        session,
        score=session.score.record(False),
        answered=True,
        last_correct=False,
    )


def advance(session: QuizSession, rng: random.Random | None = None) -> QuizSession | None:
    """Move to the next question; None once the last one is done."""
    if not session.answered:
        raise InvalidTransition("Answer or give up before moving on")
    if session.is_last:
        return None
    nxt = replace(
        session,
        position=session.position + 1,
        answered=False,
        last_correct=None,
        pending_input="",
        selected_index=None,
    )
    return _prepare_question(nxt, rng or random.Random())


def change_format(
    session: QuizSession,
    quiz_format: str,
    rng: random.Random | None = None,
) -> QuizSession:
    """Switch answer format for the current question; the score is kept."""
    if quiz_format not in QUIZ_FORMATS:
        raise ValueError(f"Unknown quiz format: {quiz_format}")
    _require_unanswered(session)
    cleared = replace(session, pending_input="", selected_index=None)
    if quiz_format == session.format:
        return cleared
    return _prepare_question(replace(cleared, format=quiz_format), rng or random.Random())


class QuizEngine:
    """Holds the one live session and the last-used answer format."""

    def __init__(
        self,
        rng: random.Random | None = None,
        quiz_format: str = INPUT,
        on_complete: Callable[[Score], None] | None = None,
    ):
        self.rng = rng or random.Random()
        self.format = quiz_format
        self.on_complete = on_complete
        self.session: QuizSession | None = None
        self.last_score: Score | None = None

    @property
    def state(self) -> str:
        if self.session is None:
            return BROWSING
        return RESULT if self.session.answered else ACTIVE

    def _current(self) -> QuizSession:
        if self.session is None:
            raise InvalidTransition("No quiz session in progress")
        return self.session

    def start(self, pool: Iterable[Entry]) -> QuizSession | None:
        """Start a new session, discarding any previous one.

        An empty pool leaves the engine browsing and returns None.
        """
        session = start_session(pool, self.format, self.rng)
        if session is None:
            log.info("Empty candidate pool, staying in browsing")
            return None
        self.session = session
        self.last_score = None
        log.info("Session started: %d questions, %s format", len(session.working_set), session.format)
        return session

    def set_input(self, text: str) -> QuizSession:
        self.session = set_input(self._current(), text)
        return self.session

    def submit_answer(self, text: str | None = None) -> QuizSession:
        self.session = submit_answer(self._current(), text)
        return self.session

    def submit_choice(self, index: int) -> QuizSession:
        self.session = submit_choice(self._current(), index)
        return self.session

    def give_up(self) -> QuizSession:
        self.session = give_up(self._current())
        return self.session

    def change_format(self, quiz_format: str) -> QuizSession:
        self.session = change_format(self._current(), quiz_format, self.rng)
        self.format = quiz_format
        return self.session

    def advance(self) -> QuizSession | None:
        """Next question, or None when the session is over (score in last_score)."""
        session = self._current()
        nxt = advance(session, self.rng)
        if nxt is None:
            self.finish()
            log.info("Session complete: %d correct, %d incorrect",
                     session.score.correct, session.score.incorrect)
            if self.on_complete:
                self.on_complete(session.score)
            return None
        self.session = nxt
        return nxt

    def finish(self) -> Score | None:
        """Abandon or close the session and return to browsing."""
        if self.session is not None:
            self.last_score = self.session.score
        self.session = None
        return self.last_score
