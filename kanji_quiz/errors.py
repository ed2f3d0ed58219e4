"""Recoverable error states surfaced to the browsing/quiz layer."""
from __future__ import annotations


class KanjiQuizError(Exception):
    pass


class LevelNotReady(KanjiQuizError):
    """The selected level has no published data; nothing is fetched."""

    def __init__(self, level: int):
        super().__init__(f"Level {level} is not ready yet")
        self.level = level


class DataUnavailable(KanjiQuizError):
    """Fetching a level's mappings failed (transport error or non-2xx status)."""

    def __init__(self, level: int, reason: str):
        super().__init__(f"Could not load level {level}: {reason}")
        self.level = level
        self.reason = reason


class InvalidTransition(KanjiQuizError):
    pass
