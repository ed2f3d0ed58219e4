from __future__ import annotations

from dataclasses import dataclass, field

INPUT = "input"
CHOICE = "choice"
QUIZ_FORMATS = (INPUT, CHOICE)


@dataclass
class MappingRecord:
    identifier: str
    reading: str = ""
    meaning: str = ""
    additional_info: str = ""
    components: str = ""


@dataclass(frozen=True)
class Segment:
    text: str
    emphasized: bool = False


@dataclass(frozen=True)
class Entry:
    key: str  # "<row index>:<id>", unique per catalog
    id: str
    reading: str
    image_reference: str
    meaning: str = ""
    tags: str = ""
    components: tuple[str, ...] = ()


@dataclass(frozen=True)
class Score:
    correct: int = 0
    incorrect: int = 0

    @property
    def total(self) -> int:
        return self.correct + self.incorrect

    def record(self, correct: bool) -> Score:
        if correct:
            return Score(self.correct + 1, self.incorrect)
        return Score(self.correct, self.incorrect + 1)


@dataclass(frozen=True)
class ChoiceSet:
    choices: tuple[str, ...]
    correct_index: int


@dataclass(frozen=True)
class QuizSession:
    working_set: tuple[Entry, ...]
    source_pool: tuple[Entry, ...]
    position: int = 0
    format: str = INPUT
    score: Score = field(default_factory=Score)
    choice_set: ChoiceSet | None = None
    answered: bool = False
    last_correct: bool | None = None
    pending_input: str = ""
    selected_index: int | None = None

    @property
    def current(self) -> Entry:
        return self.working_set[self.position]

    @property
    def is_last(self) -> bool:
        return self.position >= len(self.working_set) - 1
