"""Immutable catalog data for the escape room.

These are loaded once from the packaged TOML files at startup and shared
across all sessions. Nothing here is ever mutated.
"""

from dataclasses import dataclass
from enum import StrEnum

FIRST_LEVEL = 1
LAST_LEVEL = 5
LEVELS = range(FIRST_LEVEL, LAST_LEVEL + 1)

# Questions posed per room
QUESTIONS_PER_LEVEL = 3

Position = tuple[float, float, float]


class QuestionKind(StrEnum):
    CHOICE = "choice"
    FREEFORM = "freeform"


class KeyRevealStyle(StrEnum):
    """Where the key turns up once the questions are solved."""

    TABLE = "table"
    DRAWER = "drawer"
    PAINTING = "painting"
    FLOOR = "floor"
    WALL = "wall"


@dataclass(frozen=True)
class Question:
    """A knowledge-check item posed by the puzzle object."""

    id: str
    level: int
    kind: QuestionKind
    prompt: str
    expected_answer: str
    explanation: str = ""
    code: str | None = None
    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class RoomObject:
    """A fixture in the room, interactive or purely decorative."""

    id: str
    display_name: str
    world_position: Position
    can_hold_questions: bool = False
    can_hide_key: bool = False
    question_hint: str = ""
    key_hint: str = ""
    key_world_position: Position | None = None


@dataclass(frozen=True)
class LevelTheme:
    level: int
    name: str
    key_reveal_style: KeyRevealStyle = KeyRevealStyle.TABLE


@dataclass(frozen=True)
class Catalog:
    """The complete question bank, room fixtures and level themes."""

    questions: tuple[Question, ...] = ()
    room_objects: tuple[RoomObject, ...] = ()
    themes: tuple[LevelTheme, ...] = ()

    def questions_for_level(self, level: int) -> list[Question]:
        return [q for q in self.questions if q.level == level]

    def room_object(self, object_id: str) -> RoomObject:
        for obj in self.room_objects:
            if obj.id == object_id:
                return obj
        raise KeyError(object_id)

    def theme(self, level: int) -> LevelTheme:
        for theme in self.themes:
            if theme.level == level:
                return theme
        raise KeyError(level)

    @property
    def question_holders(self) -> list[RoomObject]:
        return [o for o in self.room_objects if o.can_hold_questions]

    @property
    def key_hiders(self) -> list[RoomObject]:
        return [o for o in self.room_objects if o.can_hide_key]
