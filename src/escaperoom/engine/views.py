"""Read-only helpers the presentation layer uses to describe the room."""

from dataclasses import dataclass

from .catalog import Catalog, KeyRevealStyle, LevelTheme, RoomObject
from .layout import LevelSetup
from .state import GameState


@dataclass(frozen=True)
class Objective:
    label: str
    done: bool


FINAL_OBJECTIVE = "Proceed through the door"


def objectives(state: GameState) -> list[Objective]:
    """The per-level checklist shown on the HUD."""
    return [
        Objective("Find the puzzle", state.all_questions_correct),
        Objective("Solve the challenge", state.all_questions_correct),
        Objective("Find the key", state.key_collected),
        Objective("Activate the switch", state.switch_activated),
        Objective("Escape the room", state.door_unlocked),
    ]


def current_objective(state: GameState) -> str:
    for objective in objectives(state):
        if not objective.done:
            return objective.label
    return FINAL_OBJECTIVE


def is_question_object_active(state: GameState, setup: LevelSetup, object_id: str) -> bool:
    return (
        state.is_playing
        and object_id == setup.question_object_id
        and not state.all_questions_correct
    )


def is_key_object_active(state: GameState, setup: LevelSetup, object_id: str) -> bool:
    return (
        state.is_playing
        and object_id == setup.key_object_id
        and state.key_revealed
        and not state.key_collected
    )


def is_switch_active(state: GameState) -> bool:
    return state.is_playing and state.key_collected and not state.switch_activated


def is_door_active(state: GameState) -> bool:
    return state.is_playing and state.door_unlocked


def object_hint(obj: RoomObject, state: GameState, setup: LevelSetup) -> str:
    """Hint text for a room object, or "" when it has nothing to say."""
    if is_question_object_active(state, setup, obj.id):
        return obj.question_hint
    if is_key_object_active(state, setup, obj.id):
        return obj.key_hint
    return ""


def interactable_object_ids(
    catalog: Catalog, state: GameState, setup: LevelSetup
) -> list[str]:
    """Catalog objects that currently respond to a click."""
    return [
        obj.id
        for obj in catalog.room_objects
        if is_question_object_active(state, setup, obj.id)
        or is_key_object_active(state, setup, obj.id)
    ]


KEY_REVEAL_LINES = {
    KeyRevealStyle.TABLE: "A key has appeared on top of the {name}.",
    KeyRevealStyle.DRAWER: "A hidden drawer in the {name} slides open. A key glints inside.",
    KeyRevealStyle.PAINTING: "The wall behind the {name} swings aside to show a key.",
    KeyRevealStyle.FLOOR: "A floorboard next to the {name} lifts up. There is a key beneath it.",
    KeyRevealStyle.WALL: "A stone in the wall by the {name} slides out, holding a key.",
}


def key_reveal_line(theme: LevelTheme, obj: RoomObject) -> str:
    """How the key shows itself in this room, named after its hiding place."""
    return KEY_REVEAL_LINES[theme.key_reveal_style].format(name=obj.display_name.lower())
