"""Game progression state.

GameState is frozen: transitions build a new instance instead of
patching the old one. All values are ints, bools, enums or a small
Feedback record, so a snapshot can be handed to the presentation layer
as-is.
"""

from dataclasses import dataclass
from enum import StrEnum

from .catalog import FIRST_LEVEL, LAST_LEVEL

MAX_LIVES = 3

# Added to the session seed when all lives are lost, so the restarted
# run gets a different layout.
SEED_RETRY_INCREMENT = 1


class GamePhase(StrEnum):
    START = "start"
    PLAYING = "playing"
    VICTORY = "victory"


class FeedbackKind(StrEnum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class Feedback:
    kind: FeedbackKind
    message: str


@dataclass(frozen=True)
class GameState:
    """Everything the state machine owns."""

    game_phase: GamePhase = GamePhase.START
    current_level: int = FIRST_LEVEL
    seed: int = 0
    lives: int = MAX_LIVES

    # Per-level gates, in the order the player clears them
    all_questions_correct: bool = False
    key_revealed: bool = False
    key_collected: bool = False
    switch_activated: bool = False
    door_unlocked: bool = False

    show_question_panel: bool = False
    feedback: Feedback | None = None

    @property
    def is_playing(self) -> bool:
        return self.game_phase is GamePhase.PLAYING


def new_game_state(seed: int = 0) -> GameState:
    """Create the state a process starts with: the start screen."""
    return GameState(seed=seed)


def invariant_violations(state: GameState) -> list[str]:
    """Describe every state invariant that does not hold."""
    problems = []
    if state.key_collected and not state.key_revealed:
        problems.append("key collected before it was revealed")
    if state.switch_activated and not state.key_collected:
        problems.append("switch activated without the key")
    if state.door_unlocked and not state.switch_activated:
        problems.append("door unlocked without the switch")
    if state.all_questions_correct and state.show_question_panel:
        problems.append("question panel open after all questions were answered")
    if not 0 < state.lives <= MAX_LIVES:
        problems.append(f"lives out of range: {state.lives}")
    if state.game_phase is GamePhase.VICTORY:
        if state.current_level != LAST_LEVEL:
            problems.append(f"victory on level {state.current_level}")
        if not state.door_unlocked:
            problems.append("victory without an unlocked door")
    return problems
