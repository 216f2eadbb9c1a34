"""Action dispatch for the game progression state machine.

apply_action(state, action) -> GameState is the main entry point. Every
handler is a pure function of (state, action) that returns a whole new
state. An action whose precondition does not hold is ignored: the
handler returns the state it was given, unchanged, and never raises.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from enum import StrEnum
from functools import reduce

from .catalog import LAST_LEVEL
from .state import (
    SEED_RETRY_INCREMENT,
    Feedback,
    FeedbackKind,
    GamePhase,
    GameState,
    new_game_state,
)


class ActionType(StrEnum):
    START_GAME = "start_game"
    SHOW_QUESTION_PANEL = "show_question_panel"
    HIDE_QUESTION_PANEL = "hide_question_panel"
    ALL_QUESTIONS_CORRECT = "all_questions_correct"
    LOSE_LIFE = "lose_life"
    CLEAR_FEEDBACK = "clear_feedback"
    REVEAL_KEY = "reveal_key"
    COLLECT_KEY = "collect_key"
    ACTIVATE_SWITCH = "activate_switch"
    NEXT_LEVEL = "next_level"
    RESTART = "restart"


@dataclass(frozen=True)
class Action:
    """A discrete intent. Only START_GAME carries a payload: the new seed."""

    type: ActionType
    seed: int | None = None


SOLVED_MESSAGE = "Correct! A key has been revealed somewhere in the room..."
KEY_MESSAGE = "Key collected! Find the switch to unlock the door."
SWITCH_MESSAGE = "Switch activated! The door is now unlocked."
OUT_OF_LIVES_MESSAGE = "Out of lives! The rooms have been rearranged. Back to level 1."


def _lives_message(lives: int) -> str:
    noun = "life" if lives == 1 else "lives"
    return f"Wrong answer. {lives} {noun} remaining."


def _start_game(state: GameState, action: Action) -> GameState:
    if state.game_phase is GamePhase.PLAYING:
        return state
    seed = action.seed if action.seed is not None else state.seed
    return replace(new_game_state(seed), game_phase=GamePhase.PLAYING)


def _show_question_panel(state: GameState, action: Action) -> GameState:
    if not state.is_playing or state.all_questions_correct:
        return state
    return replace(state, show_question_panel=True)


def _hide_question_panel(state: GameState, action: Action) -> GameState:
    return replace(state, show_question_panel=False)


def _all_questions_correct(state: GameState, action: Action) -> GameState:
    if not state.is_playing or state.all_questions_correct:
        return state
    return replace(
        state,
        all_questions_correct=True,
        show_question_panel=False,
        feedback=Feedback(FeedbackKind.CORRECT, SOLVED_MESSAGE),
    )


def _lose_life(state: GameState, action: Action) -> GameState:
    if not state.is_playing or state.all_questions_correct:
        return state
    lives = state.lives - 1
    if lives <= 0:
        # Full reset, but on a new layout
        return replace(
            new_game_state(state.seed + SEED_RETRY_INCREMENT),
            game_phase=GamePhase.PLAYING,
            feedback=Feedback(FeedbackKind.INCORRECT, OUT_OF_LIVES_MESSAGE),
        )
    return replace(
        state,
        lives=lives,
        feedback=Feedback(FeedbackKind.INCORRECT, _lives_message(lives)),
    )


def _clear_feedback(state: GameState, action: Action) -> GameState:
    return replace(state, feedback=None)


def _reveal_key(state: GameState, action: Action) -> GameState:
    if not state.is_playing or not state.all_questions_correct:
        return state
    return replace(state, key_revealed=True)


def _collect_key(state: GameState, action: Action) -> GameState:
    if not state.is_playing or not state.key_revealed or state.key_collected:
        return state
    return replace(
        state,
        key_collected=True,
        feedback=Feedback(FeedbackKind.CORRECT, KEY_MESSAGE),
    )


def _activate_switch(state: GameState, action: Action) -> GameState:
    if not state.is_playing or not state.key_collected or state.switch_activated:
        return state
    return replace(
        state,
        switch_activated=True,
        door_unlocked=True,
        feedback=Feedback(FeedbackKind.CORRECT, SWITCH_MESSAGE),
    )


def _next_level(state: GameState, action: Action) -> GameState:
    if not state.is_playing or not state.door_unlocked:
        return state
    if state.current_level >= LAST_LEVEL:
        return replace(state, game_phase=GamePhase.VICTORY)
    return replace(
        new_game_state(state.seed),
        game_phase=GamePhase.PLAYING,
        current_level=state.current_level + 1,
    )


def _restart(state: GameState, action: Action) -> GameState:
    return new_game_state()


_ACTION_DISPATCH: dict[ActionType, Callable[[GameState, Action], GameState]] = {
    ActionType.START_GAME: _start_game,
    ActionType.SHOW_QUESTION_PANEL: _show_question_panel,
    ActionType.HIDE_QUESTION_PANEL: _hide_question_panel,
    ActionType.ALL_QUESTIONS_CORRECT: _all_questions_correct,
    ActionType.LOSE_LIFE: _lose_life,
    ActionType.CLEAR_FEEDBACK: _clear_feedback,
    ActionType.REVEAL_KEY: _reveal_key,
    ActionType.COLLECT_KEY: _collect_key,
    ActionType.ACTIVATE_SWITCH: _activate_switch,
    ActionType.NEXT_LEVEL: _next_level,
    ActionType.RESTART: _restart,
}


def apply_action(state: GameState, action: Action | ActionType) -> GameState:
    """Return the state that results from dispatching action."""
    if isinstance(action, ActionType):
        action = Action(action)
    return _ACTION_DISPATCH[action.type](state, action)


def replay(actions: Iterable[Action | ActionType], state: GameState | None = None) -> GameState:
    """Fold a sequence of actions over state (the start screen by default)."""
    if state is None:
        state = new_game_state()
    return reduce(apply_action, actions, state)
