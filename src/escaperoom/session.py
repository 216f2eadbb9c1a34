"""Session layer bridging the game engine and the presentation layer.

One EscapeSession per player. It owns the single GameState, caches the
LevelSetup for the current (level, seed), tracks the question sequence,
and runs deferred intents. Everything lives in memory only.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from .engine.answers import AnswerOutcome, QuestionProgress
from .engine.catalog import Catalog, LevelTheme, Question
from .engine.layout import LevelSetup, resolve_level
from .engine.rng import new_seed
from .engine.state import GamePhase, GameState, new_game_state
from .engine.transitions import Action, ActionType, apply_action
from .engine.views import (
    is_door_active,
    is_key_object_active,
    is_question_object_active,
    is_switch_active,
    object_hint,
)
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScheduledIntent:
    due_at: float
    generation: int
    level: int
    action: Action


@dataclass
class SessionOptions:
    reveal_delay: float = 0.0
    door_delay: float = 0.0
    seed: int | None = None  # pin every game to this seed


class EscapeSession:
    """Wraps a GameState + its LevelSetup + the pending intent queue."""

    def __init__(
        self,
        catalog: Catalog,
        options: SessionOptions | None = None,
        clock: Callable[[], float] = time.monotonic,
        player: str = "unknown",
    ):
        self.catalog = catalog
        self.options = options or SessionOptions()
        self.clock = clock
        self.player = player
        self.state = new_game_state()
        self.pending: list[ScheduledIntent] = []
        # Advances whenever a run is superseded (new seed or back to start).
        self.generation = 0
        self._setup: LevelSetup | None = None
        self._progress: QuestionProgress | None = None
        self._progress_key: tuple[int, int, int] | None = None

    # --- state machine -------------------------------------------------

    def dispatch(self, action: Action | ActionType) -> GameState:
        """Apply one action and replace the state with the result."""
        if isinstance(action, ActionType):
            action = Action(action)
        old = self.state
        new = apply_action(old, action)
        if new == old:
            logger.debug(
                "action_ignored",
                fingerprint=self.player,
                action=action.type,
                phase=old.game_phase,
                level=old.current_level,
            )
            return old

        self.state = new
        superseded = new.seed != old.seed or (
            new.game_phase is GamePhase.START and old.game_phase is not GamePhase.START
        )
        if superseded:
            self.generation += 1
        logger.info(
            "action_dispatched",
            fingerprint=self.player,
            action=action.type,
            phase=new.game_phase,
            level=new.current_level,
            lives=new.lives,
        )
        return new

    def start_game(self) -> GameState:
        seed = self.options.seed if self.options.seed is not None else new_seed()
        return self.dispatch(Action(ActionType.START_GAME, seed=seed))

    def show_question_panel(self) -> GameState:
        return self.dispatch(ActionType.SHOW_QUESTION_PANEL)

    def hide_question_panel(self) -> GameState:
        return self.dispatch(ActionType.HIDE_QUESTION_PANEL)

    def all_questions_correct(self) -> GameState:
        return self.dispatch(ActionType.ALL_QUESTIONS_CORRECT)

    def lose_life(self) -> GameState:
        return self.dispatch(ActionType.LOSE_LIFE)

    def clear_feedback(self) -> GameState:
        return self.dispatch(ActionType.CLEAR_FEEDBACK)

    def reveal_key(self) -> GameState:
        return self.dispatch(ActionType.REVEAL_KEY)

    def collect_key(self) -> GameState:
        return self.dispatch(ActionType.COLLECT_KEY)

    def activate_switch(self) -> GameState:
        return self.dispatch(ActionType.ACTIVATE_SWITCH)

    def next_level(self) -> GameState:
        return self.dispatch(ActionType.NEXT_LEVEL)

    def restart(self) -> GameState:
        return self.dispatch(ActionType.RESTART)

    # --- deferred intents ---------------------------------------------

    def schedule(self, action: Action | ActionType, delay: float) -> None:
        """Queue action to run once delay seconds have passed."""
        if isinstance(action, ActionType):
            action = Action(action)
        self.pending.append(
            ScheduledIntent(
                self.clock() + delay, self.generation, self.state.current_level, action
            )
        )
        if delay <= 0:
            self.run_pending()

    def run_pending(self) -> int:
        """Dispatch every due intent; drop the ones from a superseded run or level.

        Returns the number of intents dispatched.
        """
        now = self.clock()
        due = [i for i in self.pending if i.due_at <= now]
        self.pending = [i for i in self.pending if i.due_at > now]
        dispatched = 0
        for intent in sorted(due, key=lambda i: i.due_at):
            if (
                intent.generation != self.generation
                or intent.level != self.state.current_level
            ):
                logger.debug(
                    "scheduled_action_dropped",
                    fingerprint=self.player,
                    action=intent.action.type,
                )
                continue
            self.dispatch(intent.action)
            dispatched += 1
        return dispatched

    # --- derived views ------------------------------------------------

    @property
    def setup(self) -> LevelSetup:
        """The layout for the current level, resolved once per (level, seed).

        Only the current layout is kept.
        """
        level, seed = self.state.current_level, self.state.seed
        setup = self._setup
        if setup is None or (setup.level, setup.seed) != (level, seed):
            setup = resolve_level(self.catalog, level, seed)
            self._setup = setup
            logger.debug(
                "level_resolved",
                level=setup.level,
                question_object=setup.question_object_id,
                key_object=setup.key_object_id,
                questions=[q.id for q in setup.selected_questions],
            )
        return setup

    @property
    def progress(self) -> QuestionProgress:
        setup = self.setup
        key = (setup.level, setup.seed, self.generation)
        if self._progress is None or self._progress_key != key:
            self._progress = QuestionProgress(setup.selected_questions)
            self._progress_key = key
        return self._progress

    @property
    def theme(self) -> LevelTheme:
        return self.catalog.theme(self.state.current_level)

    @property
    def current_question(self) -> Question | None:
        return self.progress.current

    # --- presentation choreography -------------------------------------

    def inspect(self, object_id: str) -> str:
        """Click on a room object. Returns a line of text for the player."""
        obj = self.catalog.room_object(object_id)
        hint = object_hint(obj, self.state, self.setup)
        if is_question_object_active(self.state, self.setup, object_id):
            self.show_question_panel()
        elif is_key_object_active(self.state, self.setup, object_id):
            self.collect_key()
        return hint or f"Just an ordinary {obj.display_name.lower()}."

    def submit_answer(self, answer: str) -> AnswerOutcome | None:
        """Answer the current question. None when no question is open."""
        state = self.state
        if not state.is_playing or not state.show_question_panel:
            return None
        question = self.current_question
        if question is None:
            return None

        outcome = self.progress.submit(answer)
        logger.info(
            "answer_submitted",
            fingerprint=self.player,
            question=question.id,
            outcome=outcome,
        )
        if outcome is AnswerOutcome.INCORRECT:
            self.lose_life()
        elif outcome is AnswerOutcome.COMPLETED:
            self.all_questions_correct()
            self.schedule(ActionType.REVEAL_KEY, self.options.reveal_delay)
        return outcome

    def use_switch(self) -> bool:
        if not is_switch_active(self.state):
            return False
        self.activate_switch()
        return True

    def open_door(self) -> bool:
        if not is_door_active(self.state):
            return False
        self.clear_feedback()
        self.schedule(ActionType.NEXT_LEVEL, self.options.door_delay)
        return True


@dataclass
class SessionStore:
    """In-memory sessions keyed by player identity."""

    catalog: Catalog
    options: SessionOptions = field(default_factory=SessionOptions)
    sessions: dict[str, EscapeSession] = field(default_factory=dict)

    def get_or_create(self, player: str) -> EscapeSession:
        session = self.sessions.get(player)
        if session is None:
            session = EscapeSession(self.catalog, self.options, player=player)
            self.sessions[player] = session
            logger.info("session_created", fingerprint=player)
        else:
            logger.debug("session_accessed", fingerprint=player)
        return session

    def __len__(self) -> int:
        return len(self.sessions)
