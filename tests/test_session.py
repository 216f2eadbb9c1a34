"""Tests for the session layer: dispatch, caching, and deferred intents."""

from escaperoom.engine.answers import AnswerOutcome
from escaperoom.engine.catalog import Catalog
from escaperoom.engine.state import GamePhase
from escaperoom.engine.transitions import ActionType
from escaperoom.session import EscapeSession, SessionOptions, SessionStore


def _solve_questions(game: EscapeSession) -> None:
    game.inspect(game.setup.question_object_id)
    for question in game.setup.selected_questions:
        game.submit_answer(question.expected_answer)


def test_new_session_is_on_start_screen(session: EscapeSession):
    assert session.state.game_phase is GamePhase.START
    assert session.pending == []


def test_start_game_uses_pinned_seed(session: EscapeSession):
    session.start_game()
    assert session.state.game_phase is GamePhase.PLAYING
    assert session.state.seed == 42


def test_start_game_draws_fresh_seed(catalog: Catalog):
    seeds = set()
    for _ in range(5):
        game = EscapeSession(catalog)
        game.start_game()
        seeds.add(game.state.seed)
    assert len(seeds) > 1


def test_ignored_action_keeps_state(session: EscapeSession):
    before = session.state
    assert session.collect_key() is before
    assert session.state is before


def test_setup_is_cached(session: EscapeSession):
    session.start_game()
    assert session.setup is session.setup
    assert session.setup.level == 1
    assert session.setup.seed == 42


def test_setup_follows_level(session: EscapeSession):
    session.start_game()
    first = session.setup
    _solve_questions(session)
    session.inspect(session.setup.key_object_id)
    session.use_switch()
    session.open_door()
    assert session.state.current_level == 2
    assert session.setup.level == 2
    assert session.setup is not first


def test_inspect_question_object_opens_panel(session: EscapeSession):
    session.start_game()
    holder = session.catalog.room_object(session.setup.question_object_id)
    assert session.inspect(holder.id) == holder.question_hint
    assert session.state.show_question_panel


def test_inspect_ordinary_object(session: EscapeSession):
    session.start_game()
    message = session.inspect("stool")
    assert message == "Just an ordinary stool."
    assert not session.state.show_question_panel


def test_answer_without_open_panel(session: EscapeSession):
    session.start_game()
    question = session.current_question
    assert session.submit_answer(question.expected_answer) is None
    assert session.progress.index == 0


def test_wrong_answer_costs_a_life(session: EscapeSession):
    session.start_game()
    session.inspect(session.setup.question_object_id)
    question = session.current_question
    assert session.submit_answer("definitely wrong") is AnswerOutcome.INCORRECT
    assert session.state.lives == 2
    assert session.current_question == question


def test_losing_all_lives_reshuffles(session: EscapeSession):
    session.start_game()
    generation = session.generation
    session.inspect(session.setup.question_object_id)
    for _ in range(3):
        session.submit_answer("definitely wrong")
    assert session.state.seed == 43
    assert session.state.lives == 3
    assert session.setup.seed == 43
    assert session.progress.index == 0
    assert session.generation == generation + 1


def test_solving_reveals_key_immediately_without_delay(session: EscapeSession):
    session.start_game()
    _solve_questions(session)
    assert session.state.all_questions_correct
    assert session.state.key_revealed
    assert session.pending == []


def test_reveal_waits_for_delay(catalog: Catalog, clock):
    game = EscapeSession(catalog, SessionOptions(reveal_delay=2.0, seed=42), clock=clock)
    game.start_game()
    _solve_questions(game)
    assert game.state.all_questions_correct
    assert not game.state.key_revealed

    clock.advance(1.0)
    assert game.run_pending() == 0
    assert not game.state.key_revealed

    clock.advance(1.5)
    assert game.run_pending() == 1
    assert game.state.key_revealed
    assert game.pending == []


def test_zero_and_nonzero_delays_end_the_same(catalog: Catalog, clock):
    instant = EscapeSession(catalog, SessionOptions(seed=42), clock=clock)
    delayed = EscapeSession(
        catalog, SessionOptions(reveal_delay=1.0, door_delay=0.5, seed=42), clock=clock
    )
    for game in (instant, delayed):
        game.start_game()
        _solve_questions(game)
        clock.advance(1.0)
        game.run_pending()
        game.inspect(game.setup.key_object_id)
        game.use_switch()
        game.open_door()
        clock.advance(0.5)
        game.run_pending()
    assert instant.state == delayed.state
    assert instant.state.current_level == 2


def test_stale_intent_is_dropped_after_restart(catalog: Catalog, clock):
    game = EscapeSession(catalog, SessionOptions(door_delay=1.0, seed=42), clock=clock)
    game.start_game()
    _solve_questions(game)
    game.inspect(game.setup.key_object_id)
    game.use_switch()
    assert game.open_door()
    assert len(game.pending) == 1

    game.restart()
    game.start_game()
    clock.advance(2.0)
    assert game.run_pending() == 0
    assert game.state.current_level == 1
    assert not game.state.door_unlocked


def _clear_room(game: EscapeSession) -> None:
    _solve_questions(game)
    game.inspect(game.setup.key_object_id)
    assert game.use_switch()


def test_repeated_door_click_does_not_skip_next_level(catalog: Catalog, clock):
    game = EscapeSession(catalog, SessionOptions(door_delay=5.0, seed=42), clock=clock)
    game.start_game()
    _clear_room(game)
    assert game.open_door()
    clock.advance(4.0)
    assert game.open_door()

    clock.advance(1.0)
    assert game.run_pending() == 1
    assert game.state.current_level == 2

    _clear_room(game)
    assert game.state.door_unlocked
    clock.advance(4.0)
    assert game.run_pending() == 0
    assert game.state.current_level == 2
    assert game.pending == []


def test_intents_due_together_fire_once(catalog: Catalog, clock):
    game = EscapeSession(catalog, SessionOptions(door_delay=1.0, seed=42), clock=clock)
    game.start_game()
    _clear_room(game)
    game.open_door()
    game.open_door()
    clock.advance(2.0)
    assert game.run_pending() == 1
    assert game.state.current_level == 2


def test_setup_cache_keeps_only_current_layout(session: EscapeSession):
    session.start_game()
    first = session.setup
    _clear_room(session)
    session.open_door()
    assert session.setup.level == 2
    session.restart()
    session.start_game()
    again = session.setup
    assert again == first
    assert again is not first
    assert session._setup is again


def test_stale_reveal_dropped_after_restart(catalog: Catalog, clock):
    game = EscapeSession(catalog, SessionOptions(reveal_delay=3.0, seed=42), clock=clock)
    game.start_game()
    _solve_questions(game)
    game.restart()
    game.start_game()
    clock.advance(5.0)
    game.run_pending()
    assert not game.state.key_revealed
    assert game.progress.index == 0


def test_schedule_runs_in_due_order(session: EscapeSession, clock):
    session.start_game()
    session.schedule(ActionType.CLEAR_FEEDBACK, 2.0)
    session.schedule(ActionType.SHOW_QUESTION_PANEL, 1.0)
    clock.advance(1.0)
    assert session.run_pending() == 1
    assert session.state.show_question_panel
    assert len(session.pending) == 1


def test_switch_and_door_guards(session: EscapeSession):
    session.start_game()
    assert not session.use_switch()
    assert not session.open_door()
    assert session.state.current_level == 1


def test_play_through_every_level(session: EscapeSession):
    session.start_game()
    for level in range(1, 6):
        assert session.state.current_level == level
        _solve_questions(session)
        session.inspect(session.setup.key_object_id)
        assert session.use_switch()
        assert session.open_door()
    assert session.state.game_phase is GamePhase.VICTORY


def test_store_reuses_sessions(catalog: Catalog):
    store = SessionStore(catalog, SessionOptions(seed=1))
    first = store.get_or_create("alice")
    assert store.get_or_create("alice") is first
    assert store.get_or_create("bob") is not first
    assert len(store) == 2
    assert first.options.seed == 1
