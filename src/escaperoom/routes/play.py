"""Gameplay routes.

Every route maps a player click onto one session intent and re-renders
the room. Routes never touch GameState directly.
"""

from xitzin import Redirect, Request, Xitzin
from xitzin.auth import get_identity, require_certificate

from ..engine.answers import AnswerOutcome
from ..engine.catalog import QuestionKind
from ..engine.state import GamePhase
from ..engine.views import (
    current_objective,
    interactable_object_ids,
    is_door_active,
    is_key_object_active,
    is_switch_active,
    key_reveal_line,
    object_hint,
)
from ..session import EscapeSession


def _escape_session(request: Request) -> EscapeSession:
    """Look up the player's session and fire any intents that fell due."""
    identity = get_identity(request)
    game = request.app.state.sessions.get_or_create(identity.fingerprint)
    game.run_pending()
    return game


def _room_objects(game: EscapeSession) -> list[dict]:
    state, setup = game.state, game.setup
    active = set(interactable_object_ids(game.catalog, state, setup))
    return [
        {
            "id": obj.id,
            "name": obj.display_name,
            "active": obj.id in active,
            "hint": object_hint(obj, state, setup),
        }
        for obj in game.catalog.room_objects
    ]


def _render_play(app: Xitzin, game: EscapeSession, message: str = ""):
    """Render whichever view matches the game phase."""
    state = game.state
    if state.game_phase is GamePhase.START:
        return app.template("start.gmi", message=message, feedback=state.feedback)
    if state.game_phase is GamePhase.VICTORY:
        return app.template("victory.gmi", message=message)

    question = game.current_question
    if state.show_question_panel and question is not None:
        return app.template(
            "question.gmi",
            level=state.current_level,
            question=question,
            is_choice=question.kind is QuestionKind.CHOICE,
            number=game.progress.number,
            total=len(game.progress.questions),
            lives=state.lives,
            feedback=state.feedback,
            message=message,
        )

    setup = game.setup
    key_visible = is_key_object_active(state, setup, setup.key_object_id)
    key_line = ""
    if key_visible:
        hider = game.catalog.room_object(setup.key_object_id)
        key_line = key_reveal_line(game.theme, hider)
    return app.template(
        "play.gmi",
        level=state.current_level,
        theme=game.theme,
        lives=state.lives,
        objective=current_objective(state),
        objects=_room_objects(game),
        key_visible=key_visible,
        key_line=key_line,
        switch_active=is_switch_active(state),
        door_active=is_door_active(state),
        feedback=state.feedback,
        message=message,
    )


def _answer(app: Xitzin, game: EscapeSession, answer: str):
    question = game.current_question
    outcome = game.submit_answer(answer)
    if outcome is None or question is None:
        return _render_play(app, game, message="There is no question in front of you.")
    if outcome is AnswerOutcome.INCORRECT:
        return _render_play(app, game)
    return _render_play(app, game, message=f"Correct! {question.explanation}")


def _register_room_routes(app: Xitzin) -> None:
    """Register the room view and object interaction routes."""

    @app.gemini("/play", name="play")
    @require_certificate
    def play(request: Request):
        """Main game view."""
        return _render_play(app, _escape_session(request))

    @app.gemini("/start", name="start")
    @require_certificate
    def start(request: Request):
        game = _escape_session(request)
        game.start_game()
        return _render_play(app, game)

    @app.gemini("/inspect/{object_id}", name="inspect")
    @require_certificate
    def inspect(request: Request, object_id: str):
        """Click on a room object."""
        game = _escape_session(request)
        if not game.state.is_playing:
            return Redirect("/play")
        try:
            message = game.inspect(object_id)
        except KeyError:
            message = "There is nothing like that in this room."
        return _render_play(app, game, message=message)

    @app.gemini("/key", name="key")
    @require_certificate
    def key(request: Request):
        game = _escape_session(request)
        if not game.state.is_playing:
            return Redirect("/play")
        setup = game.setup
        if not is_key_object_active(game.state, setup, setup.key_object_id):
            return _render_play(app, game, message="There is no key in sight.")
        return _render_play(app, game, message=game.inspect(setup.key_object_id))

    @app.gemini("/switch", name="switch")
    @require_certificate
    def switch(request: Request):
        game = _escape_session(request)
        if not game.use_switch():
            return _render_play(app, game, message="The switch won't budge.")
        return _render_play(app, game)

    @app.gemini("/door", name="door")
    @require_certificate
    def door(request: Request):
        game = _escape_session(request)
        if not game.open_door():
            return _render_play(app, game, message="The door is locked.")
        return _render_play(app, game, message="The door swings open...")

    @app.gemini("/dismiss", name="dismiss")
    @require_certificate
    def dismiss(request: Request):
        game = _escape_session(request)
        game.clear_feedback()
        return _render_play(app, game)


def _register_question_routes(app: Xitzin) -> None:
    """Register question panel routes."""

    @app.input("/answer", prompt="Your answer:", name="answer")
    @require_certificate
    def answer(request: Request, query: str):
        """Freeform answer entry."""
        return _answer(app, _escape_session(request), query)

    @app.gemini("/choose/{index}", name="choose")
    @require_certificate
    def choose(request: Request, index: str):
        """Pick one option of a choice question (1-based)."""
        game = _escape_session(request)
        question = game.current_question
        if question is None or not index.isdigit():
            return Redirect("/play")
        position = int(index) - 1
        if not 0 <= position < len(question.options):
            return _render_play(app, game, message="No such option.")
        return _answer(app, game, question.options[position])

    @app.gemini("/close", name="close")
    @require_certificate
    def close(request: Request):
        game = _escape_session(request)
        game.hide_question_panel()
        return _render_play(app, game)


def _register_game_routes(app: Xitzin) -> None:
    @app.input(
        "/restart",
        prompt="Are you sure you want to start over? Type YES to confirm:",
        name="restart",
    )
    @require_certificate
    def restart(request: Request, query: str):
        """Reset the game with confirmation."""
        game = _escape_session(request)
        if query.strip().upper() == "YES":
            game.restart()
            return _render_play(app, game, message="Back at the entrance.")
        return Redirect("/play")


def register_routes(app: Xitzin) -> None:
    """Register gameplay routes."""
    _register_room_routes(app)
    _register_question_routes(app)
    _register_game_routes(app)
