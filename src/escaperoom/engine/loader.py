"""Parse the packaged TOML catalog files into a Catalog object.

Three files live in the data directory:
  questions.toml     [[question]] tables, grouped by level
  room_objects.toml  [[object]] tables describing room fixtures
  levels.toml        [[level]] tables with per-room themes

load_catalog() always runs validate_catalog() before returning, so a
misconfigured catalog fails at startup rather than mid-game.
"""

import tomllib
from collections import Counter
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

from .catalog import (
    LEVELS,
    QUESTIONS_PER_LEVEL,
    Catalog,
    KeyRevealStyle,
    LevelTheme,
    Position,
    Question,
    QuestionKind,
    RoomObject,
)

QUESTIONS_FILE = "questions.toml"
ROOM_OBJECTS_FILE = "room_objects.toml"
LEVELS_FILE = "levels.toml"


class CatalogError(ValueError):
    """The static catalog violates a data-integrity rule."""


def _read_toml(path: Path | Traversable) -> dict[str, Any]:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _parse_position(raw: Any, where: str) -> Position:
    if not isinstance(raw, list) or len(raw) != 3:
        raise CatalogError(f"{where}: position must be a list of three numbers")
    x, y, z = (float(v) for v in raw)
    return (x, y, z)


def _parse_question(raw: dict[str, Any]) -> Question:
    where = f"question {raw.get('id', '?')!r}"
    try:
        return Question(
            id=raw["id"],
            level=int(raw["level"]),
            kind=QuestionKind(raw["kind"]),
            prompt=raw["prompt"],
            expected_answer=raw["answer"],
            explanation=raw.get("explanation", ""),
            code=raw.get("code"),
            options=tuple(raw.get("options", ())),
        )
    except KeyError as exc:
        raise CatalogError(f"{where}: missing field {exc.args[0]!r}") from exc
    except ValueError as exc:
        raise CatalogError(f"{where}: {exc}") from exc


def _parse_room_object(raw: dict[str, Any]) -> RoomObject:
    where = f"room object {raw.get('id', '?')!r}"
    try:
        key_position = raw.get("key_position")
        return RoomObject(
            id=raw["id"],
            display_name=raw["name"],
            world_position=_parse_position(raw["position"], where),
            can_hold_questions=bool(raw.get("can_hold_questions", False)),
            can_hide_key=bool(raw.get("can_hide_key", False)),
            question_hint=raw.get("question_hint", ""),
            key_hint=raw.get("key_hint", ""),
            key_world_position=(
                _parse_position(key_position, where) if key_position else None
            ),
        )
    except KeyError as exc:
        raise CatalogError(f"{where}: missing field {exc.args[0]!r}") from exc


def _parse_theme(raw: dict[str, Any]) -> LevelTheme:
    try:
        level = int(raw["level"])
        name = raw["name"]
    except KeyError as exc:
        raise CatalogError(f"level theme: missing field {exc.args[0]!r}") from exc

    style = raw.get("key_reveal_style", KeyRevealStyle.TABLE)
    try:
        key_reveal_style = KeyRevealStyle(style)
    except ValueError as exc:
        raise CatalogError(f"level {level}: unknown key reveal style {style!r}") from exc
    return LevelTheme(level=level, name=name, key_reveal_style=key_reveal_style)


def _check_unique(ids: list[str], what: str) -> None:
    dupes = sorted(i for i, n in Counter(ids).items() if n > 1)
    if dupes:
        raise CatalogError(f"duplicate {what} ids: {', '.join(dupes)}")


def _check_questions(catalog: Catalog) -> None:
    _check_unique([q.id for q in catalog.questions], "question")

    for q in catalog.questions:
        if q.level not in LEVELS:
            raise CatalogError(f"question {q.id!r}: level {q.level} out of range")
        if q.kind is QuestionKind.CHOICE:
            if not q.options:
                raise CatalogError(f"question {q.id!r}: choice question has no options")
            if q.expected_answer not in q.options:
                raise CatalogError(
                    f"question {q.id!r}: expected answer is not one of the options"
                )

    for level in LEVELS:
        available = len(catalog.questions_for_level(level))
        if available < QUESTIONS_PER_LEVEL:
            raise CatalogError(
                f"level {level} has {available} questions, "
                f"needs at least {QUESTIONS_PER_LEVEL}"
            )


def _check_room_objects(catalog: Catalog) -> None:
    _check_unique([o.id for o in catalog.room_objects], "room object")

    for obj in catalog.key_hiders:
        if obj.key_world_position is None:
            raise CatalogError(f"room object {obj.id!r} hides the key but has no key position")

    holders = catalog.question_holders
    if not holders:
        raise CatalogError("no room object can hold questions")

    # Whichever holder gets picked, a different object must be able to hide the key.
    hider_ids = {o.id for o in catalog.key_hiders}
    for holder in holders:
        if not hider_ids - {holder.id}:
            raise CatalogError(
                f"no key hider is distinct from question holder {holder.id!r}"
            )


def _check_themes(catalog: Catalog) -> None:
    levels = [t.level for t in catalog.themes]
    missing = [level for level in LEVELS if level not in levels]
    if missing:
        raise CatalogError(f"no theme for level(s) {missing}")


def validate_catalog(catalog: Catalog) -> None:
    """Raise CatalogError if the catalog cannot support a full game."""
    _check_questions(catalog)
    _check_room_objects(catalog)
    _check_themes(catalog)


def load_catalog(data_dir: Path | Traversable) -> Catalog:
    """Parse the catalog files in data_dir and return a validated Catalog."""
    questions = _read_toml(data_dir / QUESTIONS_FILE).get("question", [])
    room_objects = _read_toml(data_dir / ROOM_OBJECTS_FILE).get("object", [])
    themes = _read_toml(data_dir / LEVELS_FILE).get("level", [])

    catalog = Catalog(
        questions=tuple(_parse_question(q) for q in questions),
        room_objects=tuple(_parse_room_object(o) for o in room_objects),
        themes=tuple(_parse_theme(t) for t in themes),
    )
    validate_catalog(catalog)
    return catalog
