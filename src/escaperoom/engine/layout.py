"""Per-level role assignment.

resolve_level(catalog, level, seed) -> LevelSetup decides which fixture
poses the questions, which one hides the key, and which questions are
asked. It is a pure function of its arguments: the same (level, seed)
pair always yields an identical LevelSetup.
"""

from dataclasses import dataclass

from .catalog import LEVELS, QUESTIONS_PER_LEVEL, Catalog, Position, Question
from .loader import CatalogError
from .rng import MASK32, SeededRandom, shuffle

# Below the floor, out of sight. Only reachable with a misconfigured catalog.
DEFAULT_KEY_POSITION: Position = (0.0, -2.0, 0.0)


@dataclass(frozen=True)
class LevelSetup:
    """The randomized layout for one level of one session."""

    level: int
    seed: int
    question_object_id: str
    key_object_id: str
    selected_questions: tuple[Question, ...]
    key_world_position: Position


def level_seed(level: int, seed: int) -> int:
    """Mix the session seed with the level number into a generator seed."""
    return (seed * 31 + level * 7) & MASK32


def resolve_level(catalog: Catalog, level: int, seed: int) -> LevelSetup:
    """Assign puzzle roles and pick the questions for a level."""
    if level not in LEVELS:
        raise ValueError(f"level must be in {LEVELS.start}..{LEVELS.stop - 1}, got {level}")

    rng = SeededRandom(level_seed(level, seed))

    holders = shuffle(catalog.question_holders, rng)
    if not holders:
        raise CatalogError("no room object can hold questions")
    question_object = holders[0]

    hiders = shuffle(
        [o for o in catalog.key_hiders if o.id != question_object.id], rng
    )
    if not hiders:
        raise CatalogError(
            f"no key hider is distinct from question holder {question_object.id!r}"
        )
    key_object = hiders[0]

    questions = shuffle(catalog.questions_for_level(level), rng)

    return LevelSetup(
        level=level,
        seed=seed,
        question_object_id=question_object.id,
        key_object_id=key_object.id,
        selected_questions=tuple(questions[:QUESTIONS_PER_LEVEL]),
        key_world_position=key_object.key_world_position or DEFAULT_KEY_POSITION,
    )
