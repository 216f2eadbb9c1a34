"""Answer checking and question-sequence tracking.

The state machine only hears about the end result of a question round
(ALL_QUESTIONS_CORRECT) or a single wrong answer (LOSE_LIFE). Walking
through the selected questions one at a time happens here.
"""

from dataclasses import dataclass
from enum import StrEnum

from .catalog import Question


class AnswerOutcome(StrEnum):
    CORRECT = "correct"  # move on to the next question
    INCORRECT = "incorrect"
    COMPLETED = "completed"  # the last question was just answered


def check_answer(question: Question, answer: str) -> bool:
    """Compare a submitted answer with the expected one."""
    answer = answer.strip()
    if not answer:
        return False
    return answer == question.expected_answer


@dataclass
class QuestionProgress:
    """Position within one level's question sequence.

    A wrong answer keeps the player on the same question.
    """

    questions: tuple[Question, ...]
    index: int = 0

    @property
    def current(self) -> Question | None:
        if self.index >= len(self.questions):
            return None
        return self.questions[self.index]

    @property
    def is_complete(self) -> bool:
        return self.current is None

    @property
    def number(self) -> int:
        """1-based number of the question being asked."""
        return min(self.index + 1, len(self.questions))

    def submit(self, answer: str) -> AnswerOutcome:
        question = self.current
        if question is None:
            raise ValueError("all questions have already been answered")
        if not check_answer(question, answer):
            return AnswerOutcome.INCORRECT
        self.index += 1
        if self.is_complete:
            return AnswerOutcome.COMPLETED
        return AnswerOutcome.CORRECT
