from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from quizweb.question_bank import QuestionBank

UNANSWERED = 0


@dataclass(frozen=True)
class QuestionOutcome:
    number: int  # 1-based position in the bank
    text: str
    user_answer: int
    correct_answer: int
    user_option_text: Optional[str]  # None when nothing valid was chosen
    correct_option_text: str
    is_correct: bool


@dataclass(frozen=True)
class ScoredResult:
    correct_count: int
    total: int
    elapsed: timedelta
    outcomes: List[QuestionOutcome]

    @property
    def elapsed_formatted(self) -> str:
        return format_duration(self.elapsed)

    @property
    def percentage(self) -> float:
        return (self.correct_count / self.total * 100.0) if self.total > 0 else 0.0


def format_duration(elapsed: timedelta) -> str:
    """Render a duration as MM:SS; minutes keep counting past 59."""
    seconds = max(int(elapsed.total_seconds()), 0)
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def score(
    bank: QuestionBank,
    answers: Sequence[int],
    started_at: datetime,
    finished_at: datetime,
) -> ScoredResult:
    """
    Evaluate submitted answers against the bank.

    ``answers[i]`` is the 1-based option chosen for question ``i``. Missing
    entries, zero and out-of-range values count as unanswered. The clock
    reading is passed in so identical inputs always give identical results.
    """
    outcomes: List[QuestionOutcome] = []
    correct_count = 0

    for position, question in enumerate(bank):
        user_answer = answers[position] if position < len(answers) else UNANSWERED
        is_correct = user_answer == question.correct_index
        if is_correct:
            correct_count += 1
        outcomes.append(QuestionOutcome(
            number=position + 1,
            text=question.text,
            user_answer=user_answer,
            correct_answer=question.correct_index,
            user_option_text=question.option_text(user_answer),
            correct_option_text=question.correct_option,
            is_correct=is_correct,
        ))

    # A clock that stepped backwards must not produce a negative duration.
    elapsed = max(finished_at - started_at, timedelta(0))
    return ScoredResult(
        correct_count=correct_count,
        total=len(bank),
        elapsed=elapsed,
        outcomes=outcomes,
    )
