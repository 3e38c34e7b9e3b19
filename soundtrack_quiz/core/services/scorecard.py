"""Service for tallying the answered questions of a quiz session."""

from __future__ import annotations

from soundtrack_quiz.core.formatting import extract_youtube_id
from soundtrack_quiz.core.models import QuestionResult, QuizQuestion, QuizResult


class Scorecard:
    """Accumulates per-question results in answer order."""

    def __init__(self) -> None:
        self._results: list[QuestionResult] = []

    def record_answer(self, question: QuizQuestion, guessed: str, is_correct: bool) -> QuestionResult:
        """Append the outcome of a finished question."""
        result = QuestionResult(
            song_title=question.song.title,
            artist=question.song.artist,
            guessed=guessed,
            correct=question.correct_answer,
            is_correct=is_correct,
            video_id=extract_youtube_id(question.song.video_link) or None,
        )
        self._results.append(result)
        return result

    def get_result(self) -> QuizResult:
        """Return an immutable summary with the percentage score."""
        total = len(self._results)
        correct = sum(1 for result in self._results if result.is_correct)
        score = round(correct / total * 100) if total else 0
        return QuizResult(
            total_questions=total,
            correct_answers=correct,
            score=score,
            questions=tuple(self._results),
        )
