"""Multiple-choice quiz generation from a song catalog.

Generation never raises. Expected problems (no songs, no labels, too few
labels for four options) are logged and reported through ``QuizBatch.issue``;
anything unexpected is logged with its traceback and turned into an empty
batch so the caller can offer a retry.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
import logging
import math
import random
from typing import Sequence

from soundtrack_quiz.constants.quiz_constants import (
    MIN_POPULARITY_SCORE,
    OPTION_COUNT,
    QUESTION_COUNT,
    REGULAR_TOP_FRACTION,
)
from soundtrack_quiz.core.errors import InsufficientDataError, NoOperationError
from soundtrack_quiz.core.models import LabelKind, QuizMode, QuizQuestion, Song

logger = logging.getLogger(__name__)

# Per-label limits for the successive selection passes; None means unconstrained.
_DIVERSITY_PASSES: tuple[int | None, ...] = (1, 2, None)


class GenerationIssue(str, Enum):
    INVALID_INPUT = "invalid_input"
    INSUFFICIENT_DATA = "insufficient_data"
    NO_OPERATION = "no_operation"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True, slots=True)
class QuizBatch:
    """Generated questions plus the reportable condition, if any."""

    questions: tuple[QuizQuestion, ...] = ()
    issue: GenerationIssue | None = None
    detail: str | None = None

    def is_empty(self) -> bool:
        return not self.questions


def generate_quiz(
    songs: Sequence[Song],
    labels: Sequence[str],
    mode: QuizMode = QuizMode.REGULAR,
    question_count: int = QUESTION_COUNT,
    rng: random.Random | None = None,
    label_kind: LabelKind = LabelKind.GAME,
) -> list[QuizQuestion]:
    batch = generate_quiz_batch(songs, labels, mode, question_count, rng=rng, label_kind=label_kind)
    return list(batch.questions)


def generate_quiz_batch(
    songs: Sequence[Song],
    labels: Sequence[str],
    mode: QuizMode = QuizMode.REGULAR,
    question_count: int = QUESTION_COUNT,
    rng: random.Random | None = None,
    label_kind: LabelKind = LabelKind.GAME,
) -> QuizBatch:
    rng = rng if rng is not None else random.Random()
    try:
        return _generate(songs, labels, QuizMode(mode), question_count, rng, label_kind)
    except NoOperationError as exc:
        logger.warning("Quiz generation skipped: %s", exc)
        return QuizBatch(issue=GenerationIssue.NO_OPERATION, detail=str(exc))
    except InsufficientDataError as exc:
        logger.warning("Quiz generation failed: %s", exc)
        return QuizBatch(issue=GenerationIssue.INSUFFICIENT_DATA, detail=str(exc))
    except ValueError as exc:
        logger.warning("Quiz generation rejected input: %s", exc)
        return QuizBatch(issue=GenerationIssue.INVALID_INPUT, detail=str(exc))
    except Exception:
        logger.exception("Unexpected error while generating quiz")
        return QuizBatch(issue=GenerationIssue.UNEXPECTED_ERROR, detail="Unexpected error while generating quiz.")


def _generate(
    songs: Sequence[Song],
    labels: Sequence[str],
    mode: QuizMode,
    question_count: int,
    rng: random.Random,
    label_kind: LabelKind,
) -> QuizBatch:
    if not songs:
        raise NoOperationError("Catalog contains no songs.")
    label_list = list(dict.fromkeys(label for label in labels if label))
    if not label_list:
        raise ValueError("No answer labels were provided.")
    if question_count <= 0:
        raise ValueError("Question count must be positive.")
    if len(label_list) < OPTION_COUNT:
        raise InsufficientDataError(
            f"At least {OPTION_COUNT} answer labels are required, got {len(label_list)}."
        )

    label_set = set(label_list)
    usable = [song for song in songs if song.label_for(label_kind) in label_set]
    if not usable:
        raise ValueError("No song matches any of the answer labels.")

    distinct_labels = len({song.label_for(label_kind) for song in usable})
    target = min(question_count, distinct_labels)

    candidates = candidate_pool(usable, mode, target, rng)
    chosen = select_diverse_songs(candidates, target, label_kind)
    questions = tuple(build_question(song, label_list, label_kind, rng) for song in chosen)

    if len(questions) < question_count:
        detail = f"Built {len(questions)} of {question_count} requested questions from {distinct_labels} labels."
        logger.warning(detail)
        return QuizBatch(questions=questions, issue=GenerationIssue.INSUFFICIENT_DATA, detail=detail)
    return QuizBatch(questions=questions)


def candidate_pool(
    songs: Sequence[Song],
    mode: QuizMode,
    question_count: int,
    rng: random.Random,
) -> list[Song]:
    """Return candidate songs in draw order for the requested mode.

    Regular mode draws from the most popular quarter of the catalog, widened
    to at least twice the question count. Pro mode draws from the remaining
    tail, or from the whole catalog weighted toward obscure songs when the
    tail is too small.
    """
    ranked = sorted(songs, key=lambda song: song.popularity_score, reverse=True)
    minimum = 2 * question_count
    cutoff = min(len(ranked), max(math.ceil(len(ranked) * REGULAR_TOP_FRACTION), minimum))

    if mode is QuizMode.REGULAR:
        top = ranked[:cutoff]
        return weighted_order(top, [song.popularity_score for song in top], rng)

    tail = ranked[cutoff:]
    if len(tail) >= minimum:
        rng.shuffle(tail)
        return tail
    return weighted_order(ranked, [1.0 - song.popularity_score for song in ranked], rng)


def weighted_order(songs: Sequence[Song], weights: Sequence[float], rng: random.Random) -> list[Song]:
    """Order songs by a weighted draw without replacement (key = u ** (1 / w))."""
    keyed = []
    for song, weight in zip(songs, weights):
        safe_weight = weight if weight > MIN_POPULARITY_SCORE else MIN_POPULARITY_SCORE
        keyed.append((rng.random() ** (1.0 / safe_weight), song))
    keyed.sort(key=lambda item: item[0], reverse=True)
    return [song for _, song in keyed]


def select_diverse_songs(candidates: Sequence[Song], count: int, label_kind: LabelKind) -> list[Song]:
    selected: list[Song] = []
    seen: set[tuple[str, str]] = set()
    per_label: Counter[str] = Counter()

    for limit in _DIVERSITY_PASSES:
        for song in candidates:
            if len(selected) >= count:
                return selected
            if song.identity in seen:
                continue
            label = song.label_for(label_kind)
            if limit is not None and per_label[label] >= limit:
                continue
            selected.append(song)
            seen.add(song.identity)
            per_label[label] += 1
    return selected


def build_question(
    song: Song,
    labels: Sequence[str],
    label_kind: LabelKind,
    rng: random.Random,
) -> QuizQuestion:
    correct = song.label_for(label_kind)
    if correct is None:
        raise ValueError(f"Song '{song.title}' has no {label_kind.value}.")
    wrong = [label for label in labels if label != correct]
    options = [correct, *rng.sample(wrong, OPTION_COUNT - 1)]
    rng.shuffle(options)
    return QuizQuestion(song=song, options=tuple(options), correct_answer=correct, label_kind=label_kind)
