"""Quiz grading.

Pure functions: no I/O, no clock, no enrollment state.
"""

from dataclasses import dataclass, field

from learnease.courses.models import Quiz


PASS_THRESHOLD = 50


def percentage(part: int, whole: int) -> int:
    """``100 * part / whole`` rounded half up; 0 when ``whole`` is 0.

    Integer arithmetic only: 1/2 -> 50, 1/3 -> 33, 2/3 -> 67, 1/8 -> 13.
    """
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


@dataclass(frozen=True)
class QuizResult:
    score: int
    passed: bool
    correct_count: int
    total_questions: int
    per_question: dict[str, bool] = field(default_factory=dict)


def score_quiz(quiz: Quiz, answers: dict[str, int]) -> QuizResult:
    """Grade an answer set against a quiz.

    ``answers`` maps question id to the chosen option index and may be partial.
    Unanswered, out-of-range or unknown answers count as incorrect. A quiz
    without questions scores 0 and fails.
    """
    per_question = {
        q.id: answers.get(q.id) == q.correct_index for q in quiz.questions
    }
    correct = sum(per_question.values())
    total = len(quiz.questions)
    score = percentage(correct, total)

    return QuizResult(
        score=score,
        passed=total > 0 and score >= PASS_THRESHOLD,
        correct_count=correct,
        total_questions=total,
        per_question=per_question,
    )
