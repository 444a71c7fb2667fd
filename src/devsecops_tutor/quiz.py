"""Quiz scoring and playground code edits."""
from devsecops_tutor.models import CodeQualitySuggestion, QuizQuestion, QuizScore


def is_correct(question: QuizQuestion, answer: str | None) -> bool:
    if answer is None:
        return False
    return answer.strip().lower() == question.answer.strip().lower()


def score_quiz(questions: list[QuizQuestion], answers: list[str | None]) -> QuizScore:
    """Count correct answers; unanswered questions count as wrong."""
    correct = sum(
        1 for i, q in enumerate(questions)
        if i < len(answers) and is_correct(q, answers[i])
    )
    return QuizScore(correct=correct, total=len(questions))


def apply_suggestion(content: str, suggestion: CodeQualitySuggestion) -> str:
    """Replace the suggested (1-based) line; out-of-range suggestions are ignored."""
    lines = content.split("\n")
    if 0 < suggestion.line_number <= len(lines):
        lines[suggestion.line_number - 1] = suggestion.suggested_code
    return "\n".join(lines)
