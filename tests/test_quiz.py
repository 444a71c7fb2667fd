# tests/test_quiz.py
from devsecops_tutor.models import CodeQualitySuggestion, QuizQuestion, QuizScore
from devsecops_tutor.quiz import apply_suggestion, is_correct, score_quiz

QUESTIONS = [
    QuizQuestion(question="Q1", options=["SAST", "DAST"], answer="SAST"),
    QuizQuestion(question="Q2", options=["SCA", "IAST"], answer="IAST"),
    QuizQuestion(question="Q3", options=["yes", "no"], answer="no"),
]


def test_is_correct_ignores_case_and_whitespace():
    assert is_correct(QUESTIONS[0], "  sast ")
    assert not is_correct(QUESTIONS[0], "DAST")
    assert not is_correct(QUESTIONS[0], None)


def test_score_quiz():
    score = score_quiz(QUESTIONS, ["SAST", "SCA", "no"])
    assert score.correct == 2
    assert score.total == 3
    assert score.percent == 66.7


def test_score_quiz_unanswered_counts_wrong():
    score = score_quiz(QUESTIONS, ["SAST"])
    assert score.correct == 1
    assert score.total == 3


def test_score_quiz_empty():
    score = score_quiz([], [])
    assert score == QuizScore(correct=0, total=0)
    assert score.percent == 0.0


def suggestion(line):
    return CodeQualitySuggestion(line_number=line, suggestion="s", explanation="e", suggested_code="USER app")


def test_apply_suggestion_replaces_line():
    content = "FROM ubuntu\nUSER root\nCMD run"
    assert apply_suggestion(content, suggestion(2)) == "FROM ubuntu\nUSER app\nCMD run"


def test_apply_suggestion_out_of_range_ignored():
    content = "FROM ubuntu\nUSER root"
    assert apply_suggestion(content, suggestion(0)) == content
    assert apply_suggestion(content, suggestion(3)) == content
