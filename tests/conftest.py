import json

import pytest
from loguru import logger

from devsecops_tutor.progress import ProgressStore


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tutor.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    """A freshly loaded progress store on an empty database."""
    s = ProgressStore(tmp_db)
    s.load()
    return s


@pytest.fixture
def log_messages():
    """Collect loguru messages at WARNING and above."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


class FakeGenerator:
    """Stands in for ContentGenerator; replies come from a kind -> text map."""

    def __init__(self, replies=None):
        self.replies = {
            "explanation": "Use CI/CD and CI for automation.\n\n```\nCI/CD here\n```",
            "follow_up": "SAST scans source code.",
            "summary": "- Shift left",
            "glossary": json.dumps({"CI/CD": "Pipeline", "CI": "Integration", "SAST": "Static testing"}),
            "quiz": json.dumps({"questions": [
                {"question": "Q1?", "options": ["a", "b", "c", "d"], "answer": "a"},
                {"question": "Q2?", "options": ["a", "b", "c", "d"], "answer": "b"},
            ]}),
            "more_quiz": json.dumps({"questions": [
                {"question": "Q3?", "options": ["a", "b", "c", "d"], "answer": "c"},
            ]}),
            "playground": json.dumps({
                "scenario": "Harden the image",
                "fileName": "Dockerfile",
                "initialFileContent": "FROM ubuntu\nUSER root\n",
            }),
            "scan": json.dumps({"findings": [
                {"severity": "high", "title": "Root user", "description": "Runs as root", "recommendation": "Add USER"},
            ]}),
            "code_quality": json.dumps({"suggestions": [
                {"lineNumber": 2, "suggestion": "Drop root", "explanation": "Least privilege", "suggestedCode": "USER app"},
            ]}),
            "descriptions": json.dumps({"descriptions": {"What is DevSecOps?": "An intro."}}),
            "certification_challenge": json.dumps({"challenge": "Secure a pipeline."}),
            "certification_evaluation": json.dumps({
                "score": 90, "feedbackSummary": "Great", "strengths": ["IaC"], "areasForImprovement": [],
            }),
            "diagram": json.dumps({
                "title": "Pipeline flow",
                "nodes": [
                    {"id": "1", "label": "Commit", "tooltip": "Code is pushed."},
                    {"id": "2", "label": "SAST scan", "tooltip": "Source is scanned."},
                    {"id": "3", "label": "Deploy", "tooltip": "Release ships."},
                ],
                "edges": [{"from": "1", "to": "2"}, {"from": "2", "to": "3"}],
            }),
            "vulnerabilities": json.dumps({
                "cves": [{"cveId": "CVE-2025-0001", "description": "RCE in a parser", "cvssScore": 9.8}],
                "owasp": [{"owaspId": "A01:2021", "name": "Broken Access Control", "summary": "Users act outside limits."}],
            }),
            "news": json.dumps({
                "summary": "SAST adoption keeps growing.",
                "sources": [{"title": "State of DevSecOps", "uri": "https://example.com/report"}],
            }),
        }
        self.replies.update(replies or {})
        self.calls = []

    def generate(self, topic, kind, **context):
        kind = getattr(kind, "value", kind)
        self.calls.append((topic, kind, context))
        reply = self.replies[kind]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def make_generator():
    """Build a FakeGenerator with some replies overridden."""
    return FakeGenerator
