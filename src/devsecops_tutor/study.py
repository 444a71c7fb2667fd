"""Study session orchestration.

Glues the content generator to the progress store: generated prose is run
through the glossary annotator before display, and finishing a quiz or
submitting a playground solution marks the topic complete (which schedules
its next review).
"""
from loguru import logger

from devsecops_tutor import catalog
from devsecops_tutor.generator import (
    ContentGenerator, ContentKind, GenerationError, parse_certification, parse_challenge,
    parse_descriptions, parse_diagram, parse_findings, parse_glossary, parse_news, parse_playground,
    parse_quiz, parse_suggestions, parse_vulnerabilities,
)
from devsecops_tutor.glossary import annotate
from devsecops_tutor.importer import read_glossary_file
from devsecops_tutor.models import (
    CertificationResult, CodeQualitySuggestion, Diagram, NewsBrief, PlaygroundScenario, QuizQuestion,
    QuizScore, ScanFinding, VulnerabilityFeed,
)
from devsecops_tutor.progress import ProgressStore
from devsecops_tutor.quiz import score_quiz


class StudySession:
    def __init__(
        self,
        store: ProgressStore,
        generator: ContentGenerator,
        glossary_file: str | None = None,
        pass_score: int = 85,
    ):
        self.store = store
        self.generator = generator
        self.glossary_file = glossary_file
        self.pass_score = pass_score
        self._glossary: dict[str, str] | None = None
        self.topic: str | None = None
        self.quiz: list[QuizQuestion] = []
        self.playground: PlaygroundScenario | None = None
        self.challenge: str | None = None
        self._vulnerabilities: VulnerabilityFeed | None = None
        self._news: NewsBrief | None = None

    # --- glossary ------------------------------------------------------

    def load_glossary(self) -> dict[str, str]:
        """Glossary for this session, fetched once and then reused."""
        if self._glossary is None:
            if self.glossary_file:
                glossary = read_glossary_file(self.glossary_file)
            else:
                glossary = parse_glossary(self.generator.generate("", ContentKind.GLOSSARY))
            logger.info(f"Loaded glossary with {len(glossary)} terms")
            self._glossary = glossary
        return self._glossary

    @property
    def glossary(self) -> dict[str, str]:
        """Like load_glossary(), but an unavailable glossary reads as empty."""
        try:
            return self.load_glossary()
        except (GenerationError, OSError, ValueError) as e:
            logger.warning(f"Glossary unavailable, showing text without term hints: {e}")
            return {}

    def annotate(self, text: str) -> str:
        return annotate(text, self.glossary)

    # --- topics --------------------------------------------------------

    def topic_descriptions(self) -> dict[str, str]:
        try:
            return parse_descriptions(self.generator.generate("", ContentKind.DESCRIPTIONS))
        except GenerationError as e:
            logger.warning(f"Topic descriptions unavailable: {e}")
            return {}

    def _require_topic(self) -> str:
        if self.topic is None:
            raise ValueError("Start a topic first.")
        return self.topic

    def start_topic(self, topic: str) -> dict:
        """Generate the explanation and key takeaways for `topic`."""
        if not catalog.is_known(topic):
            raise ValueError(f"Unknown topic: {topic}")
        self.topic = topic
        self.quiz = []
        self.playground = None
        glossary = self.glossary
        explanation = self.generator.generate(topic, ContentKind.EXPLANATION)
        summary = self.generator.generate(topic, ContentKind.SUMMARY)
        return {
            "topic": topic,
            "explanation": annotate(explanation, glossary),
            "summary": summary,
            "diagram": self.topic_diagram(topic),
        }

    def topic_diagram(self, topic: str) -> Diagram | None:
        """Flow diagram for `topic`; the lesson is shown without one on failure."""
        try:
            return parse_diagram(self.generator.generate(topic, ContentKind.DIAGRAM))
        except GenerationError as e:
            logger.warning(f"Diagram unavailable for {topic!r}: {e}")
            return None

    def ask(self, question: str) -> str:
        topic = self._require_topic()
        answer = self.generator.generate(topic, ContentKind.FOLLOW_UP, question=question)
        return self.annotate(answer)

    def mark_complete(self) -> None:
        self.store.mark_complete(self._require_topic())

    # --- quiz ----------------------------------------------------------

    def generate_quiz(self, more: bool = False, count: int = 3) -> list[QuizQuestion]:
        """Create a quiz, or with `more` append questions to the current one.

        Returns only the newly generated questions.
        """
        topic = self._require_topic()
        kind = ContentKind.MORE_QUIZ if more and self.quiz else ContentKind.QUIZ
        questions = parse_quiz(self.generator.generate(topic, kind, count=count))
        if kind == ContentKind.MORE_QUIZ:
            self.quiz.extend(questions)
        else:
            self.quiz = questions
        return questions

    def finish_quiz(self, answers: list[str | None], questions: list[QuizQuestion] | None = None) -> QuizScore:
        topic = self._require_topic()
        score = score_quiz(self.quiz if questions is None else questions, answers)
        self.store.mark_complete(topic)
        return score

    # --- playground ----------------------------------------------------

    def start_playground(self) -> PlaygroundScenario:
        topic = self._require_topic()
        self.playground = parse_playground(self.generator.generate(topic, ContentKind.PLAYGROUND))
        return self.playground

    def _require_playground(self) -> PlaygroundScenario:
        if self.playground is None:
            raise ValueError("Start a playground exercise first.")
        return self.playground

    def submit_playground(self, content: str) -> list[ScanFinding]:
        """Scan the learner's solution; submitting completes the topic."""
        topic = self._require_topic()
        scenario = self._require_playground()
        findings = parse_findings(self.generator.generate(
            topic, ContentKind.SCAN,
            scenario=scenario.scenario,
            initial_content=scenario.initial_content,
            submitted_content=content,
        ))
        self.store.mark_complete(topic)
        return findings

    def analyze_code(self, content: str) -> list[CodeQualitySuggestion]:
        topic = self._require_topic()
        scenario = self._require_playground()
        return parse_suggestions(self.generator.generate(
            topic, ContentKind.CODE_QUALITY, file_name=scenario.file_name, content=content,
        ))

    # --- feeds ---------------------------------------------------------

    def vulnerability_feed(self) -> VulnerabilityFeed:
        """Recent CVEs and the OWASP Top 10, fetched once per session."""
        if self._vulnerabilities is None:
            self._vulnerabilities = parse_vulnerabilities(self.generator.generate("", ContentKind.VULNERABILITIES))
        return self._vulnerabilities

    def news(self) -> NewsBrief:
        if self._news is None:
            brief = parse_news(self.generator.generate("", ContentKind.NEWS))
            brief.summary = self.annotate(brief.summary)
            self._news = brief
        return self._news

    # --- certification -------------------------------------------------

    def generate_challenge(self) -> str:
        self.challenge = parse_challenge(self.generator.generate("", ContentKind.CERTIFICATION_CHALLENGE))
        return self.challenge

    def evaluate_certification(self, solution: str) -> CertificationResult:
        if self.challenge is None:
            raise ValueError("Generate a certification challenge first.")
        return parse_certification(self.generator.generate(
            "", ContentKind.CERTIFICATION_EVALUATION,
            challenge=self.challenge, solution=solution, pass_score=self.pass_score,
        ))

    def passed(self, result: CertificationResult) -> bool:
        return result.score >= self.pass_score
