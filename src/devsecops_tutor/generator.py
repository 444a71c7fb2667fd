"""Content generation through Gemini, plus parsers for structured replies."""
import json
import re
from enum import Enum

from loguru import logger

from devsecops_tutor import catalog, prompts
from devsecops_tutor.models import (
    CVE, CertificationResult, CodeQualitySuggestion, Diagram, DiagramNode, NewsBrief, NewsSource,
    OwaspRisk, PlaygroundScenario, QuizQuestion, ScanFinding, VulnerabilityFeed,
)


class GenerationError(RuntimeError):
    """The content service failed or sent a reply that could not be parsed."""


class ContentKind(str, Enum):
    EXPLANATION = "explanation"
    FOLLOW_UP = "follow_up"
    SUMMARY = "summary"
    QUIZ = "quiz"
    MORE_QUIZ = "more_quiz"
    PLAYGROUND = "playground"
    SCAN = "scan"
    CODE_QUALITY = "code_quality"
    GLOSSARY = "glossary"
    DESCRIPTIONS = "descriptions"
    CERTIFICATION_CHALLENGE = "certification_challenge"
    CERTIFICATION_EVALUATION = "certification_evaluation"
    DIAGRAM = "diagram"
    VULNERABILITIES = "vulnerabilities"
    NEWS = "news"


# Kinds answered as free Markdown prose; the rest reply with JSON.
PROSE_KINDS = {ContentKind.EXPLANATION, ContentKind.FOLLOW_UP, ContentKind.SUMMARY}


def build_prompt(topic: str, kind: ContentKind, **context) -> str:
    if kind == ContentKind.EXPLANATION:
        return prompts.explanation_prompt(topic)
    if kind == ContentKind.FOLLOW_UP:
        return context["question"]
    if kind == ContentKind.SUMMARY:
        return prompts.summary_prompt(topic)
    if kind == ContentKind.QUIZ:
        return prompts.quiz_prompt(topic, context.get("count", 3))
    if kind == ContentKind.MORE_QUIZ:
        return prompts.quiz_prompt(topic, context.get("count", 3), more=True)
    if kind == ContentKind.PLAYGROUND:
        return prompts.playground_prompt(topic)
    if kind == ContentKind.SCAN:
        return prompts.scan_prompt(
            topic, context["scenario"], context["initial_content"], context["submitted_content"],
        )
    if kind == ContentKind.CODE_QUALITY:
        return prompts.code_quality_prompt(topic, context["file_name"], context["content"])
    if kind == ContentKind.GLOSSARY:
        return prompts.GLOSSARY_PROMPT
    if kind == ContentKind.DESCRIPTIONS:
        return prompts.descriptions_prompt(context.get("topics", catalog.ALL_TOPICS))
    if kind == ContentKind.CERTIFICATION_CHALLENGE:
        return prompts.CERTIFICATION_CHALLENGE_PROMPT
    if kind == ContentKind.CERTIFICATION_EVALUATION:
        return prompts.certification_evaluation_prompt(
            context["challenge"], context["solution"], context.get("pass_score", 85),
        )
    if kind == ContentKind.DIAGRAM:
        return prompts.diagram_prompt(topic)
    if kind == ContentKind.VULNERABILITIES:
        return prompts.VULNERABILITIES_PROMPT
    if kind == ContentKind.NEWS:
        return prompts.NEWS_PROMPT
    raise ValueError(f"Unknown content kind: {kind}")


class ContentGenerator:
    """Sends prompts to Gemini and returns the reply text.

    An explanation opens a chat for its topic; follow-up questions on the
    same topic continue that chat so the model keeps the context.
    """

    def __init__(self, api_key: str | None = None, model_name: str = "gemini-2.5-flash"):
        self.api_key = api_key
        self.model_name = model_name
        self._model = None
        self._chat = None
        self._chat_topic = None

    @property
    def model(self):
        """Lazy-load Gemini client."""
        if self._model is None:
            if not self.api_key:
                raise GenerationError(
                    "No Gemini API key configured. Set DEVSECOPS_TUTOR_GEMINI_API_KEY."
                )
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(model_name=self.model_name)
        return self._model

    def _chat_for(self, topic: str, fresh: bool):
        if fresh or self._chat is None or self._chat_topic != topic:
            self._chat = self.model.start_chat()
            self._chat_topic = topic
        return self._chat

    def generate(self, topic: str, kind: ContentKind | str, **context) -> str:
        kind = ContentKind(kind)
        prompt = build_prompt(topic, kind, **context)
        logger.debug(f"Generating {kind.value} for {topic!r}")
        try:
            if kind in (ContentKind.EXPLANATION, ContentKind.FOLLOW_UP):
                chat = self._chat_for(topic, fresh=kind == ContentKind.EXPLANATION)
                response = chat.send_message(prompt)
            elif kind in PROSE_KINDS:
                response = self.model.generate_content(prompt)
            else:
                response = self.model.generate_content(
                    prompt,
                    generation_config={"response_mime_type": "application/json"},
                )
            return response.text
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"{kind.value} generation failed for {topic!r}: {e}")
            raise GenerationError(f"Failed to generate {kind.value.replace('_', ' ')}.") from e


# =============================================================================
# Reply parsing
# =============================================================================

_JSON_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def load_json_reply(text: str, what: str):
    cleaned = text.strip()
    fenced = _JSON_FENCE.match(cleaned)
    if fenced:
        cleaned = fenced.group(1)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Malformed {what} reply: {e}")
        raise GenerationError(f"The {what} reply was not valid JSON.") from e


def parse_quiz(text: str) -> list[QuizQuestion]:
    data = load_json_reply(text, "quiz")
    try:
        return [
            QuizQuestion(question=q["question"], options=list(q["options"]), answer=q["answer"])
            for q in data["questions"]
        ]
    except (KeyError, TypeError) as e:
        raise GenerationError(f"Quiz reply is missing fields: {e}") from e


def parse_playground(text: str) -> PlaygroundScenario:
    data = load_json_reply(text, "playground")
    try:
        return PlaygroundScenario(
            scenario=data["scenario"],
            file_name=data["fileName"],
            initial_content=data["initialFileContent"],
        )
    except (KeyError, TypeError) as e:
        raise GenerationError(f"Playground reply is missing fields: {e}") from e


def parse_findings(text: str) -> list[ScanFinding]:
    data = load_json_reply(text, "scan")
    try:
        return [
            ScanFinding(
                severity=str(f["severity"]).upper(),
                title=f["title"],
                description=f["description"],
                recommendation=f["recommendation"],
            )
            for f in data["findings"]
        ]
    except (KeyError, TypeError) as e:
        raise GenerationError(f"Scan reply is missing fields: {e}") from e


def parse_suggestions(text: str) -> list[CodeQualitySuggestion]:
    data = load_json_reply(text, "code quality")
    try:
        return [
            CodeQualitySuggestion(
                line_number=int(s["lineNumber"]),
                suggestion=s["suggestion"],
                explanation=s["explanation"],
                suggested_code=s["suggestedCode"],
            )
            for s in data["suggestions"]
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise GenerationError(f"Code quality reply is missing fields: {e}") from e


def parse_glossary(text: str) -> dict[str, str]:
    data = load_json_reply(text, "glossary")
    if not isinstance(data, dict):
        raise GenerationError("Glossary reply is not a JSON object.")
    return {str(term): str(definition) for term, definition in data.items()}


def parse_descriptions(text: str) -> dict[str, str]:
    data = load_json_reply(text, "descriptions")
    descriptions = data.get("descriptions") if isinstance(data, dict) else None
    if not isinstance(descriptions, dict):
        raise GenerationError("Descriptions reply has no 'descriptions' object.")
    return {str(topic): str(sentence) for topic, sentence in descriptions.items()}


def parse_challenge(text: str) -> str:
    data = load_json_reply(text, "certification challenge")
    if not isinstance(data, dict) or not isinstance(data.get("challenge"), str):
        raise GenerationError("Certification reply has no 'challenge' text.")
    return data["challenge"]


def parse_certification(text: str) -> CertificationResult:
    data = load_json_reply(text, "certification evaluation")
    try:
        return CertificationResult(
            score=int(round(float(data["score"]))),
            feedback_summary=data["feedbackSummary"],
            strengths=list(data.get("strengths", [])),
            areas_for_improvement=list(data.get("areasForImprovement", [])),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise GenerationError(f"Certification reply is missing fields: {e}") from e


def parse_diagram(text: str) -> Diagram:
    data = load_json_reply(text, "diagram")
    try:
        nodes = [DiagramNode(id=str(n["id"]), label=n["label"], tooltip=n["tooltip"]) for n in data["nodes"]]
        known = {n.id for n in nodes}
        edges = [
            (str(e["from"]), str(e["to"])) for e in data.get("edges", [])
            if str(e["from"]) in known and str(e["to"]) in known
        ]
        return Diagram(title=data["title"], nodes=nodes, edges=edges)
    except (KeyError, TypeError) as e:
        raise GenerationError(f"Diagram reply is missing fields: {e}") from e


def parse_vulnerabilities(text: str) -> VulnerabilityFeed:
    data = load_json_reply(text, "vulnerability feed")
    try:
        return VulnerabilityFeed(
            cves=[
                CVE(cve_id=c["cveId"], description=c["description"], cvss_score=float(c["cvssScore"]))
                for c in data["cves"]
            ],
            owasp=[
                OwaspRisk(owasp_id=o["owaspId"], name=o["name"], summary=o["summary"])
                for o in data["owasp"]
            ],
        )
    except (KeyError, TypeError, ValueError) as e:
        raise GenerationError(f"Vulnerability feed reply is missing fields: {e}") from e


def parse_news(text: str) -> NewsBrief:
    data = load_json_reply(text, "news")
    try:
        return NewsBrief(
            summary=data["summary"],
            sources=[NewsSource(title=s["title"], uri=s["uri"]) for s in data.get("sources", [])],
        )
    except (KeyError, TypeError) as e:
        raise GenerationError(f"News reply is missing fields: {e}") from e
