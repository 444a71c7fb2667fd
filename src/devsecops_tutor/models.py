"""Data classes for the tutor domain model."""
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ReviewEntry:
    next_review_date: datetime
    interval_index: int


@dataclass
class QuizQuestion:
    question: str
    options: list[str]
    answer: str


@dataclass
class PlaygroundScenario:
    scenario: str
    file_name: str
    initial_content: str


@dataclass
class ScanFinding:
    severity: str  # CRITICAL, HIGH, MEDIUM, LOW, INFO
    title: str
    description: str
    recommendation: str


@dataclass
class CodeQualitySuggestion:
    line_number: int
    suggestion: str
    explanation: str
    suggested_code: str


@dataclass
class CertificationResult:
    score: int
    feedback_summary: str
    strengths: list[str] = field(default_factory=list)
    areas_for_improvement: list[str] = field(default_factory=list)


@dataclass
class QuizScore:
    correct: int
    total: int

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.correct / self.total * 100, 1)


@dataclass
class CVE:
    cve_id: str
    description: str
    cvss_score: float

    @property
    def severity(self) -> str:
        if self.cvss_score >= 9.0:
            return "CRITICAL"
        elif self.cvss_score >= 7.0:
            return "HIGH"
        elif self.cvss_score >= 4.0:
            return "MEDIUM"
        elif self.cvss_score >= 0.1:
            return "LOW"
        return "INFO"


@dataclass
class OwaspRisk:
    owasp_id: str  # e.g. A01:2021
    name: str
    summary: str


@dataclass
class VulnerabilityFeed:
    cves: list[CVE] = field(default_factory=list)
    owasp: list[OwaspRisk] = field(default_factory=list)


@dataclass
class NewsSource:
    title: str
    uri: str


@dataclass
class NewsBrief:
    summary: str
    sources: list[NewsSource] = field(default_factory=list)


@dataclass
class DiagramNode:
    id: str
    label: str
    tooltip: str


@dataclass
class Diagram:
    """A linear flow; nodes are listed in flow order."""
    title: str
    nodes: list[DiagramNode] = field(default_factory=list)
    edges: list[tuple[str, str]] = field(default_factory=list)
