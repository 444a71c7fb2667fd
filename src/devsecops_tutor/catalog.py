"""Curated DevSecOps topic list, grouped by difficulty tier."""

TOPICS = {
    "beginner": (
        "What is DevSecOps?",
        "Core Principles of DevSecOps",
        "Continuous Integration/Continuous Delivery (CI/CD)",
        "Infrastructure as Code (IaC)",
        "Security Champions Program",
    ),
    "intermediate": (
        "Static Application Security Testing (SAST)",
        "Dynamic Application Security Testing (DAST)",
        "Software Composition Analysis (SCA)",
        "Threat Modeling in the SDLC",
        "Container Security Best Practices",
    ),
    "advanced": (
        "Interactive Application Security Testing (IAST)",
        "Runtime Application Self-Protection (RASP)",
        "Policy as Code (PaC)",
        "Secrets Management at Scale",
        "Automated Security Orchestration",
    ),
    "master": (
        "Chaos Engineering for Security",
        "Building a DevSecOps Culture",
        "Measuring DevSecOps Success (Metrics & KPIs)",
        "Advanced Cloud Native Security",
        "Supply Chain Security (SLSA, SBOM)",
    ),
    "ai_in_devsecops": (
        "AI-Powered Threat Detection",
        "Automated Code Remediation with AI",
        "AI for Security Policy Generation",
        "Predictive Risk Analysis using AI",
        "AI in Security Testing (Fuzzing & Pen-testing)",
    ),
}

TIER_LABELS = {
    "beginner": "Beginner",
    "intermediate": "Intermediate",
    "advanced": "Advanced",
    "master": "Master",
    "ai_in_devsecops": "AI in DevSecOps",
}

ALL_TOPICS = tuple(topic for tier in TOPICS.values() for topic in tier)
TOTAL_TOPICS = len(ALL_TOPICS)

# topics/week -> label
LEARNING_RATES = {
    2: "Casual (2 topics/week)",
    5: "Regular (5 topics/week)",
    10: "Intensive (10 topics/week)",
}
DEFAULT_LEARNING_RATE = 5


def is_known(topic: str) -> bool:
    return topic in ALL_TOPICS


def tier_of(topic: str) -> str | None:
    for tier, topics in TOPICS.items():
        if topic in topics:
            return tier
    return None


def filter_topics(search: str = "") -> dict[str, list[str]]:
    """Topics whose name contains `search` (case-insensitive), empty tiers dropped."""
    needle = search.strip().lower()
    result = {}
    for tier, topics in TOPICS.items():
        matches = [t for t in topics if needle in t.lower()]
        if matches:
            result[tier] = matches
    return result
