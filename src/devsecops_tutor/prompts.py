"""
Prompts sent to the content-generation model.

Structured prompts spell out the JSON shape they expect because replies are
requested as application/json and parsed by generator.parse_* helpers.
"""
import json


def explanation_prompt(topic: str) -> str:
    return f"""Explain the DevSecOps topic: "{topic}".
Please structure your explanation in Markdown format with the following sections:
- A brief, clear introduction to the concept.
- Why it is important in a DevSecOps lifecycle.
- Key principles or best practices associated with it.
- A simple example or analogy to help understanding.
"""


def summary_prompt(topic: str) -> str:
    return (
        f'Based on the DevSecOps topic "{topic}", create a "Key Takeaways and Action Items" section. '
        "Use Markdown bullet points. Focus on the most critical points a learner should remember "
        "and actionable steps they can take."
    )


def quiz_prompt(topic: str, count: int = 3, more: bool = False) -> str:
    lead = (
        f'Generate {count} MORE multiple choice quiz questions about "{topic}". '
        "They should be different from typical introductory questions."
        if more
        else f'Generate a {count}-question multiple choice quiz about "{topic}".'
    )
    return f"""{lead} Each question should have 4 options.
Return JSON: {{"questions": [{{"question": str, "options": [str, str, str, str], "answer": str}}]}}
The "answer" must be exactly one of the options."""


def playground_prompt(topic: str) -> str:
    return f"""Create a hands-on playground scenario for a beginner learning about "{topic}".
Provide a scenario description, a filename (e.g., Dockerfile, terraform.tf, Jenkinsfile),
and the initial, vulnerable content for that file.
Return JSON: {{"scenario": str, "fileName": str, "initialFileContent": str}}"""


def scan_prompt(topic: str, scenario: str, initial_content: str, submitted_content: str) -> str:
    return f"""You are an automated DevSecOps security scanner. Your task is to analyze a user's code
submission for vulnerabilities and misconfigurations based on a specific learning topic.

Learning Topic: "{topic}"
Scenario: "{scenario}"

Initial (vulnerable) File Content:
```
{initial_content}
```

User's Submitted Solution:
```
{submitted_content}
```

Analyze the user's solution. Identify security issues, bad practices, or remaining vulnerabilities.
For each issue, provide a severity level (CRITICAL, HIGH, MEDIUM, LOW, INFO), a concise title,
a clear description of the problem, and an actionable recommendation for how to fix it.

If the user has fixed all issues and the code is secure according to best practices,
return an empty array for the 'findings'.
Return JSON: {{"findings": [{{"severity": str, "title": str, "description": str, "recommendation": str}}]}}"""


def code_quality_prompt(topic: str, file_name: str, content: str) -> str:
    return f"""You are a senior software engineer performing a code review. Analyze the provided code
snippet for quality, focusing on maintainability, readability, efficiency, and adherence to best practices.

Learning Topic: "{topic}"
File Name: "{file_name}"

User's Submitted Code:
```
{content}
```

Provide feedback as a list of suggestions. For each suggestion, provide:
1. 'lineNumber': The line number the suggestion applies to.
2. 'suggestion': A concise description of the suggested improvement.
3. 'explanation': A brief explanation of why the change is recommended.
4. 'suggestedCode': The full, corrected line of code that should replace the original line.

If the code quality is excellent and you have no suggestions, return an empty array for the 'suggestions'.
Return JSON: {{"suggestions": [{{"lineNumber": int, "suggestion": str, "explanation": str, "suggestedCode": str}}]}}"""


GLOSSARY_PROMPT = (
    "Generate a comprehensive glossary of at least 20 common DevSecOps terms. "
    "Include acronyms like SAST, DAST, IAST, RASP, IaC, PaC, CI/CD, SCA, SLSA, and SBOM. "
    "Return a single JSON object where keys are the terms/acronyms and values are their definitions."
)


def descriptions_prompt(topics) -> str:
    return (
        "For the following list of DevSecOps topics, generate a single, beginner-friendly sentence "
        'describing each one. Return the result as a single JSON object with a single key named "descriptions". '
        'The value of this "descriptions" key must be another JSON object, where each key is one of the exact '
        "topic names from the provided list, and the corresponding value is the one-sentence description. "
        f"Topics: {json.dumps(list(topics))}"
    )


CERTIFICATION_CHALLENGE_PROMPT = """You are a curriculum designer for an advanced DevSecOps course.
Create a single, comprehensive final certification challenge for a student who has completed modules
on all aspects of DevSecOps, from CI/CD and IaC to container security, threat modeling, and supply chain
security. The challenge should be a realistic, multi-faceted scenario that requires the student to
synthesize their knowledge. It must ask the student to:
1. Describe a plan or strategy.
2. Provide multiple example configuration files (like Dockerfile, a CI/CD pipeline snippet, or an IaC file).
3. Explain the security considerations and decisions they made.
Return JSON: {"challenge": str} where the challenge is the full scenario text in Markdown format."""


def certification_evaluation_prompt(challenge: str, solution: str, pass_score: int) -> str:
    return f"""You are a Senior DevSecOps Architect acting as an expert evaluator for a certification exam.
Your task is to review a student's solution to a complex challenge.
THE CHALLENGE SCENARIO WAS:
---
{challenge}
---
THE STUDENT'S SUBMITTED SOLUTION IS:
---
{solution}
---
Please evaluate the student's solution based on: Comprehensive Understanding, Security Best Practices,
Technical Accuracy, and Clarity. Provide a score from 0 to 100 (passing is {pass_score}).
Return JSON: {{"score": int, "feedbackSummary": str, "strengths": [str], "areasForImprovement": [str]}}"""


def diagram_prompt(topic: str) -> str:
    return f"""Generate data for a simple diagram explaining the DevSecOps topic: "{topic}".
The diagram should be representable as a simple linear flow. Ensure the nodes are ordered
logically in the array to represent the flow. Each label is a short, user-facing label
(max 4 words); each tooltip is a one or two-sentence explanation.
Return JSON: {{"title": str, "nodes": [{{"id": str, "label": str, "tooltip": str}}], "edges": [{{"from": str, "to": str}}]}}"""


VULNERABILITIES_PROMPT = """Act as a threat intelligence feed for developers.
1. List 5 of the most recent, notable CVEs (Common Vulnerabilities and Exposures) from the last 60 days.
   For each, provide the CVE identifier, a brief, easy-to-understand description for a developer,
   and its CVSS score (as a number).
2. List the current OWASP Top 10 vulnerabilities. For each one, provide its identifier
   (e.g., A01:2021), name, and a one-sentence summary of what it is.
Return JSON: {"cves": [{"cveId": str, "description": str, "cvssScore": float}],
"owasp": [{"owaspId": str, "name": str, "summary": str}]}"""


NEWS_PROMPT = """Summarize the latest (last 30 days) news, trends, and notable events in the world of DevSecOps.
Provide a concise overview in Markdown suitable for developers and security professionals,
and list the articles or announcements the summary draws on.
Return JSON: {"summary": str, "sources": [{"title": str, "uri": str}]}"""
