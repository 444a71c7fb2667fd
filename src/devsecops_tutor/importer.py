"""Load a glossary from a local file instead of generating one."""
import json
import re
from pathlib import Path

import yaml

# "**SAST** - Static analysis...", "- **SBOM**: A list...", "IaC: Infrastructure..."
MARKDOWN_TERM = re.compile(r"^\s*(?:[-*+]\s+)?(?:\*\*([^*]+)\*\*|([^:*\n]+?))\s*[-—:]\s+(.+?)\s*$")


def parse_markdown_glossary(text: str) -> dict[str, str]:
    glossary = {}
    for line in text.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        match = MARKDOWN_TERM.match(line)
        if match:
            term = (match.group(1) or match.group(2)).strip()
            glossary[term] = match.group(3)
    return glossary


def _as_glossary(data) -> dict[str, str]:
    if isinstance(data, dict) and isinstance(data.get("glossary"), dict):
        data = data["glossary"]
    if not isinstance(data, dict):
        raise ValueError("Glossary file must contain a mapping of term to definition")
    return {str(term): str(definition) for term, definition in data.items()}


def read_glossary_file(file_path: str) -> dict[str, str]:
    """Read a term -> definition mapping from .json, .yaml/.yml or .md/.txt."""
    path = Path(file_path)
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")

    if suffix == ".json":
        return _as_glossary(json.loads(text))
    elif suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML glossary {path.name}: {e}") from e
        return _as_glossary(data)
    else:
        # Markdown / plain text definitions list
        return parse_markdown_glossary(text)
