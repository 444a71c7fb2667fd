"""Glossary term annotation for generated prose.

Text is first split into fenced-code and plain segments. Terms are then
matched inside plain segments only, longest term first, so that a phrase
such as "CI/CD" is claimed before "CI" gets a chance at its characters.
Each match becomes an inline marker:

    <glossary-term data-term="CI/CD">ci/cd</glossary-term>

The attribute carries the glossary key as stored (used to look up the
definition); the element body is the source text exactly as written.
"""
import html
import re
from dataclasses import dataclass

FENCE = "```"
CODE = "code"
TEXT = "text"

MARKER_PATTERN = re.compile(r'<glossary-term data-term="([^"]*)">(.*?)</glossary-term>', re.DOTALL)

# `inline code` or the (target) of [text](target); a marker counts as one unit
LITERAL_SPAN = re.compile(
    r"`[^`\n]*`"
    r"|\]\((?:<glossary-term [^>]*>.*?</glossary-term>|[^()\n])*\)"
)


@dataclass
class Segment:
    kind: str  # CODE or TEXT
    text: str


def split_code_fences(text: str) -> list[Segment]:
    """Split `text` into plain and fenced-code segments.

    A code segment runs from an opening ``` through the matching closing ```
    inclusive. An opening fence with no closing fence swallows the rest of
    the text.
    """
    segments = []
    pos = 0
    while pos < len(text):
        start = text.find(FENCE, pos)
        if start == -1:
            segments.append(Segment(TEXT, text[pos:]))
            break
        if start > pos:
            segments.append(Segment(TEXT, text[pos:start]))
        close = text.find(FENCE, start + len(FENCE))
        if close == -1:
            segments.append(Segment(CODE, text[start:]))
            break
        end = close + len(FENCE)
        segments.append(Segment(CODE, text[start:end]))
        pos = end
    return segments


def _term_pattern(term: str) -> re.Pattern:
    return re.compile(r"(?<!\w)" + re.escape(term) + r"(?!\w)", re.IGNORECASE)


def _overlaps(start: int, end: int, spans: list[tuple[int, int, str]]) -> bool:
    return any(start < s_end and s_start < end for s_start, s_end, _ in spans)


def _marker(term: str, surface: str) -> str:
    return f'<glossary-term data-term="{html.escape(term, quote=True)}">{surface}</glossary-term>'


def _annotate_plain(text: str, terms: list[str]) -> str:
    claimed: list[tuple[int, int, str]] = []
    for term in terms:
        pattern = _term_pattern(term)
        pos = 0
        while True:
            match = pattern.search(text, pos)
            if match is None:
                break
            if _overlaps(match.start(), match.end(), claimed):
                pos = match.start() + 1
                continue
            claimed.append((match.start(), match.end(), term))
            pos = match.end()

    out = []
    pos = 0
    for start, end, term in sorted(claimed):
        out.append(text[pos:start])
        out.append(_marker(term, text[start:end]))
        pos = end
    out.append(text[pos:])
    return "".join(out)


def annotate(text: str, glossary: dict[str, str]) -> str:
    """Wrap every glossary term found outside code fences in a marker.

    Must be applied once per raw fragment; text that already contains
    markers is not supported.
    """
    if not text or not glossary:
        return text
    # sorted() is stable, so equal-length terms keep glossary order
    terms = sorted((t for t in glossary if t.strip()), key=len, reverse=True)
    return "".join(
        _annotate_plain(seg.text, terms) if seg.kind == TEXT else seg.text
        for seg in split_code_fences(text)
    )


def annotated_terms(text: str) -> list[str]:
    """Canonical glossary keys referenced by markers, in first-seen order."""
    seen = []
    for match in MARKER_PATTERN.finditer(text):
        term = html.unescape(match.group(1))
        if term not in seen:
            seen.append(term)
    return seen


def _plain(text: str) -> str:
    return MARKER_PATTERN.sub(lambda m: m.group(2), text)


def render_markers(text: str, template: str = "**{surface}**") -> str:
    """Replace markers using `template`, which may use {term} and {surface}.

    Markers inside inline code spans and Markdown link targets are reduced to
    their surface text so the rendered code and URLs stay intact.
    """
    def styled(chunk: str) -> str:
        return MARKER_PATTERN.sub(
            lambda m: template.format(term=html.unescape(m.group(1)), surface=m.group(2)),
            chunk,
        )

    out = []
    for seg in split_code_fences(text):
        if seg.kind == CODE:
            out.append(seg.text)
            continue
        pos = 0
        for match in LITERAL_SPAN.finditer(seg.text):
            out.append(styled(seg.text[pos:match.start()]))
            out.append(_plain(match.group(0)))
            pos = match.end()
        out.append(styled(seg.text[pos:]))
    return "".join(out)
