"""
Post-processing for raw model completions.

Every transformation is a small pure function over a string. `clean_text`
chains them in a fixed order and repeats the chain until the text stops
changing, so cleaning an already-cleaned text is a no-op.
"""

import re
from typing import Dict, List, Tuple

from pydantic_models import AnalysisSections, FormattedResponse

DISCLAIMER_SENTENCE = (
    "It's important to remember that I am an AI assistant and cannot provide medical advice."
)

# (header label, section key), in the order the prompt asks for them
SECTION_HEADERS: List[Tuple[str, str]] = [
    ("INITIAL ASSESSMENT", "assessment"),
    ("RECOMMENDATIONS", "recommendations"),
    ("URGENCY LEVEL", "urgency"),
    ("DISCLAIMER", "disclaimer"),
]


def _disclaimer_pattern(sentence: str) -> "re.Pattern[str]":
    parts = []
    for word in sentence.split():
        parts.append(re.escape(word).replace("'", "['’]"))
    return re.compile(r"\s*" + r"\s+".join(parts), re.IGNORECASE)


_DISCLAIMER_RE = _disclaimer_pattern(DISCLAIMER_SENTENCE)
_EMPHASIS_RE = re.compile(r"(\*\*|__)(.+?)\1", re.DOTALL)
_HSPACE_RE = re.compile(r"[ \t\f\v]+")
_TRAILING_SPACE_RE = re.compile(r" +(?=\n)")
_BLANK_LINES_RE = re.compile(r"\n{3,}")
_HEADER_RES = {
    key: re.compile(r"^[ \t]*(?:#+[ \t]*)?(?:[-*+][ \t]*)?(?:\d+[.)][ \t]*)?" + re.escape(label) + r"[ \t]*:", re.MULTILINE)
    for label, key in SECTION_HEADERS
}


def strip_emphasis(text: str) -> str:
    """Drop paired ** / __ markers, keeping the wrapped text. Lone * bullets stay."""
    return _EMPHASIS_RE.sub(r"\2", text)


def strip_disclaimer(text: str) -> str:
    while _DISCLAIMER_RE.search(text):
        text = _DISCLAIMER_RE.sub("", text)
    return text


def normalize_whitespace(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _HSPACE_RE.sub(" ", text)
    return _TRAILING_SPACE_RE.sub("", text)


def collapse_blank_lines(text: str) -> str:
    return _BLANK_LINES_RE.sub("\n\n", text)


def _clean_once(text: str) -> str:
    text = strip_emphasis(text)
    text = strip_disclaimer(text)
    text = normalize_whitespace(text)
    text = collapse_blank_lines(text)
    return text.strip()


def clean_text(text: str) -> str:
    cleaned = _clean_once(text)
    while cleaned != text:
        text, cleaned = cleaned, _clean_once(cleaned)
    return cleaned


def extract_sections(text: str) -> AnalysisSections:
    """
    Split `text` on the known section headers.

    A section runs from the end of its header to the start of the next header
    found after it, or to the end of the text. Missing headers leave the
    section empty.
    """
    found = []
    for label, key in SECTION_HEADERS:
        m = _HEADER_RES[key].search(text)
        if m:
            found.append((m.start(), m.end(), key))
    found.sort()

    sections: Dict[str, str] = {}
    for i, (_, body_start, key) in enumerate(found):
        body_end = found[i + 1][0] if i + 1 < len(found) else len(text)
        sections[key] = text[body_start:body_end].strip()
    return AnalysisSections(**sections)


def format_response(text: str) -> FormattedResponse:
    cleaned = clean_text(text)
    return FormattedResponse(cleaned_text=cleaned, sections=extract_sections(cleaned))
