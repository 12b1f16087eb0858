"""Postcheck validator — enforces the report schema on every outgoing answer.

The validator only adds: missing sections get a placeholder bullet, and a
report without any confidence token gets an explicit "no hypothesis" line.
Banned phrases are reported, never rewritten.
"""

import re
from dataclasses import dataclass, field

from wirepro.application.services.text_normalizer import normalize
from wirepro.domain.entities import Confidence
from wirepro.domain.policies import (
    BANNED_PHRASES,
    HYPOTHESES_SECTION,
    NO_HYPOTHESIS_LINE,
    REPORT_SECTIONS,
    SECTION_ALIASES,
    SECTION_PLACEHOLDER,
)
from wirepro.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

log = PipelineLogger("Postcheck")

_TITLES = {title: title for title in REPORT_SECTIONS} | SECTION_ALIASES

_HEADER = re.compile(
    # Optional markdown decoration and list numbering ("## 1. OBSERVATIONS:")
    r"^\s*[#*_\s]*(?:\d+[.)]\s*)?[*_\s]*(?P<title>"
    + "|".join(re.escape(t) for t in sorted(_TITLES, key=len, reverse=True))
    + r")[*_\s]*:[*_]*\s*(?P<rest>.*)$",
    re.IGNORECASE,
)

_CONFIDENCE_TOKEN = re.compile(
    r"\[(" + "|".join(c.value for c in Confidence) + r")\]",
    re.IGNORECASE,
)


@dataclass
class ParsedReport:
    """Free text before the first section header, then each section's lines."""

    preamble: list[str] = field(default_factory=list)
    sections: dict[str, list[str]] = field(default_factory=dict)

    def has(self, title: str) -> bool:
        return title in self.sections


@dataclass
class PostcheckResult:
    text: str
    added_sections: list[str] = field(default_factory=list)
    inserted_no_hypothesis: bool = False
    banned_phrases: list[str] = field(default_factory=list)

    @property
    def altered(self) -> bool:
        return bool(self.added_sections) or self.inserted_no_hypothesis


def parse_sections(text: str) -> ParsedReport:
    """Split a report into its known sections; repeated headers are merged."""
    parsed = ParsedReport()
    current: list[str] = parsed.preamble

    for line in text.split("\n"):
        match = _HEADER.match(line)
        if match is None:
            current.append(line)
            continue
        title = _TITLES[match.group("title").upper()]
        current = parsed.sections.setdefault(title, [])
        rest = match.group("rest").strip()
        if rest:
            current.append(rest if rest.startswith("-") else f"- {rest}")

    return parsed


def _trim(lines: list[str]) -> list[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def render_sections(parsed: ParsedReport) -> str:
    blocks = []
    preamble = _trim(parsed.preamble)
    if preamble:
        blocks.append("\n".join(preamble))
    for title in REPORT_SECTIONS:
        body = _trim(parsed.sections.get(title, []))
        blocks.append("\n".join([f"{title}:", *body]))
    return "\n\n".join(blocks)


def has_confidence_token(text: str) -> bool:
    return _CONFIDENCE_TOKEN.search(text) is not None


def extract_confidence_tag(text: str | None) -> str | None:
    """First bracketed confidence token in ``text`` (e.g. "PROBABLE"), if any."""
    match = _CONFIDENCE_TOKEN.search(text or "")
    return match.group(1).upper() if match else None


def find_banned_phrases(text: str) -> list[str]:
    """Every banned phrase occurrence, repeated once per occurrence."""
    haystack = normalize(text)
    found: list[str] = []
    for phrase in BANNED_PHRASES:
        count = haystack.count(normalize(phrase))
        found.extend([phrase] * count)
    return found


def postcheck(answer_text: str | None, *, offline: bool = False) -> PostcheckResult:
    """Validate ``answer_text``; offline answers are scanned but never padded."""
    text = str(answer_text or "").replace("\r\n", "\n").strip()
    result = PostcheckResult(text=text)

    if not offline:
        parsed = parse_sections(text)
        for title in REPORT_SECTIONS:
            if not _trim(parsed.sections.get(title, [])):
                if not parsed.has(title):
                    result.added_sections.append(title)
                parsed.sections[title] = [SECTION_PLACEHOLDER]

        if not has_confidence_token(text):
            body = parsed.sections[HYPOTHESES_SECTION]
            if _trim(body) == [SECTION_PLACEHOLDER]:
                body.clear()
            body.insert(0, NO_HYPOTHESIS_LINE)
            result.inserted_no_hypothesis = True

        result.text = render_sections(parsed)
        if result.altered:
            log.step_warning(
                PipelineStage.POSTCHECK,
                "Answer completed to match the report schema",
                added=",".join(result.added_sections) or "-",
                no_hypothesis=result.inserted_no_hypothesis,
            )

    result.banned_phrases = find_banned_phrases(result.text)
    for phrase in result.banned_phrases:
        log.step_warning(PipelineStage.POSTCHECK, "Banned phrase in answer", phrase=phrase)

    return result
