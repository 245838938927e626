"""
Turns the model's free-text reply into a StructuredAnswer.

The reply is scanned line by line with a small state machine. Section headings
("Symptoms:", "**Home Remedies**", "4. When to see a doctor", ...) switch the
state; list lines under a heading become items of that section. The first
paragraph is the summary even when the model did not label it.

If no list section is found at all, a second pass collects every bullet or
numbered line in the reply and sorts it into a bucket by keyword
(see rule_based.classify_item).
"""

import logging
import re
from enum import Enum
from typing import List, Optional, Tuple

from pydantic_models import MAX_ITEMS, StructuredAnswer
from rule_based import classify_item

logger = logging.getLogger(__name__)

INVALID_INPUT_ERROR = "Invalid AI response received"
INVALID_INPUT_SUMMARY = "Unable to process the medical information."
PARSE_ERROR = "Failed to parse AI response"
PARSE_ERROR_SUMMARY = "There was an error processing the medical information."


class Section(Enum):
    NONE = None
    SUMMARY = "summary"
    SYMPTOMS = "symptoms"
    REMEDIES = "remedies"
    PRECAUTIONS = "precautions"


# Checked in order; lowercase substrings of the heading text.
SECTION_CUES = [
    (Section.SUMMARY, ("summary",)),
    (Section.SYMPTOMS, ("symptom",)),
    (Section.REMEDIES, ("remed", "treatment")),
    (Section.PRECAUTIONS, ("precaution", "warning", "when to see a doctor")),
]

# Headings are short: "Key symptoms to watch for:" but not a whole sentence.
MAX_HEADING_WORDS = 5
MAX_HEADING_WORDS_WITH_COLON = 6

# "- x", "• x", "* x", "1. x", "2) x", "(3) x"; a leading "**" is bold, not a bullet.
_LIST_MARKER = r"(?:[-•]|\*(?!\*)|\d+[.)](?!\d)|\(\d+\))"

_LIST_MARKER_RE = re.compile(r"^" + _LIST_MARKER)
_HEADING_LEAD_RE = re.compile(r"^[-•#>*_\s]*(?:(?:\d+[.)](?!\d)|\(\d+\))\s*)?[*_\s]*")
_HEADING_TRAIL_RE = re.compile(r"[*_#\s]+$")
# What a list line may say and still be a heading: "2. Key symptoms", "- Home remedies:".
_BARE_HEADING_RE = re.compile(
    r"^(?:(?:key|common|main|brief|home|possible|general|important)\s+)*"
    r"(?:summary|symptoms?|remed(?:y|ies)|treatments?|precautions?|warnings?(?:\s+signs)?"
    r"|when to see a doctor)$",
    re.IGNORECASE,
)
_ITEM_MARKER_RE = re.compile(r"^" + _LIST_MARKER + r"\s*")
_FALLBACK_ITEM_RE = re.compile(r"^[ \t]*" + _LIST_MARKER + r"[ \t]*(.+)$", re.MULTILINE)
_EMPHASIS_RE = re.compile(r"\*\*|__")


def _clean(text: str) -> str:
    return _EMPHASIS_RE.sub("", text).strip()


def match_heading(line: str) -> Optional[Tuple[Section, str]]:
    """
    Return (section, inline_text) if the stripped line is a section heading.

    inline_text is whatever follows the heading's colon on the same line
    ("Summary: The flu is..." -> "The flu is..."), or "" if nothing does.
    """
    label = _HEADING_TRAIL_RE.sub("", _HEADING_LEAD_RE.sub("", line))
    head, colon, inline = label.partition(":")
    inline = _clean(inline)

    # "1. Manage symptoms with rest" is an item; "2. Key symptoms:" is a heading.
    if _LIST_MARKER_RE.match(line):
        if inline or not _BARE_HEADING_RE.match(_clean(head)):
            return None
    if colon:
        if len(head.split()) > MAX_HEADING_WORDS_WITH_COLON:
            return None
    else:
        if len(head.split()) > MAX_HEADING_WORDS or head.rstrip().endswith((".", "!", "?", ",")):
            return None

    lowered = _clean(head).lower()
    for section, cues in SECTION_CUES:
        if any(cue in lowered for cue in cues):
            return section, inline
    return None


def parse_list_line(line: str) -> Optional[str]:
    """Return the item carried by a line inside a list section, if any."""
    marker = _ITEM_MARKER_RE.match(line)
    if marker:
        item = _clean(line[marker.end():])
        return item or None
    if len(line) > 5 and not line.endswith(":"):
        return _clean(line) or None
    return None


def _scan_sections(text: str) -> StructuredAnswer:
    summary_lines: List[str] = []
    started = False
    buckets = {
        Section.SYMPTOMS: [],
        Section.REMEDIES: [],
        Section.PRECAUTIONS: [],
    }
    # Leading text is the summary until the first blank line or heading.
    state = Section.SUMMARY

    for raw_line in text.splitlines():
        line = raw_line.strip()

        if not line:
            if state is Section.SUMMARY and summary_lines:
                state = Section.NONE
            continue

        heading = match_heading(line)
        first_line, started = not started, True
        if heading is not None:
            section, inline = heading
            if section is Section.SUMMARY:
                # Only a leading "Summary:" labels the summary; the text before
                # the first heading is the summary otherwise.
                if not first_line:
                    state = Section.NONE
                    continue
                summary_lines = [inline] if inline else []
            state = section
            continue

        if state is Section.SUMMARY:
            summary_lines.append(_clean(line))
        elif state is not Section.NONE:
            item = parse_list_line(line)
            if item:
                buckets[state].append(item)

    return StructuredAnswer(
        summary="\n".join(s for s in summary_lines if s).strip(),
        symptoms=buckets[Section.SYMPTOMS][:MAX_ITEMS],
        remedies=buckets[Section.REMEDIES][:MAX_ITEMS],
        precautions=buckets[Section.PRECAUTIONS][:MAX_ITEMS],
    )


def _classify_loose_items(text: str, answer: StructuredAnswer) -> StructuredAnswer:
    buckets = {"symptoms": [], "remedies": [], "precautions": []}
    for match in _FALLBACK_ITEM_RE.finditer(text):
        item = _clean(match.group(1))
        if not item:
            continue
        bucket = classify_item(item)
        if bucket is not None and len(buckets[bucket]) < MAX_ITEMS:
            buckets[bucket].append(item)
    return answer.model_copy(update=buckets)


def format_response(ai_message) -> StructuredAnswer:
    """
    Build a StructuredAnswer from the raw model reply.

    Never raises. Empty or non-string input, and any failure while parsing,
    come back as a StructuredAnswer with `error` set.
    """
    if not ai_message or not isinstance(ai_message, str):
        logger.warning("Invalid AI response received: %r", type(ai_message).__name__)
        return StructuredAnswer.failure(INVALID_INPUT_ERROR, INVALID_INPUT_SUMMARY)

    try:
        answer = _scan_sections(ai_message)
        if not (answer.symptoms or answer.remedies or answer.precautions):
            logger.debug("No section headings found, classifying list items by keyword")
            answer = _classify_loose_items(ai_message, answer)
        return answer
    except Exception:
        logger.exception("Error in format_response")
        return StructuredAnswer.failure(PARSE_ERROR, PARSE_ERROR_SUMMARY)
