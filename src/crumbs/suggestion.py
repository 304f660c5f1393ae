"""One-line advice text for matched breadcrumbs."""

import re
from typing import Iterable, Optional

from shared_types import Severity

from .models import Breadcrumb
from .query import severity_sort_key

# A sentence ends at . ! or ? followed by whitespace or end of text, so
# filenames like "config.json" don't cut the summary short.
_FIRST_SENTENCE = re.compile(r"^.+?[.!?](?=\s|$)", re.DOTALL)
MAX_SUMMARY = 100

_PREFIXES = {
    Severity.STOP: "Do not modify.",
    Severity.WARN: "Proceed with caution.",
}


def first_sentence(message: str) -> str:
    match = _FIRST_SENTENCE.match(message)
    if match:
        return match.group(0).strip()
    if len(message) > MAX_SUMMARY:
        return message[:MAX_SUMMARY].strip() + "..."
    return message.strip()


def single_suggestion(breadcrumb: Breadcrumb) -> str:
    summary = first_sentence(breadcrumb.message)
    prefix = _PREFIXES.get(breadcrumb.severity)
    return f"{prefix} {summary}" if prefix else summary


def generate_suggestion(breadcrumbs: Iterable[Breadcrumb]) -> Optional[str]:
    ordered = sorted(breadcrumbs, key=severity_sort_key)
    if not ordered:
        return None
    return "\n".join(single_suggestion(b) for b in ordered)
