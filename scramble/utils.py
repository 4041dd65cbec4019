"""Utility functions for sentence scramble."""

import re

from .config import EXPLICIT_CHUNK_MIN
from .models import SentenceWithOptions

ABBREVIATIONS = (
    'Mr.', 'Mrs.', 'Ms.', 'Dr.', 'Prof.', 'St.', 'vs.', 'etc.', 'e.g.', 'i.e.',
    'U.S.', 'U.K.', 'U.N.', 'Jan.', 'Feb.', 'Mar.', 'Apr.', 'Jun.', 'Jul.',
    'Aug.', 'Sep.', 'Sept.', 'Oct.', 'Nov.', 'Dec.',
)

# Stands in for protected dots while splitting
_PLACEHOLDER = '\ue000'

_ABBREVIATION_PATTERNS = [
    (re.compile(r'\b' + re.escape(abbr)), abbr.replace('.', _PLACEHOLDER))
    for abbr in ABBREVIATIONS
]
_DECIMAL = re.compile(r'(\d)\.(\d)')
_SENTENCE_BOUNDARY = re.compile(r'(?<=[.!?])\s+(?=["“‘(¿¡]*[A-ZÀ-ÖØ-Þ])')


def normalize_newlines(text: str) -> str:
    return re.sub(r'\r\n?', '\n', text)


def split_into_sentences(text: str) -> list[str]:
    """Split a paragraph into sentences, leaving abbreviations and decimals intact."""
    normalized = re.sub(r'\s+', ' ', normalize_newlines(text)).strip()
    if not normalized:
        return []

    for pattern, replacement in _ABBREVIATION_PATTERNS:
        normalized = pattern.sub(replacement, normalized)
    normalized = _DECIMAL.sub(rf'\1{_PLACEHOLDER}\2', normalized)

    parts = _SENTENCE_BOUNDARY.split(normalized)
    cleaned = []
    for part in parts:
        part = part.replace(_PLACEHOLDER, '.').strip()
        if part:
            cleaned.append(part)
    return cleaned


def parse_teacher_input(text: str) -> list[SentenceWithOptions]:
    """Turn the teacher's text box into sentences.

    One sentence per line when the input has line breaks, otherwise the
    paragraph is split into sentences. A line written as
    ``chunk / chunk / chunk / chunk`` carries explicit chunks, used only when
    there are more than three of them.
    """
    normalized = normalize_newlines(text).strip()
    if not normalized:
        return []

    if '\n' in normalized:
        lines = normalized.split('\n')
    else:
        lines = split_into_sentences(normalized)

    items = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        if '/' in line:
            chunks = [c.strip() for c in line.split('/') if c.strip()]
            joined = ' '.join(chunks)
            if not joined:
                continue
            if len(chunks) > EXPLICIT_CHUNK_MIN:
                items.append(SentenceWithOptions(joined, chunks=chunks))
            else:
                items.append(SentenceWithOptions(joined))
        else:
            items.append(SentenceWithOptions(line))
    return items
