"""Serialize assignments into URL-safe link fragments.

Two formats coexist. The compact format stores the assignment as a
positional array to keep links short:

    [id, title, version, seed,
     [hints, feedback, scramble, attemptsPerItem?, revealAfterMax?, revealAnswerAfterMaxAttempts?],
     [[text, alts?, lock?, chunks?], ...]]

The legacy format stores the keyed assignment object. Both are JSON, UTF-8
encoded and base64url-encoded without padding. Decoders never raise; they
return None for anything that is not a valid assignment.
"""

import base64
import binascii
import json
import logging
import math

from .config import COMPACT_HASH_PREFIX, LEGACY_HASH_PREFIX
from .models import Assignment, AssignmentOptions, SentenceWithOptions

logger = logging.getLogger(__name__)


def _to_b64url(value) -> str:
    payload = json.dumps(value, ensure_ascii=False, separators=(',', ':'), allow_nan=False)
    encoded = base64.b64encode(payload.encode('utf-8')).decode('ascii')
    return encoded.replace('+', '-').replace('/', '_').rstrip('=')


def _from_b64url(token: str):
    """Inverse of _to_b64url. Raises ValueError on malformed input."""
    padded = token + '=' * (-len(token) % 4)
    b64 = padded.replace('-', '+').replace('_', '/')
    try:
        raw = base64.b64decode(b64, validate=True)
    except binascii.Error as e:
        raise ValueError(f'Invalid base64 payload: {e}') from e
    return json.loads(raw.decode('utf-8'))


def trim_trailing(values: list) -> list:
    """Drop trailing None / empty-list entries; entries in the middle are kept."""
    end = len(values)
    while end > 0 and (values[end - 1] is None or values[end - 1] == []):
        end -= 1
    return values[:end]


def _compact_sentence(sentence: SentenceWithOptions) -> list:
    return trim_trailing([sentence.text, sentence.alts, sentence.lock, sentence.chunks])


def _compact_options(options: AssignmentOptions) -> list:
    return trim_trailing([
        options.hints,
        options.feedback,
        options.scramble,
        options.attempts_per_item,
        options.reveal_after_max,
        options.reveal_answer_after_max_attempts,
    ])


def _string_list(value) -> list[str] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(f'Expected a list, got {type(value).__name__}')
    return [str(v) for v in value]


def _expand_sentence(entry) -> SentenceWithOptions | None:
    """Accept a bare string, a positional array or a keyed object."""
    if isinstance(entry, str):
        return SentenceWithOptions(entry)
    if isinstance(entry, list) and entry and isinstance(entry[0], str):
        padded = entry + [None] * (4 - len(entry))
        return SentenceWithOptions(
            padded[0],
            alts=_string_list(padded[1]),
            lock=_string_list(padded[2]),
            chunks=_string_list(padded[3]),
        )
    if isinstance(entry, dict) and isinstance(entry.get('text'), str):
        return SentenceWithOptions(
            entry['text'],
            alts=_string_list(entry.get('alts')),
            lock=_string_list(entry.get('lock')),
            chunks=_string_list(entry.get('chunks')),
        )
    return None


def _expand_options(value) -> AssignmentOptions:
    if isinstance(value, dict):
        return AssignmentOptions.from_dict(value)
    if not isinstance(value, list):
        return AssignmentOptions()
    padded = value + [None] * (6 - len(value))
    return AssignmentOptions(
        hints=padded[0] if padded[0] is not None else 'none',
        feedback=padded[1] if padded[1] is not None else 'show-on-wrong',
        scramble=padded[2] if padded[2] is not None else 'seeded',
        attempts_per_item=padded[3],
        reveal_after_max=padded[4],
        reveal_answer_after_max_attempts=padded[5],
    )


def _parse_version(value):
    if isinstance(value, bool):
        raise ValueError('Version must be a number')
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f'Version must be finite, got {value!r}')
    return int(number) if number.is_integer() else number


def _build_assignment(id, title, version, seed, options, sentences) -> Assignment | None:
    """Validate decoded fields and assemble an Assignment, or None."""
    id = '' if id is None else str(id)
    title = '' if title is None else str(title)
    seed = '' if seed is None else str(seed)
    if not id or not title or not seed:
        return None
    if not isinstance(sentences, list):
        return None

    expanded = []
    for entry in sentences:
        try:
            sentence = _expand_sentence(entry)
        except ValueError as e:
            logger.warning(f"Skipping sentence entry {entry!r}: {e}")
            continue
        if sentence is None:
            logger.warning(f"Skipping undecodable sentence entry: {entry!r}")
            continue
        expanded.append(sentence)
    if not expanded:
        return None

    return Assignment(id, title, _parse_version(version), seed, _expand_options(options), expanded)


def encode_assignment_to_compact_hash(assignment: Assignment) -> str:
    """Encode to the compact format; returns '' if encoding fails."""
    try:
        compact = [
            assignment.id,
            assignment.title,
            assignment.version,
            assignment.seed,
            _compact_options(assignment.options),
            [_compact_sentence(s) for s in assignment.sentences],
        ]
        return _to_b64url(compact)
    except Exception as e:
        logger.error(f"Compact encoding failed: {type(e).__name__}: {e}")
        return ''


def parse_assignment_from_compact_hash(token: str) -> Assignment | None:
    try:
        data = _from_b64url(token)
        if not isinstance(data, list) or len(data) < 6:
            return None
        return _build_assignment(*data[:6])
    except Exception as e:
        logger.warning(f"Failed to decode compact assignment: {type(e).__name__}: {e}")
        return None


def encode_assignment_to_hash(assignment: Assignment) -> str:
    """Encode to the legacy keyed-object format; returns '' if encoding fails."""
    try:
        return _to_b64url(assignment.to_dict())
    except Exception as e:
        logger.error(f"Encoding failed: {type(e).__name__}: {e}")
        return ''


def parse_assignment_from_hash(token: str) -> Assignment | None:
    try:
        data = _from_b64url(token)
        if not isinstance(data, dict):
            return None
        return _build_assignment(
            data.get('id'), data.get('title'), data.get('version'), data.get('seed'),
            data.get('options'), data.get('sentences'),
        )
    except Exception as e:
        logger.warning(f"Failed to decode assignment: {type(e).__name__}: {e}")
        return None


def encode_assignment(assignment: Assignment) -> tuple[str, str]:
    """Encode for a share link. Returns (prefix, token), falling back to the
    legacy format when compact encoding fails; ('', '') if both fail."""
    token = encode_assignment_to_compact_hash(assignment)
    if token:
        return COMPACT_HASH_PREFIX, token
    token = encode_assignment_to_hash(assignment)
    if token:
        return LEGACY_HASH_PREFIX, token
    return '', ''


def parse_assignment_link(fragment: str) -> Assignment | None:
    """Decode a `#C=...` or `#A=...` fragment; the prefix picks the format."""
    if not fragment:
        return None
    if '#' in fragment:
        fragment = fragment[fragment.index('#'):]
    else:
        fragment = '#' + fragment
    if fragment.startswith(COMPACT_HASH_PREFIX):
        return parse_assignment_from_compact_hash(fragment[len(COMPACT_HASH_PREFIX):])
    if fragment.startswith(LEGACY_HASH_PREFIX):
        return parse_assignment_from_hash(fragment[len(LEGACY_HASH_PREFIX):])
    return None
