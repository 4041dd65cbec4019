"""Helpers for the teacher's authoring and sharing flow."""

import random
import re
import string
from datetime import datetime, timezone
from urllib.parse import urlencode

from .config import (
    ASSIGNMENT_VERSION, DEFAULT_ATTEMPTS_PER_ITEM, DEFAULT_INSTRUCTIONS_TEMPLATE,
    QR_CODE_BASE_URL, QR_CODE_SIZE, SHARE_HISTORY_LIMIT
)
from .encoding import encode_assignment
from .models import Assignment, AssignmentOptions, ShareHistoryEntry, TeacherDraft
from .utils import parse_teacher_input

_BASE36 = string.digits + string.ascii_lowercase


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _random_base36(length: int) -> str:
    return ''.join(random.choices(_BASE36, k=length))


def generate_assignment_id() -> str:
    """Opaque id: 'ss-' + UTC timestamp digits + random suffix."""
    now = datetime.now(timezone.utc)
    timestamp = now.strftime('%Y%m%d%H%M%S') + f'{now.microsecond // 1000:03d}'
    return f'ss-{timestamp}-{_random_base36(6)}'


def generate_seed() -> str:
    return _random_base36(8)


def build_options(attempts: str, reveal_after_max_attempts: bool) -> AssignmentOptions:
    """Options from the authoring form: attempts is a number string or 'unlimited'."""
    attempts = str(attempts).strip()
    if attempts == 'unlimited':
        attempts_setting = 'unlimited'
    else:
        try:
            attempts_setting = int(attempts)
        except ValueError:
            raise ValueError(f"Invalid attempts per item: {attempts!r}")
        if attempts_setting <= 0:
            raise ValueError(f"Attempts per item must be positive, got {attempts_setting}")

    return AssignmentOptions(
        hints='none',
        feedback='show-on-wrong',
        scramble='seeded',
        attempts_per_item=attempts_setting,
        reveal_after_max=reveal_after_max_attempts,
        reveal_answer_after_max_attempts=reveal_after_max_attempts,
    )


def create_assignment(title: str, text: str, attempts: str = DEFAULT_ATTEMPTS_PER_ITEM,
                      reveal_after_max_attempts: bool = True) -> Assignment:
    """Build a new assignment from the authoring form. Raises ValueError on bad input."""
    if not title or not title.strip():
        raise ValueError('Please provide a title.')
    if not text or not text.strip():
        raise ValueError('Please provide at least one sentence.')
    sentences = parse_teacher_input(text)
    if not sentences:
        raise ValueError('Please provide at least one valid sentence.')

    return Assignment(
        generate_assignment_id(),
        title,
        ASSIGNMENT_VERSION,
        generate_seed(),
        build_options(attempts, reveal_after_max_attempts),
        sentences,
    )


def build_share_link(base_url: str, assignment: Assignment) -> str:
    """Link with the assignment in its fragment; compact format preferred."""
    prefix, token = encode_assignment(assignment)
    if not token:
        raise ValueError('Failed to generate a shareable link.')
    base = (base_url or '').split('#')[0]
    return f'{base}{prefix}{token}'


def ensure_instructions_template(template: str = None) -> str:
    if template and template.strip():
        return template
    return DEFAULT_INSTRUCTIONS_TEMPLATE


def _format_date(created_at: str) -> str:
    try:
        return datetime.fromisoformat(created_at.replace('Z', '+00:00')).strftime('%Y-%m-%d')
    except (ValueError, AttributeError):
        return created_at


def build_instructions_from_template(template: str, title: str, link: str,
                                     attempts_per_item: str, created_at: str) -> str:
    """Fill {{title}}, {{link}}, {{attempts}} and {{date}} in a template."""
    if str(attempts_per_item) == 'unlimited':
        attempts = 'Unlimited'
    else:
        attempts = f'{attempts_per_item} attempts per item'

    replacements = {
        '{{title}}': title or 'Assignment',
        '{{link}}': link,
        '{{attempts}}': attempts,
        '{{date}}': _format_date(created_at),
    }
    output = template
    for token, value in replacements.items():
        output = output.replace(token, value)
    return output


def build_qr_file_name(name: str) -> str:
    normalized = re.sub(r'[^a-z0-9]+', '-', (name or '').strip().lower())
    normalized = normalized.strip('-')[:40]
    return f'{normalized or "assignment"}-qr.png'


def build_qr_url(link: str) -> str:
    """URL of a QR code image for the link; '' when there is no link."""
    trimmed = (link or '').strip()
    if not trimmed:
        return ''
    return f"{QR_CODE_BASE_URL}?{urlencode({'size': QR_CODE_SIZE, 'data': trimmed})}"


def build_share_entry(assignment: Assignment, link: str, attempts: str,
                      reveal_after_max_attempts: bool, template: str = None) -> ShareHistoryEntry:
    """History record for a freshly generated link."""
    template = ensure_instructions_template(template)
    created_at = _now_iso()
    return ShareHistoryEntry(
        id=assignment.id,
        title=assignment.title,
        link=link,
        instructions=build_instructions_from_template(
            template, assignment.title, link, attempts, created_at),
        created_at=created_at,
        attempts_per_item=str(attempts),
        reveal_after_max_attempts=reveal_after_max_attempts,
        template=template,
        sentences=[s.text for s in assignment.sentences],
        qr_file_name=build_qr_file_name(assignment.title),
    )


def sanitize_draft(data: dict) -> TeacherDraft:
    """Fill defaults into a stored draft."""
    reveal = data.get('revealAfterMaxAttempts')
    return TeacherDraft(
        title=data.get('title') or '',
        sentences=data.get('sentences') or '',
        attempts_per_item=data.get('attemptsPerItem') or DEFAULT_ATTEMPTS_PER_ITEM,
        reveal_after_max_attempts=reveal if isinstance(reveal, bool) else True,
        instructions_template=ensure_instructions_template(data.get('instructionsTemplate')),
        updated_at=data.get('updatedAt') or _now_iso(),
    )


def _sanitize_sentences(sentences) -> list[str]:
    if not isinstance(sentences, list):
        return []
    texts = []
    for sentence in sentences:
        if isinstance(sentence, str):
            text = sentence
        elif isinstance(sentence, dict) and 'text' in sentence:
            text = str(sentence.get('text') or '')
        else:
            text = ''
        if text:
            texts.append(text)
    return texts


def sanitize_history_entry(data) -> ShareHistoryEntry | None:
    """Rebuild a stored history entry; None when it has no usable link."""
    if not isinstance(data, dict) or not isinstance(data.get('link'), str):
        return None
    reveal = data.get('revealAfterMaxAttempts')
    return ShareHistoryEntry(
        id=data.get('id') or '',
        title=data.get('title') or '',
        link=data['link'],
        instructions=data.get('instructions') or '',
        created_at=data.get('createdAt') or _now_iso(),
        attempts_per_item=data.get('attemptsPerItem') or DEFAULT_ATTEMPTS_PER_ITEM,
        reveal_after_max_attempts=reveal if isinstance(reveal, bool) else True,
        template=ensure_instructions_template(data.get('template')),
        sentences=_sanitize_sentences(data.get('sentences')),
        qr_file_name=data.get('qrFileName') or build_qr_file_name(data.get('title') or ''),
    )


def sanitize_history(entries) -> list[ShareHistoryEntry]:
    if not isinstance(entries, list):
        return []
    sanitized = [sanitize_history_entry(e) for e in entries]
    return [e for e in sanitized if e is not None][:SHARE_HISTORY_LIMIT]
