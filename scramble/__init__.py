from .models import (
    SentenceWithOptions, AssignmentOptions, Assignment, Word, Result, Summary,
    StudentProgress, TeacherDraft, ShareHistoryEntry
)
from .interfaces import Storage
from .tokenization import tokenize, DEFAULT_LOCKED_PHRASES
from .utils import split_into_sentences, parse_teacher_input
from .chunking import chunk_sentence, chunk_text, build_units, make_words
from .prng import seeded_shuffle
from .encoding import (
    encode_assignment_to_compact_hash, parse_assignment_from_compact_hash,
    encode_assignment_to_hash, parse_assignment_from_hash, parse_assignment_link
)
from .summary import compute_summary
from .session import PlaySession, CheckOutcome, progress_storage_key

__all__ = [
    'SentenceWithOptions', 'AssignmentOptions', 'Assignment', 'Word', 'Result', 'Summary',
    'StudentProgress', 'TeacherDraft', 'ShareHistoryEntry',
    'Storage',
    'tokenize', 'DEFAULT_LOCKED_PHRASES',
    'split_into_sentences', 'parse_teacher_input',
    'chunk_sentence', 'chunk_text', 'build_units', 'make_words',
    'seeded_shuffle',
    'encode_assignment_to_compact_hash', 'parse_assignment_from_compact_hash',
    'encode_assignment_to_hash', 'parse_assignment_from_hash', 'parse_assignment_link',
    'compute_summary',
    'PlaySession', 'CheckOutcome', 'progress_storage_key',
]
