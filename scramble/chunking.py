"""Break long sentences into readable multi-word chunks.

A sentence with more than CHUNK_ACTIVATION_WORDS words is too long to
scramble word by word, so it is cut at natural grammatical break points:
relative clauses, clause-ending punctuation, coordinating conjunctions and
prepositional phrases. Chunks aim for MIN_CHUNK_WORDS..MAX_CHUNK_WORDS words.
"""

import re

from .config import (
    CHUNK_ACTIVATION_WORDS, MIN_CHUNK_WORDS, MAX_CHUNK_WORDS, CHUNK_FORCE_MARGIN,
    EXPLICIT_CHUNK_MIN, WORD_MODE_MAX_TOKENS
)
from .models import SentenceWithOptions, Word
from .tokenization import tokenize, merge_tokens, normalize_token_for_match, count_words
from .utils import split_into_sentences

RELATIVE_PRONOUNS = frozenset(['who', 'that', 'which', 'where', 'when'])

PREPOSITIONS = frozenset([
    'in', 'on', 'at', 'with', 'for', 'to', 'from', 'by', 'about', 'as',
    'into', 'like', 'through', 'after', 'over', 'between', 'out',
    'against', 'during', 'without', 'before', 'under', 'around', 'among',
])

CONJUNCTIONS = frozenset([
    'and', 'but', 'or', 'nor', 'so', 'yet', 'because', 'although', 'though',
    'while', 'whereas', 'unless',
])

DETERMINERS = frozenset([
    'the', 'a', 'an', 'this', 'that', 'these', 'those', 'another', 'other',
    'each', 'every', 'any', 'some',
])

_CLAUSE_END = (',', '.', ';', '!', '?', '—', '–')
_CLOSERS = '"\'”’»)]}'
_TRAILING_PUNCTUATION = re.compile(r'[^\w\s]$')


def ends_clause(token: str) -> bool:
    """True when the token closes a clause (comma, full stop, dash, ...)."""
    return token.rstrip(_CLOSERS).endswith(_CLAUSE_END)


def merge_proper_nouns(tokens: list[str]) -> list[str]:
    """Glue runs of capitalized tokens so names are never split."""
    merged = []
    for i, token in enumerate(tokens):
        if i > 0 and token[:1].isupper() and tokens[i - 1][:1].isupper():
            merged[-1] = f'{merged[-1]} {token}'
        else:
            merged.append(token)
    return merged


def _find_split(current: list[str]) -> int | None:
    """Index in `current` to split an overlong chunk at, or None.

    Prefers the last preposition, then the last conjunction, that leaves
    MIN_CHUNK_WORDS on both sides. The right-hand minimum is waived when the
    left half ends in punctuation (a colon, closing bracket or quote).
    """
    for vocabulary in (PREPOSITIONS, CONJUNCTIONS):
        for j in range(len(current) - 1, 0, -1):
            if normalize_token_for_match(current[j]) not in vocabulary:
                continue
            before, after = current[:j], current[j:]
            if count_words(before) < MIN_CHUNK_WORDS:
                continue
            if count_words(after) < MIN_CHUNK_WORDS and not _TRAILING_PUNCTUATION.search(before[-1]):
                continue
            return j
    return None


def chunk_sentence(sentence: str, locked_phrases=()) -> list[str]:
    """Split one sentence into chunks; short sentences come back whole."""
    if not sentence or not sentence.strip():
        return []

    tokens = merge_proper_nouns(tokenize(sentence, locked_phrases))
    if count_words(tokens) <= CHUNK_ACTIVATION_WORDS:
        return [sentence.strip()]

    chunks = []
    current = []
    for i, token in enumerate(tokens):
        if (normalize_token_for_match(token) in RELATIVE_PRONOUNS
                and count_words(current) >= MIN_CHUNK_WORDS):
            chunks.append(current)
            current = []

        current.append(token)
        words = count_words(current)

        if ends_clause(token):
            if words >= MIN_CHUNK_WORDS:
                chunks.append(current)
                current = []
            continue

        if words > MAX_CHUNK_WORDS:
            split_at = _find_split(current)
            if split_at is not None:
                chunks.append(current[:split_at])
                current = current[split_at:]
            elif words > MAX_CHUNK_WORDS + CHUNK_FORCE_MARGIN:
                chunks.append(current)
                current = []

        # Look ahead: cut before a conjunction or a "preposition + determiner" pair
        if i + 1 < len(tokens) and count_words(current) >= MIN_CHUNK_WORDS:
            following = normalize_token_for_match(tokens[i + 1])
            if following in CONJUNCTIONS:
                if count_words(tokens[i + 1:]) > MIN_CHUNK_WORDS + 1:
                    chunks.append(current)
                    current = []
            elif (following in PREPOSITIONS and i + 2 < len(tokens)
                    and normalize_token_for_match(tokens[i + 2]) in DETERMINERS):
                chunks.append(current)
                current = []

    if current:
        chunks.append(current)

    if len(chunks) > 1 and count_words(chunks[-1]) < MIN_CHUNK_WORDS:
        tail = chunks.pop()
        chunks[-1] = chunks[-1] + tail

    return [merge_tokens(chunk) for chunk in chunks]


def chunk_text(text: str) -> list[str]:
    """Chunk every sentence of a paragraph, in order."""
    chunks = []
    for sentence in split_into_sentences(text):
        chunks.extend(chunk_sentence(sentence))
    return chunks


def build_units(sentence: SentenceWithOptions) -> tuple[list[str], bool]:
    """Decide what the student drags for this sentence.

    Returns (units, chunk_mode). Teacher chunks win when there are more than
    EXPLICIT_CHUNK_MIN of them; long sentences are auto-chunked when that
    yields enough chunks; otherwise the tokens are used.
    """
    if sentence.chunks and len(sentence.chunks) > EXPLICIT_CHUNK_MIN:
        return list(sentence.chunks), True

    tokens = tokenize(sentence.text, sentence.lock or ())
    if len(tokens) > WORD_MODE_MAX_TOKENS:
        auto_chunks = chunk_sentence(sentence.text, sentence.lock or ())
        if len(auto_chunks) > EXPLICIT_CHUNK_MIN:
            return auto_chunks, True
    return tokens, False


def make_words(units: list[str]) -> list[Word]:
    """Wrap units in Word objects with positional ids."""
    return [Word(f'{i}-{text}', text) for i, text in enumerate(units)]
