"""Sentence tokenization with locked multi-word phrases."""

import re
import unicodedata

# Phrasal verbs that always move as a single tile.
DEFAULT_LOCKED_PHRASES = (
    'drop off', 'pick up', 'turn on', 'turn off', 'put on', 'take off',
    'look after', 'give up', 'run into', 'get over', 'come across',
    'work out', 'set up', 'find out', 'figure out', 'go on', 'carry on',
)

_DIACRITICS = re.compile('[\u0300-\u036f]')
_OUTER_PUNCTUATION = re.compile(r'^[\W_]+|[\W_]+$')
_INNER_SEPARATOR = re.compile(r"(?:[^\w'’]|_)+")
_CLOSING_PUNCTUATION = re.compile(r'^[,.;:!?)\]}”’»…%]')
_OPENING_BRACKETS = ('(', '[', '{', '“', '‘', '«')
_BARE_QUOTES = re.compile(r'^["\']+$')


def normalize_token_for_match(value: str) -> str:
    """Canonical form of a token used only for phrase matching.

    Strips diacritics, unifies curly quotes, drops leading/trailing
    punctuation and lower-cases. Returns '' for punctuation-only tokens.
    """
    text = unicodedata.normalize('NFKD', value)
    text = _DIACRITICS.sub('', text)
    text = re.sub(r'[’‘]', "'", text)
    text = re.sub(r'[“”«»„]', '"', text)

    cleaned = _OUTER_PUNCTUATION.sub('', text)
    if not cleaned:
        return ''

    cleaned = _INNER_SEPARATOR.sub(' ', cleaned).strip()
    return re.sub(r'\s+', ' ', cleaned).lower()


def merge_tokens(tokens: list[str]) -> str:
    """Join tokens with single spaces.

    No space goes before a token that opens with closing punctuation, or
    after a token that ends in an opening bracket or is a bare quote mark.
    A token that opens with an opening bracket or quote keeps its leading
    space, so 'pick (up)' stays 'pick (up)' and chunks joined this way
    rebuild the sentence they came from.
    """
    merged = ''
    previous = ''
    for token in tokens:
        if not token:
            continue
        if not merged:
            merged = token
        elif (_CLOSING_PUNCTUATION.match(token) or previous.endswith(_OPENING_BRACKETS)
                or _BARE_QUOTES.match(previous)):
            merged += token
        else:
            merged = f'{merged} {token}'
        previous = token
    return merged


def build_locked_phrase_tokens(phrases) -> tuple[tuple[str, ...], ...]:
    """Canonicalize phrases into token tuples, longest first, duplicates removed."""
    seen = set()
    collected = []
    for phrase in phrases:
        tokens = tuple(t for t in (normalize_token_for_match(p) for p in phrase.split()) if t)
        if not tokens:
            continue
        key = ' '.join(tokens)
        if key in seen:
            continue
        seen.add(key)
        collected.append(tokens)

    collected.sort(key=lambda tokens: (-len(tokens), ' '.join(tokens)))
    return tuple(collected)


_DEFAULT_LOCKED_TOKENS = build_locked_phrase_tokens(DEFAULT_LOCKED_PHRASES)


def tokenize(sentence: str, locked_phrases=()) -> list[str]:
    """Split a sentence into word tokens, keeping locked phrases together.

    Punctuation stays attached to its word. Phrase matching ignores case,
    accents, quote style and surrounding punctuation, while the merged token
    keeps the original text.
    """
    if not sentence or not sentence.strip():
        return []

    raw_tokens = sentence.split()
    canonical_tokens = [normalize_token_for_match(t) for t in raw_tokens]
    if locked_phrases:
        locked = build_locked_phrase_tokens([*DEFAULT_LOCKED_PHRASES, *locked_phrases])
    else:
        locked = _DEFAULT_LOCKED_TOKENS

    result = []
    i = 0
    while i < len(raw_tokens):
        span = 1
        if canonical_tokens[i]:
            for phrase in locked:
                end = i + len(phrase)
                if end <= len(raw_tokens) and tuple(canonical_tokens[i:end]) == phrase:
                    span = len(phrase)
                    break
        if span > 1:
            result.append(merge_tokens(raw_tokens[i:i + span]))
        else:
            result.append(raw_tokens[i])
        i += span
    return result


def is_word(token: str) -> bool:
    """True when the token carries at least one letter or digit."""
    return bool(re.search(r'[^\W_]', token))


def count_words(tokens) -> int:
    return sum(1 for t in tokens if is_word(t))
