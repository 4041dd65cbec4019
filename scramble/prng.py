"""Deterministic shuffling keyed by a string seed.

Uses 32-bit integer arithmetic throughout so a shared link scrambles the
same way on every client: the seed is hashed with an imul/rotate
loop, that hash seeds Mulberry32, and Mulberry32 drives a Fisher-Yates pass.
"""

import time

_MASK = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK


def _utf16_units(text: str) -> list[int]:
    """UTF-16 code units of the text; the seed hash works on these."""
    data = text.encode('utf-16-le')
    return [int.from_bytes(data[i:i + 2], 'little') for i in range(0, len(data), 2)]


def hash_seed(seed: str) -> int:
    """Hash a string seed to an unsigned 32-bit integer."""
    units = _utf16_units(seed)
    h = (1779033703 ^ len(units)) & _MASK
    for unit in units:
        h = _imul(h ^ unit, 3432918353)
        h = ((h << 13) | (h >> 19)) & _MASK
    return h


def mulberry32(state: int):
    """Return a generator function producing floats in [0, 1)."""
    state &= _MASK

    def random() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK
        t = state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        return ((t ^ (t >> 14)) & _MASK) / 4294967296

    return random


def seeded_shuffle(items, seed: str) -> list:
    """Return a shuffled copy of `items`; the same seed gives the same order."""
    random = mulberry32(hash_seed(seed))
    shuffled = list(items)
    current = len(shuffled)
    while current != 0:
        picked = int(random() * current)
        current -= 1
        shuffled[current], shuffled[picked] = shuffled[picked], shuffled[current]
    return shuffled


def random_seed() -> str:
    """Seed for non-reproducible scrambling, taken from the wall clock."""
    return str(time.time_ns())
