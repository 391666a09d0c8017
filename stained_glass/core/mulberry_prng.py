"""
Python implementation of the Mulberry32 PRNG used by the stained-glass viewer.

Seeds are folded to 32 bits with the same rolling hash the browser uses,
so a given seed string produces the exact same float stream (and hence the
exact same tessellation) on both sides.
"""

import secrets
from typing import Optional

_MASK32 = 0xFFFFFFFF
_GOLDEN_GAMMA = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & _MASK32


def _imul(a, b):
    """32-bit integer multiply, low word only (Math.imul)."""
    return (_uint32(a) * _uint32(b)) & _MASK32


def hash_string(seed: str) -> int:
    """
    Fold a seed string into an unsigned 32-bit integer.

    Rolling ``h = 31 * h + code`` over UTF-16 code units, wrapped to 32 bits.
    Characters outside the BMP contribute two code units (a surrogate pair).
    """
    data = seed.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = (_imul(31, h) + code) & _MASK32
    return h


class Mulberry32PRNG:
    """
    Mulberry32 generator over a single 32-bit state word.

    Not thread-safe: each generation owns its own instance.
    """

    def __init__(self, seed):
        """Initialize with a seed string or a 32-bit integer."""
        self.call_count = 0

        if isinstance(seed, str):
            self.state = hash_string(seed)
        else:
            self.state = _uint32(seed)

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        self.state = (self.state + _GOLDEN_GAMMA) & _MASK32
        s = self.state
        t = _imul(s ^ (s >> 15), 1 | s)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32) ^ t
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    def uniform(self, low: float, high: float) -> float:
        """Random float in [low, high)."""
        return low + self.random() * (high - low)


def create_prng(seed: Optional[str] = None) -> Mulberry32PRNG:
    """
    Build a fresh generator for one generation run.

    Without a seed the state is drawn from the OS entropy pool, so the
    layout differs on every call.
    """
    if seed is None:
        return Mulberry32PRNG(secrets.randbits(32))
    return Mulberry32PRNG(seed)


def layout_seed(image_key: str, shuffle_key: int = 0) -> str:
    """Seed string for an image; bumping ``shuffle_key`` reshuffles the layout."""
    return f"{image_key}__{shuffle_key}"
